import tkinter as tk
from tkinter import ttk

from logics.column_types import ColumnType

_CHOICES = [ColumnType.UNSET, ColumnType.NOMINAL, ColumnType.ORDINAL]


class ColumnSelection(ttk.LabelFrame):
    """
    One type selector per discovered column, with its value preview.

    The first option ("Type pour <col>") stands for an unset column.

    Args:
        parent: Parent widget.
        on_change: callable(column_name, ColumnType) when a selector changes.
        on_process: callable() for the "Traiter les colonnes" button.
    """

    def __init__(self, parent, *, on_change, on_process):
        super().__init__(parent, text="Types des colonnes", padding=8)
        self.on_change = on_change
        self.on_process = on_process
        self._combos = {}
        self._rows = ttk.Frame(self)
        self._rows.pack(fill='x')
        self._process_button = ttk.Button(self, text="Traiter les colonnes", command=self.on_process)
        self._process_button.pack(pady=(8, 0), anchor='e')

    # ── Public API ────────────────────────────────────────────

    def set_columns(self, columns, registry):
        """Rebuild the selectors for a new column list."""
        for widget in self._rows.winfo_children():
            widget.destroy()
        self._combos = {}

        for row, descriptor in enumerate(columns):
            name = descriptor.name
            tk.Label(self._rows, text=name, font=("Arial", 10, "bold")).grid(
                row=row * 2, column=0, sticky='w', pady=(6, 0),
            )
            combo = ttk.Combobox(self._rows, values=self._options(name), state='readonly', width=30)
            combo.grid(row=row * 2, column=1, sticky='w', padx=10, pady=(6, 0))
            combo.bind('<<ComboboxSelected>>', lambda _e, c=name: self._selected(c))
            self._combos[name] = combo

            tk.Label(self._rows, text=descriptor.preview_text(), fg="gray",
                     wraplength=700, justify='left').grid(
                row=row * 2 + 1, column=0, columnspan=2, sticky='w',
            )
        self.refresh(registry)

    def refresh(self, registry, enabled=True):
        """Sync selector values with the registry."""
        for name, combo in self._combos.items():
            options = self._options(name)
            index = _CHOICES.index(registry.get(name))
            combo.set(options[index])
            combo.config(state='readonly' if enabled else 'disabled')
        self._process_button.config(state='normal' if enabled and self._combos else 'disabled')

    # ── Internals ─────────────────────────────────────────────

    @staticmethod
    def _options(name):
        return [f"Type pour {name}", ColumnType.NOMINAL.label, ColumnType.ORDINAL.label]

    def _selected(self, name):
        index = self._combos[name].current()
        column_type = _CHOICES[index]
        self.on_change(name, column_type)
