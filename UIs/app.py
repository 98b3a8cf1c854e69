import tkinter as tk
from tkinter import ttk, messagebox, filedialog

from logics.data_model import SessionPhase
from logics.errors import ValidationError
from logics.file_handler import export_results
from logics.service_client import AnalysisServiceClient
from logics.session import AnalysisSession

from UIs.column_selection import ColumnSelection
from UIs.file_picker import FilePicker
from UIs.results_view import ResultsView
from UIs.tk_runner import TkRunner
from UIs.widgets import ScrollableFrame


class AnalysisApp:
    """Main window: file picker, submit, column types, results."""

    def __init__(self, root, config):
        self.root = root
        self.root.title("Application de traitement de fichier")
        self.root.geometry(config.geometry)

        client = AnalysisServiceClient(config.service_url, timeout=config.timeout)
        self.session = AnalysisSession(client, runner=TkRunner(root))
        self.session.subscribe(lambda _s: self._render())
        self._shown_columns = None
        self._shown_results = None

        self._build_ui()
        self._render()

    # ── Layout ───────────────────────────────────────────────

    def _build_ui(self):
        scroll = ScrollableFrame(self.root)
        scroll.pack(fill='both', expand=True)
        body = scroll.body

        tk.Label(body, text="Application de traitement de fichier", font=("Arial", 16, "bold")).pack(
            anchor='w', padx=20, pady=(15, 10),
        )

        self.file_picker = FilePicker(body, on_selected=self.session.select_file)
        self.file_picker.pack(fill='x', padx=20, pady=5)

        action_frame = ttk.Frame(body)
        action_frame.pack(fill='x', padx=20, pady=5)
        self.submit_button = ttk.Button(action_frame, text="Télécharger et traiter", command=self._on_submit)
        self.submit_button.pack(side='left')
        self.progress = ttk.Progressbar(action_frame, mode='indeterminate', length=200)
        self.export_button = ttk.Button(action_frame, text="Exporter vers Excel", command=self._on_export)

        self.error_label = tk.Label(body, text="", fg="#dc2626", wraplength=900, justify='left')
        self.error_label.pack(anchor='w', padx=20)

        self.column_selection = ColumnSelection(
            body,
            on_change=self._on_column_type,
            on_process=self._on_process,
        )

        self.results_view = ResultsView(body)
        self.results_view.pack(fill='x', padx=20, pady=10)

    # ── Session → widgets ───────────────────────────────────

    def _render(self):
        session = self.session
        state = session.state
        loading = session.loading

        self.file_picker.show_file(state.file)

        if loading:
            self.submit_button.config(text="Chargement...", state='disabled')
            self.progress.pack(side='left', padx=10)
            self.progress.start(10)
        else:
            self.submit_button.config(text="Télécharger et traiter", state='normal')
            self.progress.stop()
            self.progress.pack_forget()

        self.error_label.config(text=session.error or "")

        if state.columns:
            if self._shown_columns is not state.columns:
                self.column_selection.set_columns(state.columns, state.column_types)
                self._shown_columns = state.columns
            self.column_selection.refresh(state.column_types, enabled=not loading)
            if not self.column_selection.winfo_manager():
                self.column_selection.pack(fill='x', padx=20, pady=10, before=self.results_view)
        else:
            self._shown_columns = None
            self.column_selection.pack_forget()

        if state.results is not self._shown_results:
            if state.results is None:
                self.results_view.clear()
            else:
                self.results_view.show(state.results)
            self._shown_results = state.results

        if state.results is not None and not state.results.is_empty() and not loading:
            self.export_button.pack(side='right')
        else:
            self.export_button.pack_forget()

        if session.phase is SessionPhase.COLUMNS_READY:
            self.error_label.config(text="Choisissez le type de chaque colonne puis lancez le traitement.", fg="gray")
        else:
            self.error_label.config(fg="#dc2626")

    # ── Callbacks ───────────────────────────────────────────

    def _on_submit(self):
        try:
            self.session.upload()
        except ValidationError as e:
            messagebox.showwarning("Attention", str(e))

    def _on_process(self):
        try:
            self.session.process()
        except ValidationError as e:
            messagebox.showwarning("Attention", str(e))

    def _on_column_type(self, column, column_type):
        try:
            self.session.set_column_type(column, column_type)
        except ValidationError as e:
            messagebox.showwarning("Attention", str(e))

    def _on_export(self):
        if self.session.results is None:
            messagebox.showerror("Erreur", "Aucun résultat à exporter.")
            return

        path = filedialog.asksaveasfilename(
            defaultextension=".xlsx",
            filetypes=[("Excel", "*.xlsx")],
        )
        if path:
            try:
                sheets = export_results(self.session.results, path)
                messagebox.showinfo("Succès", f"{len(sheets)} feuilles exportées: {path}")
            except (OSError, ValueError) as e:
                messagebox.showerror("Erreur d'export", str(e))
