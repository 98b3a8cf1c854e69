import tkinter as tk
from tkinter import ttk

from logics.matrix_reshaper import column_labels, to_table_rows


class ScrollableFrame(ttk.Frame):
    """
    A frame with a vertical scrollbar; put children in ``.body``.

    Example:
        sf = ScrollableFrame(root)
        sf.pack(fill='both', expand=True)
        tk.Label(sf.body, text="...").pack()
    """

    def __init__(self, parent, **kwargs):
        super().__init__(parent, **kwargs)
        self._canvas = tk.Canvas(self, highlightthickness=0)
        scrollbar = ttk.Scrollbar(self, orient='vertical', command=self._canvas.yview)
        self._canvas.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side='right', fill='y')
        self._canvas.pack(side='left', fill='both', expand=True)

        self.body = ttk.Frame(self._canvas)
        self._window = self._canvas.create_window((0, 0), window=self.body, anchor='nw')

        self.body.bind('<Configure>', self._on_body_configure)
        self._canvas.bind('<Configure>', self._on_canvas_configure)
        # Windows/macOS send <MouseWheel>; X11 sends Button-4 / Button-5
        for sequence in ('<MouseWheel>', '<Button-4>', '<Button-5>'):
            self._canvas.bind_all(sequence, self._on_wheel)

    # ── Internals ─────────────────────────────────────────────

    def _on_body_configure(self, _event=None):
        self._canvas.configure(scrollregion=self._canvas.bbox('all'))

    def _on_canvas_configure(self, event):
        self._canvas.itemconfigure(self._window, width=event.width)

    def _on_wheel(self, event):
        self._canvas.yview_scroll(wheel_step(event), "units")


def wheel_step(event):
    """Scroll direction in units: -1 (up) or 1 (down)."""
    if getattr(event, 'num', None) == 4:
        return -1
    if getattr(event, 'num', None) == 5:
        return 1
    return -1 if event.delta > 0 else 1


class MatrixTable(ttk.Frame):
    """
    Read-only Treeview of a matrix, headed "Col 1".."Col C".

    Rows alternate background like a striped table.

    Args:
        parent: Parent widget.
        matrix: Rectangular list of rows.
        max_height: Visible rows before the table scrolls.
        heading_color: Optional colour strip drawn above the headings.
    """

    def __init__(self, parent, matrix, *, max_height=12, heading_color=None):
        super().__init__(parent)
        labels = column_labels(matrix)
        rows = to_table_rows(matrix)

        tree = ttk.Treeview(
            self,
            columns=labels,
            show='headings',
            height=min(len(rows), max_height),
        )
        for label in labels:
            tree.heading(label, text=label)
            tree.column(label, width=90, anchor='e', stretch=False)

        tree.tag_configure('even', background='#f9fafb')
        tree.tag_configure('odd', background='#ffffff')
        for i, row in enumerate(rows):
            tree.insert('', 'end', values=[str(v) for v in row],
                        tags=('even' if i % 2 == 0 else 'odd',))

        xscroll = ttk.Scrollbar(self, orient='horizontal', command=tree.xview)
        tree.configure(xscrollcommand=xscroll.set)
        if heading_color:
            tk.Frame(self, height=4, bg=heading_color).pack(fill='x')
        tree.pack(fill='x', expand=True)
        xscroll.pack(fill='x')

