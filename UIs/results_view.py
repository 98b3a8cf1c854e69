import tkinter as tk
from tkinter import ttk

import matplotlib
matplotlib.use('TkAgg')
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from logics.charts import FIGURE_BUILDERS
from logics.result_sections import TABLE, build_sections

from UIs.widgets import MatrixTable

HEADING_COLORS = {
    'distance': '#3b82f6',
    'burt': '#22c55e',
    'contingency': '#ede9fe',
}


class ResultsView(ttk.Frame):
    """Renders a ResultBundle: a table and charts for every matrix."""

    def __init__(self, parent):
        super().__init__(parent)
        self._canvases = []

    def show(self, bundle):
        self.clear()
        sections = build_sections(bundle)
        if not sections:
            return

        tk.Label(self, text="Résultats", font=("Arial", 14, "bold")).pack(anchor='w', pady=(15, 5))
        for section in sections:
            self._render_section(section)

    def clear(self):
        for canvas in self._canvases:
            canvas.figure.clear()
        self._canvases = []
        for widget in self.winfo_children():
            widget.destroy()

    def _render_section(self, section):
        frame = ttk.LabelFrame(self, text=section.title, padding=8)
        frame.pack(fill='x', pady=8)
        color = HEADING_COLORS.get(section.kind)

        for view in section.views:
            if view == TABLE:
                MatrixTable(frame, section.matrix, heading_color=color).pack(fill='x', pady=4)
            else:
                figure = FIGURE_BUILDERS[view](section.matrix, section.title)
                canvas = FigureCanvasTkAgg(figure, master=frame)
                canvas.draw()
                canvas.get_tk_widget().pack(fill='x', pady=4)
                self._canvases.append(canvas)

        if section.freq_matrix is not None:
            tk.Label(frame, text="Table de fréquences", fg="gray").pack(anchor='w', pady=(8, 0))
            MatrixTable(frame, section.freq_matrix, heading_color=color).pack(fill='x', pady=4)
