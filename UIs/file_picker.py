import tkinter as tk
from tkinter import ttk, filedialog, messagebox

from logics.file_handler import read_uploaded_file

NO_FILE_TEXT = "Sélectionner un fichier"


class FilePicker(ttk.Frame):
    """File selection row: browse button + name of the chosen file."""

    def __init__(self, parent, *, on_selected):
        super().__init__(parent)
        self.on_selected = on_selected

        self._button = ttk.Button(self, text="Parcourir...", command=self._browse)
        self._button.pack(side='left')
        self._label = tk.Label(self, text=NO_FILE_TEXT, fg="gray")
        self._label.pack(side='left', padx=10)

    def show_file(self, uploaded_file):
        if uploaded_file is None:
            self._label.config(text=NO_FILE_TEXT, fg="gray")
        else:
            self._label.config(text=uploaded_file.filename, fg="green")

    def _browse(self):
        path = filedialog.askopenfilename(
            filetypes=[("Excel/CSV files", "*.xlsx *.xls *.csv"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            uploaded_file = read_uploaded_file(path)
        except OSError as e:
            messagebox.showerror("Erreur de lecture", str(e))
            return
        self.on_selected(uploaded_file)
