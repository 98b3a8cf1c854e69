import os
import re

import pandas as pd

from logics.data_model import UploadedFile
from logics.matrix_reshaper import column_labels, to_table_rows
from logics.result_sections import build_sections

_SHEET_FORBIDDEN = re.compile(r'[\[\]:*?/\\]')
_SHEET_MAX = 31


def read_uploaded_file(path):
    """
    Read the picked file into memory; the content is not inspected.

    Args:
        path: Path chosen in the file dialog.

    Returns:
        UploadedFile with the base name and raw bytes.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, 'rb') as fh:
        content = fh.read()
    filename = os.path.basename(path)
    print(f"[DEBUG] Read {filename}: {len(content)} bytes")
    return UploadedFile(filename, content)


def matrix_frame(matrix):
    """DataFrame with "Col j" headers and "Row i" index for one matrix."""
    return pd.DataFrame(
        to_table_rows(matrix),
        columns=column_labels(matrix),
        index=[f"Row {i + 1}" for i in range(len(matrix))],
    )


def export_results(bundle, path):
    """
    Export every matrix of a ResultBundle to Excel.

    Sheet layout:
        - one sheet per section, in display order (dissimilarity, Burt,
          then each contingency table),
        - "<key> (freq)" for a contingency table's frequency table.
        Sheet names drop the characters Excel rejects, are truncated to
        31 chars, and get a numeric suffix when two names collide.

    Args:
        bundle: ResultBundle to export.
        path: Output .xlsx file path.

    Returns:
        list of the sheet names written.

    Raises:
        ValueError: If the bundle holds no matrix.
    """
    sections = build_sections(bundle)
    if not sections:
        raise ValueError("Aucun résultat à exporter.")

    used = set()
    written = []
    with pd.ExcelWriter(path, engine='xlsxwriter') as writer:
        for section in sections:
            tables = [(section.title, section.matrix)]
            if section.freq_matrix is not None:
                tables.append((f"{section.title} (freq)", section.freq_matrix))

            for title, matrix in tables:
                sheet_name = _sheet_name(title, used)
                matrix_frame(matrix).to_excel(writer, sheet_name=sheet_name)
                written.append(sheet_name)
                print(f"[EXPORT] Sheet '{sheet_name}' written ({len(matrix)} rows)")
    return written


def _sheet_name(title, used):
    base = _SHEET_FORBIDDEN.sub('', title).strip().strip("'") or 'Sheet'
    name = base[:_SHEET_MAX]
    n = 2
    while name.lower() in used:
        suffix = f" ({n})"
        name = base[:_SHEET_MAX - len(suffix)] + suffix
        n += 1
    used.add(name.lower())
    return name
