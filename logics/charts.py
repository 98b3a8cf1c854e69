import math

import numpy as np
from matplotlib.figure import Figure

from logics.matrix_reshaper import (
    PALETTE, column_labels, series_color,
    to_grouped_bar_series, to_histogram_series, to_pie_series,
)

HISTOGRAM_COLOR = PALETTE[0]


def histogram_figure(matrix, title, figsize=(8, 3)):
    """Bar per matrix cell, x = row-major position."""
    series = to_histogram_series(matrix)
    fig = Figure(figsize=figsize, tight_layout=True)
    ax = fig.add_subplot(111)

    positions = [index for index, _ in series]
    values = [value for _, value in series]
    ax.bar(positions, values, color=HISTOGRAM_COLOR)
    ax.set_xticks(positions)
    ax.set_xticklabels([str(p) for p in positions], fontsize=7)
    ax.set_title(f"{title} - Histogram")
    ax.set_ylabel("Valeur")
    return fig


def combobar_figure(matrix, title, figsize=(8, 4)):
    """Grouped bars: one group per row, one coloured bar per column."""
    series = to_grouped_bar_series(matrix)
    labels = column_labels(matrix)
    fig = Figure(figsize=figsize, tight_layout=True)
    ax = fig.add_subplot(111)

    x = np.arange(len(series))
    width = 0.8 / len(labels)
    for j, label in enumerate(labels):
        offsets = x - 0.4 + width * (j + 0.5)
        ax.bar(offsets, [entry[label] for entry in series], width,
               label=label, color=series_color(j))

    ax.set_xticks(x)
    ax.set_xticklabels([entry['name'] for entry in series])
    ax.set_title(f"{title} - Combobar")
    ax.legend(fontsize=7)
    return fig


def pie_figure(matrix, title, figsize=(6, 5)):
    """
    One wedge per matrix cell.

    Matplotlib refuses negative wedges and an all-zero pie; in that case
    (or with NaN/inf cells) the axes carry a notice instead.
    """
    series = to_pie_series(matrix)
    fig = Figure(figsize=figsize, tight_layout=True)
    ax = fig.add_subplot(111)
    ax.set_title(f"{title} - Camembert")

    names = [name for name, _ in series]
    values = [value for _, value in series]
    if not _drawable(values):
        ax.text(0.5, 0.5, "Camembert indisponible (valeurs négatives ou nulles)",
                ha='center', va='center', transform=ax.transAxes)
        ax.set_axis_off()
        return fig

    colors = [series_color(k) for k in range(len(values))]
    ax.pie(values, labels=names, colors=colors, autopct='%1.1f%%',
           textprops={'fontsize': 7})
    ax.axis('equal')
    ax.legend(names, fontsize=7, loc='center left', bbox_to_anchor=(1.0, 0.5))
    return fig


def _drawable(values):
    if not all(math.isfinite(v) and v >= 0 for v in values):
        return False
    return sum(values) > 0


FIGURE_BUILDERS = {
    'histogram': histogram_figure,
    'combobar': combobar_figure,
    'pie': pie_figure,
}
