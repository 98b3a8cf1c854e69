from numbers import Real

from logics.errors import ShapeError


# Fixed series palette; colour choice only depends on the series index.
PALETTE = [
    '#4f46e5', '#10b981', '#f59e0b', '#ef4444',
    '#8b5cf6', '#ec4899', '#14b8a6', '#f97316',
]


def series_color(index):
    """Return the palette colour for a series index (wraps every 8)."""
    return PALETTE[index % len(PALETTE)]


def validate_matrix(rows, name="matrix"):
    """
    Check that rows form a non-empty rectangular numeric matrix.

    Values are not converted: ints stay ints, floats stay floats.

    Args:
        rows: Sequence of rows, each a sequence of numbers.
        name: Label used in error messages (e.g. the table key).

    Returns:
        A list of lists holding the original values.

    Raises:
        ShapeError: If there are no rows, no columns, ragged rows,
            or a cell that is not a number.
    """
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        raise ShapeError(f"{name}: matrix has no rows")

    matrix = []
    width = None
    for i, row in enumerate(rows):
        if not isinstance(row, (list, tuple)):
            raise ShapeError(f"{name}: row {i} is not a sequence")
        if width is None:
            width = len(row)
            if width == 0:
                raise ShapeError(f"{name}: matrix has no columns")
        elif len(row) != width:
            raise ShapeError(f"{name}: row {i} has {len(row)} cells, expected {width}")

        for j, value in enumerate(row):
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ShapeError(f"{name}: cell ({i}, {j}) is not a number: {value!r}")
        matrix.append(list(row))

    return matrix


def column_labels(matrix):
    """Labels "Col 1".."Col C", taken from the width of the first row."""
    if len(matrix) == 0:
        raise ShapeError("cannot infer column labels from a matrix with no rows")
    return [f"Col {j + 1}" for j in range(len(matrix[0]))]


def to_table_rows(matrix):
    """Rows for literal table rendering (copied, values untouched)."""
    return [list(row) for row in matrix]


def to_histogram_series(matrix):
    """
    Flatten row-major into (index, value) pairs.

    This is a value-by-position series, not a binned histogram:
    [[1, 2], [3, 4]] -> [(0, 1), (1, 2), (2, 3), (3, 4)].
    """
    return [(index, value) for index, value in enumerate(_flatten(matrix))]


def to_grouped_bar_series(matrix):
    """
    One entry per row, mapping "Col j" to the cell value.

    [[1, 2], [3, 4]] ->
        [{'name': 'Row 1', 'Col 1': 1, 'Col 2': 2},
         {'name': 'Row 2', 'Col 1': 3, 'Col 2': 4}]

    Raises:
        ShapeError: If the matrix has no rows.
    """
    labels = column_labels(matrix)

    series = []
    for i, row in enumerate(matrix):
        entry = {'name': f"Row {i + 1}"}
        for label, value in zip(labels, row):
            entry[label] = value
        series.append(entry)
    return series


def to_pie_series(matrix):
    """Flatten row-major into ("Item k", value) pairs; nothing is filtered."""
    return [(f"Item {k + 1}", value) for k, value in enumerate(_flatten(matrix))]


def _flatten(matrix):
    for row in matrix:
        yield from row
