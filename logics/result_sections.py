from dataclasses import dataclass
from typing import Optional, Tuple

DISTANCE_TITLE = "Matrice de dissemblance"
BURT_TITLE = "Matrice de Burt"

TABLE = 'table'
HISTOGRAM = 'histogram'
COMBOBAR = 'combobar'
PIE = 'pie'

ALL_VIEWS = (TABLE, HISTOGRAM, COMBOBAR, PIE)
# Distance and Burt matrices only get a table and a histogram.
SUMMARY_VIEWS = (TABLE, HISTOGRAM)


@dataclass(frozen=True)
class ResultSection:
    title: str
    matrix: list
    views: Tuple[str, ...]
    freq_matrix: Optional[list] = None
    kind: str = 'contingency'


def build_sections(bundle):
    """
    Decide what to render for every matrix in a ResultBundle.

    Order: dissimilarity, Burt, then one section per contingency table in
    the order the service returned them. Missing matrices yield nothing.
    """
    sections = []
    if bundle is None:
        return sections

    if bundle.distance_matrix is not None:
        sections.append(ResultSection(DISTANCE_TITLE, bundle.distance_matrix, SUMMARY_VIEWS, kind='distance'))
    if bundle.burt_matrix is not None:
        sections.append(ResultSection(BURT_TITLE, bundle.burt_matrix, SUMMARY_VIEWS, kind='burt'))

    for key, matrix in bundle.contingency_tables.items():
        sections.append(ResultSection(
            key,
            matrix,
            ALL_VIEWS,
            freq_matrix=bundle.freq_tables.get(key),
        ))
    return sections
