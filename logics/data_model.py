from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from logics.column_types import ColumnTypeRegistry
from logics.errors import ShapeError
from logics.matrix_reshaper import validate_matrix


@dataclass(frozen=True)
class UploadedFile:
    """The file picked by the user, sent as-is to the service."""
    filename: str
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class ColumnDescriptor:
    """A column discovered by the upload step and its value preview."""
    name: str
    values: tuple = ()

    def preview_text(self):
        return ", ".join(self.values)


@dataclass
class ResultBundle:
    """Matrices returned by the process step."""
    distance_matrix: Optional[List[list]] = None
    burt_matrix: Optional[List[list]] = None
    contingency_tables: Dict[str, List[list]] = field(default_factory=dict)
    freq_tables: Dict[str, List[list]] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data):
        """
        Build a bundle from the decoded process response.

        Every matrix is checked with validate_matrix(). Frequency tables
        without a matching contingency table are dropped.

        Raises:
            ShapeError: If a matrix breaks the rectangular/non-empty invariant.
        """
        distance = data.get('distance_matrix')
        burt = data.get('burt_matrix')
        contingency = data.get('contingency_tables') or {}
        freq = data.get('freq_tables') or {}
        if not isinstance(contingency, dict) or not isinstance(freq, dict):
            raise ShapeError("contingency_tables and freq_tables must be objects keyed by column pair")

        bundle = cls(
            distance_matrix=validate_matrix(distance, 'distance_matrix') if distance is not None else None,
            burt_matrix=validate_matrix(burt, 'burt_matrix') if burt is not None else None,
            contingency_tables={
                str(key): validate_matrix(m, str(key)) for key, m in contingency.items()
            },
        )
        for key, m in freq.items():
            key = str(key)
            if key not in bundle.contingency_tables:
                print(f"[PROCESS] Ignoring frequency table without contingency table: {key}")
                continue
            if m is not None:
                bundle.freq_tables[key] = validate_matrix(m, f"{key} (freq)")
        return bundle

    def is_empty(self):
        return (
            self.distance_matrix is None
            and self.burt_matrix is None
            and not self.contingency_tables
        )


class SessionPhase(Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    COLUMNS_READY = "columns-ready"
    PROCESSING = "processing"
    RESULTS_READY = "results-ready"
    ERROR = "error"


class SessionState:
    """Shared state container for one analysis session."""

    def __init__(self):
        self.phase = SessionPhase.IDLE
        self.file = None                            # UploadedFile picked by the user
        self.columns = []                           # ColumnDescriptor list from the last upload
        self.file_handle = None                     # Server-side path returned by upload
        self.column_types = ColumnTypeRegistry()    # User classification per column
        self.results = None                         # ResultBundle from the last processing
        self.error_message = None                   # Only meaningful in ERROR
        self.token = 0                              # Bumped on every file selection

    @property
    def loading(self):
        return self.phase in (SessionPhase.UPLOADING, SessionPhase.PROCESSING)

    @property
    def error(self):
        if self.phase is SessionPhase.ERROR:
            return self.error_message
        return None

    @property
    def column_names(self):
        return [c.name for c in self.columns]
