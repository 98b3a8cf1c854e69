from enum import Enum

from logics.errors import ValidationError


class ColumnType(Enum):
    """User classification of a column. Values are the wire encoding."""

    UNSET = ""
    NOMINAL = "0"
    ORDINAL = "1"

    @property
    def label(self):
        return _LABELS[self]

    @classmethod
    def parse(cls, value):
        """
        Accept a ColumnType, its wire value ("", "0", "1") or its name.

        Raises:
            ValidationError: For anything else.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNSET
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise ValidationError(f"Type de colonne inconnu: {value!r}")


_LABELS = {
    ColumnType.UNSET: "Non défini",
    ColumnType.NOMINAL: "Nominal",
    ColumnType.ORDINAL: "Ordinal",
}


class ColumnTypeRegistry:
    """Per-column classification chosen by the user."""

    def __init__(self):
        self._types = {}                            # column name -> ColumnType

    def get(self, column):
        return self._types.get(column, ColumnType.UNSET)

    def set(self, column, column_type):
        column_type = ColumnType.parse(column_type)
        if column_type is ColumnType.UNSET:
            self._types.pop(column, None)
        else:
            self._types[column] = column_type

    def clear(self):
        self._types.clear()

    def missing(self, columns):
        """Columns (in the given order) that still have no type."""
        return [c for c in columns if self.get(c) is ColumnType.UNSET]

    def all_assigned(self, columns):
        return not self.missing(columns)

    def to_payload(self, columns):
        """
        Build the ``column_types`` request field for the given columns.

        Raises:
            ValidationError: If any column is still unset; ``missing`` lists them.
        """
        missing = self.missing(columns)
        if missing:
            raise ValidationError(
                "Veuillez choisir un type pour: " + ", ".join(missing),
                missing=missing,
            )
        return {c: self._types[c].value for c in columns}

    def __len__(self):
        return len(self._types)

    def __contains__(self, column):
        return column in self._types
