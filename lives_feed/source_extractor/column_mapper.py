"""
Column Mapper

Socrata ``rows.json`` exports keep column metadata and row values apart:

    {
        "meta": {"view": {"columns": [{"name": "Restaurant Name", ...}, ...]}},
        "data": [["...", "...", ...], ...]
    }

Each row in ``data`` is a plain array aligned by position with
``meta.view.columns``. This module zips the two back together into read-only
name -> value records. It is the only place that knows about the document's
outer shape.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Optional

from ..common.errors import MalformedInputError

logger = logging.getLogger(__name__)

# Read-only mapping of column name -> raw value for one input row
FieldRecord = Mapping[str, Any]


def extract_columns(document: Mapping[str, Any]) -> list[str]:
    """
    Return the ordered column names from ``meta.view.columns``.

    Raises:
        MalformedInputError: If the metadata section is missing or a column
            has no string ``name``
    """
    try:
        columns = document["meta"]["view"]["columns"]
    except (KeyError, TypeError) as e:
        raise MalformedInputError("Source document has no meta.view.columns section") from e

    if not isinstance(columns, list):
        raise MalformedInputError("meta.view.columns must be an array")

    names = []
    for position, column in enumerate(columns):
        name = column.get("name") if isinstance(column, Mapping) else None
        if not isinstance(name, str):
            raise MalformedInputError(f"Column at position {position} has no name")
        names.append(name)

    return names


def extract_rows(document: Mapping[str, Any]) -> list[Sequence[Any]]:
    """
    Return the raw row arrays from ``data``.

    Raises:
        MalformedInputError: If ``data`` is missing or not an array
    """
    rows = document.get("data")
    if not isinstance(rows, list):
        raise MalformedInputError("Source document has no data array")
    return rows


class ColumnMapper:
    """
    Maps positional rows to named-field records.

    Usage:
        mapper = ColumnMapper.from_document(document)
        for record in mapper.iter_records(extract_rows(document)):
            record["Restaurant Name"]
    """

    def __init__(self, columns: Sequence[str]):
        self.columns = tuple(columns)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "ColumnMapper":
        return cls(extract_columns(document))

    def map_row(self, row: Sequence[Any], row_index: Optional[int] = None) -> FieldRecord:
        """
        Zip one row with the column names.

        Args:
            row: Raw row values in column order
            row_index: Position of the row in the document (for error messages)

        Returns:
            Read-only mapping of column name to raw value

        Raises:
            MalformedInputError: If the row is not an array or its length
                differs from the number of columns
        """
        if not isinstance(row, list):
            raise MalformedInputError(
                f"expected an array of values, got {type(row).__name__}", row_index
            )
        if len(row) != len(self.columns):
            raise MalformedInputError(
                f"row has {len(row)} values but there are {len(self.columns)} columns",
                row_index,
            )

        return MappingProxyType(dict(zip(self.columns, row)))

    def iter_records(self, rows: Sequence[Sequence[Any]]) -> Iterator[tuple[int, FieldRecord]]:
        """Yield ``(row_index, record)`` pairs in source order."""
        for row_index, row in enumerate(rows):
            yield row_index, self.map_row(row, row_index)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(columns={len(self.columns)})"
