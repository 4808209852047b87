"""Source Extractor Service.

This service is responsible for retrieving the raw inspection document and
turning its column-indexed rows into named-field records.

Main components:
- fetch_source_document / load_source_document: Retrieve and decode the document
- ColumnMapper: Zips ``meta.view.columns`` with each row in ``data``
- retry_with_backoff: Retry decorator used for downloads
"""

from .column_mapper import ColumnMapper, FieldRecord, extract_columns, extract_rows
from .fetcher import fetch_source_document, load_source_document, parse_source_document

__all__ = [
    "ColumnMapper",
    "FieldRecord",
    "extract_columns",
    "extract_rows",
    "fetch_source_document",
    "load_source_document",
    "parse_source_document",
]
__version__ = "0.1.0"
