"""
Normalizer Service

This service transforms named-field inspection records into the typed
businesses/inspections rows of a LIVES feed.

Key responsibilities:
- Decode the nested address column and coordinates
- Derive business_id (facility id passthrough or legacy name|street hash)
- Convert inspection timestamps to YYYYMMDD dates
- Ensure each business is emitted once (first-seen wins)
"""

from .deduplicator import BusinessDeduplicator
from .models import (
    BUSINESS_COLUMNS,
    INSPECTION_COLUMNS,
    Address,
    Business,
    BusinessIdentifierStrategy,
    Inspection,
)
from .normalize import normalize_record

__all__ = [
    "BUSINESS_COLUMNS",
    "INSPECTION_COLUMNS",
    "Address",
    "Business",
    "BusinessDeduplicator",
    "BusinessIdentifierStrategy",
    "Inspection",
    "normalize_record",
]
__version__ = "0.1.0"
