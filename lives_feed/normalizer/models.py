"""
Typed records produced by the normalizer.

Downstream code (deduplication, assembly, CSV writing) only ever sees these
dataclasses; untyped JSON access stops at the normalizer boundary.
"""

from dataclasses import astuple, dataclass
from enum import Enum
from typing import Any, Optional

BUSINESS_COLUMNS = (
    "business_id",
    "name",
    "address",
    "city",
    "state",
    "postal_code",
    "latitude",
    "longitude",
    "phone_number",
)

INSPECTION_COLUMNS = (
    "business_id",
    "score",
    "date",
    "description",
    "type",
)


class BusinessIdentifierStrategy(str, Enum):
    """How ``business_id`` is derived. Fixed for a whole run."""

    # Pass the source's facility identifier through verbatim
    FACILITY = "facility"
    # MD5 of "name|street"; distinct businesses sharing both values collide
    LEGACY = "legacy"


@dataclass(frozen=True)
class Address:
    """Decoded human-readable address of one source row."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None


@dataclass(frozen=True)
class Business:
    """One row of businesses.csv."""

    business_id: str
    name: Optional[str]
    street_address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    postal_code: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    phone_number: Optional[str] = None

    def to_row(self) -> tuple[Any, ...]:
        """Values in BUSINESS_COLUMNS order."""
        return astuple(self)


@dataclass(frozen=True)
class Inspection:
    """One row of inspections.csv."""

    business_id: str
    score: Any
    date: str
    description: Optional[str] = None
    type: Optional[str] = None

    def to_row(self) -> tuple[Any, ...]:
        """Values in INSPECTION_COLUMNS order."""
        return astuple(self)
