"""
Inspection Record Normalization Logic

This module turns one named-field record from the source document into a
typed (Business, Inspection) pair. It handles the nested address decoding,
business id derivation, date conversion and value cleanup.

Key Responsibilities:
- Decode the JSON-in-JSON address column into street/city/state/zip
- Parse latitude/longitude, tolerating missing coordinates
- Derive business_id from the facility id or from a legacy name|street hash
- Convert inspection timestamps to LIVES ``YYYYMMDD`` civil dates

The address column of a Socrata location field is a fixed-position array:

    [human_address_json, latitude, longitude, machine_address, needs_recoding]

where ``human_address_json`` is itself a JSON string such as
``{"address": "111 CONGRESS AVE", "city": "AUSTIN", "state": "TX", "zip": "78701"}``.
"""

import json
import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Optional

from ..common.errors import (
    FeedError,
    MalformedAddressError,
    MalformedInputError,
    MissingIdentifierError,
)
from ..common.feed_config import ColumnNames
from ..source_extractor.column_mapper import FieldRecord
from .hash_generator import generate_business_id
from .models import Address, Business, BusinessIdentifierStrategy, Inspection

logger = logging.getLogger(__name__)

LIVES_DATE_FORMAT = "%Y%m%d"

# Positions inside the location array
HUMAN_ADDRESS_INDEX = 0
LATITUDE_INDEX = 1
LONGITUDE_INDEX = 2


def normalize_record(
    record: FieldRecord,
    strategy: BusinessIdentifierStrategy = BusinessIdentifierStrategy.FACILITY,
    columns: Optional[ColumnNames] = None,
    reporting_tz: tzinfo = timezone.utc,
    row_index: Optional[int] = None,
) -> tuple[Business, Inspection]:
    """
    Normalize one source record into a business and an inspection.

    Args:
        record: Named-field record produced by the ColumnMapper
        strategy: How business_id is derived (fixed for the whole run)
        columns: Source column names; defaults to the Austin dataset's names
        reporting_tz: Zone used to turn inspection timestamps into dates
        row_index: Position of the row in the document (for error messages)

    Returns:
        Tuple of (Business, Inspection). Both carry the same business_id.
        phone_number, description and type are always None.

    Raises:
        MalformedAddressError: If the nested address is absent or undecodable
        MissingIdentifierError: If the facility strategy is used and the
            facility id is empty
        MalformedInputError: If the inspection date is missing or unparsable

    Examples:
        >>> business, inspection = normalize_record(record)
        >>> business.business_id
        '10637887'
        >>> inspection.date
        '20130116'
    """
    columns = columns or ColumnNames()

    try:
        address, latitude, longitude = parse_address(record.get(columns.address), row_index)

        name = _safe_string(record.get(columns.name))
        business_id = derive_business_id(
            strategy,
            name=name,
            street=address.street,
            facility_id=record.get(columns.facility_id),
            row_index=row_index,
        )

        try:
            inspection_date = epoch_to_feed_date(record.get(columns.date), reporting_tz)
        except ValueError as e:
            raise MalformedInputError(str(e), row_index) from e

        business = Business(
            business_id=business_id,
            name=name,
            street_address=address.street,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            latitude=latitude,
            longitude=longitude,
        )
        inspection = Inspection(
            business_id=business_id,
            score=record.get(columns.score),
            date=inspection_date,
        )

        logger.debug(
            "Normalized inspection record",
            extra={
                'row_index': row_index,
                'business_id': business_id,
                'date': inspection_date,
            }
        )

        return business, inspection

    except FeedError:
        raise
    except Exception as e:
        logger.error(
            "Unexpected error during normalization",
            extra={
                'row_index': row_index,
                'error': str(e),
                'error_type': type(e).__name__,
            }
        )
        raise MalformedInputError(f"Unexpected normalization error: {e}", row_index) from e


def parse_address(
    value: Any,
    row_index: Optional[int] = None,
) -> tuple[Address, Optional[float], Optional[float]]:
    """
    Decode a Socrata location array.

    Args:
        value: Raw value of the address column
        row_index: Position of the row (for error messages)

    Returns:
        Tuple of (Address, latitude, longitude). Coordinates are None when
        absent or unparsable.

    Raises:
        MalformedAddressError: If the column is null, not an array, or its
            first element is not a JSON-encoded object
    """
    if value is None:
        raise MalformedAddressError("address is missing", row_index)

    if not isinstance(value, list) or not value:
        raise MalformedAddressError(
            f"address must be a non-empty array, got {type(value).__name__}", row_index
        )

    human_address = value[HUMAN_ADDRESS_INDEX]
    if not isinstance(human_address, str):
        raise MalformedAddressError("human address is missing", row_index)

    try:
        decoded = json.loads(human_address)
    except json.JSONDecodeError as e:
        raise MalformedAddressError(f"human address is not valid JSON: {e}", row_index) from e

    if not isinstance(decoded, dict):
        raise MalformedAddressError(
            f"human address must decode to an object, got {type(decoded).__name__}", row_index
        )

    address = Address(
        street=_safe_string(decoded.get('address')),
        city=_safe_string(decoded.get('city')),
        state=_safe_string(decoded.get('state')),
        postal_code=_safe_string(decoded.get('zip')),
    )

    latitude = _parse_numeric(_element(value, LATITUDE_INDEX), 'latitude', row_index)
    longitude = _parse_numeric(_element(value, LONGITUDE_INDEX), 'longitude', row_index)

    return address, latitude, longitude


def derive_business_id(
    strategy: BusinessIdentifierStrategy,
    name: Optional[str],
    street: Optional[str],
    facility_id: Any,
    row_index: Optional[int] = None,
) -> str:
    """
    Compute business_id according to the run's identifier strategy.

    Args:
        strategy: FACILITY passes ``facility_id`` through; LEGACY hashes name|street
        name: Cleaned restaurant name
        street: Cleaned street address
        facility_id: Raw facility id value from the source
        row_index: Position of the row (for error messages)

    Returns:
        The business id string

    Raises:
        MissingIdentifierError: If FACILITY is selected and facility_id is empty
    """
    if strategy is BusinessIdentifierStrategy.LEGACY:
        return generate_business_id(name, street)

    business_id = _safe_string(facility_id)
    if business_id is None:
        raise MissingIdentifierError("facility id is empty", row_index)
    return business_id


def epoch_to_feed_date(value: Any, reporting_tz: tzinfo = timezone.utc) -> str:
    """
    Convert an inspection timestamp to a LIVES ``YYYYMMDD`` date.

    Supports:
    - Unix timestamps in seconds (int, float, or numeric string)
    - ISO 8601 strings; naive values are taken as already in the reporting zone
    - date/datetime objects

    Args:
        value: Raw inspection date value
        reporting_tz: Zone whose calendar the date is reported in

    Returns:
        Date formatted as ``YYYYMMDD``

    Raises:
        ValueError: If the value is missing or cannot be parsed

    Examples:
        >>> epoch_to_feed_date(1358294400)
        '20130116'
        >>> epoch_to_feed_date("2013-01-16T00:00:00")
        '20130116'
    """
    if value is None or value == '':
        raise ValueError("inspection date is missing")

    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        raise ValueError(f"unsupported inspection date: {value!r}")

    if isinstance(value, datetime):
        moment = value if value.tzinfo is None else value.astimezone(reporting_tz)
        return moment.strftime(LIVES_DATE_FORMAT)

    if isinstance(value, date):
        return value.strftime(LIVES_DATE_FORMAT)

    if isinstance(value, str):
        stripped = value.strip()
        try:
            value = float(stripped)
        except ValueError:
            try:
                parsed = datetime.fromisoformat(stripped.replace('Z', '+00:00'))
            except ValueError as e:
                raise ValueError(f"unparsable inspection date: {value!r}") from e
            return epoch_to_feed_date(parsed, reporting_tz)

    if isinstance(value, (int, float)):
        try:
            moment = datetime.fromtimestamp(value, tz=reporting_tz)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"inspection timestamp out of range: {value!r}") from e
        return moment.strftime(LIVES_DATE_FORMAT)

    raise ValueError(f"unsupported inspection date type: {type(value).__name__}")


def _element(values: list, index: int) -> Any:
    return values[index] if index < len(values) else None


def _parse_numeric(value: Any, field_name: str, row_index: Optional[int] = None) -> Optional[float]:
    """
    Parse a coordinate value safely.

    Args:
        value: Value to parse
        field_name: Name of field (for logging)
        row_index: Position of the row (for logging)

    Returns:
        Float value or None if invalid/missing
    """
    if value is None or value == '':
        return None

    if isinstance(value, bool):
        logger.warning(
            "Invalid %s type", field_name,
            extra={'value': value, 'type': type(value).__name__, 'row_index': row_index}
        )
        return None

    if isinstance(value, (int, float)):
        return float(value)

    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            logger.warning(
                "Failed to parse %s as number", field_name,
                extra={'value': value, 'row_index': row_index}
            )
            return None

    logger.warning(
        "Invalid %s type", field_name,
        extra={'value': value, 'type': type(value).__name__, 'row_index': row_index}
    )
    return None


def _safe_string(value: Any) -> Optional[str]:
    """
    Safely convert a value to string or None.

    Args:
        value: Value to convert

    Returns:
        String value or None if empty/None
    """
    if value is None:
        return None

    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None

    # 10637887.0 and "10637887" name the same facility
    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    return str(value)
