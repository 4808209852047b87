"""
Legacy Business Identifier Generator

Older LIVES feeds for this dataset were published before the source carried a
facility identifier. Businesses were keyed by hashing the restaurant name and
street address instead. This module keeps that derivation available as an
explicit mode so that feeds can still be produced with the historical keys.

Key Concepts:
- Deterministic: same name and street always produce the same id
- No case or whitespace folding: "Murphys Deli" and "MURPHYS DELI" differ
- Collisions: two businesses with the same name at the same street share an id
- MD5 hash: 128-bit, fixed-length hex string
"""

import hashlib
from typing import Optional

BUSINESS_ID_SEPARATOR = "|"


def generate_business_id(name: Optional[str], street: Optional[str]) -> str:
    """
    Generate a legacy business id from name and street address.

    Algorithm:
    1. Substitute the empty string for a missing name or street
    2. Concatenate with '|' delimiter
    3. Return the hex MD5 digest of the UTF-8 bytes

    Examples:
        >>> business_id = generate_business_id("111 Murphys Deli", "111 CONGRESS AVE")
        >>> len(business_id)
        32

    Args:
        name: Restaurant name as written to the business row
        street: Street address as written to the business row

    Returns:
        32-character hexadecimal MD5 hash string
    """
    composite_key = f"{name or ''}{BUSINESS_ID_SEPARATOR}{street or ''}"

    hash_object = hashlib.md5(composite_key.encode("utf-8"))
    return hash_object.hexdigest()

