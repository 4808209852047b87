"""LIVES Feed Package.

This package converts a municipal restaurant-inspection dataset (a Socrata-style
``rows.json`` document) into a LIVES feed archive:
- source_extractor: Retrieves the raw JSON document and maps rows to named fields
- normalizer: Decodes addresses, derives business ids, converts dates, deduplicates
- publisher: Assembles the businesses/inspections tables and packages the archive
"""

__version__ = "0.1.0"
