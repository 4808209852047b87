"""LIVES Feed Test Suite.

This package contains unit and integration tests for the LIVES feed builder.

Test Structure:
- unit/: Unit tests for individual functions and classes
- integration/: End-to-end tests from a rows.json file to a feed archive
"""

__version__ = "0.1.0"
