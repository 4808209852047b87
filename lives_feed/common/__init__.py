"""
Common building blocks shared across the LIVES feed services.

This package is intentionally small: the error hierarchy every stage raises
and the feed configuration loader.
"""
