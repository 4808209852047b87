"""
Error hierarchy for the LIVES feed pipeline.

Every error raised here is fatal for the run: the feed is published
all-or-nothing, so nothing is retried or downgraded to a warning once the
transformation has started.
"""

from typing import Optional


class FeedError(Exception):
    """
    Base class for all errors raised while building a feed.

    Args:
        message: Human-readable description of the problem
        row_index: Zero-based position of the offending input row, when the
                   error is tied to a single row
    """

    def __init__(self, message: str, row_index: Optional[int] = None):
        self.row_index = row_index
        if row_index is not None:
            message = f"row {row_index}: {message}"
        super().__init__(message)


class MalformedInputError(FeedError):
    """Raised when the source document or one of its rows has an unexpected shape."""
    pass


class MalformedAddressError(FeedError):
    """Raised when a row's nested address is absent or cannot be decoded."""
    pass


class MissingIdentifierError(FeedError):
    """Raised when the facility strategy is selected but a row has no facility id."""
    pass


class SourceFetchError(FeedError):
    """Raised when the source document cannot be retrieved."""
    pass


class ConfigError(FeedError, ValueError):
    """Raised when the feed configuration file is invalid."""
    pass


__all__ = [
    "FeedError",
    "MalformedInputError",
    "MalformedAddressError",
    "MissingIdentifierError",
    "SourceFetchError",
    "ConfigError",
]
