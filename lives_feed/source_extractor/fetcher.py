"""
Source Document Retrieval

This module loads the raw inspection document, either by downloading it from
the open data portal or by reading a local copy. Either way the whole document
is decoded into memory before any row is processed.

Failure modes:
- The document cannot be retrieved (network, HTTP status, missing file)
  -> SourceFetchError
- The document is retrieved but is not a JSON object -> MalformedInputError
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

import requests

from ..common.errors import MalformedInputError, SourceFetchError
from .retry import TRANSIENT_EXCEPTIONS, retry_download

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_RETRIES = 3

# Status codes worth retrying; anything else that is not 200 fails immediately
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def parse_source_document(body: Union[bytes, str], origin: str = "<memory>") -> dict[str, Any]:
    """
    Decode a raw JSON document.

    Args:
        body: Raw document content
        origin: URL or path the content came from (for error messages)

    Returns:
        The decoded top-level JSON object

    Raises:
        MalformedInputError: If the content is not valid JSON or not an object
    """
    try:
        document = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Source document from {origin} is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise MalformedInputError(
            f"Source document from {origin} must be a JSON object, got {type(document).__name__}"
        )

    return document


def _download(url: str, timeout: float) -> bytes:
    response = requests.get(url, headers={"Accept": "application/json"}, timeout=timeout)

    if response.status_code in RETRYABLE_STATUS_CODES:
        raise requests.exceptions.HTTPError(
            f"Source returned HTTP {response.status_code}", response=response
        )
    if response.status_code != 200:
        raise SourceFetchError(f"Source returned HTTP {response.status_code} for {url}")

    return response.content


def fetch_source_document(
    url: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = 1.0,
) -> dict[str, Any]:
    """
    Download and decode the raw inspection document.

    Transient failures (connection errors, timeouts, 429 and 5xx responses)
    are retried with exponential backoff.

    Args:
        url: Document URL (typically a Socrata ``rows.json`` export)
        timeout: Per-request timeout in seconds
        max_retries: Number of retries after the first attempt
        retry_delay: Delay before the first retry in seconds

    Returns:
        The decoded top-level JSON object

    Raises:
        SourceFetchError: If the document cannot be downloaded
        MalformedInputError: If the downloaded body is not a JSON object
    """
    logger.info("Downloading source document", extra={"url": url, "timeout": timeout})

    download = retry_download(max_retries=max_retries, initial_delay=retry_delay)(_download)
    try:
        body = download(url, timeout)
    except TRANSIENT_EXCEPTIONS as e:
        raise SourceFetchError(f"Failed to download source document from {url}: {e}") from e

    logger.info("Downloaded source document", extra={"url": url, "bytes": len(body)})
    return parse_source_document(body, origin=url)


def load_source_document(path: Union[str, Path]) -> dict[str, Any]:
    """
    Read and decode a local copy of the raw inspection document.

    Args:
        path: Path to a ``rows.json`` file

    Returns:
        The decoded top-level JSON object

    Raises:
        SourceFetchError: If the file does not exist or cannot be read
        MalformedInputError: If the file is not a JSON object
    """
    path = Path(path)
    try:
        body = path.read_bytes()
    except OSError as e:
        raise SourceFetchError(f"Cannot read source document {path}: {e}") from e

    logger.info("Loaded source document", extra={"path": str(path), "bytes": len(body)})
    return parse_source_document(body, origin=str(path))
