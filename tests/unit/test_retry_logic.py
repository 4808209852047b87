"""Tests for download retry logic with exponential backoff."""

import pytest
import requests

from lives_feed.source_extractor import retry as retry_module
from lives_feed.source_extractor.retry import retry_download, retry_with_backoff


@pytest.fixture
def sleeps(monkeypatch):
    """Record requested delays instead of sleeping."""
    delays = []
    monkeypatch.setattr(retry_module.time, "sleep", delays.append)
    return delays


class TestRetryWithBackoff:
    """Tests for the retry decorator."""

    def test_succeeds_on_first_attempt(self, sleeps):
        call_count = {"count": 0}

        @retry_with_backoff(max_retries=3)
        def download():
            call_count["count"] += 1
            return b"{}"

        assert download() == b"{}"
        assert call_count["count"] == 1
        assert sleeps == []

    def test_succeeds_after_failures(self, sleeps):
        call_count = {"count": 0}

        @retry_with_backoff(max_retries=3, initial_delay=0.5, backoff_factor=2.0)
        def flaky_download():
            call_count["count"] += 1
            if call_count["count"] < 3:
                raise ConnectionError("Connection reset")
            return b"{}"

        assert flaky_download() == b"{}"
        assert call_count["count"] == 3
        assert sleeps == [0.5, 1.0]

    def test_exhausts_all_attempts(self, sleeps):
        call_count = {"count": 0}

        @retry_with_backoff(max_retries=3, initial_delay=1.0, backoff_factor=2.0)
        def always_fails():
            call_count["count"] += 1
            raise TimeoutError("Portal export timed out")

        with pytest.raises(TimeoutError, match="Portal export timed out"):
            always_fails()

        # Initial attempt + 3 retries, no sleep after the last one
        assert call_count["count"] == 4
        assert sleeps == [1.0, 2.0, 4.0]

    def test_only_catches_specified_exceptions(self, sleeps):
        @retry_with_backoff(max_retries=2, exceptions=(ConnectionError,))
        def raises_value_error():
            raise ValueError("Wrong exception type")

        with pytest.raises(ValueError, match="Wrong exception type"):
            raises_value_error()
        assert sleeps == []

    def test_no_retries(self, sleeps):
        call_count = {"count": 0}

        @retry_with_backoff(max_retries=0)
        def fails_once():
            call_count["count"] += 1
            raise ConnectionError("Fail")

        with pytest.raises(ConnectionError):
            fails_once()

        assert call_count["count"] == 1

    def test_preserves_function_metadata_and_arguments(self, sleeps):
        @retry_with_backoff(max_retries=1)
        def fetch(url, timeout=30):
            """Fetch a document."""
            return (url, timeout)

        assert fetch.__name__ == "fetch"
        assert fetch.__doc__ == "Fetch a document."
        assert fetch("https://example.org", timeout=5) == ("https://example.org", 5)


class TestRetryDownload:
    """Tests for the HTTP download convenience decorator."""

    def test_retries_requests_exceptions(self, sleeps):
        call_count = {"count": 0}

        @retry_download(max_retries=2, initial_delay=0.25)
        def download():
            call_count["count"] += 1
            if call_count["count"] == 1:
                raise requests.exceptions.HTTPError("503 Service Unavailable")
            if call_count["count"] == 2:
                raise requests.exceptions.ChunkedEncodingError("Connection broken")
            return b"{}"

        assert download() == b"{}"
        assert call_count["count"] == 3
        assert sleeps == [0.25, 0.5]

    def test_does_not_retry_other_errors(self, sleeps):
        @retry_download(max_retries=2)
        def download():
            raise KeyError("meta")

        with pytest.raises(KeyError):
            download()
        assert sleeps == []


pytestmark = pytest.mark.unit
