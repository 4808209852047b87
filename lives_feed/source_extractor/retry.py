"""Retry logic for source downloads with exponential backoff.

Open data portals regularly return 5xx responses or drop connections while
exporting large documents. This module provides a decorator that retries the
download on transient failures before the run gives up.
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar

import requests

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)

TRANSIENT_EXCEPTIONS: tuple[type[Exception], ...] = (
    requests.exceptions.RequestException,
    ConnectionError,
    TimeoutError,
)


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (ConnectionError, TimeoutError),
) -> Callable[[F], F]:
    """Decorator to retry a function with exponential backoff.

    The wrapped function is called up to ``max_retries + 1`` times. Between
    attempts the decorator sleeps ``initial_delay * backoff_factor ** attempt``
    seconds. Exceptions not listed in ``exceptions`` propagate immediately.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        initial_delay: Delay in seconds before the first retry (default: 1.0)
        backoff_factor: Multiplier applied to the delay after each retry (default: 2.0)
        exceptions: Exception types that trigger a retry

    Returns:
        Decorated function that retries on the listed exceptions

    Example:
        @retry_with_backoff(max_retries=2, initial_delay=0.5)
        def download(url):
            response = requests.get(url, timeout=30)
            response.raise_for_status()
            return response.content

    Backoff schedule (initial_delay=1.0, backoff_factor=2.0):
        Attempt 1: immediate
        Attempt 2: after 1 second
        Attempt 3: after 2 seconds
        Attempt 4: after 4 seconds
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e

                    if attempt < max_retries:
                        delay = initial_delay * (backoff_factor**attempt)

                        logger.warning(
                            "Function %s failed (attempt %d/%d): %s. Retrying in %.1f seconds...",
                            func.__name__,
                            attempt + 1,
                            max_retries + 1,
                            e,
                            delay,
                            extra={
                                "function": func.__name__,
                                "retry_attempt": attempt + 1,
                                "max_retries": max_retries + 1,
                                "delay_seconds": delay,
                                "exception_type": type(e).__name__,
                            },
                        )

                        time.sleep(delay)
                    else:
                        logger.error(
                            "Function %s failed after %d attempts",
                            func.__name__,
                            max_retries + 1,
                            extra={
                                "function": func.__name__,
                                "total_attempts": max_retries + 1,
                                "exception_type": type(e).__name__,
                            },
                        )

            raise last_exception  # type: ignore

        return wrapper  # type: ignore

    return decorator


def retry_download(max_retries: int = 3, initial_delay: float = 1.0) -> Callable[[F], F]:
    """Convenience decorator for HTTP downloads.

    Retries any ``requests`` failure as well as the builtin connection and
    timeout errors.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        initial_delay: Delay before the first retry in seconds (default: 1.0)

    Returns:
        Decorated function
    """
    return retry_with_backoff(
        max_retries=max_retries,
        initial_delay=initial_delay,
        backoff_factor=2.0,
        exceptions=TRANSIENT_EXCEPTIONS,
    )
