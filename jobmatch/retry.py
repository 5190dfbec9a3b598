"""Retry combinator applied around every fetch task."""
from __future__ import annotations

import functools
import time
from typing import Any, Callable, Tuple, Type

from jobmatch.log import get_logger

log = get_logger(__name__)


def backoff_delay(attempt: int, base_delay: float, backoff_factor: float, max_delay: float) -> float:
    """Seconds to wait after failed attempt ``attempt`` (1-based)."""
    return min(base_delay * backoff_factor ** (attempt - 1), max_delay)


def retry(
    *,
    max_attempts: int = 2,
    base_delay: float = 1.5,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    label: str | None = None,
) -> Callable:
    """Decorator: call the wrapped function up to ``max_attempts`` times.

    Waits ``backoff_delay`` between attempts and re-raises the last failure
    unchanged. Exceptions outside ``retryable`` propagate on the first attempt.
    """

    def decorator(fn: Callable) -> Callable:
        name = label or getattr(fn, "__qualname__", repr(fn))

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt >= max_attempts:
                        log.error("%s gave up after %d attempt(s): %s", name, attempt, exc)
                        raise
                    delay = backoff_delay(attempt, base_delay, backoff_factor, max_delay)
                    log.warning(
                        "%s attempt %d/%d failed (%s); next try in %.1fs",
                        name, attempt, max_attempts, exc, delay,
                    )
                    if delay > 0:
                        time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
