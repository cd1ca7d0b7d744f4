"""
utils/retry.py — Exponential-backoff retry decorator for backend reads.

Uses tenacity under the hood. Logs each attempt with structlog so transient
Supabase failures are observable without crashing the caller. Only wrap
idempotent calls (selects, updates keyed by id); inserts are never retried.

Usage:
    from fibertrack_pipeline.utils.retry import with_retry_sync

    @with_retry_sync(max_attempts=3, base_delay=0.5)
    def fetch_rows() -> list[dict]:
        return client.table("assets").select("*").execute().data

    # Defaults come from settings.supabase_max_attempts / supabase_retry_delay
    @with_retry_sync()
    def fetch_waves() -> list[dict]: ...
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fibertrack_shared.config import settings

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def with_retry_sync(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float = 30.0,
    retry_on: type[Exception] | tuple[type[Exception], ...] = Exception,
) -> Callable[[F], F]:
    """
    Decorator that retries a synchronous function with exponential backoff.

    Delays: base_delay * 2^(attempt-1), capped at max_delay.

    Args:
        max_attempts: Total attempts before re-raising (default: settings).
        base_delay:   Initial delay in seconds (default: settings).
        max_delay:    Maximum delay cap in seconds.
        retry_on:     Exception type(s) that trigger a retry.

    Returns:
        Decorated function.
    """
    attempts = max_attempts if max_attempts is not None else settings.supabase_max_attempts
    delay = base_delay if base_delay is not None else settings.supabase_retry_delay

    def decorator(fn: F) -> F:
        attempt_log = log.bind(function=fn.__qualname__)

        def before_sleep(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome else None
            attempt_log.warning(
                "retry_attempt",
                attempt=state.attempt_number,
                max_attempts=attempts,
                delay_s=state.next_action.sleep if state.next_action else None,
                error=str(exc) if exc else None,
            )

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            retrying = Retrying(
                stop=stop_after_attempt(attempts),
                wait=wait_exponential(multiplier=delay, max=max_delay),
                retry=retry_if_exception_type(retry_on),
                before_sleep=before_sleep,
                reraise=True,
            )
            try:
                return retrying(fn, *args, **kwargs)
            except Exception as exc:
                attempt_log.error(
                    "retry_exhausted",
                    max_attempts=attempts,
                    error=str(exc),
                )
                raise

        return wrapper  # type: ignore[return-value]

    return decorator
