"""Retry policy for gateway transport calls.

Only transport failures are retried. HTTP error responses reach the caller on
the first attempt so a rejected submission is never replayed.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, ParamSpec, TypeVar

import backoff
import requests

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")

TRANSPORT_RETRY_EXCEPTIONS: tuple[type[Exception], ...] = (
    requests.ConnectionError,
    requests.Timeout,
)


def _log_backoff(details: dict[str, Any]) -> None:
    logger.warning(
        "Gateway call failed on attempt %d; retrying in %.1fs",
        details["tries"],
        details.get("wait") or 0.0,
    )


def _log_giveup(details: dict[str, Any]) -> None:
    logger.error("Gateway call gave up after %d attempt(s)", details["tries"])


def retry_with_backoff(
    *,
    exceptions: Iterable[type[Exception]] = TRANSPORT_RETRY_EXCEPTIONS,
    max_tries: int = 3,
    max_time: float | None = None,
    jitter: Any = backoff.full_jitter,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Return a decorator retrying ``exceptions`` with exponential backoff.

    The final exception is re-raised once ``max_tries`` (or ``max_time``
    seconds) is exhausted. Tests pass ``jitter=None`` or patch ``time.sleep``.
    """

    return backoff.on_exception(
        backoff.expo,
        tuple(exceptions),
        max_tries=max_tries,
        max_time=max_time,
        jitter=jitter,
        on_backoff=_log_backoff,
        on_giveup=_log_giveup,
        logger=None,
    )


__all__ = ["TRANSPORT_RETRY_EXCEPTIONS", "retry_with_backoff"]
