"""Helper validators shared across field constraint tables.

Every ``Check`` returned here accepts a non-blank value plus the reference
date and returns either ``None`` (accepted) or a human-readable rejection.
Checks never raise; unparsable input is reported as a rejection.
"""

from __future__ import annotations

import math
import re
from collections.abc import Collection
from datetime import date
from typing import Any, Callable

Check = Callable[[Any, date], str | None]


def is_blank(value: Any) -> bool:
    """Return ``True`` when ``value`` should be treated as missing."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def coerce_number(value: object) -> float | None:
    """Return ``value`` as ``float`` when it is numeric or a numeric string."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        candidate = value.strip().replace(",", "")
        if not candidate:
            return None
        try:
            number = float(candidate)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def coerce_int(value: object) -> int | None:
    """Return ``value`` as ``int`` when it represents a whole number."""

    number = coerce_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def length_between(label: str, minimum: int | None = None, maximum: int | None = None) -> Check:
    """Bound the trimmed string length of a value."""

    def _check(value: Any, today: date) -> str | None:
        if not isinstance(value, str):
            return f"{label} must be text"
        length = len(value.strip())
        if minimum is not None and length < minimum:
            return f"{label} must be at least {minimum} characters"
        if maximum is not None and length > maximum:
            return f"{label} must not exceed {maximum} characters"
        return None

    return _check


def matches(pattern: str, message: str, *, strip_whitespace: bool = False) -> Check:
    """Require the trimmed value to fully match ``pattern``."""

    compiled = re.compile(pattern)

    def _check(value: Any, today: date) -> str | None:
        if not isinstance(value, str):
            return message
        candidate = re.sub(r"\s+", "", value) if strip_whitespace else value.strip()
        if compiled.fullmatch(candidate) is None:
            return message
        return None

    return _check


def number_between(
    label: str,
    minimum: float | None = None,
    maximum: float | None = None,
    *,
    integer: bool = False,
    message: str | None = None,
) -> Check:
    """Require a numeric value inside ``[minimum, maximum]``."""

    def _check(value: Any, today: date) -> str | None:
        number = coerce_number(value)
        if number is None:
            return f"{label} must be a number"
        if integer and not number.is_integer():
            return f"{label} must be a whole number"
        if minimum is not None and number < minimum:
            return message or f"{label} must be at least {_format_bound(minimum)}"
        if maximum is not None and number > maximum:
            return message or f"{label} cannot exceed {_format_bound(maximum)}"
        return None

    return _check


def one_of(label: str, options: Collection[str]) -> Check:
    """Require membership in a closed option set."""

    def _check(value: Any, today: date) -> str | None:
        if not isinstance(value, str) or value not in options:
            return f"{label} must be one of: {', '.join(sorted(options))}"
        return None

    return _check


def items_between(label: str, minimum: int = 0, maximum: int | None = None) -> Check:
    """Bound the number of entries in an array value."""

    def _check(value: Any, today: date) -> str | None:
        if not isinstance(value, (list, tuple)):
            return f"{label} must be a list"
        count = len(value)
        if count < minimum:
            noun = "entry" if minimum == 1 else "entries"
            return f"At least {minimum} {label.lower()} {noun} required"
        if maximum is not None and count > maximum:
            return f"Maximum {maximum} {label.lower()} allowed"
        return None

    return _check


def is_boolean(label: str) -> Check:
    """Require an actual boolean flag."""

    def _check(value: Any, today: date) -> str | None:
        if not isinstance(value, bool):
            return f"{label} must be yes or no"
        return None

    return _check


def _format_bound(bound: float) -> str:
    if float(bound).is_integer():
        return f"{int(bound):,}"
    return f"{bound:g}"


__all__ = [
    "Check",
    "coerce_int",
    "coerce_number",
    "is_blank",
    "is_boolean",
    "items_between",
    "length_between",
    "matches",
    "number_between",
    "one_of",
]
