"""Date helper utilities shared by validators, rules and the auditor."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

_ISO_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})")


def resolve_today(today: date | None = None) -> date:
    """Return ``today`` or the current local date."""

    if today is not None:
        return today
    return date.today()


def parse_date(value: Any) -> date | None:
    """Return a ``date`` parsed from ``value`` when possible.

    Accepts ``date``/``datetime`` instances and strings that start with an ISO
    ``YYYY-MM-DD`` date (timestamps such as ``2001-04-03T00:00:00Z`` included).
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _ISO_DATE.match(value.strip())
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


def calculate_age(birth_date: date, today: date) -> int:
    """Return completed years between ``birth_date`` and ``today``."""

    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


__all__ = ["calculate_age", "parse_date", "resolve_today"]
