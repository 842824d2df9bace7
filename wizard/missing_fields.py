"""Utilities for identifying missing values in record data."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from core.validators import is_blank


def get_path_value(record: Any, dotted_path: str) -> Any:
    """Return the value for ``dotted_path`` in ``record`` when present."""

    if not dotted_path:
        return record

    target: Any = record
    for part in dotted_path.split("."):
        if isinstance(target, Mapping):
            target = target.get(part)
            continue
        if hasattr(target, part):
            target = getattr(target, part)
            continue
        return None
    return target


def is_filled(record: Any, field: str) -> bool:
    """Return ``True`` when ``field`` holds an explicit value in ``record``.

    ``False`` and ``0`` count as filled; ``None``, blank strings and empty
    collections do not.
    """

    return not is_blank(get_path_value(record, field))


def missing_fields(record: Any, paths: Iterable[str]) -> list[str]:
    """Return the subset of ``paths`` that are blank or missing in ``record``."""

    missing: list[str] = []
    for path in paths:
        if not is_filled(record, path):
            missing.append(path)
    return missing


__all__ = ["get_path_value", "is_blank", "is_filled", "missing_fields"]
