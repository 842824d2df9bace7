"""Context-aware logging for wizard and gateway activity.

Log records carry the id of the record being edited and the current wizard
section. Both are bound through context variables, so nested calls inherit
them without passing them around.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

LOG_FORMAT = "%(asctime)s %(levelname)s [record=%(record_id)s step=%(wizard_step)s] %(name)s: %(message)s"

_UNSET = "-"

_CONTEXT_VARS: dict[str, contextvars.ContextVar[str]] = {
    "record_id": contextvars.ContextVar("record_id", default=_UNSET),
    "wizard_step": contextvars.ContextVar("wizard_step", default=_UNSET),
}

_base_record_factory = logging.getLogRecordFactory()
_factory_installed = False


def _normalise(value: object) -> str:
    text = "" if value is None else str(value).strip()
    return text or _UNSET


def current_context() -> dict[str, str]:
    return {name: var.get() for name, var in _CONTEXT_VARS.items()}


def _contextual_record(*args: object, **kwargs: object) -> logging.LogRecord:
    record = _base_record_factory(*args, **kwargs)
    for name, value in current_context().items():
        setattr(record, name, value)
    return record


def _level_number(level: int | str) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.strip().upper())
    return number if isinstance(number, int) else logging.INFO


def configure_logging(*, level: int | str | None = None) -> None:
    """Install the context-aware record factory and format root handlers.

    ``level`` defaults to ``config.LOG_LEVEL``. Calling this again only
    updates the level.
    """

    global _factory_installed
    if level is None:
        from config import LOG_LEVEL

        level = LOG_LEVEL
    if not _factory_installed:
        logging.setLogRecordFactory(_contextual_record)
        _factory_installed = True
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(_level_number(level))
    for handler in root.handlers:
        if handler.formatter is None:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))


def set_record_id(record_id: str | None) -> None:
    """Bind the record being edited for subsequent log records."""

    _CONTEXT_VARS["record_id"].set(_normalise(record_id))


def set_wizard_step(step: str | None) -> None:
    _CONTEXT_VARS["wizard_step"].set(_normalise(step))


@contextmanager
def log_context(
    *,
    record_id: str | None = None,
    wizard_step: str | None = None,
) -> Iterator[None]:
    """Temporarily bind ``record_id`` and/or ``wizard_step``; ``None`` keeps the current value."""

    overrides = {"record_id": record_id, "wizard_step": wizard_step}
    tokens = [
        (var, var.set(_normalise(overrides[name])))
        for name, var in _CONTEXT_VARS.items()
        if overrides[name] is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "current_context",
    "log_context",
    "set_record_id",
    "set_wizard_step",
]
