"""Helpers for computing wizard step completion status."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from core.schema_registry import Section
from wizard.missing_fields import is_filled, missing_fields


class StepStatus(StrEnum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class StepMissing:
    """Missing required fields and filled optional fields for a step."""

    required: list[str]
    optional_filled: list[str]


def compute_step_missing(
    record: Mapping[str, Any],
    section: Section,
    optional_fields: Iterable[str] | None = None,
) -> StepMissing:
    """Compute missing required and filled optional fields for ``section``."""

    optional = tuple(section.optional if optional_fields is None else optional_fields)
    return StepMissing(
        required=missing_fields(record, section.required),
        optional_filled=[name for name in optional if is_filled(record, name)],
    )


def step_status(
    record: Mapping[str, Any],
    section: Section,
    optional_fields: Iterable[str] | None = None,
) -> StepStatus:
    """Return the tri-state status of ``section``.

    Required complete plus any optional value gives ``COMPLETE``; required
    complete alone gives ``PARTIAL``.
    """

    missing = compute_step_missing(record, section, optional_fields)
    if missing.required:
        return StepStatus.INCOMPLETE
    if missing.optional_filled:
        return StepStatus.COMPLETE
    return StepStatus.PARTIAL


__all__ = ["StepMissing", "StepStatus", "compute_step_missing", "step_status"]
