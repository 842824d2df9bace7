"""Completion percentages derived from partial records.

Two granularities coexist and are deliberately not unified: the profile page
counts a flat list of compulsory fields while the dashboard counts complete
sections. Both are pure and deterministic.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Final

from core.schema_registry import Section, get_sections
from wizard.missing_fields import missing_fields

COMPLETE_THRESHOLD: Final[int] = 80
PARTIAL_THRESHOLD: Final[int] = 50

# Either a concrete Section or a set of field alternatives keyed by name.
SectionSpec = Section | Sequence[Sequence[str]]


@dataclass(frozen=True)
class CompletionResult:
    """Aggregate completion of one record."""

    percentage: int
    completed_sections: int
    total_sections: int
    per_section: dict[str, bool] = field(default_factory=dict)
    missing_fields: tuple[str, ...] = ()


def round_half_up(value: float) -> int:
    """Round ``value`` to the nearest integer with halves rounded up."""

    return int(math.floor(value + 0.5))


def _percentage(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return round_half_up(100 * done / total)


def section_is_complete(record: Mapping[str, Any], section: SectionSpec) -> bool:
    """Return ``True`` when all required fields of ``section`` are filled.

    Alternative field groups are satisfied when any one group is fully filled.
    """

    if isinstance(section, Section):
        return not missing_fields(record, section.required)
    return any(not missing_fields(record, group) for group in section)


def field_level_completion(record: Mapping[str, Any], fields: Iterable[str]) -> CompletionResult:
    """Return the rounded share of ``fields`` that are filled in ``record``.

    The result lists the unfilled fields in order and carries no sections.
    """

    ordered = tuple(fields)
    missing = tuple(missing_fields(record, ordered))
    return CompletionResult(
        percentage=_percentage(len(ordered) - len(missing), len(ordered)),
        completed_sections=0,
        total_sections=0,
        missing_fields=missing,
    )


def section_level_completion(
    record: Mapping[str, Any],
    sections: Mapping[str, SectionSpec] | Iterable[Section],
) -> int:
    """Return the rounded share of complete sections."""

    specs = list(sections.values()) if isinstance(sections, Mapping) else list(sections)
    done = sum(1 for spec in specs if section_is_complete(record, spec))
    return _percentage(done, len(specs))


def section_percentages(record: Mapping[str, Any], sections: Iterable[Section]) -> dict[str, int]:
    """Return the per-section fill percentage over each section's fields."""

    return {section.id: field_level_completion(record, section.fields).percentage for section in sections}


def calculate_completion(record: Mapping[str, Any], kind: str) -> CompletionResult:
    """Compute field-level completion of ``record`` over ``kind``'s registry."""

    sections = get_sections(kind)
    required = [name for section in sections for name in section.required]
    missing = tuple(missing_fields(record, required))
    per_section = {section.id: section_is_complete(record, section) for section in sections}
    return CompletionResult(
        percentage=_percentage(len(required) - len(missing), len(required)),
        completed_sections=sum(per_section.values()),
        total_sections=len(sections),
        per_section=per_section,
        missing_fields=missing,
    )


def completion_badge(percentage: float) -> str:
    """Return the badge bucket for ``percentage``."""

    if percentage >= COMPLETE_THRESHOLD:
        return "complete"
    if percentage >= PARTIAL_THRESHOLD:
        return "partial"
    return "incomplete"


__all__ = [
    "COMPLETE_THRESHOLD",
    "CompletionResult",
    "PARTIAL_THRESHOLD",
    "calculate_completion",
    "completion_badge",
    "field_level_completion",
    "round_half_up",
    "section_is_complete",
    "section_level_completion",
    "section_percentages",
]
