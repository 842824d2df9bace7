"""Canonical section validation shared by the wizard controller and callers.

Composes the registry's required fields, the per-field constraints and the
cross-field rules into one function per section.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from core.field_validators import validate_fields
from core.rules import RuleViolation, errors_by_field, evaluate_rules
from core.schema_registry import get_sections


@dataclass(frozen=True)
class SectionValidationResult:
    """Structured validation outcome for one or more sections."""

    field_errors: dict[str, str] = field(default_factory=dict)
    violations: tuple[RuleViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.field_errors

    @property
    def warnings(self) -> tuple[RuleViolation, ...]:
        return tuple(violation for violation in self.violations if not violation.blocking)


def validate_section(
    kind: str,
    section_id: str,
    record: Mapping[str, Any],
    *,
    rule_sections: Iterable[str] | None = None,
    today: date | None = None,
) -> SectionValidationResult:
    """Validate the fields of ``section_id`` plus the rules owned by it.

    ``rule_sections`` widens which rules are evaluated; it defaults to the
    section itself. Field-level errors win over rule errors on the same
    field.
    """

    section = next((item for item in get_sections(kind) if item.id == section_id), None)
    if section is None:
        raise KeyError(section_id)
    errors = validate_fields(kind, record, section.fields, today=today)
    scopes = set(rule_sections) if rule_sections is not None else {section_id}
    violations = tuple(evaluate_rules(kind, record, sections=scopes, today=today))
    for name, message in errors_by_field(violations).items():
        errors.setdefault(name, message)
    return SectionValidationResult(field_errors=errors, violations=violations)


def validate_record(
    kind: str,
    record: Mapping[str, Any],
    *,
    today: date | None = None,
) -> SectionValidationResult:
    """Validate every section of ``kind`` and every rule against ``record``."""

    errors: dict[str, str] = {}
    for section in get_sections(kind):
        errors.update(validate_fields(kind, record, section.fields, today=today))
    violations = tuple(evaluate_rules(kind, record, today=today))
    for name, message in errors_by_field(violations).items():
        errors.setdefault(name, message)
    return SectionValidationResult(field_errors=errors, violations=violations)


__all__ = ["SectionValidationResult", "validate_record", "validate_section"]
