"""Cross-field consistency rules evaluated when a section is submitted.

Rules complement the field constraints in :mod:`core.field_validators`: a rule
only runs once every trigger field is present, so absence stays a field-level
concern. ``error`` violations block advancing past the owning section while
``warning`` violations are advisory.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any, Callable, Final

from constants import options
from constants.keys import ProfileFields as P
from constants.keys import ScholarshipFields as S
from core.schema_registry import EntityKind, field_label
from core.validators import coerce_int, coerce_number, is_blank
from wizard.date_utils import resolve_today

# Allowed drift between the recorded academic gap and the computed one.
ACADEMIC_GAP_TOLERANCE: Final[int] = 1


class Severity(StrEnum):
    """Severity shared by rule violations and data-quality issues."""

    ERROR = "error"
    WARNING = "warning"


Predicate = Callable[[Mapping[str, Any], date], str | None]


@dataclass(frozen=True)
class CrossFieldRule:
    """Predicate spanning several fields of one record."""

    id: str
    section: str
    fields: tuple[str, ...]
    predicate: Predicate
    severity: Severity = Severity.ERROR
    trigger_fields: tuple[str, ...] | None = None

    @property
    def triggers(self) -> tuple[str, ...]:
        return self.fields if self.trigger_fields is None else self.trigger_fields

    def applies(self, record: Mapping[str, Any]) -> bool:
        return all(not is_blank(record.get(field)) for field in self.triggers)


@dataclass(frozen=True)
class RuleViolation:
    """Outcome of a failed cross-field rule."""

    rule_id: str
    section: str
    fields: tuple[str, ...]
    message: str
    severity: Severity = Severity.ERROR

    @property
    def blocking(self) -> bool:
        return self.severity is Severity.ERROR


def suggest_academic_gap(graduation_year: Any, *, today: date | None = None) -> int | None:
    """Return the gap in years since ``graduation_year`` or ``None`` when unknown.

    Future graduation years yield ``None`` so an in-progress degree never
    pre-fills a gap.
    """

    year = coerce_int(graduation_year)
    if year is None:
        return None
    current = resolve_today(today).year
    if year > current:
        return None
    return current - year


def _academic_gap(record: Mapping[str, Any], today: date) -> str | None:
    # A future graduation year gives a negative expected gap and is still compared.
    year = coerce_int(record.get(P.GRADUATION_YEAR))
    gap = coerce_number(record.get(P.ACADEMIC_GAP))
    if year is None or gap is None:
        return None
    expected = today.year - year
    if abs(gap - expected) > ACADEMIC_GAP_TOLERANCE:
        return f"Academic gap should be about {expected} years based on your graduation year"
    return None


def _loan_consistency(record: Mapping[str, Any], today: date) -> str | None:
    approval = record.get(P.LOAN_APPROVAL)
    amount = coerce_number(record.get(P.LOAN_AMOUNT)) or 0.0
    if approval is None and amount <= 0:
        return None
    if approval is True and amount <= 0:
        return "Loan amount must be greater than 0 when a loan is approved"
    if approval is not True and amount > 0:
        return "Loan approval must be confirmed when a loan amount is entered"
    return None


def _required_when_status(field: str, statuses: Collection[str], reason: str) -> Predicate:
    def _check(record: Mapping[str, Any], today: date) -> str | None:
        if record.get(P.EMPLOYMENT_STATUS) not in statuses:
            return None
        if is_blank(record.get(field)):
            return f"{field_label(field)} is required {reason}"
        return None

    return _check


def _budget_parity(record: Mapping[str, Any], today: date) -> str | None:
    if record.get(P.BUDGET_RANGE) != record.get(P.ESTIMATED_BUDGET):
        return "Budget range in study preferences differs from the estimated budget"
    return None


def _ordered(low_field: str, high_field: str, message: str) -> Predicate:
    def _check(record: Mapping[str, Any], today: date) -> str | None:
        low = coerce_number(record.get(low_field))
        high = coerce_number(record.get(high_field))
        if low is None or high is None:
            return None
        if low > high:
            return message
        return None

    return _check


_EMPLOYMENT_RULES: Final[tuple[CrossFieldRule, ...]] = tuple(
    CrossFieldRule(
        id="employment_details",
        section="employment",
        fields=(field,),
        predicate=_required_when_status(field, statuses, reason),
        trigger_fields=(P.EMPLOYMENT_STATUS,),
    )
    for field, statuses, reason in (
        (P.JOB_TITLE, options.WORKING_STATUSES, "when employed"),
        (P.ORGANIZATION_NAME, options.WORKING_STATUSES, "when employed"),
        (P.FIELD_OF_WORK, options.WORKING_STATUSES, "when employed"),
        (P.GAP_REASON, options.NOT_WORKING_STATUSES, "when not currently working"),
    )
)

PROFILE_RULES: Final[tuple[CrossFieldRule, ...]] = (
    CrossFieldRule(
        id="academic_gap",
        section="academic",
        fields=(P.ACADEMIC_GAP, P.GRADUATION_YEAR),
        predicate=_academic_gap,
    ),
    CrossFieldRule(
        id="loan_consistency",
        section="budget",
        fields=(P.LOAN_AMOUNT, P.LOAN_APPROVAL),
        predicate=_loan_consistency,
        trigger_fields=(),
    ),
    *_EMPLOYMENT_RULES,
    CrossFieldRule(
        id="budget_parity",
        section="budget",
        fields=(P.ESTIMATED_BUDGET, P.BUDGET_RANGE),
        predicate=_budget_parity,
        severity=Severity.WARNING,
    ),
)

SCHOLARSHIP_RULES: Final[tuple[CrossFieldRule, ...]] = (
    CrossFieldRule(
        id="value_range_order",
        section="funding",
        fields=(S.TOTAL_VALUE_MAX, S.TOTAL_VALUE_MIN),
        predicate=_ordered(
            S.TOTAL_VALUE_MIN,
            S.TOTAL_VALUE_MAX,
            "Maximum value must be greater than or equal to the minimum value",
        ),
    ),
    CrossFieldRule(
        id="age_range_order",
        section="requirements",
        fields=(S.MAX_AGE, S.MIN_AGE),
        predicate=_ordered(S.MIN_AGE, S.MAX_AGE, "Maximum age must be greater than or equal to the minimum age"),
    ),
)

_RULES: dict[str, tuple[CrossFieldRule, ...]] = {
    EntityKind.STUDENT_PROFILE: PROFILE_RULES,
    EntityKind.SCHOLARSHIP: SCHOLARSHIP_RULES,
}


def register_rules(kind: str, rules: Iterable[CrossFieldRule]) -> None:
    """Register (or replace) the cross-field rules for ``kind``."""

    _RULES[str(kind)] = tuple(rules)


def rules_for(kind: str, *, sections: Collection[str] | None = None) -> tuple[CrossFieldRule, ...]:
    """Return the rules for ``kind``, optionally limited to ``sections``."""

    rules = _RULES.get(str(kind), ())
    if sections is None:
        return rules
    return tuple(rule for rule in rules if rule.section in sections)


def evaluate_rules(
    kind: str,
    record: Mapping[str, Any],
    *,
    sections: Collection[str] | None = None,
    today: date | None = None,
) -> list[RuleViolation]:
    """Evaluate every applicable rule of ``kind`` against ``record``."""

    reference = resolve_today(today)
    violations: list[RuleViolation] = []
    for rule in rules_for(kind, sections=sections):
        if not rule.applies(record):
            continue
        message = rule.predicate(record, reference)
        if message:
            violations.append(
                RuleViolation(
                    rule_id=rule.id,
                    section=rule.section,
                    fields=rule.fields,
                    message=message,
                    severity=rule.severity,
                )
            )
    return violations


def errors_by_field(violations: Iterable[RuleViolation]) -> dict[str, str]:
    """Map blocking violations onto their first field (first message wins)."""

    errors: dict[str, str] = {}
    for violation in violations:
        if not violation.blocking or not violation.fields:
            continue
        errors.setdefault(violation.fields[0], violation.message)
    return errors


__all__ = [
    "ACADEMIC_GAP_TOLERANCE",
    "CrossFieldRule",
    "PROFILE_RULES",
    "RuleViolation",
    "SCHOLARSHIP_RULES",
    "Severity",
    "errors_by_field",
    "evaluate_rules",
    "register_rules",
    "rules_for",
    "suggest_academic_gap",
]
