"""Advisory data-quality audit of persisted student profiles.

The audit runs on already-saved records and surfaces suspicious values in a
dismissible banner. It never raises and never blocks saving.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Callable, Final

from constants.keys import ProfileFields as P
from core.rules import Severity
from core.validators import coerce_number, is_blank
from wizard.date_utils import parse_date, resolve_today

logger = logging.getLogger(__name__)

MIN_PASSPORT_LENGTH: Final[int] = 6
MIN_ADDRESS_LENGTH: Final[int] = 10


@dataclass(frozen=True)
class DataQualityIssue:
    """A single advisory finding about a stored record."""

    severity: Severity
    field: str
    issue: str
    observed_value: Any
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["severity"] = str(self.severity)
        return payload


AuditCheck = Callable[[Mapping[str, Any], date], Iterable[DataQualityIssue]]


def _is_numeric_text(value: str) -> bool:
    compact = "".join(value.split())
    return bool(compact) and compact.isdigit()


def _date_of_birth(record: Mapping[str, Any], today: date) -> Iterable[DataQualityIssue]:
    raw = record.get(P.DATE_OF_BIRTH)
    born = parse_date(raw)
    if born is not None and born > today:
        yield DataQualityIssue(
            severity=Severity.ERROR,
            field=P.DATE_OF_BIRTH,
            issue="Date of birth is in the future",
            observed_value=raw,
            recommendation="Confirm the date of birth with the student",
        )


def _passport(record: Mapping[str, Any], today: date) -> Iterable[DataQualityIssue]:
    raw = record.get(P.PASSPORT_NUMBER)
    if isinstance(raw, str) and raw.strip() and len("".join(raw.split())) < MIN_PASSPORT_LENGTH:
        yield DataQualityIssue(
            severity=Severity.WARNING,
            field=P.PASSPORT_NUMBER,
            issue="Passport number seems too short",
            observed_value=raw,
            recommendation="Verify the passport number against the document",
        )


def _gpa(record: Mapping[str, Any], today: date) -> Iterable[DataQualityIssue]:
    raw = record.get(P.HIGHEST_GPA)
    if not isinstance(raw, str) or not raw.strip().endswith("%"):
        return
    number = coerce_number(raw.strip().rstrip("%"))
    if number is not None and number > 100:
        yield DataQualityIssue(
            severity=Severity.ERROR,
            field=P.HIGHEST_GPA,
            issue="Percentage cannot exceed 100%",
            observed_value=raw,
            recommendation="Re-enter the GPA as a percentage between 0 and 100",
        )


def _address(record: Mapping[str, Any], today: date) -> Iterable[DataQualityIssue]:
    raw = record.get(P.ADDRESS)
    if not isinstance(raw, str) or not raw.strip():
        return
    stripped = raw.strip()
    if len(stripped) < MIN_ADDRESS_LENGTH or _is_numeric_text(stripped):
        yield DataQualityIssue(
            severity=Severity.WARNING,
            field=P.ADDRESS,
            issue="Address looks incomplete",
            observed_value=raw,
            recommendation="Provide a full street address including city",
        )


def _course(record: Mapping[str, Any], today: date) -> Iterable[DataQualityIssue]:
    raw = record.get(P.INTERESTED_COURSE)
    if isinstance(raw, str) and _is_numeric_text(raw):
        yield DataQualityIssue(
            severity=Severity.WARNING,
            field=P.INTERESTED_COURSE,
            issue="Course name contains only numbers",
            observed_value=raw,
            recommendation="Enter the name of the course of interest",
        )


def _budget(record: Mapping[str, Any], today: date) -> Iterable[DataQualityIssue]:
    preferred = record.get(P.BUDGET_RANGE)
    estimated = record.get(P.ESTIMATED_BUDGET)
    if is_blank(preferred) or is_blank(estimated) or preferred == estimated:
        return
    yield DataQualityIssue(
        severity=Severity.WARNING,
        field=P.ESTIMATED_BUDGET,
        issue="Budget in study preferences does not match financial information",
        observed_value={P.BUDGET_RANGE: preferred, P.ESTIMATED_BUDGET: estimated},
        recommendation="Align the budget range with the estimated budget",
    )


AUDIT_CHECKS: Final[tuple[AuditCheck, ...]] = (
    _date_of_birth,
    _passport,
    _gpa,
    _address,
    _course,
    _budget,
)


def audit_record(record: Mapping[str, Any] | None, *, today: date | None = None) -> list[DataQualityIssue]:
    """Return advisory issues found in ``record``."""

    if not isinstance(record, Mapping):
        return []
    reference = resolve_today(today)
    issues: list[DataQualityIssue] = []
    for check in AUDIT_CHECKS:
        try:
            issues.extend(check(record, reference))
        except (TypeError, ValueError) as exc:
            logger.warning("Data-quality check %s failed: %s", check.__name__, exc)
    if issues:
        logger.info("Data-quality audit found %d issue(s)", len(issues))
    return issues


def summarize_issues(issues: Iterable[DataQualityIssue]) -> dict[str, int]:
    """Return issue counts keyed by severity (every severity present)."""

    counts = Counter(str(issue.severity) for issue in issues)
    return {str(severity): counts.get(str(severity), 0) for severity in Severity}


__all__ = [
    "AUDIT_CHECKS",
    "DataQualityIssue",
    "audit_record",
    "summarize_issues",
]
