"""Per-field constraints for student profiles and scholarship listings.

Constraints are field-local and re-entrant: they read only the single value
handed to them, never raise, and are safe to run on every keystroke. Whether
a field is required comes from the section registry so the two never drift.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date
from enum import StrEnum
from typing import Any, Final, Iterable

from pydantic import EmailStr, HttpUrl, ValidationError
from pydantic.type_adapter import TypeAdapter

from constants import options
from constants.keys import ProfileFields as P
from constants.keys import ScholarshipFields as S
from core.schema_registry import EntityKind, field_label, get_sections
from core.validators import (
    Check,
    coerce_number,
    is_blank,
    is_boolean,
    items_between,
    length_between,
    matches,
    number_between,
    one_of,
)
from wizard.date_utils import calculate_age, parse_date, resolve_today

_EMAIL_ADAPTER: Final[TypeAdapter[EmailStr]] = TypeAdapter(EmailStr)
_URL_ADAPTER: Final[TypeAdapter[HttpUrl]] = TypeAdapter(HttpUrl)

# Letters (any script), spaces, hyphens, apostrophes and periods.
NAME_PATTERN: Final[str] = r"(?:[^\W\d_]|[\s'.\-])+"
PHONE_PATTERN: Final[str] = r"\+?[1-9]\d{9,19}"
PASSPORT_PATTERN: Final[str] = r"[A-Za-z0-9]{6,15}"
CURRENCY_PATTERN: Final[str] = r"[A-Z]{3}"
SCHOLARSHIP_ID_PATTERN: Final[str] = r"[A-Z0-9_-]+"
INSTITUTION_PATTERN: Final[str] = r"(?:[^\W_]|[\s\-.&,'()])+"
INTAKE_PATTERN: Final[str] = r"(?:Fall|Spring|Summer|Winter)\s+\d{4}"

MIN_GRADUATION_YEAR: Final[int] = 1980
MIN_AGE: Final[int] = 16
MAX_AGE: Final[int] = 100


class FieldKind(StrEnum):
    """Value shape a constraint expects."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    CHOICE = "choice"
    LIST = "list"
    FLAG = "flag"
    EMAIL = "email"
    URL = "url"
    TESTS = "tests"


@dataclass(frozen=True)
class FieldConstraint:
    """Validation contract for a single record field."""

    field: str
    kind: FieldKind = FieldKind.TEXT
    checks: tuple[Check, ...] = ()
    required: bool = False
    max_items: int | None = None
    label: str = ""

    @property
    def display_label(self) -> str:
        return self.label or field_label(self.field)

    def validate(self, value: Any, *, today: date | None = None) -> str | None:
        """Return ``None`` when ``value`` is acceptable, else the rejection reason."""

        if is_blank(value):
            if self.required:
                return f"{self.display_label} is required"
            return None
        reference = resolve_today(today)
        for check in self.checks:
            error = check(value, reference)
            if error:
                return error
        return None


def _birth_date(value: Any, today: date) -> str | None:
    born = parse_date(value)
    if born is None:
        return "Date must be in YYYY-MM-DD format"
    if born > today:
        return "Date of birth cannot be in the future"
    age = calculate_age(born, today)
    if age < MIN_AGE or age > MAX_AGE:
        return f"Age must be between {MIN_AGE} and {MAX_AGE} years"
    return None


def _future_date(label: str) -> Check:
    def _check(value: Any, today: date) -> str | None:
        parsed = parse_date(value)
        if parsed is None:
            return "Date must be in YYYY-MM-DD format"
        if parsed <= today:
            return f"{label} must be in the future"
        return None

    return _check


def _email(value: Any, today: date) -> str | None:
    try:
        _EMAIL_ADAPTER.validate_python(str(value).strip())
    except (ValidationError, TypeError):
        return "Invalid email format"
    return None


def _https_url(value: Any, today: date) -> str | None:
    candidate = str(value).strip()
    try:
        _URL_ADAPTER.validate_python(candidate)
    except (ValidationError, TypeError):
        return "Please enter a valid URL"
    if not candidate.lower().startswith("https://"):
        return "URL must use HTTPS for security"
    return None


def _gpa(value: Any, today: date) -> str | None:
    text = str(value).strip()
    is_percentage = text.endswith("%")
    number = coerce_number(text.rstrip("%"))
    message = "GPA must be in percentage (0-100%) or scale format (0-4.0 or 0-10)"
    if number is None or number < 0:
        return message
    if is_percentage and number > 100:
        return "Percentage cannot exceed 100%"
    if number > 100:
        return message
    return None


def validate_test_score(test_type: str, score: float) -> bool:
    """Return ``True`` when ``score`` lies within ``test_type``'s published range."""

    bounds = options.TEST_SCORE_RANGES.get(test_type)
    if bounds is None:
        return False
    low, high = bounds
    return low <= score <= high


def _test_entries(allowed_types: Iterable[str]) -> Check:
    allowed = frozenset(allowed_types)

    def _check(value: Any, today: date) -> str | None:
        if not isinstance(value, (list, tuple)):
            return "Tests must be a list"
        for entry in value:
            if not isinstance(entry, Mapping):
                return "Each test must include its details"
            test_type = entry.get("testType")
            if is_blank(test_type):
                return "Test type is required for all added tests"
            if not isinstance(test_type, str) or test_type not in allowed:
                return f"Unsupported test type: {test_type}"
            raw_score = entry.get("overallScore")
            if is_blank(raw_score):
                return "Overall score is required for all added tests"
            if is_blank(entry.get("testDate")):
                return "Test date is required for all added tests"
            score = coerce_number(raw_score)
            if score is None or not validate_test_score(test_type, score):
                low, high = options.TEST_SCORE_RANGES[test_type]
                return f"{test_type} score must be between {low:g} and {high:g}"
            minimum = options.TEST_MINIMUM_SCORES.get(test_type)
            if minimum is not None and score < minimum:
                return f"{test_type} score must be at least {minimum:g} (current: {raw_score})"
            taken = parse_date(entry.get("testDate"))
            if taken is None:
                return "Please enter a valid test date"
            if taken > today:
                return "Test date cannot be in the future"
        return None

    return _check


def _graduation_year(value: Any, today: date) -> str | None:
    year = coerce_number(value)
    if year is None:
        return "Graduation year must be a number"
    if not year.is_integer():
        return "Graduation year must be a whole number"
    latest = today.year + 1
    if year < MIN_GRADUATION_YEAR or year > latest:
        return f"Graduation year must be between {MIN_GRADUATION_YEAR} and {latest}"
    return None


def _c(field: str, kind: FieldKind, *checks: Check, max_items: int | None = None) -> FieldConstraint:
    return FieldConstraint(field=field, kind=kind, checks=checks, max_items=max_items)


def _list(field: str, minimum: int, maximum: int) -> FieldConstraint:
    return _c(field, FieldKind.LIST, items_between(field_label(field), minimum, maximum), max_items=maximum)


_PROFILE_CONSTRAINTS: Final[tuple[FieldConstraint, ...]] = (
    _c(P.FIRST_NAME, FieldKind.TEXT, length_between("First name", 1, 50), matches(NAME_PATTERN, "First name can only contain letters, spaces, hyphens, apostrophes and periods")),
    _c(P.LAST_NAME, FieldKind.TEXT, length_between("Last name", 1, 50), matches(NAME_PATTERN, "Last name can only contain letters, spaces, hyphens, apostrophes and periods")),
    _c(P.DATE_OF_BIRTH, FieldKind.DATE, _birth_date),
    _c(P.GENDER, FieldKind.CHOICE, one_of("Gender", options.GENDERS)),
    _c(P.EMAIL, FieldKind.EMAIL, _email),
    _c(P.NATIONALITY, FieldKind.TEXT, length_between("Nationality", 1, 50), matches(NAME_PATTERN, "Nationality can only contain letters and spaces")),
    _c(P.PHONE_NUMBER, FieldKind.TEXT, matches(PHONE_PATTERN, "Phone number must be 10-20 digits with an optional leading +", strip_whitespace=True)),
    _c(P.SECONDARY_NUMBER, FieldKind.TEXT, matches(PHONE_PATTERN, "Invalid secondary phone number format", strip_whitespace=True)),
    _c(P.PASSPORT_NUMBER, FieldKind.TEXT, matches(PASSPORT_PATTERN, "Passport number must be 6-15 letters or digits", strip_whitespace=True)),
    _c(P.CITY, FieldKind.TEXT, length_between("City", 1, 50)),
    _c(P.COUNTRY, FieldKind.TEXT, length_between("Country", 1, 50)),
    _c(P.ADDRESS, FieldKind.TEXT, length_between("Address", 1, 150)),
    _c(P.HIGHEST_QUALIFICATION, FieldKind.CHOICE, one_of("Highest qualification", options.QUALIFICATION_LEVELS)),
    _c(P.HIGHEST_INSTITUTION, FieldKind.TEXT, length_between("Institution name", 1, 100), matches(INSTITUTION_PATTERN, "Institution name contains invalid characters")),
    _c(P.HIGHEST_COUNTRY, FieldKind.TEXT, length_between("Country", 1, 50)),
    _c(P.HIGHEST_GPA, FieldKind.TEXT, _gpa),
    _c(P.GRADUATION_YEAR, FieldKind.NUMBER, _graduation_year),
    _c(P.ACADEMIC_GAP, FieldKind.NUMBER, number_between("Academic gap", 0, 50, integer=True)),
    _c(P.INTERESTED_COURSE, FieldKind.TEXT, length_between("Course name", 1, 100), matches(INSTITUTION_PATTERN, "Course name contains invalid characters")),
    _c(P.FIELD_OF_STUDY, FieldKind.CHOICE, one_of("Field of study", options.FIELDS_OF_STUDY)),
    _c(P.PREFERRED_INTAKE, FieldKind.TEXT, matches(INTAKE_PATTERN, "Preferred intake must look like 'Fall 2025'")),
    _c(P.BUDGET_RANGE, FieldKind.CHOICE, one_of("Budget range", options.BUDGET_RANGES)),
    _list(P.INTERESTED_SERVICES, 0, 10),
    _c(P.PART_TIME_INTEREST, FieldKind.FLAG, is_boolean("Part-time interest")),
    _c(P.ACCOMMODATION_REQUIRED, FieldKind.FLAG, is_boolean("Accommodation required")),
    _c(P.HAS_DEPENDENTS, FieldKind.FLAG, is_boolean("Has dependents")),
    _c(P.FUNDING_SOURCE, FieldKind.CHOICE, one_of("Funding source", options.FUNDING_SOURCES)),
    _c(P.ESTIMATED_BUDGET, FieldKind.CHOICE, one_of("Estimated budget", options.BUDGET_RANGES)),
    _c(P.SAVINGS_AMOUNT, FieldKind.CHOICE, one_of("Savings amount", options.SAVINGS_RANGES)),
    _c(P.LOAN_APPROVAL, FieldKind.FLAG, is_boolean("Loan approval")),
    _c(P.LOAN_AMOUNT, FieldKind.NUMBER, number_between("Loan amount", 0, 1_000_000)),
    _c(P.SPONSOR_DETAILS, FieldKind.TEXT, length_between("Sponsor details", 10, 500)),
    _c(P.FINANCIAL_DOCUMENTS, FieldKind.FLAG, is_boolean("Financial documents")),
    _list(P.PREFERRED_COUNTRIES, 1, 5),
    _c(P.EMPLOYMENT_STATUS, FieldKind.CHOICE, one_of("Employment status", options.EMPLOYMENT_STATUSES)),
    _c(
        P.WORK_EXPERIENCE_YEARS,
        FieldKind.NUMBER,
        number_between("Work experience", 0, 50, message="Work experience must be between 0 and 50 years"),
    ),
    _c(P.JOB_TITLE, FieldKind.TEXT, length_between("Job title", 1, 100)),
    _c(P.ORGANIZATION_NAME, FieldKind.TEXT, length_between("Organization name", 1, 100)),
    _c(P.FIELD_OF_WORK, FieldKind.TEXT, length_between("Field of work", 1, 100)),
    _c(P.GAP_REASON, FieldKind.TEXT, length_between("Gap reason", 1, 500)),
    _c(P.ENGLISH_TESTS, FieldKind.TESTS, _test_entries(options.ENGLISH_TEST_TYPES)),
    _c(P.STANDARDIZED_TESTS, FieldKind.TESTS, _test_entries(options.STANDARDIZED_TEST_TYPES)),
)

_SCHOLARSHIP_CONSTRAINTS: Final[tuple[FieldConstraint, ...]] = (
    _c(
        S.SCHOLARSHIP_ID,
        FieldKind.TEXT,
        length_between("ID", 3, 50),
        matches(SCHOLARSHIP_ID_PATTERN, "Use only uppercase letters, numbers, underscores, and hyphens"),
    ),
    _c(S.SCHOLARSHIP_NAME, FieldKind.TEXT, length_between("Name", 5, 100)),
    _c(S.PROVIDER_NAME, FieldKind.TEXT, length_between("Provider name", 2, 100)),
    _c(S.PROVIDER_TYPE, FieldKind.CHOICE, one_of("Provider type", options.PROVIDER_TYPES)),
    _c(S.PROVIDER_COUNTRY, FieldKind.TEXT, length_between("Country", 2, 50)),
    _c(S.DESCRIPTION, FieldKind.TEXT, length_between("Description", 50, 2000)),
    _c(S.SHORT_DESCRIPTION, FieldKind.TEXT, length_between("Short description", 20, 300)),
    _c(S.APPLICATION_URL, FieldKind.URL, _https_url),
    _c(S.APPLICATION_DEADLINE, FieldKind.DATE, _future_date("Deadline")),
    _c(S.STUDY_LEVEL, FieldKind.TEXT, length_between("Study level", 2, 50)),
    _c(S.FIELD_CATEGORY, FieldKind.TEXT, length_between("Field category", 2, 100)),
    _list(S.TARGET_COUNTRIES, 1, 20),
    _c(S.FUNDING_TYPE, FieldKind.CHOICE, one_of("Funding type", options.FUNDING_TYPES)),
    _c(S.FUNDING_AMOUNT, FieldKind.NUMBER, number_between("Funding amount", 1, 1_000_000)),
    _c(
        S.FUNDING_CURRENCY,
        FieldKind.TEXT,
        matches(CURRENCY_PATTERN, "Use standard 3-letter currency code (e.g., USD, EUR)"),
    ),
    _c(S.TOTAL_VALUE_MIN, FieldKind.NUMBER, number_between("Minimum value", 0)),
    _c(S.TOTAL_VALUE_MAX, FieldKind.NUMBER, number_between("Maximum value", 0)),
    _list(S.ELIGIBILITY_REQUIREMENTS, 1, 50),
    _list(S.LANGUAGE_REQUIREMENTS, 0, 20),
    _c(S.MIN_AGE, FieldKind.NUMBER, number_between("Minimum age", MIN_AGE, MAX_AGE, integer=True)),
    _c(S.MAX_AGE, FieldKind.NUMBER, number_between("Maximum age", MIN_AGE, MAX_AGE, integer=True)),
    _c(S.MIN_GPA, FieldKind.NUMBER, number_between("Minimum GPA", 0, 4)),
    _c(S.DIFFICULTY_LEVEL, FieldKind.CHOICE, one_of("Difficulty level", options.DIFFICULTY_LEVELS)),
    _c(S.DATA_SOURCE, FieldKind.TEXT, length_between("Data source", 2, 100)),
    _c(S.VERIFIED, FieldKind.FLAG, is_boolean("Verified")),
    _c(S.STATUS, FieldKind.CHOICE, one_of("Status", options.LISTING_STATUSES)),
)

_CONSTRAINT_TABLES: dict[str, dict[str, FieldConstraint]] = {}


def register_constraints(kind: str, constraints: Iterable[FieldConstraint]) -> None:
    """Register the field constraints for ``kind`` (replacing earlier ones)."""

    _CONSTRAINT_TABLES[str(kind)] = {constraint.field: constraint for constraint in constraints}


register_constraints(EntityKind.STUDENT_PROFILE, _PROFILE_CONSTRAINTS)
register_constraints(EntityKind.SCHOLARSHIP, _SCHOLARSHIP_CONSTRAINTS)


def constraints_for(kind: str) -> dict[str, FieldConstraint]:
    """Return constraints for every field of ``kind`` with ``required`` resolved.

    Fields declared by the registry but missing from the constraint table get
    a bare text constraint so required-ness is still enforced.
    """

    table = _CONSTRAINT_TABLES.get(str(kind), {})
    resolved: dict[str, FieldConstraint] = {}
    for section in get_sections(kind):
        for field in section.fields:
            base = table.get(field) or FieldConstraint(field=field)
            resolved[field] = replace(base, required=field in section.required)
    for field, constraint in table.items():
        resolved.setdefault(field, constraint)
    return resolved


def max_items_for(kind: str, field: str) -> int | None:
    """Return the maximum cardinality of an array field, when bounded."""

    constraint = _CONSTRAINT_TABLES.get(str(kind), {}).get(field)
    return constraint.max_items if constraint else None


def validate_field(kind: str, field: str, value: Any, *, today: date | None = None) -> str | None:
    """Validate ``value`` for ``field`` of ``kind``; unknown fields always pass."""

    constraint = constraints_for(kind).get(field)
    if constraint is None:
        return None
    return constraint.validate(value, today=today)


def validate_fields(
    kind: str,
    values: Mapping[str, Any],
    fields: Iterable[str],
    *,
    today: date | None = None,
) -> dict[str, str]:
    """Validate ``fields`` against ``values`` and return errors keyed by field."""

    constraints = constraints_for(kind)
    errors: dict[str, str] = {}
    for field in fields:
        constraint = constraints.get(field)
        if constraint is None:
            continue
        error = constraint.validate(values.get(field), today=today)
        if error:
            errors[field] = error
    return errors


__all__ = [
    "FieldConstraint",
    "FieldKind",
    "constraints_for",
    "max_items_for",
    "register_constraints",
    "validate_field",
    "validate_fields",
    "validate_test_score",
]
