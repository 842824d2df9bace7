"""Central accessors for the section schemas of each record kind.

The registry is the single source of truth for which fields a record kind
has, how they group into sections, and which of them are required. Section
order is display order and the wizard's linear navigation order. New record
kinds are added with :func:`register_entity`; the wizard controller needs no
changes for them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, Iterable, Mapping

from constants.keys import ProfileFields as P
from constants.keys import ScholarshipFields as S
from core.errors import UnknownEntityError

logger = logging.getLogger(__name__)


class EntityKind(StrEnum):
    """Record kinds with a registered section schema."""

    STUDENT_PROFILE = "student_profile"
    SCHOLARSHIP = "scholarship"


@dataclass(frozen=True)
class Section:
    """Static metadata describing one section of a record.

    ``required_fields`` defaults to every entry of ``fields``; pass an explicit
    tuple to mark the remaining fields optional.
    """

    id: str
    label: str
    icon: str
    fields: tuple[str, ...]
    required_fields: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.required_fields is None:
            object.__setattr__(self, "required_fields", tuple(self.fields))
        unknown = [field for field in self.required or () if field not in self.fields]
        if unknown:
            raise ValueError(f"Section {self.id!r} requires undeclared fields: {', '.join(unknown)}")

    @property
    def required(self) -> tuple[str, ...]:
        return self.required_fields or ()

    @property
    def optional(self) -> tuple[str, ...]:
        return tuple(field for field in self.fields if field not in self.required)


STUDENT_PROFILE_SECTIONS: Final[tuple[Section, ...]] = (
    Section(
        id="personal",
        label="Personal Information",
        icon="user",
        fields=(
            P.FIRST_NAME,
            P.LAST_NAME,
            P.DATE_OF_BIRTH,
            P.GENDER,
            P.EMAIL,
            P.NATIONALITY,
            P.PHONE_NUMBER,
            P.SECONDARY_NUMBER,
            P.PASSPORT_NUMBER,
            P.CITY,
            P.COUNTRY,
            P.ADDRESS,
        ),
        required_fields=(
            P.FIRST_NAME,
            P.LAST_NAME,
            P.DATE_OF_BIRTH,
            P.GENDER,
            P.NATIONALITY,
            P.PHONE_NUMBER,
        ),
    ),
    Section(
        id="academic",
        label="Academic Background",
        icon="graduation-cap",
        fields=(
            P.HIGHEST_QUALIFICATION,
            P.HIGHEST_INSTITUTION,
            P.HIGHEST_COUNTRY,
            P.HIGHEST_GPA,
            P.GRADUATION_YEAR,
            P.ACADEMIC_GAP,
        ),
        required_fields=(
            P.HIGHEST_QUALIFICATION,
            P.HIGHEST_INSTITUTION,
            P.HIGHEST_GPA,
            P.GRADUATION_YEAR,
        ),
    ),
    Section(
        id="study",
        label="Study Preferences",
        icon="book-open",
        fields=(
            P.INTERESTED_COURSE,
            P.FIELD_OF_STUDY,
            P.PREFERRED_INTAKE,
            P.BUDGET_RANGE,
            P.INTERESTED_SERVICES,
            P.PART_TIME_INTEREST,
            P.ACCOMMODATION_REQUIRED,
            P.HAS_DEPENDENTS,
        ),
        required_fields=(
            P.INTERESTED_COURSE,
            P.FIELD_OF_STUDY,
            P.PREFERRED_INTAKE,
            P.BUDGET_RANGE,
        ),
    ),
    Section(
        id="budget",
        label="Financial Information",
        icon="dollar-sign",
        fields=(
            P.FUNDING_SOURCE,
            P.ESTIMATED_BUDGET,
            P.SAVINGS_AMOUNT,
            P.LOAN_APPROVAL,
            P.LOAN_AMOUNT,
            P.SPONSOR_DETAILS,
            P.FINANCIAL_DOCUMENTS,
        ),
        required_fields=(P.FUNDING_SOURCE, P.ESTIMATED_BUDGET),
    ),
    Section(
        id="countries",
        label="Preferred Countries",
        icon="globe",
        fields=(P.PREFERRED_COUNTRIES,),
    ),
    Section(
        id="employment",
        label="Employment",
        icon="briefcase",
        fields=(
            P.EMPLOYMENT_STATUS,
            P.WORK_EXPERIENCE_YEARS,
            P.JOB_TITLE,
            P.ORGANIZATION_NAME,
            P.FIELD_OF_WORK,
            P.GAP_REASON,
        ),
        required_fields=(P.EMPLOYMENT_STATUS,),
    ),
    Section(
        id="tests",
        label="Language & Standardized Tests",
        icon="languages",
        fields=(P.ENGLISH_TESTS, P.STANDARDIZED_TESTS),
        required_fields=(),
    ),
)

SCHOLARSHIP_SECTIONS: Final[tuple[Section, ...]] = (
    Section(
        id="basic",
        label="Basic Information",
        icon="file-text",
        fields=(
            S.SCHOLARSHIP_ID,
            S.SCHOLARSHIP_NAME,
            S.PROVIDER_NAME,
            S.PROVIDER_TYPE,
            S.PROVIDER_COUNTRY,
            S.DESCRIPTION,
            S.SHORT_DESCRIPTION,
        ),
    ),
    Section(
        id="application",
        label="Application",
        icon="calendar",
        fields=(S.APPLICATION_URL, S.APPLICATION_DEADLINE),
    ),
    Section(
        id="study",
        label="Study",
        icon="graduation-cap",
        fields=(S.STUDY_LEVEL, S.FIELD_CATEGORY, S.TARGET_COUNTRIES),
    ),
    Section(
        id="funding",
        label="Funding",
        icon="dollar-sign",
        fields=(
            S.FUNDING_TYPE,
            S.FUNDING_AMOUNT,
            S.FUNDING_CURRENCY,
            S.TOTAL_VALUE_MIN,
            S.TOTAL_VALUE_MAX,
        ),
        required_fields=(S.FUNDING_TYPE, S.FUNDING_AMOUNT, S.FUNDING_CURRENCY),
    ),
    Section(
        id="requirements",
        label="Requirements",
        icon="globe",
        fields=(
            S.ELIGIBILITY_REQUIREMENTS,
            S.LANGUAGE_REQUIREMENTS,
            S.MIN_AGE,
            S.MAX_AGE,
            S.MIN_GPA,
        ),
        required_fields=(S.ELIGIBILITY_REQUIREMENTS,),
    ),
    Section(
        id="settings",
        label="Settings",
        icon="settings",
        fields=(S.DIFFICULTY_LEVEL, S.DATA_SOURCE, S.VERIFIED, S.STATUS),
        required_fields=(S.DIFFICULTY_LEVEL, S.DATA_SOURCE),
    ),
)

# Profile-page completion counts these fields, independent of section layout.
COMPULSORY_PROFILE_FIELDS: Final[tuple[str, ...]] = (
    P.FIRST_NAME,
    P.LAST_NAME,
    P.DATE_OF_BIRTH,
    P.GENDER,
    P.NATIONALITY,
    P.PHONE_NUMBER,
    P.HIGHEST_QUALIFICATION,
    P.HIGHEST_INSTITUTION,
    P.HIGHEST_GPA,
    P.GRADUATION_YEAR,
    P.INTERESTED_COURSE,
    P.FIELD_OF_STUDY,
    P.PREFERRED_INTAKE,
    P.BUDGET_RANGE,
    P.PREFERRED_COUNTRIES,
    P.EMPLOYMENT_STATUS,
    P.ENGLISH_TESTS,
)

# Dashboard summary cards: a card is complete when every field of one of its
# alternatives is filled.
DASHBOARD_SECTION_FIELDS: Final[dict[str, tuple[tuple[str, ...], ...]]] = {
    "personal": ((P.FIRST_NAME, P.LAST_NAME, P.PHONE_NUMBER, P.NATIONALITY),),
    "academic": ((P.HIGHEST_QUALIFICATION, P.HIGHEST_INSTITUTION, P.GRADUATION_YEAR),),
    "study": (
        (
            P.INTERESTED_COURSE,
            P.FIELD_OF_STUDY,
            P.PREFERRED_INTAKE,
            P.BUDGET_RANGE,
            P.PREFERRED_COUNTRIES,
        ),
    ),
    "financial": ((P.FUNDING_SOURCE, P.ESTIMATED_BUDGET),),
    "employment": ((P.EMPLOYMENT_STATUS,),),
    "language": ((P.ENGLISH_TESTS,), (P.STANDARDIZED_TESTS,)),
}


FIELD_LABELS: Final[dict[str, str]] = {
    P.HIGHEST_GPA: "GPA",
    P.ACADEMIC_GAP: "Academic gap",
    P.GAP_REASON: "Gap reason",
    P.ENGLISH_TESTS: "English proficiency tests",
    P.EMPLOYMENT_STATUS: "Employment status",
    S.SCHOLARSHIP_ID: "Scholarship ID",
    S.APPLICATION_URL: "Application URL",
    S.FUNDING_CURRENCY: "Currency code",
    S.MIN_GPA: "Minimum GPA",
}


def field_label(field: str) -> str:
    """Return a human label for ``field`` (``"firstName"`` -> ``"First name"``)."""

    if field in FIELD_LABELS:
        return FIELD_LABELS[field]
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", field).split()
    if not words:
        return field
    return " ".join([words[0].capitalize(), *(word.lower() for word in words[1:])])


def _check_disjoint(kind: str, sections: Iterable[Section]) -> None:
    owners: dict[str, str] = {}
    for section in sections:
        for field in section.fields:
            if field in owners:
                raise ValueError(
                    f"Field {field!r} of {kind!r} belongs to both {owners[field]!r} and {section.id!r}"
                )
            owners[field] = section.id


_REGISTRY: dict[str, tuple[Section, ...]] = {}


def register_entity(kind: str, sections: Iterable[Section]) -> tuple[Section, ...]:
    """Register (or replace) the ordered section schema for ``kind``."""

    ordered = tuple(sections)
    if not ordered:
        raise ValueError(f"Entity {kind!r} needs at least one section")
    _check_disjoint(kind, ordered)
    if kind in _REGISTRY:
        logger.info("Replacing section schema for %s", kind)
    _REGISTRY[str(kind)] = ordered
    return ordered


register_entity(EntityKind.STUDENT_PROFILE, STUDENT_PROFILE_SECTIONS)
register_entity(EntityKind.SCHOLARSHIP, SCHOLARSHIP_SECTIONS)


def get_sections(kind: str) -> tuple[Section, ...]:
    """Return the ordered sections registered for ``kind``."""

    try:
        return _REGISTRY[str(kind)]
    except KeyError:
        raise UnknownEntityError(kind) from None


def registered_kinds() -> tuple[str, ...]:
    return tuple(_REGISTRY)


def section_index(kind: str, section_id: str) -> int:
    """Return the position of ``section_id`` within ``kind``'s sections."""

    for index, section in enumerate(get_sections(kind)):
        if section.id == section_id:
            return index
    raise KeyError(section_id)


def section_for_field(kind: str, field: str) -> Section | None:
    """Return the section that owns ``field`` or ``None`` for unsectioned keys."""

    for section in get_sections(kind):
        if field in section.fields:
            return section
    return None


def required_fields(kind: str) -> tuple[str, ...]:
    """Return all required fields of ``kind`` in section order."""

    return tuple(field for section in get_sections(kind) for field in section.required)


def field_section_map(kind: str) -> Mapping[str, int]:
    """Derive mapping of field names to section indexes."""

    return {field: index for index, section in enumerate(get_sections(kind)) for field in section.fields}


__all__ = [
    "COMPULSORY_PROFILE_FIELDS",
    "DASHBOARD_SECTION_FIELDS",
    "EntityKind",
    "SCHOLARSHIP_SECTIONS",
    "STUDENT_PROFILE_SECTIONS",
    "Section",
    "FIELD_LABELS",
    "field_label",
    "field_section_map",
    "get_sections",
    "register_entity",
    "registered_kinds",
    "required_fields",
    "section_for_field",
    "section_index",
]
