"""Closed option sets for categorical record fields.

Every set is versioned through :data:`ENUM_VERSION`; adding or removing an
option is a schema change and must bump the version so persisted records can
be re-audited.
"""

from __future__ import annotations

from typing import Final

ENUM_VERSION: Final[str] = "2024-06"

GENDERS: Final[frozenset[str]] = frozenset({"Male", "Female", "Non-binary", "Prefer not to say", "Other"})

QUALIFICATION_LEVELS: Final[frozenset[str]] = frozenset(
    {
        "High School",
        "Diploma",
        "Bachelor's Degree",
        "Master's Degree",
        "PhD",
    }
)

FIELDS_OF_STUDY: Final[frozenset[str]] = frozenset(
    {"Engineering", "Business", "Medicine", "Arts", "Science", "Technology", "Other"}
)

BUDGET_RANGES: Final[tuple[str, ...]] = (
    "under-10000",
    "10000-25000",
    "25000-50000",
    "50000-75000",
    "75000-100000",
    "over-100000",
)

SAVINGS_RANGES: Final[frozenset[str]] = frozenset(
    {"under-5000", "5000-15000", "15000-30000", "30000-50000", "over-50000"}
)

FUNDING_SOURCES: Final[frozenset[str]] = frozenset(
    {"Self-funded", "Family-funded", "Scholarship", "Loan", "Employer-sponsored", "Other"}
)

EMPLOYMENT_STATUSES: Final[frozenset[str]] = frozenset({"Employed", "Self-employed", "Studying", "Student", "Unemployed"})

# Statuses that require job details / a gap explanation.
WORKING_STATUSES: Final[frozenset[str]] = frozenset({"Employed", "Self-employed"})
NOT_WORKING_STATUSES: Final[frozenset[str]] = frozenset({"Unemployed"})

ENGLISH_TEST_TYPES: Final[frozenset[str]] = frozenset({"IELTS", "TOEFL", "PTE", "Duolingo", "Cambridge"})
STANDARDIZED_TEST_TYPES: Final[frozenset[str]] = frozenset({"GRE", "GMAT", "SAT", "ACT"})

# Published score ranges per test type (inclusive).
TEST_SCORE_RANGES: Final[dict[str, tuple[float, float]]] = {
    "IELTS": (0, 9),
    "TOEFL": (0, 120),
    "PTE": (10, 90),
    "Duolingo": (10, 160),
    "Cambridge": (80, 230),
    "GRE": (260, 340),
    "GMAT": (200, 800),
    "SAT": (400, 1600),
    "ACT": (1, 36),
}

# Lowest score the consultancy accepts when a test is recorded.
TEST_MINIMUM_SCORES: Final[dict[str, float]] = {
    "IELTS": 4.0,
    "TOEFL": 60,
    "PTE": 30,
    "Duolingo": 85,
    "SAT": 400,
}

PROVIDER_TYPES: Final[frozenset[str]] = frozenset(
    {"government", "private", "institution", "foundation", "corporate", "other"}
)

FUNDING_TYPES: Final[frozenset[str]] = frozenset(
    {
        "full",
        "partial",
        "tuition-only",
        "living-allowance",
        "travel-grant",
        "research-grant",
        "other",
    }
)

DIFFICULTY_LEVELS: Final[frozenset[str]] = frozenset({"beginner", "intermediate", "advanced", "expert"})

LISTING_STATUSES: Final[frozenset[str]] = frozenset({"active", "inactive", "pending", "draft", "suspended", "archived"})


__all__ = [
    "BUDGET_RANGES",
    "DIFFICULTY_LEVELS",
    "EMPLOYMENT_STATUSES",
    "ENGLISH_TEST_TYPES",
    "ENUM_VERSION",
    "FIELDS_OF_STUDY",
    "FUNDING_SOURCES",
    "FUNDING_TYPES",
    "GENDERS",
    "LISTING_STATUSES",
    "NOT_WORKING_STATUSES",
    "PROVIDER_TYPES",
    "QUALIFICATION_LEVELS",
    "SAVINGS_RANGES",
    "STANDARDIZED_TEST_TYPES",
    "TEST_MINIMUM_SCORES",
    "TEST_SCORE_RANGES",
    "WORKING_STATUSES",
]
