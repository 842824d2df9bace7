"""Pydantic models for the student profile record."""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from core.validators import is_blank


def _blank_to_none(value: object) -> object | None:
    """Treat empty strings or whitespace-only inputs as ``None``."""

    if isinstance(value, str) and is_blank(value):
        return None
    return value


class _TestScore(BaseModel):
    """Shared shape of a recorded test result."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    test_type: Optional[str] = Field(default=None, alias="testType")
    overall_score: Optional[float] = Field(default=None, alias="overallScore")
    test_date: Optional[date] = Field(default=None, alias="testDate")

    @field_validator("test_date", "overall_score", mode="before")
    @classmethod
    def _normalise_blank(cls, value: object) -> object | None:
        return _blank_to_none(value)


class EnglishTestScore(_TestScore):
    """English proficiency test with optional band scores."""

    listening: Optional[float] = None
    reading: Optional[float] = None
    writing: Optional[float] = None
    speaking: Optional[float] = None


class StandardizedTestScore(_TestScore):
    """Standardized admission test (GRE, GMAT, SAT, ACT)."""


class StudentProfile(BaseModel):
    """Typed view of a student profile.

    Every field is optional so partial records parse; unknown keys are kept
    through ``extra="allow"``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    date_of_birth: Optional[date] = Field(default=None, alias="dateOfBirth")
    gender: Optional[str] = None
    email: EmailStr | None = None
    nationality: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    secondary_number: Optional[str] = Field(default=None, alias="secondaryNumber")
    passport_number: Optional[str] = Field(default=None, alias="passportNumber")
    city: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None

    highest_qualification: Optional[str] = Field(default=None, alias="highestQualification")
    highest_institution: Optional[str] = Field(default=None, alias="highestInstitution")
    highest_country: Optional[str] = Field(default=None, alias="highestCountry")
    highest_gpa: Optional[str] = Field(default=None, alias="highestGpa")
    graduation_year: Optional[int] = Field(default=None, alias="graduationYear")
    current_academic_gap: Optional[int] = Field(default=None, alias="currentAcademicGap")

    interested_course: Optional[str] = Field(default=None, alias="interestedCourse")
    field_of_study: Optional[str] = Field(default=None, alias="fieldOfStudy")
    preferred_intake: Optional[str] = Field(default=None, alias="preferredIntake")
    budget_range: Optional[str] = Field(default=None, alias="budgetRange")
    interested_services: List[str] = Field(default_factory=list, alias="interestedServices")
    part_time_interest: Optional[bool] = Field(default=None, alias="partTimeInterest")
    accommodation_required: Optional[bool] = Field(default=None, alias="accommodationRequired")
    has_dependents: Optional[bool] = Field(default=None, alias="hasDependents")

    funding_source: Optional[str] = Field(default=None, alias="fundingSource")
    estimated_budget: Optional[str] = Field(default=None, alias="estimatedBudget")
    savings_amount: Optional[str] = Field(default=None, alias="savingsAmount")
    loan_approval: Optional[bool] = Field(default=None, alias="loanApproval")
    loan_amount: Optional[float] = Field(default=None, alias="loanAmount")
    sponsor_details: Optional[str] = Field(default=None, alias="sponsorDetails")
    financial_documents: Optional[bool] = Field(default=None, alias="financialDocuments")

    preferred_countries: List[str] = Field(default_factory=list, alias="preferredCountries")

    current_employment_status: Optional[str] = Field(default=None, alias="currentEmploymentStatus")
    work_experience_years: Optional[float] = Field(default=None, alias="workExperienceYears")
    job_title: Optional[str] = Field(default=None, alias="jobTitle")
    organization_name: Optional[str] = Field(default=None, alias="organizationName")
    field_of_work: Optional[str] = Field(default=None, alias="fieldOfWork")
    gap_reason_if_any: Optional[str] = Field(default=None, alias="gapReasonIfAny")

    english_proficiency_tests: List[EnglishTestScore] = Field(default_factory=list, alias="englishProficiencyTests")
    standardized_tests: List[StandardizedTestScore] = Field(default_factory=list, alias="standardizedTests")

    @field_validator(
        "email",
        "date_of_birth",
        "graduation_year",
        "current_academic_gap",
        "loan_amount",
        "work_experience_years",
        mode="before",
    )
    @classmethod
    def _normalise_blank(cls, value: object) -> object | None:
        return _blank_to_none(value)

    @field_validator("interested_services", "preferred_countries", mode="before")
    @classmethod
    def _normalise_list(cls, value: object) -> object:
        if value is None:
            return []
        return value

    def to_record(self) -> dict[str, Any]:
        """Return the camelCase record without unset values."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = ["EnglishTestScore", "StandardizedTestScore", "StudentProfile"]
