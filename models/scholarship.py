"""Pydantic model for scholarship listings."""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from core.validators import is_blank


class ScholarshipListing(BaseModel):
    """Typed view of a scholarship listing; partial records parse."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    scholarship_id: Optional[str] = Field(default=None, alias="scholarshipId")
    scholarship_name: Optional[str] = Field(default=None, alias="scholarshipName")
    provider_name: Optional[str] = Field(default=None, alias="providerName")
    provider_type: Optional[str] = Field(default=None, alias="providerType")
    provider_country: Optional[str] = Field(default=None, alias="providerCountry")
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, alias="shortDescription")

    application_url: HttpUrl | None = Field(default=None, alias="applicationUrl")
    application_deadline: Optional[date] = Field(default=None, alias="applicationDeadline")

    study_level: Optional[str] = Field(default=None, alias="studyLevel")
    field_category: Optional[str] = Field(default=None, alias="fieldCategory")
    target_countries: List[str] = Field(default_factory=list, alias="targetCountries")

    funding_type: Optional[str] = Field(default=None, alias="fundingType")
    funding_amount: Optional[float] = Field(default=None, alias="fundingAmount")
    funding_currency: Optional[str] = Field(default=None, alias="fundingCurrency")
    total_value_min: Optional[float] = Field(default=None, alias="totalValueMin")
    total_value_max: Optional[float] = Field(default=None, alias="totalValueMax")

    eligibility_requirements: List[str] = Field(default_factory=list, alias="eligibilityRequirements")
    language_requirements: List[str] = Field(default_factory=list, alias="languageRequirements")
    min_age: Optional[int] = Field(default=None, alias="minAge")
    max_age: Optional[int] = Field(default=None, alias="maxAge")
    min_gpa: Optional[float] = Field(default=None, alias="minGpa")

    difficulty_level: Optional[str] = Field(default=None, alias="difficultyLevel")
    data_source: Optional[str] = Field(default=None, alias="dataSource")
    verified: Optional[bool] = None
    status: Optional[str] = None

    @field_validator(
        "application_url",
        "application_deadline",
        "funding_amount",
        "total_value_min",
        "total_value_max",
        "min_age",
        "max_age",
        "min_gpa",
        mode="before",
    )
    @classmethod
    def _normalise_blank(cls, value: object) -> object | None:
        """Treat empty strings or whitespace-only inputs as ``None``."""

        if isinstance(value, str) and is_blank(value):
            return None
        return value

    @field_validator("target_countries", "eligibility_requirements", "language_requirements", mode="before")
    @classmethod
    def _normalise_list(cls, value: object) -> object:
        if value is None:
            return []
        return value

    def to_record(self) -> dict[str, Any]:
        """Return the camelCase record without unset values."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = ["ScholarshipListing"]
