from __future__ import annotations

from datetime import date

import pytest

from core.field_validators import (
    FieldKind,
    constraints_for,
    max_items_for,
    validate_field,
    validate_fields,
    validate_test_score,
)
from core.schema_registry import EntityKind
from wizard.services.validation import validate_section

PROFILE = EntityKind.STUDENT_PROFILE
SCHOLARSHIP = EntityKind.SCHOLARSHIP


def test_required_flag_comes_from_registry() -> None:
    constraints = constraints_for(PROFILE)
    assert constraints["firstName"].required is True
    assert constraints["email"].required is False
    assert constraints["englishProficiencyTests"].required is False
    assert constraints["preferredCountries"].kind is FieldKind.LIST


@pytest.mark.parametrize("value", [None, "", "   ", []])
def test_blank_required_value_reports_label(value: object) -> None:
    assert validate_field(PROFILE, "firstName", value) == "First name is required"


def test_blank_optional_value_passes() -> None:
    assert validate_field(PROFILE, "email", "") is None
    assert validate_field(PROFILE, "passportNumber", None) is None


def test_unknown_field_passes() -> None:
    assert validate_field(PROFILE, "favouriteColour", "blue") is None


@pytest.mark.parametrize(
    ("name", "ok"),
    [("Mary-Jane", True), ("Jean-Luc O'Brien Jr.", True), ("José", True), ("R2D2", False), ("Ann_", False)],
)
def test_name_pattern(name: str, ok: bool) -> None:
    assert (validate_field(PROFILE, "firstName", name) is None) is ok


def test_name_length_is_checked_after_trimming() -> None:
    assert validate_field(PROFILE, "lastName", "  " + "a" * 50 + "  ") is None
    assert validate_field(PROFILE, "lastName", "a" * 51) == "Last name must not exceed 50 characters"


@pytest.mark.parametrize(
    ("phone", "ok"),
    [("+9779812345678", True), ("0412345678", False), ("98765 43210", True), ("12345", False), ("+1" + "2" * 20, False)],
)
def test_phone_pattern(phone: str, ok: bool) -> None:
    assert (validate_field(PROFILE, "phoneNumber", phone) is None) is ok


def test_passport_ignores_whitespace() -> None:
    assert validate_field(PROFILE, "passportNumber", "AB 12 34 56") is None
    assert validate_field(PROFILE, "passportNumber", "AB12") is not None
    assert validate_field(PROFILE, "passportNumber", "AB-123456") is not None


def test_email_uses_email_validator() -> None:
    assert validate_field(PROFILE, "email", "student@studyabroad.org") is None
    assert validate_field(PROFILE, "email", "not-an-email") == "Invalid email format"


def test_date_of_birth_age_bounds(today: date) -> None:
    assert validate_field(PROFILE, "dateOfBirth", "2008-06-15", today=today) is None
    assert validate_field(PROFILE, "dateOfBirth", "2008-06-16", today=today) == "Age must be between 16 and 100 years"
    assert validate_field(PROFILE, "dateOfBirth", "1924-06-15", today=today) is None
    assert validate_field(PROFILE, "dateOfBirth", "1923-06-14", today=today) is not None
    assert validate_field(PROFILE, "dateOfBirth", "2030-01-01", today=today) == "Date of birth cannot be in the future"
    assert validate_field(PROFILE, "dateOfBirth", "04/03/2000", today=today) == "Date must be in YYYY-MM-DD format"


def test_graduation_year_range_follows_today(today: date) -> None:
    assert validate_field(PROFILE, "graduationYear", 1980, today=today) is None
    assert validate_field(PROFILE, "graduationYear", "2025", today=today) is None
    assert validate_field(PROFILE, "graduationYear", 2026, today=today) == "Graduation year must be between 1980 and 2025"
    assert validate_field(PROFILE, "graduationYear", 1979, today=today) is not None
    assert validate_field(PROFILE, "graduationYear", 2020.5, today=today) == "Graduation year must be a whole number"


def test_gpa_percentage_limit() -> None:
    assert validate_field(PROFILE, "highestGpa", "85%") is None
    assert validate_field(PROFILE, "highestGpa", "3.8") is None
    assert validate_field(PROFILE, "highestGpa", "120%") == "Percentage cannot exceed 100%"
    assert validate_field(PROFILE, "highestGpa", "excellent") is not None


def test_numeric_ranges() -> None:
    assert validate_field(PROFILE, "workExperienceYears", 0) is None
    assert validate_field(PROFILE, "workExperienceYears", 51) == "Work experience must be between 0 and 50 years"
    assert validate_field(PROFILE, "loanAmount", 1_000_000) is None
    assert validate_field(PROFILE, "loanAmount", -1) is not None
    assert validate_field(PROFILE, "currentAcademicGap", 0) is None
    assert validate_field(SCHOLARSHIP, "fundingAmount", 0) == "Funding amount must be at least 1"


def test_enum_membership() -> None:
    assert validate_field(PROFILE, "gender", "Female") is None
    assert validate_field(PROFILE, "gender", "female") is not None
    assert validate_field(SCHOLARSHIP, "fundingType", "tuition-only") is None
    assert validate_field(SCHOLARSHIP, "fundingType", "everything") is not None


def test_boolean_flags_accept_false() -> None:
    assert validate_field(PROFILE, "loanApproval", False) is None
    assert validate_field(PROFILE, "loanApproval", "yes") is not None


def test_scholarship_patterns(today: date) -> None:
    assert validate_field(SCHOLARSHIP, "scholarshipId", "AUS_GOV-2025") is None
    assert validate_field(SCHOLARSHIP, "scholarshipId", "aus-gov") is not None
    assert validate_field(SCHOLARSHIP, "scholarshipId", "AB") == "ID must be at least 3 characters"
    assert validate_field(SCHOLARSHIP, "fundingCurrency", "USD") is None
    assert validate_field(SCHOLARSHIP, "fundingCurrency", "usd") is not None
    assert validate_field(SCHOLARSHIP, "applicationUrl", "https://example.org/apply") is None
    assert validate_field(SCHOLARSHIP, "applicationUrl", "http://example.org/apply") == "URL must use HTTPS for security"
    assert validate_field(SCHOLARSHIP, "applicationUrl", "apply here") == "Please enter a valid URL"
    assert validate_field(SCHOLARSHIP, "applicationDeadline", "2024-06-16", today=today) is None
    assert validate_field(SCHOLARSHIP, "applicationDeadline", "2024-06-15", today=today) == "Deadline must be in the future"


def test_array_cardinality() -> None:
    assert validate_field(PROFILE, "preferredCountries", ["A", "B", "C", "D", "E"]) is None
    assert validate_field(PROFILE, "preferredCountries", list("ABCDEF")) == "Maximum 5 preferred countries allowed"
    assert validate_field(PROFILE, "preferredCountries", []) == "Preferred countries is required"
    assert validate_field(SCHOLARSHIP, "languageRequirements", []) is None
    assert max_items_for(PROFILE, "preferredCountries") == 5
    assert max_items_for(SCHOLARSHIP, "targetCountries") == 20
    assert max_items_for(SCHOLARSHIP, "eligibilityRequirements") == 50
    assert max_items_for(SCHOLARSHIP, "languageRequirements") == 20
    assert max_items_for(PROFILE, "interestedServices") == 10
    assert max_items_for(PROFILE, "firstName") is None


def test_test_score_ranges() -> None:
    assert validate_test_score("IELTS", 9)
    assert not validate_test_score("IELTS", 9.5)
    assert validate_test_score("GRE", 260)
    assert not validate_test_score("GRE", 200)
    assert not validate_test_score("Unknown", 10)


def test_language_test_entries(today: date) -> None:
    ok = [{"testType": "TOEFL", "overallScore": "95", "testDate": "2024-02-01"}]
    assert validate_field(PROFILE, "englishProficiencyTests", ok, today=today) is None
    low = [{"testType": "IELTS", "overallScore": 3.5, "testDate": "2024-02-01"}]
    assert validate_field(PROFILE, "englishProficiencyTests", low, today=today) == "IELTS score must be at least 4 (current: 3.5)"
    future = [{"testType": "IELTS", "overallScore": 6.5, "testDate": "2024-07-01"}]
    assert validate_field(PROFILE, "englishProficiencyTests", future, today=today) == "Test date cannot be in the future"
    missing = [{"testType": "GRE", "testDate": "2024-02-01"}]
    assert (
        validate_field(PROFILE, "standardizedTests", missing, today=today)
        == "Overall score is required for all added tests"
    )
    wrong_kind = [{"testType": "GRE", "overallScore": 320, "testDate": "2024-02-01"}]
    assert validate_field(PROFILE, "englishProficiencyTests", wrong_kind, today=today) == "Unsupported test type: GRE"


@pytest.mark.parametrize("test_type", [["IELTS"], {"name": "IELTS"}, 7])
def test_non_string_test_type_is_rejected(test_type: object, today: date) -> None:
    entries = [{"testType": test_type, "overallScore": 7, "testDate": "2024-01-01"}]
    message = validate_field(PROFILE, "englishProficiencyTests", entries, today=today)
    assert message == f"Unsupported test type: {test_type}"
    result = validate_section(PROFILE, "tests", {"englishProficiencyTests": entries}, today=today)
    assert result.field_errors == {"englishProficiencyTests": message}


def test_validators_are_idempotent(today: date) -> None:
    for value in ["Asha", "", "R2D2"]:
        first = validate_field(PROFILE, "firstName", value, today=today)
        assert validate_field(PROFILE, "firstName", value, today=today) == first


def test_validate_fields_collects_errors() -> None:
    errors = validate_fields(PROFILE, {"firstName": "Asha", "gender": "robot"}, ["firstName", "lastName", "gender"])
    assert set(errors) == {"lastName", "gender"}
    assert errors["lastName"] == "Last name is required"
