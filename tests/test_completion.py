from __future__ import annotations

import pytest

from core.schema_registry import (
    COMPULSORY_PROFILE_FIELDS,
    DASHBOARD_SECTION_FIELDS,
    EntityKind,
    get_sections,
)
from wizard.completion import (
    calculate_completion,
    completion_badge,
    field_level_completion,
    round_half_up,
    section_is_complete,
    section_level_completion,
    section_percentages,
)


def _fill(fields: tuple[str, ...]) -> dict[str, object]:
    return {name: "x" for name in fields}


def test_nine_of_seventeen_compulsory_fields_rounds_to_53() -> None:
    record = _fill(COMPULSORY_PROFILE_FIELDS[:9])
    result = field_level_completion(record, COMPULSORY_PROFILE_FIELDS)
    assert result.percentage == 53
    assert result.missing_fields == COMPULSORY_PROFILE_FIELDS[9:]
    assert result.total_sections == 0


def test_empty_and_full_records() -> None:
    assert field_level_completion({}, COMPULSORY_PROFILE_FIELDS).percentage == 0
    assert field_level_completion({}, COMPULSORY_PROFILE_FIELDS).missing_fields == COMPULSORY_PROFILE_FIELDS
    full = field_level_completion(_fill(COMPULSORY_PROFILE_FIELDS), COMPULSORY_PROFILE_FIELDS)
    assert full.percentage == 100
    assert full.missing_fields == ()
    assert field_level_completion({}, ()).percentage == 100


def test_false_and_zero_count_as_filled() -> None:
    result = field_level_completion({"a": False, "b": 0, "c": "", "d": []}, ["a", "b", "c", "d"])
    assert result.percentage == 50
    assert result.missing_fields == ("c", "d")


@pytest.mark.parametrize(("value", "expected"), [(52.5, 53), (52.4999, 52), (0.5, 1), (99.5, 100)])
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_filling_a_field_never_lowers_completion() -> None:
    record: dict[str, object] = {}
    previous = field_level_completion(record, COMPULSORY_PROFILE_FIELDS).percentage
    for name in COMPULSORY_PROFILE_FIELDS:
        record[name] = "x"
        current = field_level_completion(record, COMPULSORY_PROFILE_FIELDS).percentage
        assert current >= previous
        previous = current


def test_completion_is_idempotent(complete_profile: dict[str, object]) -> None:
    partial_record = dict(complete_profile)
    partial_record.pop("gender")
    snapshot = dict(partial_record)
    first = calculate_completion(partial_record, EntityKind.STUDENT_PROFILE)
    second = calculate_completion(partial_record, EntityKind.STUDENT_PROFILE)
    assert first == second
    assert first.missing_fields == ("gender",)
    assert partial_record == snapshot


def test_dashboard_language_card_accepts_either_test_list() -> None:
    language = DASHBOARD_SECTION_FIELDS["language"]
    assert section_is_complete({"standardizedTests": [{"testType": "GRE"}]}, language)
    assert not section_is_complete({"englishProficiencyTests": []}, language)


def test_section_level_completion_over_dashboard_cards() -> None:
    record = {
        "firstName": "Asha",
        "lastName": "Rai",
        "phoneNumber": "+9779812345678",
        "nationality": "Nepali",
        "currentEmploymentStatus": "Student",
    }
    # 2 of 6 cards
    assert section_level_completion(record, DASHBOARD_SECTION_FIELDS) == 33


def test_tests_section_is_trivially_complete() -> None:
    sections = get_sections(EntityKind.STUDENT_PROFILE)
    tests = next(section for section in sections if section.id == "tests")
    assert section_is_complete({}, tests)
    assert section_level_completion({}, [tests]) == 100


def test_calculate_completion_reports_missing_fields(complete_profile: dict[str, object]) -> None:
    full = calculate_completion(complete_profile, EntityKind.STUDENT_PROFILE)
    assert full.percentage == 100
    assert full.completed_sections == full.total_sections == 7
    assert full.missing_fields == ()

    partial_record = dict(complete_profile)
    partial_record.pop("preferredCountries")
    partial_record["gender"] = "   "
    partial = calculate_completion(partial_record, EntityKind.STUDENT_PROFILE)
    assert partial.missing_fields == ("gender", "preferredCountries")
    assert partial.per_section["countries"] is False
    assert partial.per_section["personal"] is False
    assert partial.completed_sections == 5
    assert partial.percentage < 100


def test_section_percentages_cover_all_fields() -> None:
    sections = get_sections(EntityKind.STUDENT_PROFILE)
    percentages = section_percentages({"preferredCountries": ["Canada"], "jobTitle": "Analyst"}, sections)
    assert percentages["countries"] == 100
    assert percentages["employment"] == 17
    assert percentages["tests"] == 0


@pytest.mark.parametrize(("percentage", "badge"), [(80, "complete"), (79.9, "partial"), (50, "partial"), (49, "incomplete")])
def test_completion_badge(percentage: float, badge: str) -> None:
    assert completion_badge(percentage) == badge
