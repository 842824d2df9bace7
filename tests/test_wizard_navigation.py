from __future__ import annotations

from dataclasses import replace
from datetime import date

from core.schema_registry import EntityKind
from integrations.gateway import SubmissionResult
from wizard.navigation.state import (
    WizardMode,
    WizardState,
    add_array_item,
    advance,
    apply_submit_result,
    begin_submit,
    can_jump_to,
    go_next,
    go_previous,
    initial_state,
    is_submit_enabled,
    jump_to,
    remove_array_item,
    set_field,
)

PROFILE = EntityKind.STUDENT_PROFILE


def _walk_to_last(state: WizardState, today: date) -> WizardState:
    while not state.is_last_section:
        state, passed = advance(state, today=today)
        assert passed, state.field_errors
    return state


def test_initial_state_moves_arrays_into_buffers(complete_profile: dict[str, object]) -> None:
    state = initial_state(PROFILE, complete_profile)
    assert state.current_section_index == 0
    assert state.visited_sections == frozenset({0})
    assert state.completed_sections == frozenset()
    assert state.array_buffers["preferredCountries"] == ("Australia", "Canada")
    assert "preferredCountries" not in state.values
    assert state.assembled_record()["preferredCountries"] == ["Australia", "Canada"]


def test_edit_mode_marks_complete_sections(complete_profile: dict[str, object]) -> None:
    record = {**complete_profile, "fundingSource": ""}
    state = initial_state(PROFILE, record, mode="edit", record_id="42")
    assert 3 not in state.completed_sections
    assert {0, 1, 2, 4, 5, 6} <= state.completed_sections
    assert can_jump_to(state, 6)
    assert not can_jump_to(state, 3)


def test_next_blocks_on_invalid_section(today: date) -> None:
    state = set_field(initial_state(PROFILE), "firstName", "R2D2", today=today)
    blocked, passed = advance(state, today=today)
    assert not passed
    assert blocked.current_section_index == 0
    assert blocked.field_errors["firstName"].startswith("First name can only contain")
    assert blocked.field_errors["lastName"] == "Last name is required"
    assert go_next(state, today=today).current_section_index == 0


def test_editing_a_field_clears_its_error(today: date) -> None:
    state, _ = advance(initial_state(PROFILE), today=today)
    assert "firstName" in state.field_errors
    edited = set_field(state, "firstName", "Asha", today=today)
    assert "firstName" not in edited.field_errors
    assert "lastName" in edited.field_errors


def test_graduation_year_prefills_academic_gap(today: date) -> None:
    state = set_field(initial_state(PROFILE), "graduationYear", 2021, today=today)
    assert state.values["currentAcademicGap"] == 3
    future = set_field(state, "graduationYear", 2025, today=today)
    assert future.values["currentAcademicGap"] == 3


def test_full_walk_and_submission(complete_profile: dict[str, object], today: date) -> None:
    state = _walk_to_last(initial_state(PROFILE, complete_profile), today)
    assert state.current_section_id == "tests"
    assert state.completed_sections == frozenset(range(6))
    assert is_submit_enabled(state)

    state, passed = advance(state, today=today)
    assert passed and state.is_last_section
    assert 6 in state.completed_sections

    pending = begin_submit(state, today=today)
    assert pending.pending and pending.request_token
    assert not is_submit_enabled(pending)
    assert set_field(pending, "firstName", "Changed", today=today) is pending

    done = apply_submit_result(
        pending,
        SubmissionResult(ok=True, record={"id": "abc"}),
        request_token=pending.request_token,
        record_id=None,
    )
    assert done.submitted and not done.pending
    assert done.record_id == "abc"


def test_submit_failure_moves_to_first_offending_section(complete_profile: dict[str, object], today: date) -> None:
    state = _walk_to_last(initial_state(PROFILE, complete_profile), today)
    broken = replace(state, values={**state.values, "fundingSource": "Lottery"})
    result = begin_submit(broken, today=today)
    assert not result.pending
    assert result.current_section_id == "budget"
    assert "fundingSource" in result.field_errors


def test_server_errors_are_mapped_to_sections(complete_profile: dict[str, object], today: date) -> None:
    pending = begin_submit(_walk_to_last(initial_state(PROFILE, complete_profile), today), today=today)
    rejected = apply_submit_result(
        pending,
        SubmissionResult(ok=False, message="Rejected", field_errors={"interestedCourse": "Course is closed"}),
        request_token=pending.request_token,
        record_id=None,
    )
    assert not rejected.pending and not rejected.submitted
    assert rejected.current_section_id == "study"
    assert rejected.field_errors == {"interestedCourse": "Course is closed"}
    assert rejected.values == pending.values


def test_stale_results_are_ignored(complete_profile: dict[str, object], today: date) -> None:
    pending = begin_submit(_walk_to_last(initial_state(PROFILE, complete_profile), today), today=today)
    stale = apply_submit_result(
        pending,
        SubmissionResult(ok=True, record={"id": "old"}),
        request_token="previous-token",
        record_id=None,
    )
    assert stale is pending
    other_record = apply_submit_result(
        pending,
        SubmissionResult(ok=True),
        request_token=pending.request_token,
        record_id="someone-else",
    )
    assert other_record is pending


def test_previous_and_jump_rules(complete_profile: dict[str, object], today: date) -> None:
    state = initial_state(PROFILE, complete_profile)
    assert go_previous(state) is state
    assert jump_to(state, 3) is state
    state = go_next(go_next(state, today=today), today=today)
    assert state.current_section_index == 2
    back = go_previous(state)
    assert back.current_section_index == 1
    assert jump_to(back, 2).current_section_index == 2
    assert not can_jump_to(back, 7)
    assert not can_jump_to(back, -1)


def test_view_mode_is_read_only_and_freely_navigable(complete_profile: dict[str, object], today: date) -> None:
    state = initial_state(PROFILE, {}, mode=WizardMode.VIEW, record_id="1")
    assert set_field(state, "firstName", "Asha", today=today) is state
    assert add_array_item(state, "preferredCountries", "Canada") is state
    assert jump_to(state, 5).current_section_index == 5
    moved, passed = advance(state, today=today)
    assert passed and moved.current_section_index == 1
    assert not is_submit_enabled(jump_to(state, 6))


def test_persisted_lists_are_loaded_verbatim() -> None:
    state = initial_state(PROFILE, {"preferredCountries": ["USA", "usa", "UK"]}, mode="edit", record_id="r1")
    assert state.array_buffers["preferredCountries"] == ("USA", "usa", "UK")
    assert state.assembled_record()["preferredCountries"] == ["USA", "usa", "UK"]
    assert add_array_item(state, "preferredCountries", " uk ") is state
    added = add_array_item(state, "preferredCountries", " Japan ")
    assert added.array_buffers["preferredCountries"] == ("USA", "usa", "UK", "Japan")


def test_array_items_respect_capacity() -> None:
    state = initial_state(PROFILE)
    for country in ["UK", "USA", "Canada", "Japan", "Germany", "France"]:
        state = add_array_item(state, "preferredCountries", country)
    assert state.array_buffers["preferredCountries"] == ("UK", "USA", "Canada", "Japan", "Germany")
    assert add_array_item(state, "preferredCountries", "uk") is state
    shorter = remove_array_item(state, "preferredCountries", 0)
    assert shorter.array_buffers["preferredCountries"][0] == "USA"
    assert remove_array_item(shorter, "preferredCountries", 9) is shorter


def test_state_round_trips_through_dict(complete_profile: dict[str, object], today: date) -> None:
    state, _ = advance(initial_state(PROFILE, complete_profile, mode="edit", record_id="7"), today=today)
    restored = WizardState.from_dict(state.to_dict())
    assert restored == state
