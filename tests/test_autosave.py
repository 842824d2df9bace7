from __future__ import annotations

from typing import Any

from constants.keys import StateKeys
from core.schema_registry import EntityKind
from state.autosave import build_draft, clear_draft, draft_key, parse_draft, restore_draft, save_draft
from wizard.navigation.state import initial_state, set_field

PROFILE = EntityKind.STUDENT_PROFILE


def test_draft_key_separates_records() -> None:
    assert draft_key(PROFILE, "create") == "student_profile:create:new"
    assert draft_key(PROFILE, "edit", "r1") == "student_profile:edit:r1"


def test_build_draft_captures_values_and_position() -> None:
    state = set_field(initial_state(PROFILE, {"preferredCountries": ["UK"]}), "firstName", "Asha")
    draft = build_draft(state)
    assert draft["values"]["firstName"] == "Asha"
    assert draft["values"]["preferredCountries"] == ["UK"]
    assert draft["wizard"] == {"current_section_index": 0, "completed_sections": [], "visited_sections": [0]}
    assert draft["meta"]["kind"] == "student_profile"
    assert draft["meta"]["captured_at"]


def test_save_restore_and_clear() -> None:
    session: dict[str, Any] = {}
    state = set_field(initial_state(PROFILE, mode="edit", record_id="r1"), "firstName", "Asha")
    save_draft(state, session)
    assert list(session[StateKeys.DRAFTS]) == ["student_profile:edit:r1"]
    assert restore_draft(PROFILE, "edit", "r2", session) is None
    restored = restore_draft(PROFILE, "edit", "r1", session)
    assert restored is not None and restored["values"]["firstName"] == "Asha"
    clear_draft(PROFILE, "edit", "r1", session)
    assert restore_draft(PROFILE, "edit", "r1", session) is None


def test_parse_draft_tolerates_bad_shapes() -> None:
    parsed = parse_draft(
        {
            "values": "nope",
            "wizard": {"current_section_index": "2", "completed_sections": ["0", "x", 1], "visited_sections": None},
        }
    )
    assert parsed["values"] == {}
    assert parsed["wizard"] == {"current_section_index": 2, "completed_sections": [0, 1], "visited_sections": []}
    assert parsed["meta"] == {}
