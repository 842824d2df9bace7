"""Draft autosave for unfinished wizard sessions.

Drafts live in ``st.session_state`` under :attr:`StateKeys.DRAFTS`, keyed by
record kind, wizard mode and record id, so an edit of one record never
restores the draft of another.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from datetime import datetime, timezone
from typing import Any

from constants.keys import StateKeys
from state.session import resolve_session_state
from wizard.navigation.state import WizardState

DraftPayload = dict[str, Any]


def _coerce_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        try:
            return int(cleaned)
        except ValueError:
            return None
    return None


def draft_key(kind: str, mode: str, record_id: str | None = None) -> str:
    """Return the storage key for a draft (``kind:mode:id``)."""

    return f"{kind}:{mode}:{record_id or 'new'}"


def build_draft(state: WizardState) -> DraftPayload:
    """Return a portable draft capturing the wizard's values and position."""

    return {
        "values": state.assembled_record(),
        "wizard": {
            "current_section_index": state.current_section_index,
            "completed_sections": sorted(state.completed_sections),
            "visited_sections": sorted(state.visited_sections),
        },
        "meta": {
            "captured_at": datetime.now(timezone.utc).isoformat(),
            "kind": str(state.kind),
            "mode": str(state.mode),
            "record_id": state.record_id,
        },
    }


def parse_draft(payload: Mapping[str, Any]) -> DraftPayload:
    """Normalise a stored draft; unknown shapes yield empty components."""

    values = payload.get("values")
    wizard = payload.get("wizard")
    meta = payload.get("meta")
    wizard_data = wizard if isinstance(wizard, Mapping) else {}
    step_index = _coerce_int(wizard_data.get("current_section_index"))
    return {
        "values": copy.deepcopy(dict(values)) if isinstance(values, Mapping) else {},
        "wizard": {
            "current_section_index": step_index if step_index is not None else 0,
            "completed_sections": [
                index for index in (_coerce_int(item) for item in wizard_data.get("completed_sections") or ()) if index is not None
            ],
            "visited_sections": [
                index for index in (_coerce_int(item) for item in wizard_data.get("visited_sections") or ()) if index is not None
            ],
        },
        "meta": dict(meta) if isinstance(meta, Mapping) else {},
    }


def _drafts(session_state: MutableMapping[str, Any] | None) -> dict[str, Any]:
    storage = resolve_session_state(session_state)
    drafts = storage.get(StateKeys.DRAFTS)
    if not isinstance(drafts, dict):
        drafts = {}
        storage[StateKeys.DRAFTS] = drafts
    return drafts


def save_draft(state: WizardState, session_state: MutableMapping[str, Any] | None = None) -> DraftPayload:
    """Capture ``state`` as the draft for its kind, mode and record id."""

    draft = build_draft(state)
    _drafts(session_state)[draft_key(state.kind, state.mode, state.record_id)] = draft
    return draft


def restore_draft(
    kind: str,
    mode: str,
    record_id: str | None = None,
    session_state: MutableMapping[str, Any] | None = None,
) -> DraftPayload | None:
    """Return the parsed draft for the given key or ``None``."""

    raw = _drafts(session_state).get(draft_key(kind, mode, record_id))
    if not isinstance(raw, Mapping):
        return None
    return parse_draft(raw)


def clear_draft(
    kind: str,
    mode: str,
    record_id: str | None = None,
    session_state: MutableMapping[str, Any] | None = None,
) -> None:
    _drafts(session_state).pop(draft_key(kind, mode, record_id), None)


__all__ = [
    "build_draft",
    "clear_draft",
    "draft_key",
    "parse_draft",
    "restore_draft",
    "save_draft",
]
