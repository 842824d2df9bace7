"""Serializable wizard state and the pure transitions that evolve it.

Every transition takes a :class:`WizardState` and returns a new one; nothing
here touches session storage or the network, which keeps navigation fully
testable and lets the controller persist the state wherever it likes.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from enum import StrEnum
from typing import Any, Callable

from constants.keys import ProfileFields as P
from core.field_validators import FieldKind, constraints_for, max_items_for
from core.rules import suggest_academic_gap
from core.schema_registry import EntityKind, field_section_map, get_sections
from integrations.gateway import SubmissionResult
from wizard.array_fields import add_item, remove_item
from wizard.completion import section_is_complete
from wizard.services.validation import validate_record, validate_section


class WizardMode(StrEnum):
    CREATE = "create"
    EDIT = "edit"
    VIEW = "view"


@dataclass(frozen=True)
class WizardState:
    """Complete, serializable state of one wizard instance."""

    kind: str
    mode: WizardMode = WizardMode.CREATE
    current_section_index: int = 0
    completed_sections: frozenset[int] = frozenset()
    visited_sections: frozenset[int] = frozenset({0})
    field_errors: dict[str, str] = field(default_factory=dict)
    array_buffers: dict[str, tuple[str, ...]] = field(default_factory=dict)
    values: dict[str, Any] = field(default_factory=dict)
    pending: bool = False
    submitted: bool = False
    record_id: str | None = None
    request_token: str | None = None

    @property
    def section_count(self) -> int:
        return len(get_sections(self.kind))

    @property
    def current_section_id(self) -> str:
        return get_sections(self.kind)[self.current_section_index].id

    @property
    def is_last_section(self) -> bool:
        return self.current_section_index == self.section_count - 1

    def assembled_record(self) -> dict[str, Any]:
        """Return the values merged with the array buffers."""

        record = copy.deepcopy(self.values)
        for name, items in self.array_buffers.items():
            record[name] = list(items)
        return record

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "mode": str(self.mode),
            "current_section_index": self.current_section_index,
            "completed_sections": sorted(self.completed_sections),
            "visited_sections": sorted(self.visited_sections),
            "field_errors": dict(self.field_errors),
            "array_buffers": {name: list(items) for name, items in self.array_buffers.items()},
            "values": copy.deepcopy(self.values),
            "pending": self.pending,
            "submitted": self.submitted,
            "record_id": self.record_id,
            "request_token": self.request_token,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WizardState":
        buffers = payload.get("array_buffers") or {}
        return cls(
            kind=str(payload["kind"]),
            mode=WizardMode(payload.get("mode", WizardMode.CREATE)),
            current_section_index=int(payload.get("current_section_index", 0)),
            completed_sections=frozenset(int(i) for i in payload.get("completed_sections") or ()),
            visited_sections=frozenset(int(i) for i in payload.get("visited_sections") or (0,)),
            field_errors=dict(payload.get("field_errors") or {}),
            array_buffers={str(name): tuple(items) for name, items in buffers.items()},
            values=copy.deepcopy(dict(payload.get("values") or {})),
            pending=bool(payload.get("pending", False)),
            submitted=bool(payload.get("submitted", False)),
            record_id=payload.get("record_id"),
            request_token=payload.get("request_token"),
        )


def array_fields(kind: str) -> tuple[str, ...]:
    """Return the tag-list fields of ``kind``."""

    return tuple(name for name, constraint in constraints_for(kind).items() if constraint.kind is FieldKind.LIST)


def initial_state(
    kind: str,
    initial_data: Mapping[str, Any] | None = None,
    *,
    mode: WizardMode | str = WizardMode.CREATE,
    record_id: str | None = None,
) -> WizardState:
    """Create the state for a fresh wizard.

    In edit and view mode, sections whose required fields are already filled
    start out completed and visited.
    """

    sections = get_sections(kind)
    resolved_mode = WizardMode(mode)
    values = copy.deepcopy(dict(initial_data or {}))
    buffers: dict[str, tuple[str, ...]] = {}
    for name in array_fields(kind):
        # Persisted lists are kept as stored; only later edits are cleaned.
        raw = values.get(name)
        if raw is None:
            values.pop(name, None)
            buffers[name] = ()
        elif isinstance(raw, (list, tuple)):
            buffers[name] = tuple(values.pop(name))
    completed: frozenset[int] = frozenset()
    if resolved_mode is not WizardMode.CREATE:
        record = {**values, **{name: list(items) for name, items in buffers.items()}}
        completed = frozenset(index for index, section in enumerate(sections) if section_is_complete(record, section))
    return WizardState(
        kind=str(kind),
        mode=resolved_mode,
        completed_sections=completed,
        visited_sections=completed | {0},
        array_buffers=buffers,
        values=values,
        record_id=record_id,
    )


def _derive_academic_gap(values: dict[str, Any], today: date | None) -> None:
    gap = suggest_academic_gap(values.get(P.GRADUATION_YEAR), today=today)
    if gap is not None:
        values[P.ACADEMIC_GAP] = gap


# Fields whose edits pre-fill dependent values, per record kind.
_AUTO_FILL: dict[str, dict[str, Callable[[dict[str, Any], date | None], None]]] = {
    EntityKind.STUDENT_PROFILE: {P.GRADUATION_YEAR: _derive_academic_gap},
}


def _without_errors(errors: Mapping[str, str], fields: Iterable[str]) -> dict[str, str]:
    dropped = set(fields)
    return {name: message for name, message in errors.items() if name not in dropped}


def set_field(state: WizardState, name: str, value: Any, *, today: date | None = None) -> WizardState:
    """Record an edit and clear the field's error; view mode is read-only."""

    if state.mode is WizardMode.VIEW or state.pending:
        return state
    if name in state.array_buffers:
        items: tuple[str, ...] = ()
        entries = value if isinstance(value, (list, tuple)) else ()
        for entry in entries:
            if isinstance(entry, str):
                items = add_item(items, entry, max_items=max_items_for(state.kind, name))
        return replace(
            state,
            array_buffers={**state.array_buffers, name: items},
            field_errors=_without_errors(state.field_errors, (name,)),
        )
    values = copy.deepcopy(state.values)
    values[name] = value
    derived = _AUTO_FILL.get(state.kind, {}).get(name)
    if derived is not None:
        derived(values, today)
    changed = [key for key in values if values.get(key) != state.values.get(key)]
    return replace(state, values=values, field_errors=_without_errors(state.field_errors, [name, *changed]))


def add_array_item(state: WizardState, name: str, value: str) -> WizardState:
    """Append ``value`` to a tag list (trimmed, de-duplicated, capped)."""

    if state.mode is WizardMode.VIEW or state.pending:
        return state
    current = state.array_buffers.get(name, ())
    updated = add_item(current, value, max_items=max_items_for(state.kind, name))
    if updated == current:
        return state
    return replace(
        state,
        array_buffers={**state.array_buffers, name: updated},
        field_errors=_without_errors(state.field_errors, (name,)),
    )


def remove_array_item(state: WizardState, name: str, index: int) -> WizardState:
    """Remove the tag at ``index``; out-of-range indexes are ignored."""

    if state.mode is WizardMode.VIEW or state.pending:
        return state
    current = state.array_buffers.get(name, ())
    updated = remove_item(current, index)
    if updated == current:
        return state
    return replace(state, array_buffers={**state.array_buffers, name: updated})


def _rule_scope(state: WizardState) -> set[str]:
    sections = get_sections(state.kind)
    scope = {sections[state.current_section_index].id}
    if state.is_last_section:
        scope.update(sections[index].id for index in state.completed_sections)
    return scope


def advance(state: WizardState, *, today: date | None = None) -> tuple[WizardState, bool]:
    """Validate the current section and advance when it passes.

    Returns the new state and whether the section passed. On the last
    section a successful validation only marks it complete.
    """

    sections = get_sections(state.kind)
    section = sections[state.current_section_index]
    if state.mode is WizardMode.VIEW:
        return jump_to(state, state.current_section_index + 1), True
    result = validate_section(
        state.kind,
        section.id,
        state.assembled_record(),
        rule_sections=_rule_scope(state),
        today=today,
    )
    remaining = _without_errors(state.field_errors, section.fields)
    if not result.ok:
        return replace(state, field_errors={**remaining, **result.field_errors}), False
    target = min(state.current_section_index + 1, len(sections) - 1)
    advanced = replace(
        state,
        current_section_index=target,
        completed_sections=state.completed_sections | {state.current_section_index},
        visited_sections=state.visited_sections | {target},
        field_errors=remaining,
    )
    return advanced, True


def go_next(state: WizardState, *, today: date | None = None) -> WizardState:
    return advance(state, today=today)[0]


def go_previous(state: WizardState) -> WizardState:
    """Step back one section without validation."""

    if state.current_section_index == 0:
        return state
    return replace(state, current_section_index=state.current_section_index - 1)


def can_jump_to(state: WizardState, index: int) -> bool:
    if index < 0 or index >= state.section_count:
        return False
    return state.mode is WizardMode.VIEW or index in state.visited_sections


def jump_to(state: WizardState, index: int) -> WizardState:
    """Move to ``index`` when allowed; otherwise return ``state`` unchanged."""

    if not can_jump_to(state, index):
        return state
    return replace(
        state,
        current_section_index=index,
        visited_sections=state.visited_sections | {index},
    )


def is_submit_enabled(state: WizardState) -> bool:
    return state.mode is not WizardMode.VIEW and state.is_last_section and not state.pending


def _first_offending_index(kind: str, errors: Mapping[str, str], fallback: int) -> int:
    positions = field_section_map(kind)
    indexes = [positions[name] for name in errors if name in positions]
    return min(indexes) if indexes else fallback


def begin_submit(state: WizardState, *, today: date | None = None) -> WizardState:
    """Validate every section and mark the submission in flight.

    Returns ``state`` unchanged when submission is not allowed. When
    validation fails the errors are recorded, the first offending section is
    shown and ``pending`` stays ``False``.
    """

    if not is_submit_enabled(state):
        return state
    result = validate_record(state.kind, state.assembled_record(), today=today)
    if not result.ok:
        target = _first_offending_index(state.kind, result.field_errors, state.current_section_index)
        return replace(
            state,
            field_errors=dict(result.field_errors),
            current_section_index=target,
            visited_sections=state.visited_sections | {target},
        )
    return replace(
        state,
        pending=True,
        field_errors={},
        completed_sections=frozenset(range(state.section_count)),
        request_token=uuid.uuid4().hex,
    )


def apply_submit_result(
    state: WizardState,
    result: SubmissionResult,
    *,
    request_token: str | None,
    record_id: str | None,
) -> WizardState:
    """Fold a gateway result into ``state``; stale results are ignored."""

    if not state.pending or request_token != state.request_token or record_id != state.record_id:
        return state
    if result.ok:
        stored = result.record or {}
        new_id = stored.get("id", state.record_id)
        return replace(
            state,
            pending=False,
            submitted=True,
            request_token=None,
            record_id=str(new_id) if new_id is not None else None,
        )
    errors = {**state.field_errors, **result.field_errors}
    target = _first_offending_index(state.kind, result.field_errors, state.current_section_index)
    return replace(
        state,
        pending=False,
        request_token=None,
        field_errors=errors,
        current_section_index=target,
        visited_sections=state.visited_sections | {target},
    )


__all__ = [
    "WizardMode",
    "WizardState",
    "add_array_item",
    "advance",
    "apply_submit_result",
    "array_fields",
    "begin_submit",
    "can_jump_to",
    "go_next",
    "go_previous",
    "initial_state",
    "is_submit_enabled",
    "jump_to",
    "remove_array_item",
    "set_field",
]
