"""Wizard controller coordinating transitions, session storage and submission."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import replace
from datetime import date
from typing import Any

import config as app_config
from constants.keys import StateKeys
from core.errors import GatewayError
from core.schema_registry import EntityKind, Section, get_sections
from integrations.gateway import SubmissionGateway, SubmissionResult, compute_patch
from models import normalize_record
from state.autosave import clear_draft, restore_draft, save_draft
from state.session import (
    discard_wizard_state,
    load_wizard_state,
    resolve_session_state,
    store_wizard_state,
)
from utils.logging_context import log_context
from wizard.completion import CompletionResult, calculate_completion
from wizard.navigation import state as transitions
from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.state import WizardMode, WizardState
from wizard.services.audit import DataQualityIssue, audit_record

logger = logging.getLogger(__name__)

SUBMIT_BLOCKED_MESSAGE = "Please fix the highlighted fields before submitting."
SUBMIT_FAILED_MESSAGE = "Submission failed unexpectedly. Your changes were kept; please try again."


class WizardController:
    """Own one :class:`WizardState` and persist it in the session.

    The controller re-uses a stored state for the same wizard id, otherwise it
    starts from ``initial_data`` (or a saved draft when ``use_draft``).
    """

    def __init__(
        self,
        kind: str,
        gateway: SubmissionGateway,
        *,
        initial_data: Mapping[str, Any] | None = None,
        mode: WizardMode | str = WizardMode.CREATE,
        record_id: str | None = None,
        wizard_id: str | None = None,
        session_state: MutableMapping[str, Any] | None = None,
        use_draft: bool = True,
        today: date | None = None,
    ) -> None:
        self._kind = str(kind)
        self._sections: tuple[Section, ...] = get_sections(self._kind)
        self._gateway = gateway
        self._today = today
        self._session_state = resolve_session_state(session_state)
        resolved_mode = WizardMode(mode)
        self._session_keys = WizardSessionKeys(wizard_id=wizard_id or f"{self._kind}:{resolved_mode}:{record_id or 'new'}")
        self._original: dict[str, Any] = dict(initial_data or {})
        self._use_draft = use_draft and resolved_mode is not WizardMode.VIEW

        stored = load_wizard_state(self._session_keys, self._session_state)
        if stored is not None and stored.kind == self._kind:
            self._state = stored
        else:
            self._state = self._build_initial_state(resolved_mode, record_id)
            self._persist(save_draft_copy=False)
        if app_config.AUDIT_ON_LOAD and resolved_mode is not WizardMode.CREATE and self._original:
            self.run_audit()

    @classmethod
    def for_record(
        cls,
        kind: str,
        gateway: SubmissionGateway,
        record_id: str,
        *,
        mode: WizardMode | str = WizardMode.EDIT,
        **kwargs: Any,
    ) -> "WizardController":
        """Load ``record_id`` through ``gateway`` and open it for editing.

        A missing record opens with every section empty.
        """

        with log_context(record_id=record_id):
            stored = gateway.fetch_record(record_id)
            if stored is None:
                logger.info("Record not found; starting with empty sections")
        return cls(
            kind,
            gateway,
            initial_data=normalize_record(kind, stored),
            mode=mode,
            record_id=record_id,
            **kwargs,
        )

    def _build_initial_state(self, mode: WizardMode, record_id: str | None) -> WizardState:
        state = transitions.initial_state(self._kind, self._original, mode=mode, record_id=record_id)
        if not self._use_draft:
            return state
        draft = restore_draft(self._kind, mode, record_id, self._session_state)
        if draft is None:
            return state
        logger.info("Restoring draft for %s", self._kind)
        restored = transitions.initial_state(
            self._kind,
            {**self._original, **draft["values"]},
            mode=mode,
            record_id=record_id,
        )
        wizard = draft["wizard"]
        count = len(self._sections)
        restored = replace(
            restored,
            completed_sections=restored.completed_sections
            | {index for index in wizard["completed_sections"] if 0 <= index < count},
            visited_sections=restored.visited_sections
            | {index for index in wizard["visited_sections"] if 0 <= index < count},
        )
        return transitions.jump_to(restored, wizard["current_section_index"])

    def _persist(self, *, save_draft_copy: bool = True) -> None:
        store_wizard_state(self._session_keys, self._state, self._session_state)
        if save_draft_copy and self._use_draft and not self._state.submitted:
            save_draft(self._state, self._session_state)

    def _apply(self, new_state: WizardState) -> WizardState:
        if new_state is not self._state:
            self._state = new_state
            self._persist()
        return self._state

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def sections(self) -> tuple[Section, ...]:
        return self._sections

    @property
    def current_section(self) -> Section:
        return self._sections[self._state.current_section_index]

    @property
    def field_errors(self) -> dict[str, str]:
        return dict(self._state.field_errors)

    @property
    def is_submit_enabled(self) -> bool:
        return transitions.is_submit_enabled(self._state)

    @property
    def audit_issues(self) -> list[DataQualityIssue]:
        """Issues for the data-quality banner; empty once dismissed."""

        if self._session_state.get(self._session_keys.audit_dismissed):
            return []
        raw = self._session_state.get(self._session_keys.audit_issues)
        return list(raw) if isinstance(raw, list) else []

    def run_audit(self) -> list[DataQualityIssue]:
        """Audit the current record and keep the issues for the banner."""

        issues = audit_record(self.assembled_record(), today=self._today) if self._kind == EntityKind.STUDENT_PROFILE else []
        self._session_state[self._session_keys.audit_issues] = issues
        return issues

    def dismiss_audit(self) -> None:
        self._session_state[self._session_keys.audit_dismissed] = True

    def assembled_record(self) -> dict[str, Any]:
        return self._state.assembled_record()

    def progress(self) -> CompletionResult:
        return calculate_completion(self.assembled_record(), self._kind)

    def can_jump_to(self, index: int) -> bool:
        return transitions.can_jump_to(self._state, index)

    def set_field(self, name: str, value: Any) -> WizardState:
        return self._apply(transitions.set_field(self._state, name, value, today=self._today))

    def add_array_item(self, name: str, value: str) -> WizardState:
        return self._apply(transitions.add_array_item(self._state, name, value))

    def remove_array_item(self, name: str, index: int) -> WizardState:
        return self._apply(transitions.remove_array_item(self._state, name, index))

    def next(self) -> bool:
        """Validate and advance; return ``True`` when the section passed."""

        section_id = self.current_section.id
        with log_context(record_id=self._state.record_id, wizard_step=section_id):
            new_state, passed = transitions.advance(self._state, today=self._today)
            self._apply(new_state)
            logger.debug("Section %s %s", section_id, "passed" if passed else "blocked")
        return passed

    def previous(self) -> WizardState:
        return self._apply(transitions.go_previous(self._state))

    def jump_to(self, index: int) -> bool:
        if not self.can_jump_to(index):
            return False
        self._apply(transitions.jump_to(self._state, index))
        return True

    def _patch(self) -> dict[str, Any]:
        current = self.assembled_record()
        if self._state.record_id is None:
            return current
        return compute_patch(self._original, current)

    def submit(self) -> SubmissionResult:
        """Validate everything and hand the patch to the gateway."""

        if not self.is_submit_enabled:
            return SubmissionResult(ok=False, message="Submission is not available on this step.")
        state = self._apply(transitions.begin_submit(self._state, today=self._today))
        if not state.pending:
            return SubmissionResult(ok=False, message=SUBMIT_BLOCKED_MESSAGE, field_errors=dict(state.field_errors))
        token, record_id = state.request_token, state.record_id
        with log_context(record_id=record_id, wizard_step=self.current_section.id):
            try:
                result = self._gateway.submit(record_id, self._patch())
            except GatewayError as exc:
                logger.error("Submission failed: %s", exc.message)
                result = SubmissionResult(ok=False, message=exc.message, field_errors=exc.field_errors)
            except Exception:
                logger.exception("Unexpected gateway failure during submission")
                result = SubmissionResult(ok=False, message=SUBMIT_FAILED_MESSAGE)
            self.apply_result(result, request_token=token, record_id=record_id)
            if result.ok:
                logger.info("Submitted %s record", self._kind)
        return result

    def apply_result(self, result: SubmissionResult, *, request_token: str | None, record_id: str | None) -> WizardState:
        """Fold a (possibly late) gateway result into the wizard."""

        updated = transitions.apply_submit_result(
            self._state,
            result,
            request_token=request_token,
            record_id=record_id,
        )
        if updated is self._state:
            logger.info("Ignoring stale submission result")
            return self._state
        self._state = updated
        if updated.submitted:
            clear_draft(self._kind, updated.mode, record_id, self._session_state)
            discard_wizard_state(self._session_keys, self._session_state)
            self._session_state[StateKeys.SUBMIT_FEEDBACK] = {"ok": True, "message": result.message}
            return self._state
        self._persist()
        self._session_state[StateKeys.SUBMIT_FEEDBACK] = {"ok": False, "message": result.message}
        return self._state


__all__ = ["SUBMIT_BLOCKED_MESSAGE", "SUBMIT_FAILED_MESSAGE", "WizardController"]
