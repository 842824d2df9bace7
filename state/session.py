"""Storage of serialized wizard state inside ``st.session_state``."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, cast

import streamlit as st

from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.state import WizardState

logger = logging.getLogger(__name__)


def resolve_session_state(session_state: MutableMapping[str, Any] | None = None) -> MutableMapping[str, Any]:
    """Return ``session_state`` or Streamlit's session store."""

    if session_state is not None:
        return session_state
    return cast(MutableMapping[str, Any], st.session_state)


def load_wizard_state(
    keys: WizardSessionKeys,
    session_state: MutableMapping[str, Any] | None = None,
) -> WizardState | None:
    """Return the stored wizard state or ``None`` when absent or unreadable."""

    storage = resolve_session_state(session_state)
    raw = storage.get(keys.navigation_state)
    if not isinstance(raw, Mapping):
        return None
    try:
        return WizardState.from_dict(raw)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Discarding unreadable wizard state %s: %s", keys.navigation_state, exc)
        storage.pop(keys.navigation_state, None)
        return None


def store_wizard_state(
    keys: WizardSessionKeys,
    state: WizardState,
    session_state: MutableMapping[str, Any] | None = None,
) -> None:
    resolve_session_state(session_state)[keys.navigation_state] = state.to_dict()


def discard_wizard_state(
    keys: WizardSessionKeys,
    session_state: MutableMapping[str, Any] | None = None,
) -> None:
    """Drop every session key owned by the wizard namespace."""

    storage = resolve_session_state(session_state)
    for key in [key for key in storage if isinstance(key, str) and key.startswith(keys.prefix)]:
        storage.pop(key, None)


__all__ = [
    "discard_wizard_state",
    "load_wizard_state",
    "resolve_session_state",
    "store_wizard_state",
]
