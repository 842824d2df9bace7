"""Session state utilities."""

from .autosave import build_draft, clear_draft, restore_draft, save_draft
from .session import discard_wizard_state, load_wizard_state, store_wizard_state

__all__ = [
    "build_draft",
    "clear_draft",
    "discard_wizard_state",
    "load_wizard_state",
    "restore_draft",
    "save_draft",
    "store_wizard_state",
]
