"""Navigation state and controller for the section wizard."""

from __future__ import annotations

import importlib
from typing import Any

from wizard.navigation.keys import WizardSessionKeys
from wizard.navigation.state import WizardMode, WizardState

__all__ = [
    "WizardController",
    "WizardMode",
    "WizardSessionKeys",
    "WizardState",
]


def __getattr__(name: str) -> Any:
    """Load the controller lazily; it depends on ``state`` which imports this package."""

    if name == "WizardController":
        value: Any = importlib.import_module(f"{__name__}.controller").WizardController
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__} has no attribute {name}")
