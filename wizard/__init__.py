"""Wizard helpers package."""

from __future__ import annotations

import importlib
from typing import Any

# Public names resolved lazily so ``core`` modules can import
# ``wizard.date_utils`` without pulling in the controller.
_LAZY_EXPORTS: dict[str, str] = {
    "ArrayFieldBuffer": "wizard.array_fields",
    "CompletionResult": "wizard.completion",
    "DataQualityIssue": "wizard.services.audit",
    "StepStatus": "wizard.step_status",
    "WizardController": "wizard.navigation.controller",
    "WizardState": "wizard.navigation.state",
    "audit_record": "wizard.services.audit",
    "calculate_completion": "wizard.completion",
    "completion_badge": "wizard.completion",
    "field_level_completion": "wizard.completion",
    "section_level_completion": "wizard.completion",
    "step_status": "wizard.step_status",
    "validate_section": "wizard.services.validation",
}

__all__ = sorted(_LAZY_EXPORTS)


def __getattr__(name: str) -> Any:
    """Load public attributes from their submodules on first access."""

    if name.startswith("__"):
        raise AttributeError(name)
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__} has no attribute {name}")
    value: Any = getattr(importlib.import_module(module_name), name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:  # pragma: no cover - convenience for REPLs
    return sorted(set(globals()) | set(__all__))
