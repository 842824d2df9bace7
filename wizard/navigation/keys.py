from __future__ import annotations

from dataclasses import dataclass

from constants.keys import StateKeys


@dataclass(frozen=True)
class WizardSessionKeys:
    """Session-state keys owned by one wizard instance (``wiz:<id>:``)."""

    wizard_id: str

    @property
    def prefix(self) -> str:
        return f"wiz:{self.wizard_id}:"

    def namespace(self, key: str) -> str:
        return f"{self.prefix}{key}"

    @property
    def navigation_state(self) -> str:
        return self.namespace("navigation_state")

    @property
    def audit_issues(self) -> str:
        return self.namespace(StateKeys.AUDIT_ISSUES)

    @property
    def audit_dismissed(self) -> str:
        return self.namespace(StateKeys.AUDIT_DISMISSED)


__all__ = ["WizardSessionKeys"]
