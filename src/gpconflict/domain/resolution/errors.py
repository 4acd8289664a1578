"""Error taxonomy of a resolution run.

Only scope-level failures are fatal once a run has started. Per-policy
problems are collected as warnings and never abort the run.
"""

from __future__ import annotations

from dataclasses import dataclass


class ScopeResolutionError(RuntimeError):
    """Raised when the link list of a scope cannot be obtained."""

    def __init__(self, message: str, *, scope: str) -> None:
        super().__init__(message)
        self.scope = scope


class SettingsFetchError(RuntimeError):
    """Raised by settings collaborators when one policy export is unusable."""

    def __init__(self, message: str, *, policy_id: str) -> None:
        super().__init__(message)
        self.policy_id = policy_id


@dataclass(frozen=True, slots=True, kw_only=True)
class AssertionExtractionWarning:
    """A policy object whose settings were skipped during extraction."""

    policy_id: str
    display_name: str = ""
    reason: str

    def __str__(self) -> str:
        label = self.display_name or self.policy_id
        return f"{label}: {self.reason}"
