"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PolicyContext(StrEnum):
    """Half of a policy object a setting is written to."""

    MACHINE = "machine"
    USER = "user"

    @property
    def sort_index(self) -> int:
        return _CONTEXT_ORDER[self]


_CONTEXT_ORDER = {PolicyContext.MACHINE: 0, PolicyContext.USER: 1}
