"""Public domain model surface."""

from __future__ import annotations

from gpconflict.domain.model.enums import PolicyContext
from gpconflict.domain.model.policy import (
    ExportedSetting,
    Identity,
    PolicyLink,
    SettingAssertion,
)

__all__ = [
    "ExportedSetting",
    "Identity",
    "PolicyContext",
    "PolicyLink",
    "SettingAssertion",
]
