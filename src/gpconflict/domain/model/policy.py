"""Links, exported settings and the assertions derived from them.

All types here are immutable value objects. They are created once per
resolution run and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .enums import PolicyContext


@dataclass(frozen=True, slots=True, kw_only=True)
class PolicyLink:
    """Association of one policy object with the scope being analysed.

    ``precedence_rank`` follows the directory convention: a lower rank is
    applied later and therefore takes effect over higher ranks.
    """

    policy_id: str
    display_name: str = ""
    enabled: bool = True
    enforced: bool = False
    precedence_rank: int

    @property
    def label(self) -> str:
        return self.display_name or self.policy_id


@dataclass(frozen=True, slots=True, kw_only=True)
class ExportedSetting:
    """One key/value setting as handed over by a settings collaborator."""

    context: PolicyContext
    key_path: str
    value_name: str
    data_type: str
    value: str


class Identity(NamedTuple):
    """Composite key naming "the same setting" across policy objects."""

    context: PolicyContext
    key_path: str
    value_name: str

    @property
    def sort_key(self) -> tuple[int, str, str]:
        return (self.context.sort_index, self.key_path, self.value_name)

    def __str__(self) -> str:
        return f"{self.context}|{self.key_path}|{self.value_name}"


@dataclass(frozen=True, slots=True, kw_only=True)
class SettingAssertion:
    """A setting value asserted by one linked policy object."""

    context: PolicyContext
    key_path: str
    value_name: str
    data_type: str
    value: str
    source_policy_id: str
    source_display_name: str = ""
    source_precedence_rank: int
    source_enforced: bool = False

    @classmethod
    def from_export(cls, setting: ExportedSetting, *, link: PolicyLink) -> SettingAssertion:
        return cls(
            context=setting.context,
            key_path=setting.key_path,
            value_name=setting.value_name,
            data_type=setting.data_type,
            value=setting.value,
            source_policy_id=link.policy_id,
            source_display_name=link.display_name,
            source_precedence_rank=link.precedence_rank,
            source_enforced=link.enforced,
        )

    @property
    def identity(self) -> Identity:
        return Identity(self.context, self.key_path, self.value_name)
