"""Reusable fakes and builders for resolution tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gpconflict.domain.model import ExportedSetting, PolicyContext, PolicyLink, SettingAssertion
from gpconflict.domain.resolution import ScopeResolutionError, SettingsFetchError

if TYPE_CHECKING:
    from collections.abc import Sequence

KEY_PATH = r"HKLM\Software\Policies\Example\Key"


def make_link(
    policy_id: str,
    rank: int,
    *,
    enabled: bool = True,
    enforced: bool = False,
    display_name: str | None = None,
) -> PolicyLink:
    return PolicyLink(
        policy_id=policy_id,
        display_name=display_name if display_name is not None else f"Policy {policy_id}",
        enabled=enabled,
        enforced=enforced,
        precedence_rank=rank,
    )


def make_setting(
    value: str,
    *,
    key_path: str = KEY_PATH,
    value_name: str = "Value",
    context: PolicyContext = PolicyContext.MACHINE,
    data_type: str = "REG_SZ",
) -> ExportedSetting:
    return ExportedSetting(
        context=context,
        key_path=key_path,
        value_name=value_name,
        data_type=data_type,
        value=value,
    )


@dataclass
class FakeDirectory:
    """In-memory link and settings collaborator recording every call."""

    links: list[PolicyLink] = field(default_factory=list)
    exports: dict[str, list[ExportedSetting]] = field(default_factory=dict)
    failing_policies: set[str] = field(default_factory=set)
    scope_error: bool = False
    link_calls: list[str] = field(default_factory=list)
    settings_calls: list[tuple[str, frozenset[PolicyContext]]] = field(default_factory=list)

    def add(self, link: PolicyLink, *settings: ExportedSetting) -> None:
        self.links.append(link)
        self.exports[link.policy_id] = list(settings)

    def fetch_links(self, scope: str) -> list[PolicyLink]:
        self.link_calls.append(scope)
        if self.scope_error:
            raise ScopeResolutionError(f"Scope {scope} is unreachable", scope=scope)
        return list(self.links)

    def fetch_settings(
        self,
        policy_id: str,
        *,
        contexts: frozenset[PolicyContext],
    ) -> Sequence[ExportedSetting]:
        self.settings_calls.append((policy_id, contexts))
        if policy_id in self.failing_policies:
            raise SettingsFetchError("export could not be parsed", policy_id=policy_id)
        return list(self.exports.get(policy_id, ()))


def make_assertion(
    policy_id: str,
    rank: int,
    value: str,
    *,
    value_name: str = "Value",
    context: PolicyContext = PolicyContext.MACHINE,
    enforced: bool = False,
) -> SettingAssertion:
    setting = make_setting(value, value_name=value_name, context=context)
    return SettingAssertion.from_export(setting, link=make_link(policy_id, rank, enforced=enforced))
