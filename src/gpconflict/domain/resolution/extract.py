"""Assertion extraction from per-policy settings exports.

Each normalized link is visited in order. Its exported settings are pulled
from the settings collaborator, restricted to the selected contexts and
stamped with the link's metadata. A policy whose export cannot be fetched or
fails validation contributes nothing and is reported as a warning instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from gpconflict.domain.model import Identity, SettingAssertion

from .errors import AssertionExtractionWarning, SettingsFetchError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from gpconflict.domain.model import ExportedSetting, PolicyContext, PolicyLink
    from gpconflict.domain.ports import SettingsFetcher

log = getLogger(__name__)


@dataclass(slots=True)
class ExtractionResult:
    assertions: list[SettingAssertion] = field(default_factory=list["SettingAssertion"])
    warnings: list[AssertionExtractionWarning] = field(
        default_factory=list["AssertionExtractionWarning"]
    )


class ExtractAssertions(Protocol):
    """Turn ordered links into stamped setting assertions."""

    def __call__(
        self,
        links: Iterable[PolicyLink],
        *,
        fetch_settings: SettingsFetcher,
        contexts: frozenset[PolicyContext],
    ) -> ExtractionResult: ...


def extract_assertions(
    links: Iterable[PolicyLink],
    *,
    fetch_settings: SettingsFetcher,
    contexts: frozenset[PolicyContext],
) -> ExtractionResult:
    result = ExtractionResult()
    for link in links:
        try:
            settings = fetch_settings(link.policy_id, contexts=contexts)
        except SettingsFetchError as exc:
            _skip(result, link, reason=str(exc))
            continue

        selected = [setting for setting in settings if setting.context in contexts]
        problem = _validate_settings(selected)
        if problem is not None:
            _skip(result, link, reason=problem)
            continue

        result.assertions.extend(
            SettingAssertion.from_export(setting, link=link) for setting in selected
        )
    return result


def _skip(result: ExtractionResult, link: PolicyLink, *, reason: str) -> None:
    log.warning("Skipping settings of policy %s (%s): %s", link.label, link.policy_id, reason)
    result.warnings.append(
        AssertionExtractionWarning(
            policy_id=link.policy_id,
            display_name=link.display_name,
            reason=reason,
        )
    )


def _validate_settings(settings: Sequence[ExportedSetting]) -> str | None:
    seen: set[Identity] = set()
    for setting in settings:
        if not setting.key_path.strip():
            return "setting with blank key path"
        identity = Identity(setting.context, setting.key_path, setting.value_name)
        if identity in seen:
            return f"setting asserted more than once: {identity}"
        seen.add(identity)
    return None
