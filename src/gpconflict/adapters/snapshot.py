"""Directory collaborators backed by a JSON snapshot file.

A snapshot captures the link lists of one or more scopes together with the
settings exports of the linked policy objects, using the gateway payload
shapes::

    {
        "scopes": {"OU=Workstations,DC=example,DC=com": [{"policyId": ..., ...}]},
        "policies": {"<policyId>": {"policyId": ..., "machine": [...], "user": [...]}}
    }

Link lists are validated eagerly per scope; policy exports are validated
lazily so one malformed export only affects that policy.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from gpconflict.adapters.gateway.schema import PolicyExportResponse, ScopeLinksResponse
from gpconflict.adapters.gateway.translator import parse_links, parse_policy_export
from gpconflict.domain.resolution.errors import ScopeResolutionError, SettingsFetchError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gpconflict.domain.model import ExportedSetting, PolicyContext, PolicyLink
    from gpconflict.domain.ports import LinkFetcher, SettingsFetcher

log = getLogger(__name__)


class SnapshotError(RuntimeError):
    """Raised when a snapshot file cannot be read as a whole."""


@dataclass(slots=True, frozen=True)
class DirectorySnapshot:
    scopes: Mapping[str, object] = field(default_factory=dict["str", "object"])
    policies: Mapping[str, object] = field(default_factory=dict["str", "object"])

    @classmethod
    def load(cls, path: Path | str) -> DirectorySnapshot:
        snapshot_path = Path(path)
        try:
            with snapshot_path.open(encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Cannot read snapshot {snapshot_path}: {exc}") from exc
        return cls.from_payload(payload)

    @classmethod
    def from_payload(cls, payload: object) -> DirectorySnapshot:
        if not isinstance(payload, dict):
            raise SnapshotError("Snapshot root must be a JSON object")
        data = cast(dict[str, object], payload)
        scopes = data.get("scopes", {})
        policies = data.get("policies", {})
        if not isinstance(scopes, dict) or not isinstance(policies, dict):
            raise SnapshotError("Snapshot 'scopes' and 'policies' must be JSON objects")
        return cls(
            scopes=cast(dict[str, object], scopes),
            policies=cast(dict[str, object], policies),
        )


@dataclass(slots=True)
class SnapshotLinkFetcher:
    snapshot: DirectorySnapshot

    def __call__(self, scope: str) -> list[PolicyLink]:
        if scope not in self.snapshot.scopes:
            raise ScopeResolutionError(f"Scope {scope} is not present in snapshot", scope=scope)
        try:
            response = ScopeLinksResponse.model_validate(
                {"scope": scope, "links": self.snapshot.scopes[scope]}
            )
        except ValidationError as exc:
            raise ScopeResolutionError(
                f"Malformed link list for scope {scope}: {exc.error_count()} validation error(s)",
                scope=scope,
            ) from exc
        return parse_links(response)


@dataclass(slots=True)
class SnapshotSettingsFetcher:
    snapshot: DirectorySnapshot

    def __call__(
        self,
        policy_id: str,
        *,
        contexts: frozenset[PolicyContext],
    ) -> list[ExportedSetting]:
        raw_export = self.snapshot.policies.get(policy_id)
        if raw_export is None:
            raise SettingsFetchError("Policy export missing from snapshot", policy_id=policy_id)
        try:
            response = PolicyExportResponse.model_validate(raw_export)
        except ValidationError as exc:
            raise SettingsFetchError(
                f"Malformed policy export: {exc.error_count()} validation error(s)",
                policy_id=policy_id,
            ) from exc
        if response.policy_id != policy_id:
            raise SettingsFetchError(
                f"Export belongs to policy {response.policy_id}",
                policy_id=policy_id,
            )
        return parse_policy_export(response, contexts=contexts)


if TYPE_CHECKING:
    _link_fetcher_check: LinkFetcher = SnapshotLinkFetcher(DirectorySnapshot())
    _settings_fetcher_check: SettingsFetcher = SnapshotSettingsFetcher(DirectorySnapshot())
