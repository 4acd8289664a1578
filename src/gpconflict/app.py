"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from gpconflict.adapters.gateway import GatewayClient, GatewayLinkFetcher, GatewaySettingsFetcher
from gpconflict.adapters.snapshot import (
    DirectorySnapshot,
    SnapshotLinkFetcher,
    SnapshotSettingsFetcher,
)
from gpconflict.config import get_gateway_config, get_resolution_config
from gpconflict.domain.resolution import ResolutionEngine

if TYPE_CHECKING:
    from pathlib import Path

    from gpconflict.config import ResolutionConfig
    from gpconflict.domain.ports import LinkFetcher, SettingsFetcher
    from gpconflict.domain.resolution import ConflictReport

log = getLogger(__name__)


def build_snapshot_fetchers(path: Path | str) -> tuple[LinkFetcher, SettingsFetcher]:
    snapshot = DirectorySnapshot.load(path)
    log.info(
        "Loaded snapshot %s: scopes=%d, policies=%d",
        path,
        len(snapshot.scopes),
        len(snapshot.policies),
    )
    return SnapshotLinkFetcher(snapshot), SnapshotSettingsFetcher(snapshot)


def build_gateway_fetchers() -> tuple[LinkFetcher, SettingsFetcher]:
    client = GatewayClient(config=get_gateway_config())
    return GatewayLinkFetcher(client), GatewaySettingsFetcher(client)


def resolve_scope_conflicts(
    scope: str,
    *,
    config: ResolutionConfig | None = None,
    snapshot_path: Path | str | None = None,
    link_fetcher: LinkFetcher | None = None,
    settings_fetcher: SettingsFetcher | None = None,
) -> ConflictReport:
    """Resolve setting conflicts for ``scope`` using the configured collaborators.

    Explicit fetchers take priority, then a snapshot file; otherwise the
    directory gateway from the environment is used. Configuration is
    validated before any collaborator is built.
    """

    effective_config = config or get_resolution_config()
    if link_fetcher is None or settings_fetcher is None:
        if snapshot_path is not None:
            default_links, default_settings = build_snapshot_fetchers(snapshot_path)
        else:
            default_links, default_settings = build_gateway_fetchers()
        link_fetcher = link_fetcher or default_links
        settings_fetcher = settings_fetcher or default_settings

    engine = ResolutionEngine(fetch_links=link_fetcher, fetch_settings=settings_fetcher)
    return engine.resolve(scope, effective_config)
