from __future__ import annotations

from pathlib import Path

import pytest

from gpconflict import app as app_module
from gpconflict.config import ConfigurationError, MissingConfigurationError, ResolutionConfig
from gpconflict.domain.model import PolicyContext
from gpconflict.domain.resolution import ScopeResolutionError
from tests.helpers.directory import FakeDirectory, make_link, make_setting

SNAPSHOT_PATH = Path(__file__).resolve().parents[1] / "data" / "snapshot.json"
SCOPE = "OU=Workstations,DC=example,DC=com"


def test_resolve_scope_conflicts_from_snapshot() -> None:
    report = app_module.resolve_scope_conflicts(
        SCOPE,
        config=ResolutionConfig(),
        snapshot_path=SNAPSHOT_PATH,
    )

    assert report.group_count == 2
    assert [
        (record.context, record.value_name, record.source_policy_id, record.is_conflicting)
        for record in report.records
    ] == [
        (PolicyContext.MACHINE, "NoAutoUpdate", "{B2}", False),
        (PolicyContext.MACHINE, "NoAutoUpdate", "{A1}", True),
        (PolicyContext.USER, "ScreenSaveTimeOut", "{B2}", False),
        (PolicyContext.USER, "ScreenSaveTimeOut", "{A1}", True),
    ]
    assert {record.winning_display_name for record in report.records} == {"Security Hardening"}
    assert [warning.policy_id for warning in report.warnings] == ["{D4}"]


def test_resolve_scope_conflicts_enforced_only_snapshot() -> None:
    report = app_module.resolve_scope_conflicts(
        SCOPE,
        config=ResolutionConfig(enforced_only=True),
        snapshot_path=SNAPSHOT_PATH,
    )

    assert report.is_empty
    assert report.warnings == ()


def test_resolve_scope_conflicts_unknown_scope_fails() -> None:
    with pytest.raises(ScopeResolutionError):
        app_module.resolve_scope_conflicts(
            "OU=Nowhere",
            config=ResolutionConfig(),
            snapshot_path=SNAPSHOT_PATH,
        )


def test_resolve_scope_conflicts_prefers_explicit_fetchers() -> None:
    directory = FakeDirectory()
    directory.add(make_link("a", 1), make_setting("A"))
    directory.add(make_link("b", 2), make_setting("B"))

    report = app_module.resolve_scope_conflicts(
        "OU=Injected",
        config=ResolutionConfig(),
        snapshot_path=SNAPSHOT_PATH,
        link_fetcher=directory.fetch_links,
        settings_fetcher=directory.fetch_settings,
    )

    assert directory.link_calls == ["OU=Injected"]
    assert len(report.records) == 2


def test_resolve_scope_conflicts_uses_gateway_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GPCONFLICT_GATEWAY_URL", raising=False)

    with pytest.raises(MissingConfigurationError):
        app_module.resolve_scope_conflicts(SCOPE, config=ResolutionConfig())


def test_resolve_scope_conflicts_reads_config_from_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("GPCONFLICT_INCLUDE_MACHINE", "no")
    monkeypatch.setenv("GPCONFLICT_INCLUDE_USER", "no")
    directory = FakeDirectory()

    with pytest.raises(ConfigurationError):
        app_module.resolve_scope_conflicts(
            SCOPE,
            link_fetcher=directory.fetch_links,
            settings_fetcher=directory.fetch_settings,
        )

    assert directory.link_calls == []
