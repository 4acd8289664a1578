from __future__ import annotations

from pathlib import Path

import pytest

from gpconflict.config import (
    ConfigurationError,
    MissingConfigurationError,
    ResolutionConfig,
    env_flag,
    get_cache_config,
    get_gateway_config,
    get_resolution_config,
    get_storage_config,
    require_env_vars,
)
from gpconflict.domain.model import PolicyContext


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("BLANK_VAR", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "BLANK_VAR"])

    assert "BLANK_VAR, MISSING_VAR" in str(exc.value)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), ("yes", True), ("off", False), ("0", False), ("No", False)],
)
def test_env_flag_parses_booleans(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected: bool,
) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert env_flag("EXAMPLE_FLAG", default=not expected) is expected


def test_env_flag_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")

    with pytest.raises(ConfigurationError, match="EXAMPLE_FLAG"):
        env_flag("EXAMPLE_FLAG", default=False)


def test_resolution_config_defaults_include_both_contexts() -> None:
    config = ResolutionConfig()

    assert config.enforced_only is False
    assert config.contexts == frozenset({PolicyContext.MACHINE, PolicyContext.USER})


def test_resolution_config_requires_a_context() -> None:
    with pytest.raises(ConfigurationError, match="At least one"):
        ResolutionConfig(include_machine=False, include_user=False)


def test_get_resolution_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPCONFLICT_ENFORCED_ONLY", "true")
    monkeypatch.setenv("GPCONFLICT_INCLUDE_USER", "0")
    monkeypatch.delenv("GPCONFLICT_INCLUDE_MACHINE", raising=False)

    config = get_resolution_config()

    assert config.enforced_only is True
    assert config.contexts == frozenset({PolicyContext.MACHINE})


def test_get_resolution_config_rejects_disabling_everything(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("GPCONFLICT_INCLUDE_USER", "off")
    monkeypatch.setenv("GPCONFLICT_INCLUDE_MACHINE", "off")

    with pytest.raises(ConfigurationError):
        get_resolution_config()


def test_get_gateway_config_requires_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GPCONFLICT_GATEWAY_URL", raising=False)

    with pytest.raises(MissingConfigurationError, match="GPCONFLICT_GATEWAY_URL"):
        get_gateway_config()


def test_get_gateway_config_builds_auth_headers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPCONFLICT_GATEWAY_URL", "https://gateway.example.test/api/")
    monkeypatch.setenv("GPCONFLICT_GATEWAY_TOKEN", "secret")

    config = get_gateway_config()

    assert config.base_url == "https://gateway.example.test/api"
    assert config.resilience.base_url == config.base_url
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["Authorization"] == "Bearer secret"


def test_get_gateway_config_without_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPCONFLICT_GATEWAY_URL", "https://gateway.example.test")
    monkeypatch.delenv("GPCONFLICT_GATEWAY_TOKEN", raising=False)

    config = get_gateway_config()

    assert config.token is None
    assert config.resilience.default_headers is not None
    assert "Authorization" not in config.resilience.default_headers


def test_storage_config_honours_data_dir_override(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("GPCONFLICT_DATA_DIR", str(tmp_path / "data"))

    storage = get_storage_config()
    cache_path = storage.http_cache_path()

    assert cache_path == (tmp_path / "data" / "http_cache.db").resolve()
    assert cache_path.parent.is_dir()


def test_cache_defaults_to_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GPCONFLICT_HTTP_CACHE", raising=False)

    cache = get_cache_config()

    assert cache is not None
    assert cache.backend == "memory"
    assert cache.sqlite_path is None


def test_sqlite_cache_lives_in_data_dir(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("GPCONFLICT_HTTP_CACHE", "SQLite")
    monkeypatch.setenv("GPCONFLICT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("GPCONFLICT_GATEWAY_URL", "https://gateway.example.test")

    cache = get_gateway_config().resilience.cache

    assert cache is not None
    assert cache.backend == "sqlite"
    assert cache.sqlite_path == str((tmp_path / "data" / "http_cache.db").resolve())


def test_cache_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPCONFLICT_HTTP_CACHE", "off")

    assert get_cache_config() is None


def test_unknown_cache_backend_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPCONFLICT_HTTP_CACHE", "redis")

    with pytest.raises(ConfigurationError, match="GPCONFLICT_HTTP_CACHE"):
        get_cache_config()
