"""Directory gateway configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CACHE_BACKENDS, CacheConfig, RateLimit, ResilienceConfig
from .storage import get_storage_config

GATEWAY_TIMEOUT_SECONDS = 15.0
GATEWAY_MAX_CALLS_PER_SECOND = 8
CACHE_DISABLED = "off"


@dataclass(frozen=True)
class GatewayConfig:
    """Holds the directory gateway endpoint and client resilience settings."""

    base_url: str
    token: str | None
    resilience: ResilienceConfig


def _default_headers(token: str | None) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def get_cache_config() -> CacheConfig | None:
    """Read ``GPCONFLICT_HTTP_CACHE`` (memory, sqlite or off; memory by default).

    The sqlite cache lives in the data directory so repeated runs reuse exports.
    """

    raw = (optional_env_var("GPCONFLICT_HTTP_CACHE") or "memory").lower()
    if raw == CACHE_DISABLED:
        return None
    if raw == "memory":
        return CacheConfig(backend="memory")
    if raw == "sqlite":
        cache_path = get_storage_config().http_cache_path()
        return CacheConfig(backend="sqlite", sqlite_path=str(cache_path))
    choices = ", ".join((*CACHE_BACKENDS, CACHE_DISABLED))
    raise ConfigurationError(f"GPCONFLICT_HTTP_CACHE must be one of {choices}, got {raw!r}")


def get_gateway_config(*, resilience: ResilienceConfig | None = None) -> GatewayConfig:
    values = require_env_vars(("GPCONFLICT_GATEWAY_URL",))
    base_url = values["GPCONFLICT_GATEWAY_URL"].strip().rstrip("/")
    token = optional_env_var("GPCONFLICT_GATEWAY_TOKEN")
    return GatewayConfig(
        base_url=base_url,
        token=token,
        resilience=resilience
        or ResilienceConfig(
            name="gateway",
            base_url=base_url,
            timeout_seconds=GATEWAY_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=GATEWAY_MAX_CALLS_PER_SECOND, per_seconds=1.0),
            cache=get_cache_config(),
            default_headers=_default_headers(token),
        ),
    )
