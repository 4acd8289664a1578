"""Shared fixtures for directory gateway adapter tests."""

from __future__ import annotations

import pytest

from gpconflict.adapters.gateway import GatewayClient
from gpconflict.adapters.http_resilience import ResilienceConfig
from gpconflict.config import GatewayConfig
from tests.helpers.gateway import BASE_URL, ClientBuilder, Handler, make_client_factory


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(
        base_url=BASE_URL,
        token=None,
        resilience=ResilienceConfig(name="gateway-test", base_url=BASE_URL, cache=None),
    )


@pytest.fixture
def build_client(gateway_config: GatewayConfig) -> ClientBuilder:
    def build(handler: Handler) -> GatewayClient:
        return GatewayClient(config=gateway_config, client_factory=make_client_factory(handler))

    return build


@pytest.fixture
def export_payload() -> dict[str, object]:
    return {
        "policyId": "{31B2F340-016D-11D2-945F-00C04FB984F9}",
        "displayName": "Default Domain Policy",
        "machine": [
            {
                "keyPath": r"HKLM\Software\Policies\Microsoft\Windows\WindowsUpdate\AU",
                "valueName": "NoAutoUpdate",
                "type": "REG_DWORD",
                "value": 1,
            },
            {
                "keyPath": r"HKLM\Software\Policies\Example",
                "valueName": "Servers",
                "type": "REG_MULTI_SZ",
                "value": ["alpha", "beta"],
            },
        ],
        "user": [
            {
                "keyPath": r"HKCU\Software\Policies\Example",
                "valueName": "",
                "type": "REG_SZ",
                "value": "default",
            }
        ],
    }
