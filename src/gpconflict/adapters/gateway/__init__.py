"""Public interface for the directory gateway adapter."""

from __future__ import annotations

from .client import GatewayAPIError, GatewayClient, GatewayLinkFetcher, GatewaySettingsFetcher
from .schema import LinkPayload, PolicyExportResponse, ScopeLinksResponse, SettingPayload
from .translator import parse_links, parse_policy_export

__all__ = [
    "GatewayAPIError",
    "GatewayClient",
    "GatewayLinkFetcher",
    "GatewaySettingsFetcher",
    "LinkPayload",
    "PolicyExportResponse",
    "ScopeLinksResponse",
    "SettingPayload",
    "parse_links",
    "parse_policy_export",
]
