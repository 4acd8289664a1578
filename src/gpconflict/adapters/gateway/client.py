"""HTTP client and fetchers for the directory gateway API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from urllib.parse import quote
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from gpconflict.adapters.http_resilience import ResilientClient
from gpconflict.config.gateway import GatewayConfig, get_gateway_config
from gpconflict.domain.resolution.errors import ScopeResolutionError, SettingsFetchError

from .schema import ErrorResponse, PolicyExportResponse, ScopeLinksResponse
from .translator import parse_links, parse_policy_export

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from gpconflict.config.http_resilience import ResilienceConfig
    from gpconflict.domain.model import ExportedSetting, PolicyContext, PolicyLink
    from gpconflict.domain.ports import LinkFetcher, PrefetchingSettingsFetcher

log = getLogger(__name__)

type ExportOutcome = PolicyExportResponse | GatewayAPIError


class GatewayAPIError(RuntimeError):
    """Raised when the gateway is unreachable or returns an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _context_params(contexts: frozenset[PolicyContext]) -> list[tuple[str, str]]:
    return [("context", str(context)) for context in sorted(contexts)]


class GatewayClient:
    """Low-level HTTP client for the directory gateway."""

    def __init__(
        self,
        *,
        config: GatewayConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_scope_links(self, scope: str) -> ScopeLinksResponse:
        return asyncio.run(self._fetch_scope_links_async(scope))

    def fetch_policy_export(
        self,
        policy_id: str,
        *,
        contexts: frozenset[PolicyContext],
    ) -> PolicyExportResponse:
        return asyncio.run(self._fetch_policy_export_async(policy_id, contexts=contexts))

    def fetch_policy_exports(
        self,
        policy_ids: Sequence[str],
        *,
        contexts: frozenset[PolicyContext],
    ) -> dict[str, ExportOutcome]:
        """Fetch several exports concurrently through one rate-limited client.

        Failures are returned in place of the export so one bad policy does not
        discard the others.
        """

        return asyncio.run(self._fetch_policy_exports_async(policy_ids, contexts=contexts))

    async def _fetch_scope_links_async(self, scope: str) -> ScopeLinksResponse:
        async with self._client_factory(self._resilience) as client:
            return await self._perform_request(
                client=client,
                url=f"{self._config.base_url}/scopes/links",
                params=[("scope", scope)],
                model=ScopeLinksResponse,
            )

    async def _fetch_policy_export_async(
        self,
        policy_id: str,
        *,
        contexts: frozenset[PolicyContext],
    ) -> PolicyExportResponse:
        async with self._client_factory(self._resilience) as client:
            return await self._request_policy_export(client, policy_id, contexts=contexts)

    async def _fetch_policy_exports_async(
        self,
        policy_ids: Sequence[str],
        *,
        contexts: frozenset[PolicyContext],
    ) -> dict[str, ExportOutcome]:
        unique_ids = list(dict.fromkeys(policy_ids))

        async with self._client_factory(self._resilience) as client:

            async def fetch_one(policy_id: str) -> ExportOutcome:
                try:
                    return await self._request_policy_export(client, policy_id, contexts=contexts)
                except GatewayAPIError as exc:
                    return exc

            outcomes = await asyncio.gather(*(fetch_one(policy_id) for policy_id in unique_ids))
        return dict(zip(unique_ids, outcomes, strict=True))

    async def _request_policy_export(
        self,
        client: ResilientClient,
        policy_id: str,
        *,
        contexts: frozenset[PolicyContext],
    ) -> PolicyExportResponse:
        policy_path = quote(policy_id, safe="")
        return await self._perform_request(
            client=client,
            url=f"{self._config.base_url}/policies/{policy_path}/settings",
            params=_context_params(contexts),
            model=PolicyExportResponse,
        )

    async def _perform_request[ModelT: BaseModel](
        self,
        *,
        client: ResilientClient,
        url: str,
        params: list[tuple[str, str]],
        model: type[ModelT],
    ) -> ModelT:
        try:
            response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise GatewayAPIError(f"Gateway request failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise GatewayAPIError(f"Not found: {url}", status_code=response.status_code)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GatewayAPIError(
                f"Gateway returned HTTP {response.status_code}",
                status_code=response.status_code,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise GatewayAPIError("Gateway returned a non-JSON body") from exc

        if isinstance(payload, dict) and "error" in payload:
            error_payload = ErrorResponse.model_validate(payload)
            log.error("Gateway error %s: %s", error_payload.error, error_payload.message)
            raise GatewayAPIError(error_payload.message or error_payload.error) from None

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise GatewayAPIError(
                f"Malformed {model.__name__} payload: {exc.error_count()} validation error(s)"
            ) from exc


def _default_client() -> GatewayClient:
    return GatewayClient(config=get_gateway_config())


@dataclass(slots=True)
class GatewayLinkFetcher:
    client: GatewayClient = field(default_factory=_default_client)

    def __call__(self, scope: str) -> list[PolicyLink]:
        try:
            response = self.client.fetch_scope_links(scope)
        except GatewayAPIError as exc:
            raise ScopeResolutionError(f"Cannot resolve scope {scope}: {exc}", scope=scope) from exc
        return parse_links(response)


@dataclass(slots=True)
class GatewaySettingsFetcher:
    client: GatewayClient = field(default_factory=_default_client)
    _prefetched: dict[tuple[str, frozenset[PolicyContext]], ExportOutcome] = field(
        default_factory=dict["tuple[str, frozenset[PolicyContext]]", "ExportOutcome"],
        repr=False,
    )

    def prefetch(
        self,
        policy_ids: Sequence[str],
        *,
        contexts: frozenset[PolicyContext],
    ) -> None:
        outcomes = self.client.fetch_policy_exports(policy_ids, contexts=contexts)
        self._prefetched = {
            (policy_id, contexts): outcome for policy_id, outcome in outcomes.items()
        }

    def __call__(
        self,
        policy_id: str,
        *,
        contexts: frozenset[PolicyContext],
    ) -> list[ExportedSetting]:
        outcome = self._prefetched.get((policy_id, contexts))
        if outcome is None:
            try:
                outcome = self.client.fetch_policy_export(policy_id, contexts=contexts)
            except GatewayAPIError as exc:
                outcome = exc

        if isinstance(outcome, GatewayAPIError):
            raise SettingsFetchError(str(outcome), policy_id=policy_id) from outcome
        if outcome.policy_id != policy_id:
            raise SettingsFetchError(
                f"Export belongs to policy {outcome.policy_id}",
                policy_id=policy_id,
            )
        return parse_policy_export(outcome, contexts=contexts)


if TYPE_CHECKING:
    _link_fetcher_check: LinkFetcher = GatewayLinkFetcher()
    _settings_fetcher_check: PrefetchingSettingsFetcher = GatewaySettingsFetcher()
