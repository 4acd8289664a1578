"""Translate gateway payloads into domain values."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from gpconflict.domain.model import ExportedSetting, PolicyContext, PolicyLink

if TYPE_CHECKING:
    from .schema import LinkPayload, PolicyExportResponse, ScopeLinksResponse, SettingPayload

log = getLogger(__name__)


def parse_link(payload: LinkPayload) -> PolicyLink:
    return PolicyLink(
        policy_id=payload.policy_id,
        display_name=payload.display_name,
        enabled=payload.enabled,
        enforced=payload.enforced,
        precedence_rank=payload.precedence,
    )


def parse_links(response: ScopeLinksResponse) -> list[PolicyLink]:
    return [parse_link(payload) for payload in response.links]


def parse_setting(payload: SettingPayload, *, context: PolicyContext) -> ExportedSetting:
    return ExportedSetting(
        context=context,
        key_path=payload.key_path,
        value_name=payload.value_name,
        data_type=payload.data_type,
        value=payload.value,
    )


def parse_policy_export(
    response: PolicyExportResponse,
    *,
    contexts: frozenset[PolicyContext],
) -> list[ExportedSetting]:
    """Return settings of the requested contexts, machine settings first."""

    settings: list[ExportedSetting] = []
    if PolicyContext.MACHINE in contexts:
        settings.extend(
            parse_setting(payload, context=PolicyContext.MACHINE) for payload in response.machine
        )
    if PolicyContext.USER in contexts:
        settings.extend(
            parse_setting(payload, context=PolicyContext.USER) for payload in response.user
        )
    log.debug(
        "Parsed %d settings from policy %s (%s)",
        len(settings),
        response.display_name or response.policy_id,
        response.policy_id,
    )
    return settings
