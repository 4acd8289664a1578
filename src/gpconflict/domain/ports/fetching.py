"""Ports for fetching scope links and policy settings from a directory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gpconflict.domain.model import ExportedSetting, PolicyContext, PolicyLink


@runtime_checkable
class LinkFetcher(Protocol):
    """Return the ordered link list for ``scope``.

    Implementations raise ``ScopeResolutionError`` when the scope cannot be
    resolved at all. An empty list is a valid answer.
    """

    def __call__(self, scope: str) -> Sequence[PolicyLink]: ...


@runtime_checkable
class SettingsFetcher(Protocol):
    """Return the exported settings of one policy object.

    Implementations raise ``SettingsFetchError`` when the export cannot be
    retrieved or parsed; callers treat that as recoverable.
    """

    def __call__(
        self,
        policy_id: str,
        *,
        contexts: frozenset[PolicyContext],
    ) -> Sequence[ExportedSetting]: ...


@runtime_checkable
class PrefetchingSettingsFetcher(SettingsFetcher, Protocol):
    """Settings fetcher that can retrieve many exports ahead of extraction."""

    def prefetch(
        self,
        policy_ids: Sequence[str],
        *,
        contexts: frozenset[PolicyContext],
    ) -> None: ...


__all__ = ["LinkFetcher", "PrefetchingSettingsFetcher", "SettingsFetcher"]
