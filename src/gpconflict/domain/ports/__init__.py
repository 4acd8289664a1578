"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import LinkFetcher, PrefetchingSettingsFetcher, SettingsFetcher

__all__ = ["LinkFetcher", "PrefetchingSettingsFetcher", "SettingsFetcher"]
