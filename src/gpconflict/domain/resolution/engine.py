"""Orchestrator for the conflict resolution subsystem.

The engine composes the stage functions and the two directory collaborators
but does not prescribe concrete adapters. One engine instance owns no state
between runs; every ``resolve`` call builds its own identity index.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gpconflict.domain.ports import PrefetchingSettingsFetcher

from .detect import DetectConflicts, detect_conflicts
from .extract import ExtractAssertions, extract_assertions
from .index import IdentityIndex
from .links import NormalizeLinks, normalize_links
from .report import BuildReport, build_report
from .winner import ResolveWinners, resolve_winners

if TYPE_CHECKING:
    from gpconflict.config.resolution import ResolutionConfig
    from gpconflict.domain.ports import LinkFetcher, SettingsFetcher

    from .report import ConflictReport

log = getLogger(__name__)


@dataclass(slots=True)
class ResolutionEngine:
    """Run full resolution from a scope's link list to a conflict report."""

    fetch_links: LinkFetcher
    fetch_settings: SettingsFetcher
    normalize: NormalizeLinks = normalize_links
    extract: ExtractAssertions = extract_assertions
    detect: DetectConflicts = detect_conflicts
    resolve_winners: ResolveWinners = resolve_winners
    build_report: BuildReport = build_report

    def resolve(self, scope: str, config: ResolutionConfig) -> ConflictReport:
        """Resolve setting conflicts among the policy objects linked to ``scope``.

        Raises ``ScopeResolutionError`` when the link list cannot be fetched; no
        partial report is produced in that case.
        """

        contexts = config.contexts
        raw_links = self.fetch_links(scope)
        if not raw_links:
            log.warning("No policy links found for scope %s", scope)

        links = self.normalize(raw_links, enforced_only=config.enforced_only)
        log.info(
            "Analysing %d of %d linked policies for %s (enforced_only=%s, contexts=%s)",
            len(links),
            len(raw_links),
            scope,
            config.enforced_only,
            ",".join(sorted(contexts)),
        )

        if links and isinstance(self.fetch_settings, PrefetchingSettingsFetcher):
            self.fetch_settings.prefetch(
                [link.policy_id for link in links],
                contexts=contexts,
            )

        extraction = self.extract(links, fetch_settings=self.fetch_settings, contexts=contexts)
        index = IdentityIndex.from_assertions(extraction.assertions)
        groups = self.detect(index)
        self.resolve_winners(groups)
        report = self.build_report(scope, groups, warnings=extraction.warnings)

        log.info(
            "Resolved %s: assertions=%d, identities=%d, conflicts=%d, records=%d, warnings=%d",
            scope,
            index.assertion_count,
            len(index),
            len(groups),
            len(report.records),
            len(report.warnings),
        )
        return report
