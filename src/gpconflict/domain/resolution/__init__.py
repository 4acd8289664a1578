"""Conflict resolution core for policy objects linked to one scope.

Layered flow of a run:
1) normalize the scope's link list (enabled/enforced filtering, rank order)
2) extract setting assertions per link from the settings collaborator
3) index assertions by (context, key path, value name)
4) keep groups whose contributors disagree on the value
5) pick each group's winner by lowest precedence rank
6) flatten groups into ordered report records
"""

from __future__ import annotations

from .detect import ConflictGroup, detect_conflicts
from .engine import ResolutionEngine
from .errors import AssertionExtractionWarning, ScopeResolutionError, SettingsFetchError
from .extract import ExtractionResult, extract_assertions
from .index import IdentityIndex
from .links import normalize_links
from .report import REPORT_COLUMNS, ConflictRecord, ConflictReport, build_report
from .winner import resolve_winners, select_winner

__all__ = [
    "REPORT_COLUMNS",
    "AssertionExtractionWarning",
    "ConflictGroup",
    "ConflictRecord",
    "ConflictReport",
    "ExtractionResult",
    "IdentityIndex",
    "ResolutionEngine",
    "ScopeResolutionError",
    "SettingsFetchError",
    "build_report",
    "detect_conflicts",
    "extract_assertions",
    "normalize_links",
    "resolve_winners",
    "select_winner",
]
