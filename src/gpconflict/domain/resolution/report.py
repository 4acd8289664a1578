"""Flattened conflict report records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from gpconflict.domain.model import Identity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gpconflict.domain.model import PolicyContext

    from .detect import ConflictGroup
    from .errors import AssertionExtractionWarning

REPORT_COLUMNS: tuple[str, ...] = (
    "context",
    "key_path",
    "value_name",
    "data_type",
    "value",
    "policy_id",
    "policy_name",
    "enforced",
    "precedence_rank",
    "winning_policy_id",
    "winning_policy_name",
    "winning_precedence_rank",
    "winning_value",
    "is_conflicting",
)


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictRecord:
    """One contributing assertion of a divergent group, annotated with its winner."""

    context: PolicyContext
    key_path: str
    value_name: str
    data_type: str
    value: str
    source_policy_id: str
    source_display_name: str
    source_enforced: bool
    source_precedence_rank: int
    winning_policy_id: str
    winning_display_name: str
    winning_precedence_rank: int
    winning_value: str
    is_conflicting: bool

    @property
    def identity(self) -> Identity:
        return Identity(self.context, self.key_path, self.value_name)

    @property
    def sort_key(self) -> tuple[int, str, str, int]:
        return (*self.identity.sort_key, self.source_precedence_rank)

    def as_row(self) -> dict[str, object]:
        return {
            "context": str(self.context),
            "key_path": self.key_path,
            "value_name": self.value_name,
            "data_type": self.data_type,
            "value": self.value,
            "policy_id": self.source_policy_id,
            "policy_name": self.source_display_name,
            "enforced": self.source_enforced,
            "precedence_rank": self.source_precedence_rank,
            "winning_policy_id": self.winning_policy_id,
            "winning_policy_name": self.winning_display_name,
            "winning_precedence_rank": self.winning_precedence_rank,
            "winning_value": self.winning_value,
            "is_conflicting": self.is_conflicting,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictReport:
    """Result of one resolution run for a scope.

    ``warnings`` lists policy objects skipped during extraction. Records are
    always computed from the remaining links.
    """

    scope: str
    records: tuple[ConflictRecord, ...] = ()
    warnings: tuple[AssertionExtractionWarning, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def identities(self) -> tuple[Identity, ...]:
        seen: dict[Identity, None] = {}
        for record in self.records:
            seen.setdefault(record.identity, None)
        return tuple(seen)

    @property
    def group_count(self) -> int:
        return len(self.identities)

    def to_rows(self) -> list[dict[str, object]]:
        return [record.as_row() for record in self.records]


class BuildReport(Protocol):
    """Flatten resolved conflict groups into an ordered report."""

    def __call__(
        self,
        scope: str,
        groups: Iterable[ConflictGroup],
        *,
        warnings: Iterable[AssertionExtractionWarning] = (),
    ) -> ConflictReport: ...


def build_report(
    scope: str,
    groups: Iterable[ConflictGroup],
    *,
    warnings: Iterable[AssertionExtractionWarning] = (),
) -> ConflictReport:
    records: list[ConflictRecord] = []
    for group in groups:
        winner = group.winner
        if winner is None:
            raise ValueError(f"Conflict group {group.identity} has no resolved winner")
        records.extend(
            ConflictRecord(
                context=assertion.context,
                key_path=assertion.key_path,
                value_name=assertion.value_name,
                data_type=assertion.data_type,
                value=assertion.value,
                source_policy_id=assertion.source_policy_id,
                source_display_name=assertion.source_display_name,
                source_enforced=assertion.source_enforced,
                source_precedence_rank=assertion.source_precedence_rank,
                winning_policy_id=winner.source_policy_id,
                winning_display_name=winner.source_display_name,
                winning_precedence_rank=winner.source_precedence_rank,
                winning_value=winner.value,
                is_conflicting=group.is_conflicting(assertion),
            )
            for assertion in group.assertions
        )
    records.sort(key=lambda record: record.sort_key)
    return ConflictReport(scope=scope, records=tuple(records), warnings=tuple(warnings))
