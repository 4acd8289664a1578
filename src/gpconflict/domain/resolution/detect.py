"""Conflict detection over the identity index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gpconflict.domain.model import Identity, SettingAssertion

    from .index import IdentityIndex


@dataclass(slots=True)
class ConflictGroup:
    """All assertions sharing one identity, in link precedence order.

    ``winner`` stays unset until winner resolution assigns it exactly once.
    """

    identity: Identity
    assertions: tuple[SettingAssertion, ...]
    distinct_value_count: int = field(init=False)
    winner: SettingAssertion | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if any(assertion.identity != self.identity for assertion in self.assertions):
            raise ValueError(f"Conflict group {self.identity} holds a foreign assertion")
        self.distinct_value_count = len({assertion.value for assertion in self.assertions})

    @property
    def is_divergent(self) -> bool:
        return len(self.assertions) >= 2 and self.distinct_value_count >= 2

    def assign_winner(self, winner: SettingAssertion) -> None:
        if self.winner is not None:
            raise ValueError(f"Winner of {self.identity} has already been resolved")
        if winner not in self.assertions:
            raise ValueError(f"Winner of {self.identity} must be one of its assertions")
        self.winner = winner

    def is_conflicting(self, assertion: SettingAssertion) -> bool:
        """Return whether ``assertion`` comes from a policy other than the winner's."""

        if self.winner is None:
            raise ValueError(f"Winner of {self.identity} has not been resolved")
        return assertion.source_policy_id != self.winner.source_policy_id


class DetectConflicts(Protocol):
    """Partition index groups into divergent conflict groups."""

    def __call__(self, index: IdentityIndex) -> tuple[ConflictGroup, ...]: ...


def detect_conflicts(index: IdentityIndex) -> tuple[ConflictGroup, ...]:
    """Return groups whose contributors disagree on the value.

    Values compare as exact strings; no data-type specific normalization is
    applied, so ``"1"`` and ``"0x1"`` count as different values.
    """

    conflicts: list[ConflictGroup] = []
    for identity, assertions in index.groups():
        if len(assertions) < 2:
            continue
        group = ConflictGroup(identity=identity, assertions=assertions)
        if group.is_divergent:
            conflicts.append(group)
    return tuple(conflicts)
