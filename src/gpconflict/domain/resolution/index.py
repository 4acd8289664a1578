"""Per-run index of assertions grouped by setting identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from gpconflict.domain.model import Identity, SettingAssertion


@dataclass(slots=True)
class IdentityIndex:
    """Container owning every assertion of one resolution run.

    Groups keep arrival order, which is ascending link precedence when fed
    from the extractor. Nothing is ever dropped here; uniform or single
    contributor groups are filtered by conflict detection.
    """

    _assertions_by_identity: dict[Identity, list[SettingAssertion]] = field(
        default_factory=dict["Identity", "list[SettingAssertion]"], repr=False
    )
    _assertion_count: int = field(default=0, repr=False)

    @classmethod
    def from_assertions(cls, assertions: Iterable[SettingAssertion]) -> IdentityIndex:
        index = cls()
        index.extend(assertions)
        return index

    def add(self, assertion: SettingAssertion) -> None:
        self._assertions_by_identity.setdefault(assertion.identity, []).append(assertion)
        self._assertion_count += 1

    def extend(self, assertions: Iterable[SettingAssertion]) -> None:
        for assertion in assertions:
            self.add(assertion)

    @property
    def identities(self) -> tuple[Identity, ...]:
        return tuple(self._assertions_by_identity)

    @property
    def assertion_count(self) -> int:
        return self._assertion_count

    def assertions_for(self, identity: Identity) -> tuple[SettingAssertion, ...]:
        return tuple(self._assertions_by_identity.get(identity, ()))

    def groups(self) -> Iterator[tuple[Identity, tuple[SettingAssertion, ...]]]:
        for identity, assertions in self._assertions_by_identity.items():
            yield identity, tuple(assertions)

    def __len__(self) -> int:
        return len(self._assertions_by_identity)
