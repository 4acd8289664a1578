"""Winner selection for divergent conflict groups.

The effective assertion is the one from the link with the lowest precedence
rank. The ``enforced`` flag is carried through to reports but does not take
part in the selection. Equal ranks resolve to the first assertion in group
order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gpconflict.domain.model import SettingAssertion

    from .detect import ConflictGroup


class ResolveWinners(Protocol):
    """Assign the effective assertion of every conflict group."""

    def __call__(self, groups: Iterable[ConflictGroup]) -> None: ...


def select_winner(assertions: Iterable[SettingAssertion]) -> SettingAssertion:
    # min() keeps the first of equal keys, which gives first-seen-wins on ties.
    return min(assertions, key=lambda assertion: assertion.source_precedence_rank)


def resolve_winners(groups: Iterable[ConflictGroup]) -> None:
    for group in groups:
        group.assign_winner(select_winner(group.assertions))
