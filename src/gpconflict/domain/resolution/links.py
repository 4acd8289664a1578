"""Link filtering and ordering."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gpconflict.domain.model import PolicyLink

log = getLogger(__name__)


class NormalizeLinks(Protocol):
    """Select and order the links of a scope for analysis."""

    def __call__(
        self,
        links: Iterable[PolicyLink],
        *,
        enforced_only: bool,
    ) -> tuple[PolicyLink, ...]: ...


def normalize_links(
    links: Iterable[PolicyLink],
    *,
    enforced_only: bool = False,
) -> tuple[PolicyLink, ...]:
    """Drop disabled (and optionally non-enforced) links, then order by rank.

    The sort is stable: links sharing a precedence rank keep their input order.
    Duplicate ranks are preserved as handed over by the collaborator.
    """

    selected: list[PolicyLink] = []
    for link in links:
        if not link.enabled:
            log.debug("Skipping disabled link %s", link.label)
            continue
        if enforced_only and not link.enforced:
            log.debug("Skipping non-enforced link %s", link.label)
            continue
        selected.append(link)
    return tuple(sorted(selected, key=lambda link: link.precedence_rank))
