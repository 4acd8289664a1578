"""Switches controlling one conflict resolution run."""

from __future__ import annotations

from dataclasses import dataclass

from gpconflict.domain.model import PolicyContext

from .env import env_flag
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ResolutionConfig:
    """Link filtering and context selection for a run.

    At least one context must be included; otherwise nothing could be analysed
    and the run is rejected before any collaborator is contacted.
    """

    enforced_only: bool = False
    include_machine: bool = True
    include_user: bool = True

    def __post_init__(self) -> None:
        if not (self.include_machine or self.include_user):
            raise ConfigurationError("At least one of machine or user settings must be included")

    @property
    def contexts(self) -> frozenset[PolicyContext]:
        selected: set[PolicyContext] = set()
        if self.include_machine:
            selected.add(PolicyContext.MACHINE)
        if self.include_user:
            selected.add(PolicyContext.USER)
        return frozenset(selected)


def get_resolution_config() -> ResolutionConfig:
    return ResolutionConfig(
        enforced_only=env_flag("GPCONFLICT_ENFORCED_ONLY", default=False),
        include_machine=env_flag("GPCONFLICT_INCLUDE_MACHINE", default=True),
        include_user=env_flag("GPCONFLICT_INCLUDE_USER", default=True),
    )
