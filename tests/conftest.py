from __future__ import annotations

import pytest

from gpconflict.config import ResolutionConfig
from gpconflict.domain.resolution import ResolutionEngine
from tests.helpers.directory import FakeDirectory


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def engine(directory: FakeDirectory) -> ResolutionEngine:
    return ResolutionEngine(
        fetch_links=directory.fetch_links,
        fetch_settings=directory.fetch_settings,
    )


@pytest.fixture
def default_config() -> ResolutionConfig:
    return ResolutionConfig()
