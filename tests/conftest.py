"""Shared fixtures for the Tactigrid test suite."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
import pytest
import structlog
from numpy.random import Generator

from tactigrid.mapgen.config import GeneratorConfig
from tactigrid.world.grid import Grid


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any logging configuration a test installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_grid() -> Grid:
    """A 5x5 all-grass grid."""
    return Grid(width=5, height=5)


@pytest.fixture
def small_config() -> GeneratorConfig:
    """Default generator parameters on a 20x20 map."""
    return GeneratorConfig(width=20, height=20)
