"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from gridcalc.config import Settings
from gridcalc.store import CellStore


class FakeGrid:
    """In-memory grid exposing the async lookup the formula core expects."""

    def __init__(self, cells: dict[tuple[int, int], object] = None, failing=()):
        self.cells = dict(cells or {})
        self.failing = set(failing)
        self.calls: list[tuple[int, int]] = []

    async def lookup(self, row: int, column: int):
        self.calls.append((row, column))
        if (row, column) in self.failing:
            raise ConnectionError(f"lookup failed for ({row}, {column})")
        return self.cells.get((row, column))


@pytest.fixture
def grid() -> FakeGrid:
    """A small grid: A1=2, B1=5, A2=3, B2=9."""
    return FakeGrid({(0, 0): 2, (0, 1): 5, (1, 0): 3, (1, 1): 9})


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Create settings with test values."""
    return Settings(
        database_path=tmp_path / "test.db",
        host="127.0.0.1",
        port=5000,
        debug=False,
        cors_allow_origins=["*"],
        max_formula_length=1000,
        honor_sqrt_root=False,
    )


@pytest_asyncio.fixture
async def cell_store(tmp_path: Path) -> AsyncGenerator[CellStore, None]:
    """Create a cell store on a temporary database."""
    store = CellStore(tmp_path / "test_cells.db")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def make_grid():
    """Factory for FakeGrid instances."""
    return FakeGrid
