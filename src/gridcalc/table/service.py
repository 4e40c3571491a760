"""Table service: cell writes, row/column inserts and table reads."""

import asyncio
import logging
from numbers import Number
from typing import Optional

from ..formula import EvaluationError, FormulaEvaluator
from ..store import Cell, CellKind, CellStore, StoreError

logger = logging.getLogger(__name__)


class TableService:
    """
    Orchestrates grid operations over an injected cell store.

    Formula cells are evaluated before anything is written, so a failed
    evaluation leaves the grid untouched.
    """

    def __init__(
        self,
        store: CellStore,
        honor_root: bool = False,
        max_formula_length: Optional[int] = None,
    ):
        """
        Initialize the service.

        Args:
            store: Cell store used for lookups and persistence
            honor_root: Use SQRT's root argument as a real n-th root
            max_formula_length: Reject longer formulas (no limit if None)
        """
        self.store = store
        self.evaluator = FormulaEvaluator(store.lookup, honor_root=honor_root)
        self.max_formula_length = max_formula_length

    async def evaluate(self, formula: str) -> Number:
        """Evaluate a formula against the current grid."""
        if self.max_formula_length is not None and len(formula) > self.max_formula_length:
            raise EvaluationError(
                formula=formula[:50],
                reason=f"Formula longer than {self.max_formula_length} characters",
            )
        return await self.evaluator.evaluate(formula)

    async def write_cell(
        self,
        row_index: int,
        column_index: int,
        value: str,
        formula: Optional[str] = None,
    ) -> Cell:
        """
        Store a cell value, evaluating it first when it is a formula.

        Args:
            row_index: Zero-based row
            column_index: Zero-based column
            value: Raw input; a leading "=" marks a formula
            formula: Formula text to evaluate and keep, defaults to value

        Returns:
            The persisted cell

        Raises:
            EvaluationError: If the formula cannot be evaluated (nothing is stored)
            StoreError: If persistence fails
        """
        if value.startswith("="):
            kind = CellKind.FORMULA
            formula_text = formula or value
            result = await self.evaluate(formula_text)
        else:
            kind = CellKind.STATIC
            formula_text = None
            result = value

        cell = await self.store.upsert_cell(row_index, column_index, result, kind, formula_text)
        logger.info(f"Stored {kind.value} cell ({row_index}, {column_index}) = {result!r}")
        return cell

    async def get_table(self) -> list[Cell]:
        return await self.store.get_table()

    async def _insert_batch(self, coordinates: list[tuple[int, int]], label: str):
        """Insert empty cells concurrently.

        Inserts that succeed are committed even if others fail; failures are
        reported together as one StoreError.
        """
        results = await asyncio.gather(
            *(self.store.insert_empty_cell(row, col, commit=False) for row, col in coordinates),
            return_exceptions=True,
        )
        await self.store.commit()

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(f"{label}: {len(failures)} of {len(coordinates)} inserts failed")
            raise StoreError(
                f"{label}: {len(failures)} of {len(coordinates)} inserts failed: {failures[0]}"
            )
        logger.info(f"{label}: inserted {len(coordinates)} cells")

    async def add_row(self, row_index: int, columns_count: int):
        """Add ``columns_count`` empty cells on row ``row_index``."""
        coordinates = [(row_index, col) for col in range(columns_count)]
        await self._insert_batch(coordinates, f"Add row {row_index}")

    async def add_column(self, column_index: int):
        """Add an empty cell at ``column_index`` to every existing row."""
        rows = await self.store.get_row_indices()
        coordinates = [(row, column_index) for row in rows]
        await self._insert_batch(coordinates, f"Add column {column_index}")
