"""SQLite-based cell store."""

import logging
from pathlib import Path
from typing import Optional, Union

import aiosqlite

from ..config import settings
from .models import Cell, CellKind, CellValue

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the persistence layer fails on a read or write."""

    pass


class CellStore:
    """Persistent storage for grid cells keyed by (row_index, column_index)."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path else settings.database_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self):
        """Initialize the database and create tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._connection = await aiosqlite.connect(str(self.db_path))
            # `value` has no declared type so numbers and raw text keep their type
            await self._connection.executescript(
                """
                CREATE TABLE IF NOT EXISTS table_structure (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    row_index INTEGER NOT NULL,
                    column_index INTEGER NOT NULL,
                    value,
                    type TEXT,
                    formulas TEXT,
                    UNIQUE(row_index, column_index)
                );

                CREATE INDEX IF NOT EXISTS idx_table_structure_row
                    ON table_structure(row_index);
                """
            )
            await self._connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to initialize cell store: {e}") from e
        logger.info(f"CellStore initialized at {self.db_path}")

    async def close(self):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise StoreError("Cell store is not initialized")
        return self._connection

    async def commit(self):
        try:
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Commit failed: {e}") from e

    # Reads
    async def fetch_cell_value(self, row: int, column: int) -> CellValue:
        """Get the stored value at a coordinate, or None if there is no cell."""
        try:
            async with self.connection.execute(
                "SELECT value FROM table_structure WHERE row_index = ? AND column_index = ?",
                (row, column),
            ) as cursor:
                result = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to fetch cell ({row}, {column}): {e}") from e
        return result[0] if result else None

    # The lookup capability handed to the formula core
    lookup = fetch_cell_value

    async def get_cell(self, row: int, column: int) -> Optional[Cell]:
        """Get a cell by coordinate."""
        try:
            async with self.connection.execute(
                "SELECT row_index, column_index, value, type, formulas FROM table_structure "
                "WHERE row_index = ? AND column_index = ?",
                (row, column),
            ) as cursor:
                result = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read cell ({row}, {column}): {e}") from e
        if result:
            return self._row_to_cell(result)
        return None

    async def get_table(self) -> list[Cell]:
        """Get every cell ordered by row, then column."""
        try:
            async with self.connection.execute(
                "SELECT row_index, column_index, value, type, formulas FROM table_structure "
                "ORDER BY row_index, column_index"
            ) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read table: {e}") from e
        return [self._row_to_cell(row) for row in rows]

    async def get_row_indices(self) -> list[int]:
        """Get the distinct row indices present in the grid."""
        try:
            async with self.connection.execute(
                "SELECT DISTINCT row_index FROM table_structure ORDER BY row_index"
            ) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read row indices: {e}") from e
        return [row[0] for row in rows]

    # Writes
    async def upsert_cell(
        self,
        row: int,
        column: int,
        value: CellValue,
        kind: CellKind,
        formula_text: Optional[str],
    ) -> Cell:
        """Update the cell at a coordinate in place, or insert it."""
        kind_value = CellKind(kind).value
        try:
            existing = await self.get_cell(row, column)
            if existing:
                await self.connection.execute(
                    """
                    UPDATE table_structure
                    SET value = ?, type = ?, formulas = ?
                    WHERE row_index = ? AND column_index = ?
                    """,
                    (value, kind_value, formula_text, row, column),
                )
            else:
                await self.connection.execute(
                    """
                    INSERT INTO table_structure (row_index, column_index, value, type, formulas)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (row, column, value, kind_value, formula_text),
                )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to upsert cell ({row}, {column}): {e}") from e

        stored = await self.get_cell(row, column)
        if stored is None:
            raise StoreError(f"Cell ({row}, {column}) missing after upsert")
        return stored

    async def insert_empty_cell(self, row: int, column: int, commit: bool = True):
        """Insert an empty cell. Fails if the coordinate is already taken."""
        try:
            await self.connection.execute(
                "INSERT INTO table_structure (row_index, column_index, value) VALUES (?, ?, NULL)",
                (row, column),
            )
            if commit:
                await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to insert cell ({row}, {column}): {e}") from e

    def _row_to_cell(self, row) -> Cell:
        return Cell(
            row_index=row[0],
            column_index=row[1],
            value=row[2],
            type=CellKind(row[3]) if row[3] else None,
            formulas=row[4],
        )
