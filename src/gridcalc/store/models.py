"""Data models for the cell store."""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel

CellValue = Union[int, float, str, None]


class CellKind(str, Enum):
    """How a cell's value was produced."""

    STATIC = "static"
    FORMULA = "formula"


class Cell(BaseModel):
    """A persisted grid cell, unique per (row_index, column_index)."""

    row_index: int
    column_index: int
    value: CellValue = None
    type: Optional[CellKind] = None  # None for empty cells created by row/column inserts
    formulas: Optional[str] = None  # Formula text, only when type is "formula"
