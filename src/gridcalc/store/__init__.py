"""Cell persistence layer for gridcalc."""

from .store import CellStore, StoreError
from .models import Cell, CellKind, CellValue

__all__ = ["CellStore", "StoreError", "Cell", "CellKind", "CellValue"]
