"""Table operations over the cell store."""

from .service import TableService
from .models import (
    CellWriteRequest,
    RowInsertRequest,
    ColumnInsertRequest,
    FormulaEvaluateRequest,
    FormulaEvaluateResponse,
    MessageResponse,
    parse_columns_count,
)

__all__ = [
    "TableService",
    "CellWriteRequest",
    "RowInsertRequest",
    "ColumnInsertRequest",
    "FormulaEvaluateRequest",
    "FormulaEvaluateResponse",
    "MessageResponse",
    "parse_columns_count",
]
