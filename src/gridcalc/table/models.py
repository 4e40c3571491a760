"""Request and response models for table operations."""

import math
from numbers import Number
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class CellWriteRequest(BaseModel):
    """Request to write a cell. Field names follow the grid client's camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    row_index: int = Field(alias="rowIndex", ge=0)
    column_index: int = Field(alias="columnIndex", ge=0)
    value: str  # Raw input; a leading "=" marks a formula
    formula: Optional[str] = None  # Formula text, defaults to value


class RowInsertRequest(BaseModel):
    """Request to add a row of empty cells."""

    model_config = ConfigDict(populate_by_name=True)

    row_index: int = Field(alias="rowIndex", ge=0)
    columns_count: int = Field(alias="columnsCount", ge=0)


class ColumnInsertRequest(BaseModel):
    """Request to add an empty column at index ``columnsCount`` to every row."""

    model_config = ConfigDict(populate_by_name=True)

    # Validated by parse_columns_count so a bad value gets a 400, not a 422
    columns_count: Any = Field(default=None, alias="columnsCount")


class FormulaEvaluateRequest(BaseModel):
    """Request to evaluate a formula without storing it."""

    formula: str


class FormulaEvaluateResponse(BaseModel):
    """Result of a formula evaluation."""

    formula: str
    result: Union[int, float]


class MessageResponse(BaseModel):
    """Plain status message."""

    message: str


def parse_columns_count(raw: Any) -> Optional[int]:
    """Return ``raw`` as a non-negative int, or None when it is missing or not numeric."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Number):
        if not math.isfinite(raw) or int(raw) != raw:
            return None
        value = int(raw)
    elif isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if value >= 0 else None
