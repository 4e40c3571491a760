"""API routes for gridcalc."""

import logging

from fastapi import APIRouter, HTTPException

from ..formula import EvaluationError
from ..store import Cell, StoreError
from ..table import (
    CellWriteRequest,
    RowInsertRequest,
    ColumnInsertRequest,
    FormulaEvaluateRequest,
    FormulaEvaluateResponse,
    MessageResponse,
    parse_columns_count,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service():
    """Get the global table service instance."""
    from .app import get_service as _get_service

    return _get_service()


# Table endpoints


@router.post("/table/cell", response_model=Cell)
async def write_cell(request: CellWriteRequest):
    """Create or update a cell, evaluating it when it holds a formula."""
    service = get_service()
    try:
        return await service.write_cell(
            request.row_index,
            request.column_index,
            request.value,
            request.formula,
        )
    except (EvaluationError, StoreError) as e:
        logger.error(f"Error writing cell ({request.row_index}, {request.column_index}): {e}")
        raise HTTPException(status_code=500, detail="Failed to update cell")


@router.get("/table", response_model=list[Cell])
async def get_table():
    """Get every cell in the grid."""
    service = get_service()
    try:
        return await service.get_table()
    except StoreError as e:
        logger.error(f"Error reading table: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch table data")


@router.post("/table/row", response_model=MessageResponse, status_code=201)
async def add_row(request: RowInsertRequest):
    """Add a row of empty cells."""
    service = get_service()
    try:
        await service.add_row(request.row_index, request.columns_count)
    except StoreError as e:
        logger.error(f"Error adding row {request.row_index}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add row")
    return MessageResponse(message="Row added successfully")


@router.post("/table/column", response_model=MessageResponse, status_code=201)
async def add_column(request: ColumnInsertRequest):
    """Add an empty column to every existing row."""
    column_index = parse_columns_count(request.columns_count)
    if column_index is None:
        raise HTTPException(status_code=400, detail="Invalid columnsCount value")

    service = get_service()
    try:
        await service.add_column(column_index)
    except StoreError as e:
        logger.error(f"Error adding column {column_index}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add column")
    return MessageResponse(message="Column added successfully")


# Formula endpoints


@router.post("/formula/evaluate", response_model=FormulaEvaluateResponse)
async def evaluate_formula(request: FormulaEvaluateRequest):
    """Evaluate a formula against the grid without storing anything."""
    service = get_service()
    try:
        result = await service.evaluate(request.formula)
    except EvaluationError:
        raise HTTPException(status_code=400, detail="Invalid formula")
    except StoreError as e:
        logger.error(f"Error evaluating formula: {e}")
        raise HTTPException(status_code=500, detail="Failed to evaluate formula")
    return FormulaEvaluateResponse(formula=request.formula, result=result)


@router.get("/health")
async def health_check():
    """Health check endpoint with non-secret configuration."""
    from ..config import settings

    return {
        "status": "ok",
        "service": "gridcalc",
        "config": {
            "database_path": str(settings.database_path),
            "max_formula_length": settings.max_formula_length,
            "honor_sqrt_root": settings.honor_sqrt_root,
        },
    }
