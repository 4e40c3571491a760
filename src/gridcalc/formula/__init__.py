"""Formula core: reference resolution and arithmetic evaluation."""

from .errors import FormulaError, EvaluationError, ReferenceLookupError
from .references import (
    CellLookup,
    CellReference,
    find_references,
    resolve_references,
    resolve_values,
)
from .evaluator import (
    FormulaEvaluator,
    FormulaShape,
    detect_shape,
    evaluate_formula,
)

__all__ = [
    "FormulaError",
    "EvaluationError",
    "ReferenceLookupError",
    "CellLookup",
    "CellReference",
    "find_references",
    "resolve_references",
    "resolve_values",
    "FormulaEvaluator",
    "FormulaShape",
    "detect_shape",
    "evaluate_formula",
]
