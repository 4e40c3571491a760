"""Formula evaluator.

A formula is text starting with ``=``. Three shapes are recognized, checked in
this order:

1. ``POW(<expr>)`` - the inner expression is evaluated and squared.
2. ``SQRT(<expr>, <root>)`` - the inner expression is evaluated and its
   square root taken. The root argument is parsed but ignored unless
   ``honor_root`` is enabled, in which case the real n-th root is used.
3. Anything else - the body is evaluated as plain arithmetic.

Cell references inside the evaluated expression are fetched through the
injected lookup before the arithmetic is folded.
"""

import logging
import math
from enum import Enum
from numbers import Number
from typing import Optional

from .errors import EvaluationError
from .parser import fold, parse_expression, to_number
from .references import CellLookup, resolve_values

logger = logging.getLogger(__name__)


class FormulaShape(str, Enum):
    """Which wrapping function, if any, a formula uses."""

    POW = "pow"
    SQRT = "sqrt"
    PLAIN = "plain"


def detect_shape(formula: str) -> FormulaShape:
    if "POW" in formula:
        return FormulaShape.POW
    if "SQRT" in formula:
        return FormulaShape.SQRT
    return FormulaShape.PLAIN


def _find_matching_paren(text: str, start: int) -> int:
    """Index of the ``')'`` matching the ``'('`` at ``text[start]``, or -1."""
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def extract_arguments(formula: str) -> list[str]:
    """Return the stripped arguments of the first parenthesis group.

    Only the first top-level comma splits, so ``SQRT(A1, 3)`` gives
    ``["A1", "3"]`` and ``POW(A1)`` gives ``["A1"]``.
    """
    open_idx = formula.find("(")
    close_idx = _find_matching_paren(formula, open_idx) if open_idx >= 0 else -1
    if close_idx < 0:
        raise EvaluationError(formula=formula, reason="Missing parenthesis group")

    inner = formula[open_idx + 1 : close_idx]
    depth = 0
    for i, ch in enumerate(inner):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            return [inner[:i].strip(), inner[i + 1 :].strip()]
    return [inner.strip()]


_MAX_INT = 2**63 - 1


def normalize_number(value: Number) -> Number:
    """Collapse integral floats to ``int`` (``14.0`` -> ``14``).

    Integers outside the 64-bit range become floats so they can be stored.

    Raises:
        EvaluationError: If the integer is too large for a float
    """
    if isinstance(value, float) and value.is_integer() and abs(value) <= _MAX_INT:
        return int(value)
    if isinstance(value, int) and abs(value) > _MAX_INT:
        try:
            return float(value)
        except OverflowError as e:
            raise EvaluationError(reason="Integer result too large to store") from e
    return value


async def evaluate_expression(expression: str, lookup: CellLookup) -> Number:
    """Resolve the references in ``expression`` and fold the arithmetic."""
    tree = parse_expression(expression)
    values = await resolve_values(expression, lookup)
    return fold(tree, values)


def _nth_root(value: Number, root_text: Optional[str]) -> Number:
    if root_text is None or root_text == "":
        raise EvaluationError(reason="Missing root argument")
    root = to_number(root_text)
    if root == 0:
        raise EvaluationError(reason="Zero root")
    if value < 0:
        # Odd roots of negative numbers stay real.
        if float(root).is_integer() and int(root) % 2 == 1:
            return -((-value) ** (1 / root))
        raise EvaluationError(reason=f"Even root of negative value {value}")
    return value ** (1 / root)


async def evaluate_formula(
    formula: str, lookup: CellLookup, honor_root: bool = False
) -> Number:
    """Evaluate a formula to a number.

    Args:
        formula: Formula text, normally starting with ``=``
        lookup: ``(row, column) -> value`` callable (sync or async)
        honor_root: Apply the real n-th root for ``SQRT`` instead of a
            fixed square root

    Returns:
        The computed number

    Raises:
        EvaluationError: If the final arithmetic cannot be computed
    """
    shape = detect_shape(formula)
    try:
        if shape is FormulaShape.POW:
            expression = extract_arguments(formula)[0]
            value = await evaluate_expression(expression, lookup)
            result = value ** 2
        elif shape is FormulaShape.SQRT:
            args = extract_arguments(formula)
            expression = args[0]
            root_text = args[1] if len(args) > 1 else None
            value = await evaluate_expression(expression, lookup)
            if honor_root:
                result = _nth_root(value, root_text)
            else:
                if value < 0:
                    raise EvaluationError(reason=f"Square root of negative value {value}")
                result = math.sqrt(value)
        else:
            body = formula[1:] if formula.startswith("=") else formula
            result = await evaluate_expression(body, lookup)

        if isinstance(result, float) and not math.isfinite(result):
            raise EvaluationError(reason=f"Non-finite result {result}")
        return normalize_number(result)
    except EvaluationError as e:
        logger.error(f"Formula evaluation error for {formula!r}: {e.reason or e}")
        raise EvaluationError(formula=formula, reason=e.reason) from e
    except (ArithmeticError, ValueError) as e:
        logger.error(f"Formula evaluation error for {formula!r}: {e}")
        raise EvaluationError(formula=formula, reason=str(e)) from e


class FormulaEvaluator:
    """Evaluate formulas against a fixed lookup.

    Holds no state between calls, so evaluating the same formula against an
    unchanged store always gives the same result.
    """

    def __init__(self, lookup: CellLookup, honor_root: bool = False):
        self.lookup = lookup
        self.honor_root = honor_root

    async def evaluate(self, formula: str) -> Number:
        return await evaluate_formula(formula, self.lookup, honor_root=self.honor_root)
