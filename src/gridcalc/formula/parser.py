"""Lark-based parser and folder for arithmetic formula bodies.

Supports:
- Integer, decimal and exponent literals: ``3``, ``2.5``, ``.5``, ``1e3``
- Cell references: ``A1``, ``AB23`` (uppercase only)
- Binary ``+ - * / ^`` and unary ``+ -``, parentheses

References are leaves of the tree. They are swapped for literal values
during folding, so no text is ever re-scanned after substitution.
"""

import math
from numbers import Number
from typing import Any, Optional

from lark import Lark, Transformer, Tree, v_args
from lark.exceptions import LarkError, VisitError

from .errors import EvaluationError

# Operator precedence (lowest to highest):
#   1. Addition/subtraction: + -
#   2. Multiplication/division: * /
#   3. Unary plus/minus: + -
#   4. Exponentiation: ^ (right-associative, binds tighter than unary minus
#      on its left, so -2^2 == -4)
#   5. Atoms: number, cell reference, parenthesized expr
GRAMMAR = r"""
?start: sum

?sum: product
    | sum "+" product   -> add
    | sum "-" product   -> sub

?product: unary
    | product "*" unary -> mul
    | product "/" unary -> div

?unary: power
    | "-" unary         -> neg
    | "+" unary         -> pos

?power: atom
    | atom "^" unary    -> pow

?atom: NUMBER           -> number
    | CELL_REF          -> cell_ref
    | "(" sum ")"

CELL_REF: /[A-Z]+[0-9]+/
NUMBER: /(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?/

%import common.WS
%ignore WS
"""

_parser = Lark(GRAMMAR, parser="lalr", start="start")


def parse_expression(text: str) -> Tree:
    """Parse an arithmetic expression (no leading ``=``) into a Lark tree.

    Raises:
        EvaluationError: If the expression has invalid syntax.
    """
    try:
        return _parser.parse(text)
    except LarkError as exc:
        raise EvaluationError(formula=text, reason=str(exc)) from exc


def to_number(value: Any) -> Number:
    """Coerce a resolved cell value to a number."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Number):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            pass
    raise EvaluationError(reason=f"Non-numeric value {value!r}")


# Largest finite float is just under 2**1024
MAX_POWER_BITS = 1024


def _int_power_too_large(base, exponent) -> bool:
    """True when ``base ** exponent`` on ints would not fit in a float."""
    if not (isinstance(base, int) and isinstance(exponent, int)):
        return False
    if exponent <= 0 or abs(base) <= 1:
        return False
    return exponent * math.log2(abs(base)) > MAX_POWER_BITS


@v_args(inline=True)
class ArithmeticTransformer(Transformer):
    """Fold a parse tree into a number, reading references from ``values``."""

    def __init__(self, values: Optional[dict[str, Any]] = None):
        super().__init__()
        self.values = values or {}

    def number(self, token):
        text = str(token)
        if any(ch in text for ch in ".eE"):
            return float(text)
        return int(text)

    def cell_ref(self, token):
        # Unresolved references are empty cells.
        return to_number(self.values.get(str(token), 0))

    def add(self, left, right):
        return left + right

    def sub(self, left, right):
        return left - right

    def mul(self, left, right):
        return left * right

    def div(self, left, right):
        if right == 0:
            raise EvaluationError(reason="Division by zero")
        return left / right

    def pow(self, base, exponent):
        if _int_power_too_large(base, exponent):
            # Past float range either way; fail before building the int
            raise EvaluationError(reason=f"Result of {base}^{exponent} is too large")
        result = base ** exponent
        if isinstance(result, complex):
            raise EvaluationError(reason=f"Complex result for {base}^{exponent}")
        return result

    def neg(self, operand):
        return -operand

    def pos(self, operand):
        return operand


def fold(tree: Tree, values: Optional[dict[str, Any]] = None) -> Number:
    """Evaluate a parse tree produced by ``parse_expression``."""
    try:
        result = ArithmeticTransformer(values).transform(tree)
    except VisitError as exc:
        orig = exc.orig_exc
        if isinstance(orig, EvaluationError):
            raise orig from exc
        raise EvaluationError(reason=str(orig)) from orig
    except (ArithmeticError, ValueError) as exc:
        raise EvaluationError(reason=str(exc)) from exc

    if isinstance(result, float) and not math.isfinite(result):
        raise EvaluationError(reason=f"Non-finite result {result}")
    return result
