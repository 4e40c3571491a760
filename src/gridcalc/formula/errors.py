"""Exceptions raised (or returned) by the formula core."""

from typing import Optional


class FormulaError(Exception):
    """Base class for formula evaluation problems."""

    pass


class EvaluationError(FormulaError):
    """Raised when the final arithmetic of a formula cannot be computed."""

    def __init__(
        self,
        message: str = "Invalid formula",
        formula: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        self.formula = formula
        self.reason = reason
        super().__init__(message)


class ReferenceLookupError(FormulaError):
    """A single cell reference whose value could not be fetched.

    The resolver hands this back as a value instead of raising it, so the
    caller can decide how to recover (it substitutes ``0``).
    """

    def __init__(self, reference: str, cause: Optional[BaseException] = None):
        self.reference = reference
        self.cause = cause
        super().__init__(f"Could not fetch value for reference {reference}: {cause}")
