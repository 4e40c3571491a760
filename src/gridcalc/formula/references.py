"""Cell reference discovery and resolution.

A reference is a run of uppercase column letters followed by row digits
(``A1``, ``B12``, ``AB23``). Resolution fetches each referenced value through
an injected lookup callable, one reference at a time, and falls back to ``0``
when the cell is empty or the lookup fails.
"""

import inspect
import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from .errors import ReferenceLookupError

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r"[A-Z]+[0-9]+")
_REFERENCE_PARTS = re.compile(r"^([A-Z]+)([0-9]+)$")

# (row, column) -> value. May be a coroutine function or a plain function.
CellLookup = Callable[[int, int], Union[Any, Awaitable[Any]]]

MISSING_VALUE = 0


def column_to_index(letters: str) -> int:
    """Convert column letters to a zero-based index (A -> 0, Z -> 25, AA -> 26)."""
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def index_to_column(index: int) -> str:
    """Convert a zero-based column index back to letters."""
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


@dataclass(frozen=True)
class CellReference:
    """A parsed ``<letters><digits>`` token with zero-based coordinates."""

    text: str
    row: int
    column: int

    @classmethod
    def parse(cls, text: str) -> "CellReference":
        match = _REFERENCE_PARTS.match(text)
        if not match:
            raise ValueError(f"Invalid cell reference: {text!r}")
        letters, digits = match.groups()
        return cls(text=text, row=int(digits) - 1, column=column_to_index(letters))

    def to_a1(self) -> str:
        return f"{index_to_column(self.column)}{self.row + 1}"


def find_references(body: str) -> list[CellReference]:
    """Return the distinct references in ``body`` in left-to-right order."""
    refs: list[CellReference] = []
    seen: set[str] = set()
    for match in REFERENCE_PATTERN.finditer(body):
        token = match.group(0)
        if token in seen:
            continue
        seen.add(token)
        refs.append(CellReference.parse(token))
    return refs


async def lookup_reference(
    ref: CellReference, lookup: CellLookup
) -> Union[Any, ReferenceLookupError]:
    """Fetch a single reference.

    Returns the stored value (``0`` for absent or empty cells), or a
    ``ReferenceLookupError`` when the lookup itself failed.
    """
    try:
        value = lookup(ref.row, ref.column)
        if inspect.isawaitable(value):
            value = await value
    except Exception as e:
        return ReferenceLookupError(ref.text, e)

    if value is None or value == "":
        return MISSING_VALUE
    return value


async def resolve_values(body: str, lookup: CellLookup) -> dict[str, Any]:
    """Resolve every reference in ``body`` to a value, sequentially.

    Lookups are awaited one after another in discovery order. A failed
    lookup is logged and treated as ``0``; it never aborts resolution.
    """
    values: dict[str, Any] = {}
    for ref in find_references(body):
        result = await lookup_reference(ref, lookup)
        if isinstance(result, ReferenceLookupError):
            logger.warning(f"Error fetching value for reference {ref.text}: {result.cause}")
            result = MISSING_VALUE
        logger.debug(f"Resolved {ref.text} (row={ref.row}, col={ref.column}) -> {result!r}")
        values[ref.text] = result
    return values


def substitute(body: str, values: dict[str, Any]) -> str:
    """Replace each reference token in ``body`` with its resolved value.

    Substitution works on the original token spans, so text produced by one
    replacement is never matched again.
    """

    def _replace(match: "re.Match[str]") -> str:
        token = match.group(0)
        if token not in values:
            return token
        return str(values[token])

    return REFERENCE_PATTERN.sub(_replace, body)


async def resolve_references(body: str, lookup: CellLookup) -> str:
    """Return ``body`` with every reference replaced by its fetched value."""
    values = await resolve_values(body, lookup)
    return substitute(body, values)
