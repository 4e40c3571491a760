"""Tests for cell reference discovery and resolution."""

import logging

import pytest

from gridcalc.formula import ReferenceLookupError
from gridcalc.formula.references import (
    CellReference,
    column_to_index,
    index_to_column,
    find_references,
    lookup_reference,
    resolve_references,
    resolve_values,
    substitute,
)


class TestCellReference:
    """Test parsing of reference tokens."""

    def test_parse_single_letter(self):
        ref = CellReference.parse("A1")
        assert ref.row == 0
        assert ref.column == 0
        assert ref.text == "A1"

    def test_parse_multi_digit_row(self):
        ref = CellReference.parse("B12")
        assert ref.row == 11
        assert ref.column == 1

    def test_single_letters_match_char_code_offset(self):
        for letter in "ABCDEFGHIJKLMNOPQRSTUVWXYZ":
            assert CellReference.parse(f"{letter}1").column == ord(letter) - ord("A")

    def test_parse_multi_letter_column(self):
        assert CellReference.parse("AA1").column == 26
        assert CellReference.parse("AB23").column == 27
        assert CellReference.parse("AB23").row == 22

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            CellReference.parse("a1")
        with pytest.raises(ValueError):
            CellReference.parse("12")

    def test_to_a1(self):
        assert CellReference.parse("AB23").to_a1() == "AB23"
        assert CellReference(text="x", row=0, column=25).to_a1() == "Z1"

    def test_reference_is_immutable(self):
        ref = CellReference.parse("A1")
        with pytest.raises(Exception):
            ref.row = 5

    def test_column_conversions(self):
        assert column_to_index("Z") == 25
        assert column_to_index("AZ") == 51
        assert index_to_column(0) == "A"
        assert index_to_column(51) == "AZ"
        assert index_to_column(702) == "AAA"


class TestFindReferences:
    """Test reference discovery."""

    def test_left_to_right_order(self):
        refs = find_references("B1+A1*C3")
        assert [r.text for r in refs] == ["B1", "A1", "C3"]

    def test_duplicates_reported_once(self):
        refs = find_references("A1+A1+B2")
        assert [r.text for r in refs] == ["A1", "B2"]

    def test_no_references(self):
        assert find_references("2+3*4") == []

    def test_function_names_are_not_references(self):
        refs = find_references("SQRT(A1, 3)")
        assert [r.text for r in refs] == ["A1"]


class TestLookupReference:
    """Test the single-reference lookup step."""

    @pytest.mark.asyncio
    async def test_returns_value(self, grid):
        assert await lookup_reference(CellReference.parse("B1"), grid.lookup) == 5

    @pytest.mark.asyncio
    async def test_absent_is_zero(self, grid):
        assert await lookup_reference(CellReference.parse("Z9"), grid.lookup) == 0

    @pytest.mark.asyncio
    async def test_empty_string_is_zero(self, make_grid):
        fake = make_grid({(0, 0): ""})
        assert await lookup_reference(CellReference.parse("A1"), fake.lookup) == 0

    @pytest.mark.asyncio
    async def test_failure_is_returned_not_raised(self, make_grid):
        fake = make_grid(failing=[(0, 0)])
        result = await lookup_reference(CellReference.parse("A1"), fake.lookup)
        assert isinstance(result, ReferenceLookupError)
        assert result.reference == "A1"
        assert isinstance(result.cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_sync_lookup_accepted(self):
        result = await lookup_reference(CellReference.parse("A1"), lambda row, col: 42)
        assert result == 42


class TestResolveReferences:
    """Test substitution of resolved values into formula text."""

    @pytest.mark.asyncio
    async def test_plain_substitution(self, grid):
        assert await resolve_references("A1+B1", grid.lookup) == "2+5"

    @pytest.mark.asyncio
    async def test_identical_tokens_all_replaced(self, grid):
        assert await resolve_references("A1*A1+A1", grid.lookup) == "2*2+2"

    @pytest.mark.asyncio
    async def test_missing_and_failed_become_zero(self, make_grid, caplog):
        fake = make_grid({(0, 0): 4}, failing=[(0, 1)])
        with caplog.at_level(logging.WARNING):
            text = await resolve_references("A1+B1+C1", fake.lookup)
        assert text == "4+0+0"
        assert "B1" in caplog.text

    @pytest.mark.asyncio
    async def test_lookups_are_sequential_in_discovery_order(self, grid):
        await resolve_values("B2+A1+B2+A2", grid.lookup)
        assert grid.calls == [(1, 1), (0, 0), (1, 0)]

    @pytest.mark.asyncio
    async def test_substituted_digits_are_not_rematched(self, make_grid):
        # A1 resolves to text that itself looks like a reference
        fake = make_grid({(0, 0): "B1", (0, 1): 7})
        assert await resolve_references("A1+B1", fake.lookup) == "B1+7"

    def test_substitute_leaves_unknown_tokens(self):
        assert substitute("A1+C4", {"A1": 3}) == "3+C4"
