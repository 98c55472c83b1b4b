"""Formulas: parsed expressions evaluated against the cells of a sheet."""

from __future__ import annotations

import math
import re
from typing import Protocol, Union

from .common import ErrorCategory, FormulaError, FormulaException, Position
from .formula_ast import parse_formula_ast

FormulaValue = Union[float, FormulaError]

# What a text cell must look like to be read as a number: leading blanks,
# an optional sign, a decimal with optional exponent, and nothing after it.
_NUMBER_RE = re.compile(r"\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class _CellLike(Protocol):
    def value(self) -> str | float | FormulaError: ...


class _SheetLike(Protocol):
    def get_cell(self, pos: Position) -> _CellLike | None: ...


def _text_to_number(text: str) -> float:
    if not text:
        return 0.0
    if _NUMBER_RE.fullmatch(text) is None:
        raise FormulaError(ErrorCategory.VALUE)
    number = float(text)
    if not math.isfinite(number):
        raise FormulaError(ErrorCategory.VALUE)
    return number


class Formula:
    """A parsed formula that can be evaluated against a sheet."""

    def __init__(self, expression: str) -> None:
        try:
            self._ast = parse_formula_ast(expression)
        except (FormulaException, ValueError) as exc:
            raise FormulaException("Invalid formula!") from exc

    def evaluate(self, sheet: _SheetLike) -> FormulaValue:
        """Return the numeric result, or the FormulaError the evaluation ran into."""

        def cell_value(pos: Position) -> float:
            if not pos.is_valid():
                raise FormulaError(ErrorCategory.REF)
            cell = sheet.get_cell(pos)
            if cell is None:
                return 0.0
            value = cell.value()
            if isinstance(value, FormulaError):
                raise FormulaError(value.category)
            if isinstance(value, str):
                return _text_to_number(value)
            return float(value)

        try:
            return self._ast.execute(cell_value)
        except FormulaError as err:
            return err

    def expression(self) -> str:
        """The formula text with only the necessary parentheses."""
        return self._ast.to_formula()

    def referenced_cells(self) -> list[Position]:
        """Valid referenced positions, sorted and without repeats."""
        return list(dict.fromkeys(p for p in self._ast.cells() if p.is_valid()))


def parse_formula(expression: str) -> Formula:
    """Parse formula text (without the leading sign)."""
    return Formula(expression)