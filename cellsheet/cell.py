"""A single spreadsheet cell holding nothing, text or a formula."""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from .common import (
    ESCAPE_SIGN,
    FORMULA_SIGN,
    CircularDependencyError,
    FormulaError,
    Position,
)
from .formula import Formula, FormulaValue, parse_formula

if TYPE_CHECKING:
    from .sheet import Sheet

CellValue = Union[str, float, FormulaError]


class _EmptyContent:
    def value(self) -> CellValue:
        return ""

    def text(self) -> str:
        return ""

    def referenced_cells(self) -> list[Position]:
        return []

    def cache_valid(self) -> bool:
        return True

    def invalidate(self) -> None:
        pass


class _TextContent(_EmptyContent):
    def __init__(self, text: str) -> None:
        if not text:
            raise ValueError("text content cannot be empty")
        self._text = text

    def value(self) -> CellValue:
        if self._text.startswith(ESCAPE_SIGN):
            return self._text[1:]
        return self._text

    def text(self) -> str:
        return self._text


class _FormulaContent(_EmptyContent):
    def __init__(self, expression: str, sheet: Sheet) -> None:
        if not expression.startswith(FORMULA_SIGN):
            raise ValueError("formula content must start with the formula sign")
        self._formula: Formula = parse_formula(expression[1:])
        self._sheet = sheet
        self._cache: FormulaValue | None = None

    def value(self) -> CellValue:
        if self._cache is None:
            self._cache = self._formula.evaluate(self._sheet)
        return self._cache

    def text(self) -> str:
        return FORMULA_SIGN + self._formula.expression()

    def referenced_cells(self) -> list[Position]:
        return self._formula.referenced_cells()

    def cache_valid(self) -> bool:
        return self._cache is not None

    def invalidate(self) -> None:
        self._cache = None


_Content = Union[_EmptyContent, _TextContent, _FormulaContent]


class Cell:
    """A cell of a sheet; tracks which cells it references and which reference it."""

    def __init__(self, sheet: Sheet) -> None:
        self._sheet = sheet
        self._content: _Content = _EmptyContent()
        self._dependents: set[Cell] = set()
        self._referenced: set[Cell] = set()

    def set(self, text: str) -> None:
        """Replace the contents; raises FormulaException or CircularDependencyError."""
        content: _Content
        if not text:
            content = _EmptyContent()
        elif len(text) > 1 and text.startswith(FORMULA_SIGN):
            content = _FormulaContent(text, self._sheet)
        else:
            content = _TextContent(text)

        if self._has_cycle(content):
            raise CircularDependencyError("Circular dependency!")
        self._replace(content)

    def clear(self) -> None:
        self._replace(_EmptyContent())

    def value(self) -> CellValue:
        return self._content.value()

    def text(self) -> str:
        return self._content.text()

    def referenced_cells(self) -> list[Position]:
        return self._content.referenced_cells()

    def is_referenced(self) -> bool:
        return bool(self._dependents)

    def _replace(self, content: _Content) -> None:
        self._content = content
        self._update_dependencies()
        self._invalidate(force=True)

    def _has_cycle(self, content: _Content) -> bool:
        positions = content.referenced_cells()
        if not positions:
            return False
        referenced = {self._sheet.get_cell(pos) for pos in positions}
        referenced.discard(None)

        visited: set[Cell] = set()
        stack: list[Cell] = [self]
        while stack:
            current = stack.pop()
            if current in referenced:
                return True
            visited.add(current)
            stack.extend(c for c in current._dependents if c not in visited)
        return False

    def _update_dependencies(self) -> None:
        for cell in self._referenced:
            cell._dependents.discard(self)
        self._referenced.clear()

        for pos in self._content.referenced_cells():
            cell = self._sheet.get_cell(pos)
            if cell is None:
                self._sheet.set_cell(pos, "")
                cell = self._sheet.get_cell(pos)
            assert cell is not None
            self._referenced.add(cell)
            cell._dependents.add(self)

    def _invalidate(self, force: bool = False) -> None:
        if force or self._content.cache_valid():
            self._content.invalidate()
            for dependent in self._dependents:
                dependent._invalidate()