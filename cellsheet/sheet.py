"""The sheet: a sparse table of cells addressed by position."""

from __future__ import annotations

from typing import Callable, TextIO

from .cell import Cell, CellValue
from .common import FormulaError, InvalidPositionError, Position, Size


def _check(pos: Position) -> None:
    if not pos.is_valid():
        raise InvalidPositionError("Invalid position!")


def _format_value(value: CellValue) -> str:
    if isinstance(value, (str, FormulaError)):
        return str(value)
    return f"{value:g}"


class Sheet:
    """A sparse grid of cells."""

    def __init__(self) -> None:
        self._cells: dict[Position, Cell] = {}

    def set_cell(self, pos: Position, text: str) -> None:
        _check(pos)
        cell = self._cells.get(pos)
        if cell is None:
            cell = self._cells[pos] = Cell(self)
        cell.set(text)

    def get_cell(self, pos: Position) -> Cell | None:
        _check(pos)
        return self._cells.get(pos)

    def clear_cell(self, pos: Position) -> None:
        """Empty the cell; it is removed unless other cells reference it."""
        _check(pos)
        cell = self._cells.get(pos)
        if cell is None:
            return
        cell.clear()
        if not cell.is_referenced():
            del self._cells[pos]

    def printable_size(self) -> Size:
        return Size(
            rows=max((pos.row + 1 for pos in self._cells), default=0),
            cols=max((pos.col + 1 for pos in self._cells), default=0),
        )

    def print_values(self, output: TextIO) -> None:
        self._print(output, lambda cell: _format_value(cell.value()))

    def print_texts(self, output: TextIO) -> None:
        self._print(output, Cell.text)

    def _print(self, output: TextIO, render: Callable[[Cell], str]) -> None:
        size = self.printable_size()
        for row in range(size.rows):
            fields = []
            for col in range(size.cols):
                cell = self._cells.get(Position(row, col))
                fields.append(render(cell) if cell is not None and cell.text() else "")
            output.write("\t".join(fields) + "\n")


def create_sheet() -> Sheet:
    return Sheet()