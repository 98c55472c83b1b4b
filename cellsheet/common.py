"""Positions, sizes, formula errors and the exceptions shared across the sheet."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar

FORMULA_SIGN = "="
ESCAPE_SIGN = "'"

_LETTERS = 26
_MAX_LETTER_COUNT = 3
_INT_MAX = 2**31 - 1


@dataclass(frozen=True, order=True)
class Position:
    """A zero-based cell address; ordering is by row, then column."""

    row: int = 0
    col: int = 0

    MAX_ROWS: ClassVar[int] = 16384
    MAX_COLS: ClassVar[int] = 16384
    NONE: ClassVar[Position]

    def is_valid(self) -> bool:
        return 0 <= self.row < self.MAX_ROWS and 0 <= self.col < self.MAX_COLS

    def to_string(self) -> str:
        """Return the address in "A1" notation, or "" for an invalid position."""
        if not self.is_valid():
            return ""
        letters = []
        col = self.col
        while col >= 0:
            letters.append(chr(ord("A") + col % _LETTERS))
            col = col // _LETTERS - 1
        return "".join(reversed(letters)) + str(self.row + 1)

    @classmethod
    def from_string(cls, text: str) -> Position:
        """Parse "A1" notation; malformed text gives Position.NONE.

        The result may still be out of range (e.g. "A0"); check is_valid().
        """
        split = next(
            (index for index, ch in enumerate(text) if not "A" <= ch <= "Z"),
            len(text),
        )
        letters, digits = text[:split], text[split:]

        if not letters or not digits or len(letters) > _MAX_LETTER_COUNT:
            return cls.NONE
        if not (digits.isascii() and digits.isdigit()):
            return cls.NONE
        row = int(digits)
        if row > _INT_MAX:
            return cls.NONE

        col = 0
        for ch in letters:
            col = col * _LETTERS + (ord(ch) - ord("A") + 1)
        return cls(row - 1, col - 1)


Position.NONE = Position(-1, -1)


@dataclass(frozen=True)
class Size:
    """Number of rows and columns of a printable area."""

    rows: int = 0
    cols: int = 0


class ErrorCategory(enum.Enum):
    """Kinds of errors a formula can evaluate to."""

    REF = "#REF!"
    VALUE = "#VALUE!"
    ARITHMETIC = "#ARITHM!"


class FormulaError(Exception):
    """An error value produced by formula evaluation.

    It is both a value stored in cells and an exception raised while
    evaluating; two errors are equal when their categories are.
    """

    def __init__(self, category: ErrorCategory) -> None:
        category = ErrorCategory(category)
        super().__init__(category.value)
        self.category = category

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FormulaError):
            return self.category == other.category
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.category)

    def __str__(self) -> str:
        return self.category.value

    def __repr__(self) -> str:
        return f"FormulaError({self.category})"


class InvalidPositionError(IndexError):
    """A position outside the sheet was used."""


class FormulaException(RuntimeError):
    """A formula could not be parsed."""


class CircularDependencyError(RuntimeError):
    """Setting a cell would create a reference cycle."""