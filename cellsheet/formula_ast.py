"""Parsing, printing and evaluating arithmetic formulas over cell references."""

from __future__ import annotations

import enum
import math
import operator
import re
from collections import deque
from typing import Callable, Iterable

from .common import ErrorCategory, FormulaError, FormulaException, Position

CellGetter = Callable[[Position], float]


class ParsingError(RuntimeError):
    """The formula text is not valid syntax."""


class _Precedence(enum.IntEnum):
    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    UNARY = 4
    ATOM = 5


# Bit set when parentheses are needed around a child: 1 for a left child, 2 for a right one.
_LEFT = 0b01
_RIGHT = 0b10
_BOTH = _LEFT | _RIGHT

_RULES = {
    _Precedence.ADD: (0, 0, 0, 0, 0, 0),
    _Precedence.SUB: (_RIGHT, _RIGHT, 0, 0, 0, 0),
    _Precedence.MUL: (_BOTH, _BOTH, 0, 0, 0, 0),
    _Precedence.DIV: (_BOTH, _BOTH, _RIGHT, _RIGHT, 0, 0),
    _Precedence.UNARY: (_BOTH, _BOTH, 0, 0, 0, 0),
    _Precedence.ATOM: (0, 0, 0, 0, 0, 0),
}

_BINARY_OPS = {
    "+": (_Precedence.ADD, operator.add),
    "-": (_Precedence.SUB, operator.sub),
    "*": (_Precedence.MUL, operator.mul),
    "/": (_Precedence.DIV, operator.truediv),
}


def _format_number(value: float) -> str:
    return f"{value:g}"


class _Expr:
    precedence: _Precedence

    def prefix(self) -> str:
        raise NotImplementedError

    def body(self) -> str:
        raise NotImplementedError

    def evaluate(self, cell_getter: CellGetter) -> float:
        raise NotImplementedError

    def formula(self, parent: _Precedence, right_child: bool = False) -> str:
        mask = _RIGHT if right_child else _LEFT
        text = self.body()
        if _RULES[parent][self.precedence] & mask:
            return f"({text})"
        return text


class _BinaryOp(_Expr):
    def __init__(self, op: str, lhs: _Expr, rhs: _Expr) -> None:
        self.op = op
        self.lhs = lhs
        self.rhs = rhs
        self.precedence, self._func = _BINARY_OPS[op]

    def prefix(self) -> str:
        return f"({self.op} {self.lhs.prefix()} {self.rhs.prefix()})"

    def body(self) -> str:
        left = self.lhs.formula(self.precedence)
        right = self.rhs.formula(self.precedence, right_child=True)
        return f"{left}{self.op}{right}"

    def evaluate(self, cell_getter: CellGetter) -> float:
        lhs = self.lhs.evaluate(cell_getter)
        rhs = self.rhs.evaluate(cell_getter)
        try:
            result = self._func(lhs, rhs)
        except (ZeroDivisionError, OverflowError):
            raise FormulaError(ErrorCategory.ARITHMETIC) from None
        if not math.isfinite(result):
            raise FormulaError(ErrorCategory.ARITHMETIC)
        return result


class _UnaryOp(_Expr):
    precedence = _Precedence.UNARY

    def __init__(self, op: str, operand: _Expr) -> None:
        self.op = op
        self.operand = operand

    def prefix(self) -> str:
        return f"({self.op} {self.operand.prefix()})"

    def body(self) -> str:
        return self.op + self.operand.formula(self.precedence)

    def evaluate(self, cell_getter: CellGetter) -> float:
        value = self.operand.evaluate(cell_getter)
        return -value if self.op == "-" else value


class _CellRef(_Expr):
    precedence = _Precedence.ATOM

    def __init__(self, position: Position) -> None:
        self.position = position

    def prefix(self) -> str:
        if not self.position.is_valid():
            return ErrorCategory.REF.value
        return self.position.to_string()

    def body(self) -> str:
        return self.prefix()

    def evaluate(self, cell_getter: CellGetter) -> float:
        return cell_getter(self.position)


class _Number(_Expr):
    precedence = _Precedence.ATOM

    def __init__(self, value: float) -> None:
        self.value = value

    def prefix(self) -> str:
        return _format_number(self.value)

    def body(self) -> str:
        return _format_number(self.value)

    def evaluate(self, cell_getter: CellGetter) -> float:
        return self.value


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
    | (?P<cell>[A-Z]+[0-9]+)
    | (?P<number>(?:[0-9]*\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?)
    | (?P<op>[-+*/()])
    """,
    re.VERBOSE,
)


def _tokenize(text: str) -> deque[tuple[str, str]]:
    tokens: deque[tuple[str, str]] = deque()
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ParsingError(
                f"Error when lexing: token recognition error at: '{text[pos]}'"
            )
        if match.lastgroup != "ws":
            tokens.append((match.lastgroup, match.group()))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self._tokens = _tokenize(text)
        self.cells: list[Position] = []

    def _peek_op(self, ops: str) -> str | None:
        if self._tokens and self._tokens[0][0] == "op" and self._tokens[0][1] in ops:
            return self._tokens[0][1]
        return None

    def _fail(self) -> ParsingError:
        found = self._tokens[0][1] if self._tokens else "<EOF>"
        return ParsingError(f"Error when parsing: {found}")

    def parse(self) -> _Expr:
        root = self._additive()
        if self._tokens:
            raise self._fail()
        return root

    def _additive(self) -> _Expr:
        node = self._multiplicative()
        while (op := self._peek_op("+-")) is not None:
            self._tokens.popleft()
            node = _BinaryOp(op, node, self._multiplicative())
        return node

    def _multiplicative(self) -> _Expr:
        node = self._unary()
        while (op := self._peek_op("*/")) is not None:
            self._tokens.popleft()
            node = _BinaryOp(op, node, self._unary())
        return node

    def _unary(self) -> _Expr:
        op = self._peek_op("+-")
        if op is not None:
            self._tokens.popleft()
            return _UnaryOp(op, self._unary())
        return self._atom()

    def _atom(self) -> _Expr:
        if not self._tokens:
            raise self._fail()
        kind, text = self._tokens[0]
        if kind == "number":
            self._tokens.popleft()
            value = float(text)
            if not math.isfinite(value):
                raise ParsingError(f"Invalid number: {text}")
            return _Number(value)
        if kind == "cell":
            self._tokens.popleft()
            position = Position.from_string(text)
            if not position.is_valid():
                raise FormulaException(f"Invalid position: {text}")
            self.cells.append(position)
            return _CellRef(position)
        if self._peek_op("(") is not None:
            self._tokens.popleft()
            node = self._additive()
            if self._peek_op(")") is None:
                raise self._fail()
            self._tokens.popleft()
            return node
        raise self._fail()


class FormulaAST:
    """A parsed formula together with the cells it references."""

    def __init__(self, root: _Expr, cells: Iterable[Position]) -> None:
        self._root = root
        self._cells = sorted(cells)

    def execute(self, cell_getter: CellGetter) -> float:
        """Evaluate the formula; raises FormulaError on arithmetic or reference errors."""
        return self._root.evaluate(cell_getter)

    def to_prefix(self) -> str:
        """Render the tree in fully parenthesised prefix form."""
        return self._root.prefix()

    def to_formula(self) -> str:
        """Render the formula with only the parentheses that are needed."""
        return self._root.formula(_Precedence.ATOM)

    def cells(self) -> list[Position]:
        """Referenced positions, sorted, with repeats kept."""
        return list(self._cells)


def parse_formula_ast(text: str) -> FormulaAST:
    """Parse formula text (without the leading sign) into a FormulaAST."""
    try:
        parser = _Parser(text)
        root = parser.parse()
    except (ParsingError, FormulaException) as exc:
        raise FormulaException(str(exc)) from exc
    return FormulaAST(root, parser.cells)