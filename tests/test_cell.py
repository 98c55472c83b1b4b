import pytest

from cellsheet.common import (
    CircularDependencyError,
    ErrorCategory,
    FormulaError,
    FormulaException,
    Position,
)
from cellsheet.sheet import Sheet


def pos(text):
    return Position.from_string(text)


@pytest.fixture
def sheet():
    return Sheet()


def test_plain_text(sheet):
    sheet.set_cell(pos("A1"), "Hello")
    cell = sheet.get_cell(pos("A1"))
    assert cell.text() == "Hello"
    assert cell.value() == "Hello"
    cell.set("World")
    assert cell.value() == "World"


def test_escaped_text(sheet):
    sheet.set_cell(pos("A3"), "'=escaped")
    cell = sheet.get_cell(pos("A3"))
    assert cell.text() == "'=escaped"
    assert cell.value() == "=escaped"


def test_lone_formula_sign_is_text(sheet):
    sheet.set_cell(pos("A1"), "=")
    cell = sheet.get_cell(pos("A1"))
    assert cell.text() == "="
    assert cell.value() == "="


def test_formula_text_is_normalised(sheet):
    sheet.set_cell(pos("A1"), "=(2*3)+4")
    assert sheet.get_cell(pos("A1")).text() == "=2*3+4"


def test_formula_value_and_error(sheet):
    sheet.set_cell(pos("B2"), "=35")
    assert sheet.get_cell(pos("B2")).value() == 35
    sheet.set_cell(pos("A1"), "=1/0")
    assert sheet.get_cell(pos("A1")).value() == FormulaError(ErrorCategory.ARITHMETIC)


def test_value_follows_referenced_changes(sheet):
    sheet.set_cell(pos("A1"), "1")
    sheet.set_cell(pos("A2"), "=A1")
    sheet.set_cell(pos("A3"), "=A2")
    a3 = sheet.get_cell(pos("A3"))
    assert a3.value() == 1
    sheet.set_cell(pos("A1"), "2")
    assert a3.value() == 2


def test_referenced_cells_are_unique_and_sorted(sheet):
    sheet.set_cell(pos("B1"), "=A1 + A2 + A1 + A3 + A1 + A2 + A1")
    assert sheet.get_cell(pos("B1")).referenced_cells() == [pos("A1"), pos("A2"), pos("A3")]


def test_is_referenced(sheet):
    sheet.set_cell(pos("A1"), "1")
    sheet.set_cell(pos("A2"), "=A1")
    a1 = sheet.get_cell(pos("A1"))
    assert a1.is_referenced()
    assert not sheet.get_cell(pos("A2")).is_referenced()
    sheet.set_cell(pos("A2"), "")
    assert not a1.is_referenced()


def test_circular_dependency_keeps_old_contents(sheet):
    sheet.set_cell(pos("E2"), "=E4")
    sheet.set_cell(pos("E4"), "=X9")
    sheet.set_cell(pos("X9"), "=M6")
    sheet.set_cell(pos("M6"), "Ready")
    with pytest.raises(CircularDependencyError):
        sheet.get_cell(pos("M6")).set("=E2")
    assert sheet.get_cell(pos("M6")).text() == "Ready"


def test_self_reference_is_circular(sheet):
    sheet.set_cell(pos("A1"), "Ready")
    with pytest.raises(CircularDependencyError):
        sheet.set_cell(pos("A1"), "=A1")
    assert sheet.get_cell(pos("A1")).text() == "Ready"


def test_bad_formula_keeps_old_contents(sheet):
    sheet.set_cell(pos("A1"), "Hello")
    with pytest.raises(FormulaException):
        sheet.get_cell(pos("A1")).set("=2+4-")
    assert sheet.get_cell(pos("A1")).text() == "Hello"


def test_clear_empties_and_updates_dependents(sheet):
    sheet.set_cell(pos("A1"), "42")
    sheet.set_cell(pos("B1"), "=A1")
    b1 = sheet.get_cell(pos("B1"))
    assert b1.value() == 42
    a1 = sheet.get_cell(pos("A1"))
    a1.clear()
    assert a1.text() == ""
    assert a1.value() == ""
    assert b1.value() == 0


def test_clear_drops_own_references(sheet):
    sheet.set_cell(pos("A1"), "1")
    sheet.set_cell(pos("B1"), "=A1")
    sheet.get_cell(pos("B1")).clear()
    assert sheet.get_cell(pos("B1")).referenced_cells() == []
    assert not sheet.get_cell(pos("A1")).is_referenced()