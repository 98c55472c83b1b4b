# cellsheet

A small spreadsheet engine held in memory. A sheet holds cells addressed as
`A1`, `B2`, `XFD16384` and so on, up to 16384 rows and 16384 columns. A cell
holds plain text or a formula. Formulas support numbers, cell references,
`+ - * /`, unary plus and minus, and parentheses.

## Installation

```
pip install .
```

## Usage

```python
import io

from cellsheet.common import Position
from cellsheet.sheet import create_sheet

sheet = create_sheet()
sheet.set_cell(Position.from_string("A1"), "2")
sheet.set_cell(Position.from_string("A2"), "=A1*3 + 1")

cell = sheet.get_cell(Position.from_string("A2"))
print(cell.text())   # =A1*3+1
print(cell.value())  # 7.0

out = io.StringIO()
sheet.print_values(out)
print(out.getvalue())
```

### Modules

- `cellsheet.common`: `Position` (with `from_string`, `to_string`,
  `is_valid`), `Size`, `ErrorCategory`, `FormulaError` and the exceptions.
- `cellsheet.formula_ast`: `parse_formula_ast` and `FormulaAST`, the parsed
  expression tree.
- `cellsheet.formula`: `parse_formula` and `Formula`.
- `cellsheet.cell`: `Cell`.
- `cellsheet.sheet`: `Sheet` and `create_sheet`.

### Cell contents

- An empty string makes the cell empty.
- Text that starts with `=` and has more than one character is a formula.
  Its text is written back in a normalised form with only the parentheses
  that are needed.
- Any other text is stored as is. A leading `'` escapes the text: the
  value of `'=escaped` is `=escaped`.

### Formula values

A formula evaluates to a number or to a `FormulaError`:

- `#VALUE!` when a referenced cell holds text that is not a number,
- `#ARITHM!` for division by zero or a result that is not finite,
- the error of a referenced cell whose own formula evaluated to an error.

Empty or missing cells count as zero. Formula values are cached and the
cache is dropped when a cell they depend on changes.

### Sheet layout

Setting a formula that refers to a cell that does not exist yet creates that
cell, empty. `clear_cell` empties a cell and removes it unless other cells
refer to it. `printable_size` covers every cell the sheet holds, empty ones
included; `print_texts` and `print_values` write that area row by row,
tab-separated.

### Errors

- `InvalidPositionError` when `set_cell`, `get_cell` or `clear_cell` is given
  a position outside the sheet.
- `FormulaException` for a formula that cannot be parsed, including one that
  names a position outside the sheet (such as `A0` or `XFE16384`).
- `CircularDependencyError` when a formula would make a cell depend on
  itself; the cell keeps its previous contents.

Formulas can also be used on their own:

```python
from cellsheet.formula import parse_formula

formula = parse_formula("(2*3)+4")
print(formula.expression())          # 2*3+4
print(formula.evaluate(sheet))       # 10.0
```

## What it does not do

There is no command-line program, no file format for saving or loading
sheets, and no functions such as `SUM`; a sheet lives only in memory.

## Running the tests

```
pip install .[test]
pytest
```