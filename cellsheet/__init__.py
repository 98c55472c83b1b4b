"""An in-memory spreadsheet engine with formulas, cell references and cycle detection."""

__version__ = "0.1.0"
__all__ = ["common", "formula_ast", "formula", "cell", "sheet"]