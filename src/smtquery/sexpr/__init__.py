"""S-expression representation of solver responses."""

from .sexpr import SExpr, Atom, Int, Real, Float, Double, App, render
from .parser import SExprParseError, parse_sexpr, is_complete

__all__ = [
    "SExpr",
    "Atom",
    "Int",
    "Real",
    "Float",
    "Double",
    "App",
    "render",
    "SExprParseError",
    "parse_sexpr",
    "is_complete",
]
