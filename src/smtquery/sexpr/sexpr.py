"""
S-expression tree for solver responses.

Responses are parsed into a small closed set of node types. ``render``
turns a tree back into display text for the caller.
"""
from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class Atom:
    """A symbol, keyword, string literal or any other non-numeric token."""
    text: str


@dataclass(frozen=True)
class Int:
    """An integer numeral, with the text it was read from (``#x1f``, ``12``...)."""
    value: int
    text: str = field(default="", compare=False)


@dataclass(frozen=True)
class Real:
    text: str


@dataclass(frozen=True)
class Float:
    text: str


@dataclass(frozen=True)
class Double:
    text: str


@dataclass(frozen=True)
class App:
    """A parenthesized list of sub-expressions."""
    items: Tuple["SExpr", ...] = ()

    def head(self) -> str:
        """Text of the first element if it is an atom, else an empty string."""
        if self.items and isinstance(self.items[0], Atom):
            return self.items[0].text
        return ""


SExpr = Union[Atom, Int, Real, Float, Double, App]


def _unquote(s: str) -> str:
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return s[1:-1]
    return s


def render(expr: SExpr, unquote: bool = False) -> str:
    """Render an s-expression as display text.

    A single-element list renders as its element. When ``unquote`` is set,
    one pair of surrounding double quotes is stripped from atoms.
    """
    if isinstance(expr, Atom):
        return _unquote(expr.text) if unquote else expr.text
    if isinstance(expr, Int):
        return str(expr.value)
    if isinstance(expr, (Real, Float, Double)):
        return expr.text
    if len(expr.items) == 1:
        return render(expr.items[0], unquote)
    return "(" + " ".join(render(e, unquote) for e in expr.items) + ")"
