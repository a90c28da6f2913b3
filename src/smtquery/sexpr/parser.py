"""Parser for SMT-LIB response text.

Parsing is done by ``sexpdata``. SMT-LIB differs from its Lisp syntax in
three places, which are handled around it: string literals escape quotes
by doubling them, ``|bar quoted|`` symbols may hold any character, and
numerals may be written ``#b...``/``#x...``. Literals and quoted symbols
are swapped for placeholders before parsing and restored as atoms, and
each token is typed here rather than by ``sexpdata``. Floating-point
literals of the form ``(fp #b. #b. #b.)`` in single or double precision
are decoded to ``Float``/``Double``.
"""
from __future__ import annotations

import re
import struct
from typing import Any, List, Optional

import sexpdata

from .sexpr import SExpr, Atom, Int, Real, Float, Double, App, render


class SExprParseError(ValueError):
    """Raised when response text is not a single well-formed s-expression."""


_NUMERAL = re.compile(r"\d+")
_DECIMAL = re.compile(r"\d+\.\d+")
_BINARY = re.compile(r"#b[01]+")
_HEX = re.compile(r"#x[0-9a-fA-F]+")

# comments first, so quotes inside a comment are ignored
_LEXICAL = re.compile(r';[^\n]*|"(?:[^"]|"")*"|\|[^|]*\|')
_PLACEHOLDER = re.compile(r"\{(\d+)\}")


def _atom(tok: str) -> SExpr:
    if _NUMERAL.fullmatch(tok):
        return Int(int(tok), tok)
    if _DECIMAL.fullmatch(tok):
        return Real(tok)
    if _BINARY.fullmatch(tok):
        return Int(int(tok[2:], 2), tok)
    if _HEX.fullmatch(tok):
        return Int(int(tok[2:], 16), tok)
    return Atom(tok)


def _mask(text: str, literals: List[str]) -> str:
    """Strip comments and replace strings and quoted symbols by ``{n}``."""
    def sub(m):
        if m.group().startswith(";"):
            return " "
        literals.append(m.group())
        return f" {{{len(literals) - 1}}} "

    masked = _LEXICAL.sub(sub, text)
    if '"' in masked:
        raise SExprParseError("Unterminated string literal")
    if "|" in masked:
        raise SExprParseError("Unterminated quoted symbol")
    return masked


class _ResponseParser(sexpdata.Parser):
    """``sexpdata`` parser that types tokens as SMT-LIB atoms."""

    def __init__(self, string: str, literals: List[str]):
        super().__init__(string)
        self.literals = literals

    def atom(self, token):
        m = _PLACEHOLDER.fullmatch(token)
        if m and int(m.group(1)) < len(self.literals):
            return Atom(self.literals[int(m.group(1))])
        return _atom(token)


def _fp_literal(items: List[SExpr]) -> Optional[SExpr]:
    # (fp sign exponent significand), all three as binary literals
    if len(items) != 4 or items[0] != Atom("fp"):
        return None
    bits = []
    for it in items[1:]:
        if not isinstance(it, Int) or not it.text.startswith("#b"):
            return None
        bits.append(it.text[2:])
    sign, exp, sig = bits
    if len(sign) != 1:
        return None
    raw = int(sign + exp + sig, 2)
    if (len(exp), len(sig)) == (8, 23):
        return Float(repr(struct.unpack(">f", raw.to_bytes(4, "big"))[0]))
    if (len(exp), len(sig)) == (11, 52):
        return Double(repr(struct.unpack(">d", raw.to_bytes(8, "big"))[0]))
    return None


def _convert(obj: Any) -> SExpr:
    if isinstance(obj, (Atom, Int, Real, Float, Double, App)):
        return obj
    if isinstance(obj, sexpdata.Symbol):
        return _atom(obj.value())
    if isinstance(obj, list):
        items = [_convert(o) for o in obj]
        fp = _fp_literal(items)
        if fp is not None:
            return fp
        return App(tuple(items))
    raise SExprParseError(f"Unsupported form in response: {obj!r}")


def parse_sexpr(text: str) -> SExpr:
    """Parse exactly one s-expression from ``text``."""
    literals: List[str] = []
    masked = _mask(text, literals)
    try:
        exprs = _ResponseParser(masked, literals).parse()
    except sexpdata.ExpectClosingBracket as e:
        raise SExprParseError(f"Unexpected end of input: missing ')': {e}") from e
    except sexpdata.ExpectNothing as e:
        raise SExprParseError(f"Unexpected ')': {e}") from e

    if not exprs:
        raise SExprParseError("Empty response")
    if len(exprs) > 1:
        rest = " ".join(render(_convert(o)) for o in exprs[1:])
        raise SExprParseError(f"Trailing input after s-expression: {rest}")
    return _convert(exprs[0])


def is_complete(text: str) -> bool:
    """Return True once ``text`` holds at least one token and balanced parens.

    Used by transports reading a response line by line.
    """
    depth = 0
    seen = False
    in_string = False
    in_bar = False
    in_comment = False
    for c in text:
        if in_comment:
            in_comment = c != "\n"
        elif in_string:
            # a doubled quote closes and reopens, which nets out the same
            in_string = c != '"'
        elif in_bar:
            in_bar = c != "|"
        elif c == ";":
            in_comment = True
        elif c == '"':
            in_string = True
            seen = True
        elif c == "|":
            in_bar = True
            seen = True
        elif c == "(":
            depth += 1
            seen = True
        elif c == ")":
            depth -= 1
        elif not c.isspace():
            seen = True
    return seen and depth <= 0 and not in_string and not in_bar
