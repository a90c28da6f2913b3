"""
Boundary to the symbolic problem builder.

A query session never builds expressions itself. It only needs to turn a
caller's handle into the solver-level symbol that names it, and to know
which inputs a model must bind.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol

TRUE_SYMBOL = "true"
FALSE_SYMBOL = "false"


class SymbolicEngine(Protocol):
    """Protocol for the component that owns symbolic handles."""

    def to_symbol(self, expr: Any) -> str:
        """Return the solver-level symbol for ``expr``.

        The literal true must resolve to ``TRUE_SYMBOL``.
        """
        ...

    def existential_inputs(self) -> List[str]:
        """Names of the inputs a satisfying model must assign, in declaration order."""
        ...


@dataclass(frozen=True)
class Symbol:
    """Handle for a constant declared through a ``SymbolTable``."""
    name: str
    sort: str = "Bool"
    existential: bool = True

    def __str__(self) -> str:
        return self.name


class SymbolTable:
    """Minimal symbolic engine: a table of declared constants.

    Handles are ``Symbol`` objects, Python booleans, or plain symbol names.
    """

    def __init__(self):
        self._symbols: Dict[str, Symbol] = {}

    def declare(self, name: str, sort: str = "Bool", existential: bool = True) -> Symbol:
        """Register a constant and return its handle."""
        sym = Symbol(name, sort, existential)
        self._symbols[name] = sym
        return sym

    def declarations(self) -> List[str]:
        return [f"(declare-const {s.name} {s.sort})" for s in self._symbols.values()]

    def lookup(self, name: str) -> Symbol:
        return self._symbols[name]

    def to_symbol(self, expr: Any) -> str:
        if isinstance(expr, bool):
            return TRUE_SYMBOL if expr else FALSE_SYMBOL
        if isinstance(expr, Symbol):
            return expr.name
        if isinstance(expr, str):
            return expr
        raise TypeError(f"Cannot resolve {type(expr).__name__} to a solver symbol")

    def existential_inputs(self) -> List[str]:
        return [s.name for s in self._symbols.values() if s.existential]
