"""
Interactive SMT-LIB query sessions.

This package drives an external SMT solver command by command: it keeps
track of the assertion stack, decodes the solver's s-expression responses
into typed results, and assembles models.
"""

__version__ = "0.1.0"

from .sexpr import SExpr, parse_sexpr, render
from .symbolic import SymbolicEngine, SymbolTable, Symbol
from .control import (
    Query,
    SolverConfig,
    SMTOption,
    SMTInfoFlag,
    CheckSatResult,
    Assignment,
    Model,
    QueryError,
    UsageError,
    ProtocolError,
    ValidationError,
    TransportError,
)
from .solver import Transport, ProcessTransport, Z3Transport, make_transport

__all__ = [
    "SExpr",
    "parse_sexpr",
    "render",
    "SymbolicEngine",
    "SymbolTable",
    "Symbol",
    "Query",
    "SolverConfig",
    "SMTOption",
    "SMTInfoFlag",
    "CheckSatResult",
    "Assignment",
    "Model",
    "QueryError",
    "UsageError",
    "ProtocolError",
    "ValidationError",
    "TransportError",
    "Transport",
    "ProcessTransport",
    "Z3Transport",
    "make_transport",
]
