"""Interactive query control: session state, commands and response decoding."""

from .config import SolverConfig
from .errors import (
    QueryError,
    UsageError,
    StackUnderflowError,
    StartModeOptionError,
    SessionClosedError,
    ProtocolError,
    ValidationError,
    TransportError,
)
from .types import (
    CheckSatResult,
    Logic,
    OptionKind,
    SMTOption,
    SMTInfoFlag,
    SMTInfoResponse,
    ErrorBehavior,
    ReasonUnknown,
    InfoUnsupported,
    InfoAssertionStackLevels,
    InfoAuthors,
    InfoErrorBehavior,
    InfoName,
    InfoReasonUnknown,
    InfoVersion,
    InfoAllStatistics,
    InfoKeyword,
)
from .model import (
    Assignment,
    Model,
    SMTResult,
    Satisfiable,
    Unsatisfiable,
    Unknown,
    ProofError,
    validate_assignments,
)
from .proxy import ProxyAssumption, encode_assumptions, proxy_name
from .state import QueryState
from .query import Query

__all__ = [
    "SolverConfig",
    "QueryError",
    "UsageError",
    "StackUnderflowError",
    "StartModeOptionError",
    "SessionClosedError",
    "ProtocolError",
    "ValidationError",
    "TransportError",
    "CheckSatResult",
    "Logic",
    "OptionKind",
    "SMTOption",
    "SMTInfoFlag",
    "SMTInfoResponse",
    "ErrorBehavior",
    "ReasonUnknown",
    "InfoUnsupported",
    "InfoAssertionStackLevels",
    "InfoAuthors",
    "InfoErrorBehavior",
    "InfoName",
    "InfoReasonUnknown",
    "InfoVersion",
    "InfoAllStatistics",
    "InfoKeyword",
    "Assignment",
    "Model",
    "SMTResult",
    "Satisfiable",
    "Unsatisfiable",
    "Unknown",
    "ProofError",
    "validate_assignments",
    "ProxyAssumption",
    "encode_assumptions",
    "proxy_name",
    "QueryState",
    "Query",
]
