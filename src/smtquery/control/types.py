"""
Query-level types: check-sat results, solver options and get-info responses.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union


class CheckSatResult(Enum):
    """Result from a check-sat style query."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


class Logic(Enum):
    """A few common SMT-LIB logics; ``ALL`` lets the solver pick."""
    ALL = "ALL"
    QF_BV = "QF_BV"
    QF_UFBV = "QF_UFBV"
    QF_ABV = "QF_ABV"
    QF_AUFBV = "QF_AUFBV"
    QF_LIA = "QF_LIA"
    QF_LRA = "QF_LRA"
    QF_NIA = "QF_NIA"
    QF_NRA = "QF_NRA"
    QF_S = "QF_S"
    QF_FP = "QF_FP"
    LIA = "LIA"
    UFLIA = "UFLIA"


class OptionKind(Enum):
    """The closed set of options a session knows how to set."""
    DIAGNOSTIC_OUTPUT_CHANNEL = ":diagnostic-output-channel"
    PRODUCE_ASSERTIONS = ":produce-assertions"
    PRODUCE_ASSIGNMENTS = ":produce-assignments"
    PRODUCE_PROOFS = ":produce-proofs"
    PRODUCE_UNSAT_ASSUMPTIONS = ":produce-unsat-assumptions"
    PRODUCE_UNSAT_CORES = ":produce-unsat-cores"
    PRODUCE_MODELS = ":produce-models"
    GLOBAL_DECLARATIONS = ":global-declarations"
    RANDOM_SEED = ":random-seed"
    REPRODUCIBLE_RESOURCE_LIMIT = ":reproducible-resource-limit"
    VERBOSITY = ":verbosity"
    OPTION_KEYWORD = "keyword"
    SET_LOGIC = "set-logic"
    SET_INFO = "set-info"


# Options the SMT-LIB standard only allows before the first assertion.
_START_MODE = frozenset({
    OptionKind.PRODUCE_ASSERTIONS,
    OptionKind.PRODUCE_ASSIGNMENTS,
    OptionKind.PRODUCE_PROOFS,
    OptionKind.PRODUCE_UNSAT_ASSUMPTIONS,
    OptionKind.PRODUCE_UNSAT_CORES,
    OptionKind.PRODUCE_MODELS,
    OptionKind.GLOBAL_DECLARATIONS,
    OptionKind.RANDOM_SEED,
    OptionKind.SET_LOGIC,
})


def _smt_value(v: Union[bool, int, str]) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


@dataclass(frozen=True)
class SMTOption:
    """A solver option.

    ``args`` holds the option value(s). For ``OPTION_KEYWORD`` and
    ``SET_INFO`` the first element is the keyword itself.

    Example:
        >>> SMTOption.produce_unsat_cores(True).render()
        ':produce-unsat-cores true'
    """
    kind: OptionKind
    args: Tuple[Union[bool, int, str], ...] = ()

    def is_start_mode(self) -> bool:
        return self.kind in _START_MODE

    def render(self) -> str:
        """Text that goes after ``set-option`` (or ``set-logic``/``set-info``)."""
        if self.kind is OptionKind.SET_LOGIC:
            return _smt_value(self.args[0])
        if self.kind in (OptionKind.OPTION_KEYWORD, OptionKind.SET_INFO):
            return " ".join(_smt_value(a) for a in self.args)
        if self.kind is OptionKind.DIAGNOSTIC_OUTPUT_CHANNEL:
            return f'{self.kind.value} "{self.args[0]}"'
        return " ".join([self.kind.value] + [_smt_value(a) for a in self.args])

    def command(self) -> str:
        if self.kind is OptionKind.SET_LOGIC:
            return f"(set-logic {self.render()})"
        if self.kind is OptionKind.SET_INFO:
            return f"(set-info {self.render()})"
        return f"(set-option {self.render()})"

    def __str__(self) -> str:
        return self.render()

    @classmethod
    def produce_assertions(cls, flag: bool = True) -> "SMTOption":
        return cls(OptionKind.PRODUCE_ASSERTIONS, (flag,))

    @classmethod
    def produce_assignments(cls, flag: bool = True) -> "SMTOption":
        return cls(OptionKind.PRODUCE_ASSIGNMENTS, (flag,))

    @classmethod
    def produce_proofs(cls, flag: bool = True) -> "SMTOption":
        return cls(OptionKind.PRODUCE_PROOFS, (flag,))

    @classmethod
    def produce_unsat_assumptions(cls, flag: bool = True) -> "SMTOption":
        return cls(OptionKind.PRODUCE_UNSAT_ASSUMPTIONS, (flag,))

    @classmethod
    def produce_unsat_cores(cls, flag: bool = True) -> "SMTOption":
        return cls(OptionKind.PRODUCE_UNSAT_CORES, (flag,))

    @classmethod
    def produce_models(cls, flag: bool = True) -> "SMTOption":
        return cls(OptionKind.PRODUCE_MODELS, (flag,))

    @classmethod
    def global_declarations(cls, flag: bool = True) -> "SMTOption":
        return cls(OptionKind.GLOBAL_DECLARATIONS, (flag,))

    @classmethod
    def random_seed(cls, seed: int) -> "SMTOption":
        return cls(OptionKind.RANDOM_SEED, (seed,))

    @classmethod
    def reproducible_resource_limit(cls, limit: int) -> "SMTOption":
        return cls(OptionKind.REPRODUCIBLE_RESOURCE_LIMIT, (limit,))

    @classmethod
    def verbosity(cls, level: int) -> "SMTOption":
        return cls(OptionKind.VERBOSITY, (level,))

    @classmethod
    def diagnostic_output_channel(cls, path: str) -> "SMTOption":
        return cls(OptionKind.DIAGNOSTIC_OUTPUT_CHANNEL, (path,))

    @classmethod
    def keyword(cls, keyword: str, *values: str) -> "SMTOption":
        return cls(OptionKind.OPTION_KEYWORD, (keyword, *values))

    @classmethod
    def set_logic(cls, logic: Union["Logic", str]) -> "SMTOption":
        name = logic.value if isinstance(logic, Logic) else logic
        return cls(OptionKind.SET_LOGIC, (name,))

    @classmethod
    def set_info(cls, keyword: str, *values: str) -> "SMTOption":
        return cls(OptionKind.SET_INFO, (keyword, *values))


class SMTInfoFlag(Enum):
    """Recognized ``get-info`` keys."""
    ALL_STATISTICS = ":all-statistics"
    ASSERTION_STACK_LEVELS = ":assertion-stack-levels"
    AUTHORS = ":authors"
    ERROR_BEHAVIOR = ":error-behavior"
    NAME = ":name"
    REASON_UNKNOWN = ":reason-unknown"
    VERSION = ":version"


class ErrorBehavior(Enum):
    IMMEDIATE_EXIT = "immediate-exit"
    CONTINUED_EXECUTION = "continued-execution"


@dataclass(frozen=True)
class ReasonUnknown:
    """Why the solver answered unknown.

    ``kind`` is "memout", "incomplete" or "other"; ``detail`` carries the
    rendered payload for "other".
    """
    kind: str
    detail: str = ""

    @classmethod
    def memout(cls) -> "ReasonUnknown":
        return cls("memout")

    @classmethod
    def incomplete(cls) -> "ReasonUnknown":
        return cls("incomplete")

    @classmethod
    def other(cls, detail: str) -> "ReasonUnknown":
        return cls("other", detail)


@dataclass(frozen=True)
class InfoUnsupported:
    pass


@dataclass(frozen=True)
class InfoAssertionStackLevels:
    levels: int


@dataclass(frozen=True)
class InfoAuthors:
    authors: List[str]


@dataclass(frozen=True)
class InfoErrorBehavior:
    behavior: ErrorBehavior


@dataclass(frozen=True)
class InfoName:
    name: str


@dataclass(frozen=True)
class InfoReasonUnknown:
    reason: ReasonUnknown


@dataclass(frozen=True)
class InfoVersion:
    version: str


@dataclass(frozen=True)
class InfoAllStatistics:
    stats: List[Tuple[str, str]]


@dataclass(frozen=True)
class InfoKeyword:
    """Fallback for any response the decoder does not recognize."""
    text: str


SMTInfoResponse = Union[
    InfoUnsupported,
    InfoAssertionStackLevels,
    InfoAuthors,
    InfoErrorBehavior,
    InfoName,
    InfoReasonUnknown,
    InfoVersion,
    InfoAllStatistics,
    InfoKeyword,
]
