"""
Models and query results.

``validate_assignments`` reconciles a caller-built assignment list against
the declared existential inputs before it is turned into a ``Model``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .config import SolverConfig
from .errors import ValidationError


@dataclass(frozen=True)
class Assignment:
    """A binding of a solver-level symbol to a concrete value."""
    symbol: str
    value: Any


@dataclass
class Model:
    """Variable assignments, in the order they were given.

    Attributes:
        assignments: (name, value) pairs
        objectives: Optimization objective values, empty unless optimizing
    """
    assignments: List[Tuple[str, Any]] = field(default_factory=list)
    objectives: List[Tuple[str, Any]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.assignments)

    def get(self, name: str, default: Any = None) -> Any:
        for n, v in self.assignments:
            if n == name:
                return v
        return default

    def __str__(self) -> str:
        return "\n".join(f"  {n} = {v}" for n, v in self.assignments)


@dataclass
class Satisfiable:
    config: SolverConfig
    model: Model

    def __str__(self) -> str:
        return f"Satisfiable. Model:\n{self.model}"


@dataclass
class Unsatisfiable:
    config: SolverConfig
    unsat_core: Optional[List[str]] = None

    def __str__(self) -> str:
        return "Unsatisfiable"


@dataclass
class Unknown:
    config: SolverConfig
    reason: str = ""

    def __str__(self) -> str:
        return f"Unknown: {self.reason}" if self.reason else "Unknown"


@dataclass
class ProofError:
    config: SolverConfig
    messages: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return "\n".join(["*** Error:"] + [f"***   {m}" for m in self.messages])


SMTResult = Union[Satisfiable, Unsatisfiable, Unknown, ProofError]


def _duplicates(names: Sequence[str]) -> List[str]:
    seen = set()
    reported = set()
    dup = []
    for n in names:
        if n in seen and n not in reported:
            dup.append(n)
            reported.add(n)
        seen.add(n)
    return dup


def validate_assignments(assignments: Sequence[Assignment],
                         declared: Sequence[str]) -> Model:
    """Check ``assignments`` against ``declared`` inputs and build a Model.

    Args:
        assignments: Caller-built bindings, in order
        declared: Names of the existential inputs of the problem

    Returns:
        Model with the bindings and no objectives

    Raises:
        ValidationError: listing every missing, extra and duplicated name
    """
    given = [a.symbol for a in assignments]
    given_set = set(given)
    declared_set = set(declared)

    missing = [n for n in declared if n not in given_set]
    extra = list(dict.fromkeys(n for n in given if n not in declared_set))
    duplicate = _duplicates(given)

    if missing or extra or duplicate:
        raise ValidationError(missing=missing, extra=extra, duplicate=duplicate)

    return Model(assignments=[(a.symbol, a.value) for a in assignments])
