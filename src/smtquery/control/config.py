"""Solver configuration snapshot for a query session."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple
import os

from .types import Logic, SMTOption

SOLVER_ENV_VAR = "SMTQUERY_SOLVER"


@dataclass(frozen=True)
class SolverConfig:
    """Immutable settings shared by every command in a session.

    Attributes:
        solver: Known solver name (see ``smtquery.solver.process``) or executable path
        options: Options sent when the session opens, before any query
        logic: Logic to select at start-up, if any
        ignore_exit_code: Do not treat a non-zero solver exit status as an error
        timeout_s: Per-response read timeout for subprocess transports
        extra_args: Additional solver command-line arguments
    """

    solver: str = "z3"
    options: Tuple[SMTOption, ...] = ()
    logic: Optional[Logic] = None
    ignore_exit_code: bool = False
    timeout_s: Optional[float] = None
    extra_args: Tuple[str, ...] = ()

    def with_options(self, *options: SMTOption) -> "SolverConfig":
        return replace(self, options=self.options + tuple(options))

    def start_commands(self) -> list[str]:
        """Commands to send before the query phase begins."""
        cmds = [o.command() for o in self.options]
        if self.logic is not None:
            cmds.append(SMTOption.set_logic(self.logic).command())
        return cmds

    @classmethod
    def from_env(cls, **kwargs) -> "SolverConfig":
        """Build a config, letting $SMTQUERY_SOLVER override the solver."""
        env = os.environ.get(SOLVER_ENV_VAR)
        if env:
            kwargs["solver"] = env
        return cls(**kwargs)
