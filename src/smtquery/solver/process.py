"""Run SMT solvers as interactive subprocesses.

The solver is kept alive on pipes for the whole session. Commands are
written one per line; ``:print-success`` is switched on so every command
gets an acknowledgement and error replies can never be mistaken for the
answer to a later query.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple
import logging
import os
import queue
import shutil
import subprocess
import threading

from ..control.config import SOLVER_ENV_VAR
from ..control.errors import ProtocolError, TransportError
from ..sexpr import is_complete

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverSpec:
    """Describes how to start an external SMT solver in interactive mode."""

    name: str
    argv: Tuple[str, ...]


_KNOWN_SOLVERS = {
    "z3": SolverSpec("z3", ("z3", "-in", "-smt2")),
    "cvc5": SolverSpec("cvc5", ("cvc5", "--lang", "smt2", "--incremental")),
    "cvc4": SolverSpec("cvc4", ("cvc4", "--lang", "smt2", "--incremental")),
    "yices": SolverSpec("yices", ("yices-smt2", "--incremental")),
    "yices-smt2": SolverSpec("yices-smt2", ("yices-smt2", "--incremental")),
    "boolector": SolverSpec("boolector", ("boolector", "--smt2", "--incremental")),
    "bitwuzla": SolverSpec("bitwuzla", ("bitwuzla", "--lang", "smt2")),
    "mathsat": SolverSpec("mathsat", ("mathsat", "-input=smt2")),
}


def resolve_solver(name_or_path: str) -> SolverSpec:
    """Resolve a solver name to an invocation spec."""
    if name_or_path in _KNOWN_SOLVERS:
        return _KNOWN_SOLVERS[name_or_path]

    p = Path(name_or_path)
    return SolverSpec(p.name or str(p), (str(p),))


def is_solver_available(name_or_path: str) -> bool:
    """Return True if the solver executable appears runnable on this system."""
    spec = resolve_solver(name_or_path)
    exe = spec.argv[0]

    # Explicit path
    if os.path.sep in exe or (os.path.altsep and os.path.altsep in exe):
        return os.path.exists(exe) and os.access(exe, os.X_OK)

    return shutil.which(exe) is not None


def pick_solver(preferred: Sequence[str] = ("z3", "cvc5", "yices-smt2")) -> Optional[SolverSpec]:
    """Pick the first available solver from a preference list.

    Users can override by setting $SMTQUERY_SOLVER.
    """
    env = os.environ.get(SOLVER_ENV_VAR)
    if env and is_solver_available(env):
        return resolve_solver(env)

    for n in preferred:
        if is_solver_available(n):
            return resolve_solver(n)

    return None


def _is_success(response: str) -> bool:
    return response.strip() in ("", "success")


class ProcessTransport:
    """Interactive transport over a solver subprocess.

    Example:
        >>> t = ProcessTransport(resolve_solver("z3"))
        >>> t.ask("(check-sat)")
        'sat'
        >>> t.close()
    """

    def __init__(self,
                 solver: SolverSpec,
                 *,
                 timeout_s: Optional[float] = None,
                 extra_args: Sequence[str] = ()):
        self.solver = solver
        self.timeout_s = timeout_s
        argv = [*solver.argv, *extra_args]
        logger.debug(f"Starting solver: {' '.join(argv)}")
        try:
            self._proc = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise TransportError(f"Cannot start solver {solver.name}: {e}") from e

        self._lines: "queue.Queue[Optional[str]]" = queue.Queue()
        self._reader = threading.Thread(target=self._pump, daemon=True)
        self._reader.start()
        self.send("(set-option :print-success true)")

    @classmethod
    def from_config(cls, config) -> "ProcessTransport":
        return cls(
            resolve_solver(config.solver),
            timeout_s=config.timeout_s,
            extra_args=config.extra_args,
        )

    def _pump(self) -> None:
        for line in self._proc.stdout:
            self._lines.put(line)
        self._lines.put(None)

    def _write(self, command: str) -> None:
        if self._proc.poll() is not None:
            raise TransportError(
                f"Solver {self.solver.name} has terminated (exit code {self._proc.returncode})")
        try:
            self._proc.stdin.write(command + "\n")
            self._proc.stdin.flush()
        except (BrokenPipeError, OSError) as e:
            raise TransportError(f"Lost connection to solver {self.solver.name}: {e}") from e

    def _read_response(self, command: str) -> str:
        buf = ""
        while not is_complete(buf):
            try:
                line = self._lines.get(timeout=self.timeout_s)
            except queue.Empty as e:
                raise TransportError(
                    f"Timed out after {self.timeout_s}s waiting for a response to {command}") from e
            if line is None:
                stderr = self._proc.stderr.read() if self._proc.stderr else ""
                raise TransportError(
                    f"Solver {self.solver.name} exited while answering {command}: {stderr.strip()}")
            buf += line
        return buf.strip()

    def send(self, command: str) -> None:
        self._write(command)
        if command.strip() == "(exit)":
            # the acknowledgement may race with the solver closing stdout
            return
        response = self._read_response(command)
        if not _is_success(response):
            raise ProtocolError("send", command, "success", response)

    def ask(self, command: str) -> str:
        self._write(command)
        return self._read_response(command)

    @property
    def returncode(self) -> Optional[int]:
        return self._proc.poll()

    def close(self) -> None:
        if self._proc.poll() is None:
            try:
                self._proc.stdin.close()
            except OSError as e:
                logger.debug(f"Ignoring error closing solver stdin: {e}")
            try:
                self._proc.wait(timeout=self.timeout_s or 5.0)
            except subprocess.TimeoutExpired:
                logger.warning(f"Solver {self.solver.name} did not exit; killing it")
                self._proc.kill()
                self._proc.wait()
