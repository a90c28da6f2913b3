"""
Interactive query session.

A ``Query`` drives one solver through SMT-LIB commands: it tracks the
assertion stack depth, builds commands, and decodes every response into a
typed result or a ``ProtocolError`` that says what was expected.

Example:
    >>> engine = SymbolTable()
    >>> x = engine.declare("x")
    >>> with Query.open(SolverConfig(), engine=engine) as q:
    ...     q.send("(declare-const x Bool)")
    ...     q.constrain(x)
    ...     q.check_sat()
    <CheckSatResult.SAT: 'sat'>
"""
from __future__ import annotations

from contextlib import contextmanager
from fractions import Fraction
import logging
from typing import Any, Iterator, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..sexpr import (
    SExpr, Atom, Int, Real, Float, Double, App,
    render, parse_sexpr, SExprParseError,
)
from ..symbolic import SymbolicEngine, SymbolTable
from .config import SolverConfig
from .errors import (
    ProtocolError,
    SessionClosedError,
    StackUnderflowError,
    StartModeOptionError,
    TransportError,
    UsageError,
)
from .model import (
    Assignment,
    Model,
    ProofError,
    SMTResult,
    Satisfiable,
    Unknown,
    Unsatisfiable,
    validate_assignments,
)
from .proxy import (
    ProxyAssumption,
    check_sat_assuming_command,
    encode_assumptions,
    proxy_table,
    strip_bars,
)
from .state import QueryState, ResumeHook
from .types import (
    CheckSatResult,
    ErrorBehavior,
    InfoAllStatistics,
    InfoAssertionStackLevels,
    InfoAuthors,
    InfoErrorBehavior,
    InfoKeyword,
    InfoName,
    InfoReasonUnknown,
    InfoUnsupported,
    InfoVersion,
    OptionKind,
    ReasonUnknown,
    SMTInfoFlag,
    SMTInfoResponse,
    SMTOption,
)

if TYPE_CHECKING:
    from ..solver.base import Transport

logger = logging.getLogger(__name__)


# What each operation expects back from the solver.
_EXPECTED = {
    "check_sat": "one of sat/unsat/unknown",
    "check_sat_assuming": "one of sat/unsat/unknown",
    "get_unsat_assumptions": "a list of assumption proxies",
    "get_unsat_core": "an unsat-core response",
    "get_proof": "a get-proof response",
    "get_assertions": "a get-assertions response",
    "get_info": "a valid get-info response",
    "get_value": "a list of (term value) pairs",
}


def _enable_hint(option: str, purpose: str) -> List[str]:
    return [
        "Make sure you use:",
        "",
        f"       SolverConfig(options=(SMTOption.{option}(True),))",
        "",
        purpose,
    ]


_HINTS = {
    "check_sat_assuming": _enable_hint(
        "produce_unsat_assumptions", "to tell the solver to produce unsat assumptions."),
    "get_unsat_assumptions": _enable_hint(
        "produce_unsat_assumptions", "to tell the solver to produce unsat assumptions."),
    "get_unsat_core": _enable_hint(
        "produce_unsat_cores", "so the solver will be ready to compute unsat cores."),
    "get_proof": _enable_hint(
        "produce_proofs", "to make sure the solver is ready for producing proofs."),
    "get_assertions": _enable_hint(
        "produce_assertions", "to make sure the solver is ready for producing assertions."),
    "get_value": [
        "get-value is only available right after a check-sat that returned sat,",
        "and the solver may need:",
        "",
        "       SolverConfig(options=(SMTOption.produce_models(True),))",
    ],
}

_CHECK_SAT_ATOMS = {
    "sat": CheckSatResult.SAT,
    "unsat": CheckSatResult.UNSAT,
    "unknown": CheckSatResult.UNKNOWN,
}


def _is_error(expr: SExpr) -> bool:
    return isinstance(expr, App) and expr.head() == "error"


def _atom_text(expr: SExpr) -> Optional[str]:
    return expr.text if isinstance(expr, Atom) else None


def _smt_value(expr: SExpr) -> Any:
    """Convert a get-value result into a Python value where the form is known."""
    if isinstance(expr, Atom):
        if expr.text == "true":
            return True
        if expr.text == "false":
            return False
        return expr.text
    if isinstance(expr, Int):
        return expr.value
    if isinstance(expr, Real):
        return Fraction(expr.text)
    if isinstance(expr, (Float, Double)):
        return float(expr.text)
    items = expr.items
    if len(items) == 1:
        return _smt_value(items[0])
    if len(items) == 2 and items[0] == Atom("-"):
        inner = _smt_value(items[1])
        if isinstance(inner, (int, Fraction, float)) and not isinstance(inner, bool):
            return -inner
    if len(items) == 3 and items[0] == Atom("/"):
        num, den = _smt_value(items[1]), _smt_value(items[2])
        if isinstance(num, (int, Fraction)) and isinstance(den, (int, Fraction)) and den:
            return Fraction(num) / Fraction(den)
    if (len(items) == 3 and items[0] == Atom("_")
            and isinstance(items[1], Atom) and items[1].text.startswith("bv")
            and items[1].text[2:].isdigit()):
        return int(items[1].text[2:])
    return render(expr)


def _grab_all_stats(expr: SExpr) -> List[Tuple[str, str]]:
    # Best effort: solvers print statistics as a flat keyword/value list.
    if not isinstance(expr, App):
        return [(render(expr, True), "")]
    out = []
    items = list(expr.items)
    for i in range(0, len(items), 2):
        key = render(items[i], True)
        value = render(items[i + 1], True) if i + 1 < len(items) else ""
        out.append((key, value))
    return out


class Query:
    """An interactive session with one solver.

    Args:
        config: Solver configuration snapshot
        transport: Carries command text to the solver
        engine: Resolves caller handles to solver symbols
        resume_hook: Default solving routine used by ``sbv_resume``
    """

    def __init__(self,
                 config: SolverConfig,
                 transport: "Transport",
                 engine: Optional[SymbolicEngine] = None,
                 resume_hook: Optional[ResumeHook] = None):
        self.state = QueryState.for_config(config, resume_hook)
        self.transport = transport
        self.engine: SymbolicEngine = engine if engine is not None else SymbolTable()

    @classmethod
    @contextmanager
    def open(cls,
             config: Optional[SolverConfig] = None,
             transport: Optional["Transport"] = None,
             engine: Optional[SymbolicEngine] = None,
             resume_hook: Optional[ResumeHook] = None) -> Iterator["Query"]:
        """Start a session, yield it, and close the transport afterwards."""
        config = config or SolverConfig.from_env()
        if transport is None:
            from ..solver import make_transport
            transport = make_transport(config)
        q = cls(config, transport, engine, resume_hook)
        try:
            q.start()
            yield q
        finally:
            transport.close()

    @property
    def config(self) -> SolverConfig:
        return self.state.config

    def start(self) -> None:
        """Send the start-up options and logic, entering query mode."""
        if self.state.started:
            return
        for cmd in self.config.start_commands():
            self.send(cmd)
        self.state.started = True

    # ------------------------------------------------------------------
    # Raw communication
    # ------------------------------------------------------------------

    def _check_open(self, command: str) -> None:
        if self.state.exited:
            logger.warning(f"Command after exit: {command}")
            raise SessionClosedError(command)

    def send(self, command: str) -> None:
        """Send a command that only needs an acknowledgement."""
        self._check_open(command)
        logger.debug(f"[send] {command}")
        self.transport.send(command)

    def ask(self, command: str) -> str:
        """Send a command and return the raw response text."""
        self._check_open(command)
        logger.debug(f"[send] {command}")
        response = self.transport.ask(command)
        logger.debug(f"[recv] {response}")
        return response

    def _unexpected(self, operation: str, command: str, response: str,
                    extra_hints: Sequence[str] = ()) -> ProtocolError:
        hints = list(extra_hints) + list(_HINTS.get(operation, ()))
        err = ProtocolError(operation, command, _EXPECTED[operation], response, hints)
        logger.warning(f"{operation}: unexpected response {response.strip()!r} to {command}")
        return err

    def _parse(self, operation: str, command: str, response: str,
               reject_errors: bool = True) -> SExpr:
        try:
            expr = parse_sexpr(response)
        except SExprParseError as e:
            raise self._unexpected(operation, command, response, [f"Parse error: {e}", ""]) from e
        if reject_errors and _is_error(expr):
            raise self._unexpected(operation, command, response)
        return expr

    # ------------------------------------------------------------------
    # Constraints and options
    # ------------------------------------------------------------------

    def constrain(self, expr: Any) -> None:
        self.send(f"(assert {self.engine.to_symbol(expr)})")

    def named_constraint(self, name: str, expr: Any) -> None:
        """Assert ``expr`` under ``name``, so it can show up in unsat cores."""
        self.send(f"(assert (! {self.engine.to_symbol(expr)} :named {name}))")

    def set_option(self, option: SMTOption) -> None:
        """Set a solver option mid-session.

        Raises:
            StartModeOptionError: for options only valid before the session starts
        """
        if option.is_start_mode():
            logger.warning(f"Rejected start-mode option during query: {option}")
            raise StartModeOptionError(option)
        if option.kind is OptionKind.SET_LOGIC:
            # unreachable: set-logic is a start-mode option
            self.send(f"(set-logic {option.render()})")
        else:
            self.send(option.command())

    # ------------------------------------------------------------------
    # Assertion stack
    # ------------------------------------------------------------------

    def get_assertion_stack_depth(self) -> int:
        return self.state.assertion_stack_depth

    def push(self, n: int = 1) -> None:
        """Push ``n`` assertion levels."""
        if n <= 0:
            logger.warning(f"push called with non-positive level {n}")
            raise UsageError("push", f"push requires a strictly positive level argument, received: {n}")
        self.send(f"(push {n})")
        self.state.pushed(n)
        logger.debug(f"Assertion stack depth now {self.state.assertion_stack_depth}")

    def pop(self, n: int = 1) -> None:
        """Pop ``n`` assertion levels. Never pops past the base level."""
        if n <= 0:
            logger.warning(f"pop called with non-positive level {n}")
            raise UsageError("pop", f"pop requires a strictly positive level argument, received: {n}")
        depth = self.state.assertion_stack_depth
        if n > depth:
            logger.warning(f"pop({n}) at depth {depth}")
            raise StackUnderflowError(n, depth)
        self.send(f"(pop {n})")
        self.state.popped(n)
        logger.debug(f"Assertion stack depth now {self.state.assertion_stack_depth}")

    def reset(self) -> None:
        """Reset the solver; all declarations and assertions are forgotten."""
        self.send("(reset)")
        self.state.cleared(keep_declarations=False)

    def reset_assertions(self) -> None:
        """Drop all assertions and pop all levels.

        Declarations made at the base level survive; with global declarations
        enabled at start-up, all declarations survive.
        """
        self.send("(reset-assertions)")
        self.state.cleared(keep_declarations=True)

    def exit(self) -> None:
        """Ask the solver to terminate. The session accepts no further commands."""
        self.send("(exit)")
        self.state.cleared(keep_declarations=False)
        self.state.exited = True

    # ------------------------------------------------------------------
    # Satisfiability
    # ------------------------------------------------------------------

    def check_sat(self) -> CheckSatResult:
        cmd = "(check-sat)"
        r = self.ask(cmd)
        expr = self._parse("check_sat", cmd, r)
        result = _CHECK_SAT_ATOMS.get(_atom_text(expr))
        if result is None:
            raise self._unexpected("check_sat", cmd, r)
        return result

    def check_sat_assuming(self, assumptions: Sequence[Any]
                           ) -> Tuple[CheckSatResult, Optional[List[Any]]]:
        """Check satisfiability under extra Boolean assumptions.

        On unsat, also returns a subset of the assumptions responsible for it.
        The subset is the one the solver picked and is not necessarily minimal.
        Requires ``SMTOption.produce_unsat_assumptions`` at start-up.
        """
        proxies = encode_assumptions(self.engine, assumptions)
        for p in proxies:
            if not self.state.proxy_declared(p.proxy):
                self.send(p.declaration())
                self.state.record_proxy(p.proxy)
            self.send(p.binding())

        cmd = check_sat_assuming_command(proxies)
        r = self.ask(cmd)
        expr = self._parse("check_sat_assuming", cmd, r)
        result = _CHECK_SAT_ATOMS.get(_atom_text(expr))
        if result is None:
            raise self._unexpected("check_sat_assuming", cmd, r)
        if result is CheckSatResult.UNSAT:
            return result, self.get_unsat_assumptions(proxies)
        return result, None

    def get_unsat_assumptions(self, proxies: Sequence[ProxyAssumption]) -> List[Any]:
        """Map the solver's unsat assumptions back to the original expressions."""
        cmd = "(get-unsat-assumptions)"
        r = self.ask(cmd)
        expr = self._parse("get_unsat_assumptions", cmd, r)
        if not isinstance(expr, App):
            raise self._unexpected("get_unsat_assumptions", cmd, r)
        table = proxy_table(proxies)
        out = []
        for e in expr.items:
            name = _atom_text(e)
            if name is None or strip_bars(name) not in table:
                raise self._unexpected(
                    "get_unsat_assumptions", cmd, r,
                    [f"Solver returned {render(e)}, which is not one of the proxies sent.", ""])
            out.append(table[strip_bars(name)].expr)
        return out

    # ------------------------------------------------------------------
    # Cores, proofs, assertions, info
    # ------------------------------------------------------------------

    def get_unsat_core(self) -> List[str]:
        """Names in the unsat core. Requires ``produce_unsat_cores`` at start-up."""
        cmd = "(get-unsat-core)"
        r = self.ask(cmd)
        expr = self._parse("get_unsat_core", cmd, r)
        if not isinstance(expr, App):
            raise self._unexpected("get_unsat_core", cmd, r)
        names = [_atom_text(e) for e in expr.items]
        if any(n is None for n in names):
            raise self._unexpected("get_unsat_core", cmd, r)
        return [strip_bars(n) for n in names]

    def get_proof(self) -> str:
        """Raw proof text. Only checked to be a well-formed s-expression."""
        cmd = "(get-proof)"
        r = self.ask(cmd)
        self._parse("get_proof", cmd, r, reject_errors=False)
        return r

    def get_assertions(self) -> List[str]:
        """Current assertions, rendered. Requires ``produce_assertions`` at start-up."""
        cmd = "(get-assertions)"
        r = self.ask(cmd)
        expr = self._parse("get_assertions", cmd, r)
        if isinstance(expr, App):
            return [render(e) for e in expr.items]
        return [render(expr)]

    def get_info(self, flag: SMTInfoFlag) -> SMTInfoResponse:
        cmd = f"(get-info {flag.value})"
        r = self.ask(cmd)
        expr = self._parse("get_info", cmd, r, reject_errors=False)

        if flag is SMTInfoFlag.ALL_STATISTICS:
            return InfoAllStatistics(_grab_all_stats(expr))

        if expr == Atom("unsupported"):
            return InfoUnsupported()

        if isinstance(expr, App) and expr.items:
            head = expr.head()
            rest = expr.items[1:]
            if head == ":assertion-stack-levels" and len(rest) == 1 and isinstance(rest[0], Int):
                return InfoAssertionStackLevels(rest[0].value)
            if head == ":authors":
                return InfoAuthors([render(e, True) for e in rest])
            if head == ":error-behavior" and len(rest) == 1:
                if rest[0] == Atom("immediate-exit"):
                    return InfoErrorBehavior(ErrorBehavior.IMMEDIATE_EXIT)
                if rest[0] == Atom("continued-execution"):
                    return InfoErrorBehavior(ErrorBehavior.CONTINUED_EXECUTION)
            if head == ":name":
                return InfoName(render(App(rest), True))
            if head == ":reason-unknown":
                if rest == (Atom("memout"),):
                    return InfoReasonUnknown(ReasonUnknown.memout())
                if rest == (Atom("incomplete"),):
                    return InfoReasonUnknown(ReasonUnknown.incomplete())
                return InfoReasonUnknown(ReasonUnknown.other(render(App(rest), True)))
            if head == ":version":
                return InfoVersion(render(App(rest), True))

        return InfoKeyword(render(expr, True))

    # ------------------------------------------------------------------
    # Values and models
    # ------------------------------------------------------------------

    def get_value(self, terms: Sequence[Any]) -> List[Tuple[str, Any]]:
        """Values of ``terms`` in the current model, in request order."""
        return self._get_value([self.engine.to_symbol(t) for t in terms])

    def _get_value(self, symbols: Sequence[str]) -> List[Tuple[str, Any]]:
        cmd = "(get-value (" + " ".join(symbols) + "))"
        r = self.ask(cmd)
        expr = self._parse("get_value", cmd, r)
        if not isinstance(expr, App):
            raise self._unexpected("get_value", cmd, r)
        out = []
        for pair in expr.items:
            if not isinstance(pair, App) or len(pair.items) != 2:
                raise self._unexpected("get_value", cmd, r)
            out.append((render(pair.items[0]), _smt_value(pair.items[1])))
        return out

    def get_model(self) -> Model:
        """Model over the engine's declared existential inputs."""
        inputs = self.engine.existential_inputs()
        if not inputs:
            return Model()
        return Model(assignments=self._get_value(inputs))

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def assign(self, handle: Any, value: Any) -> Assignment:
        """Bind ``handle`` to a concrete value, for use with ``success``."""
        return Assignment(self.engine.to_symbol(handle), value)

    def success(self, assignments: Sequence[Assignment]) -> List[SMTResult]:
        """Produce a satisfiable result from a caller-built model.

        Raises:
            ValidationError: if inputs are missing, extra or bound twice
        """
        model = validate_assignments(assignments, self.engine.existential_inputs())
        return self.result(Satisfiable(self.config, model))

    def result(self, r: SMTResult) -> List[SMTResult]:
        return [r]

    def failure(self, messages: Sequence[str]) -> List[SMTResult]:
        return self.result(ProofError(self.config, list(messages)))

    def ignore_exit_code(self) -> bool:
        return self.state.ignore_exit_code

    def sbv_resume(self) -> List[SMTResult]:
        """Fall back to default solving: check-sat, then collect a model.

        Use ``result`` instead if a result was already built by hand.
        """
        hook = self.state.resume_hook or self._default_resume
        return hook(self.state.ignore_exit_code)

    def _default_resume(self, ignore_exit_code: bool) -> List[SMTResult]:
        r = self.check_sat()
        if r is CheckSatResult.SAT:
            results: List[SMTResult] = [Satisfiable(self.config, self.get_model())]
        elif r is CheckSatResult.UNSAT:
            results = [Unsatisfiable(self.config)]
        else:
            info = self.get_info(SMTInfoFlag.REASON_UNKNOWN)
            reason = ""
            if isinstance(info, InfoReasonUnknown):
                reason = info.reason.detail or info.reason.kind
            results = [Unknown(self.config, reason)]

        rc = self.transport.returncode
        if rc not in (None, 0) and not ignore_exit_code:
            raise TransportError(f"Solver exited with code {rc}")
        return results
