"""
Exceptions raised by query sessions.

Every exception derives from ``QueryError``. Callers catch the specific
kind they can handle; none of them leaves the session unusable except
``TransportError``.
"""
from typing import Optional, Sequence, Tuple


class QueryError(Exception):
    """Base class for all query-layer errors."""


class UsageError(QueryError, ValueError):
    """The caller misused an operation. Nothing was sent to the solver."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class StackUnderflowError(UsageError):
    def __init__(self, requested: int, depth: int):
        levels = "one level" if requested == 1 else f"{requested} levels"
        super().__init__(
            "pop",
            f"Illegally trying to pop {levels}, at current level: {depth}",
        )
        self.requested = requested
        self.depth = depth


class StartModeOptionError(UsageError):
    def __init__(self, option):
        super().__init__(
            "set_option",
            f"{option} can only be set at start-up time.\n"
            "Hint: Move the option into the session configuration, "
            "so it is sent before the query begins.",
        )
        self.option = option


class SessionClosedError(UsageError):
    def __init__(self, command: str):
        super().__init__(
            "send",
            f"Session has exited; refusing to send {command}",
        )
        self.command = command


class ProtocolError(QueryError):
    """The solver's response did not have the shape the command expects.

    Attributes:
        operation: Name of the query operation (e.g. "checkSat")
        command: Command text sent to the solver
        expected: Description of the expected response
        response: Raw response text
        hints: Corrective hints, one line each
    """

    def __init__(self,
                 operation: str,
                 command: str,
                 expected: str,
                 response: str,
                 hints: Optional[Sequence[str]] = None):
        self.operation = operation
        self.command = command
        self.expected = expected
        self.response = response
        self.hints: Tuple[str, ...] = tuple(hints or ())
        super().__init__(self.format())

    def format(self) -> str:
        lines = [
            "",
            f"*** Unexpected response from the solver in {self.operation}.",
            f"***    Sent      : {self.command}",
            f"***    Expected  : {self.expected}",
            f"***    Received  : {self.response.strip()}",
        ]
        if self.hints:
            lines.append("***")
            lines.extend(f"***    {h}" if h else "***" for h in self.hints)
        return "\n".join(lines)


class ValidationError(QueryError):
    """A candidate model does not match the declared inputs.

    All three categories are computed before this is raised.
    """

    MISSING_TAG = "***   Missing inputs"
    EXTRA_TAG = "***   Extra bindings"
    DUPLICATE_TAG = "***   Duplicate bindings"

    def __init__(self,
                 missing: Sequence[str] = (),
                 extra: Sequence[str] = (),
                 duplicate: Sequence[str] = ()):
        self.missing = list(missing)
        self.extra = list(extra)
        self.duplicate = list(duplicate)
        super().__init__(self.format())

    def format(self) -> str:
        rows = [
            (tag, names) for tag, names in (
                (self.MISSING_TAG, self.missing),
                (self.EXTRA_TAG, self.extra),
                (self.DUPLICATE_TAG, self.duplicate),
            ) if names
        ]
        width = max([0] + [len(tag) for tag, _ in rows])
        lines = ["", "*** Query model construction has a faulty assignment."]
        lines.extend(f"{tag.ljust(width)}: {', '.join(names)}" for tag, names in rows)
        lines.append("*** Check your query result construction!")
        return "\n".join(lines)


class TransportError(QueryError):
    """The solver could not be reached, died, or timed out."""
