"""
In-process transport backed by the Z3 Python bindings.

Command text is evaluated by Z3's own SMT-LIB front end, so the session
sees the same responses an external ``z3 -in`` would print.
"""
import logging
from typing import Optional

import z3

from ..control.errors import ProtocolError, TransportError

logger = logging.getLogger(__name__)


def _error_text(exc: "z3.Z3Exception") -> str:
    value = exc.value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value).strip()


class Z3Transport:
    """Z3 transport wrapper.

    Each instance owns a private Z3 context, so independent sessions do
    not share declarations.
    """

    def __init__(self):
        """Initialize a fresh Z3 context."""
        self.ctx = z3.Context()
        self._closed = False
        self._exit_requested = False

    @classmethod
    def from_config(cls, config) -> "Z3Transport":
        return cls()

    def _eval(self, command: str) -> str:
        if self._closed:
            raise TransportError("Z3 transport is closed")
        try:
            out = z3.Z3_eval_smtlib2_string(self.ctx.ref(), command)
        except z3.Z3Exception as e:
            # Z3 reports command failures by raising with the text it printed
            text = _error_text(e)
            logger.debug(f"Z3 reported an error for {command}: {text}")
            return text
        return out.strip()

    def send(self, command: str) -> None:
        """Evaluate a command that should produce no output.

        Args:
            command: SMT-LIB command text

        Raises:
            ProtocolError: if Z3 prints anything other than success
        """
        response = self._eval(command)
        if command.strip() == "(exit)":
            self._exit_requested = True
            return
        if response and response != "success":
            raise ProtocolError("send", command, "success", response)

    def ask(self, command: str) -> str:
        """Evaluate a command and return its printed response."""
        return self._eval(command)

    @property
    def returncode(self) -> Optional[int]:
        # Z3 runs in-process; it has exited cleanly once asked to.
        return 0 if self._exit_requested else None

    def close(self) -> None:
        self._closed = True
