"""
Abstract transport interface between a query session and a solver.
"""
from typing import Protocol, Optional


class Transport(Protocol):
    """Protocol for exchanging SMT-LIB text with a solver.

    Implementations run one command at a time; a session never has two
    commands in flight.
    """

    def send(self, command: str) -> None:
        """Send a command whose only acceptable reply is success (or silence).

        Raises:
            ProtocolError: if the solver reports an error for the command
            TransportError: if the solver cannot be reached
        """
        ...

    def ask(self, command: str) -> str:
        """Send a command and return the solver's full response text."""
        ...

    def close(self) -> None:
        """Release the solver. Safe to call more than once."""
        ...

    @property
    def returncode(self) -> Optional[int]:
        """Exit status of the solver, or None while it is still running."""
        ...
