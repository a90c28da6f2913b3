"""
Pytest configuration and fixtures for smtquery tests.
"""
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from smtquery import Query, SolverConfig, SymbolTable  # noqa: E402


class ScriptedTransport:
    """Transport that records commands and replays canned responses.

    ``responses`` maps a command to its reply (a string, or a list of
    strings consumed in order). ``send`` always succeeds.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.sent = []
        self.asked = []
        self.commands = []
        self.closed = False
        self.exit_code = None

    def send(self, command):
        self.sent.append(command)
        self.commands.append(command)

    def ask(self, command):
        self.asked.append(command)
        self.commands.append(command)
        reply = self.responses.get(command)
        if reply is None:
            raise AssertionError(f"No scripted response for {command}")
        if isinstance(reply, list):
            return reply.pop(0)
        return reply

    @property
    def returncode(self):
        return self.exit_code

    def close(self):
        self.closed = True


def make_query(responses=None, engine=None, config=None, resume_hook=None):
    transport = ScriptedTransport(responses)
    q = Query(config or SolverConfig(), transport, engine or SymbolTable(), resume_hook)
    return q, transport


@pytest.fixture
def engine():
    return SymbolTable()
