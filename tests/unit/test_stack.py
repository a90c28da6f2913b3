"""
Tests for the assertion stack protocol.
"""
import random

import pytest

from smtquery.control import (
    UsageError,
    StackUnderflowError,
    SessionClosedError,
)
from conftest import make_query


def test_push_pop_depth():
    """Test depth follows pushes minus pops."""
    q, t = make_query()

    q.push(1)
    q.push(3)
    q.pop(2)

    assert q.get_assertion_stack_depth() == 2
    assert t.sent == ["(push 1)", "(push 3)", "(pop 2)"]


def test_random_push_pop_sequences():
    """Test depth invariant over random valid sequences."""
    rng = random.Random(1234)
    for _ in range(20):
        q, t = make_query()
        pushed = popped = 0
        for _ in range(30):
            depth = q.get_assertion_stack_depth()
            if depth and rng.random() < 0.5:
                n = rng.randint(1, depth)
                q.pop(n)
                popped += n
            else:
                n = rng.randint(1, 4)
                q.push(n)
                pushed += n
            assert q.get_assertion_stack_depth() == pushed - popped
            assert q.get_assertion_stack_depth() >= 0


@pytest.mark.parametrize("n", [0, -1])
def test_push_requires_positive(n):
    q, t = make_query()
    with pytest.raises(UsageError, match=str(n)):
        q.push(n)
    assert t.sent == []


@pytest.mark.parametrize("n", [0, -3])
def test_pop_requires_positive(n):
    q, t = make_query()
    q.push(2)
    with pytest.raises(UsageError):
        q.pop(n)
    assert q.get_assertion_stack_depth() == 2


def test_pop_underflow_sends_nothing():
    """Test popping past the base level fails without a command."""
    q, t = make_query()
    q.push(2)

    with pytest.raises(StackUnderflowError) as exc:
        q.pop(3)

    assert exc.value.requested == 3
    assert exc.value.depth == 2
    assert "3 levels" in str(exc.value)
    assert q.get_assertion_stack_depth() == 2
    assert t.sent == ["(push 2)"]


def test_pop_underflow_single_level_message():
    q, t = make_query()
    with pytest.raises(StackUnderflowError, match="one level"):
        q.pop(1)


def test_underflow_is_a_usage_error():
    assert issubclass(StackUnderflowError, UsageError)
    assert issubclass(UsageError, ValueError)


@pytest.mark.parametrize("op,cmd", [
    ("reset", "(reset)"),
    ("reset_assertions", "(reset-assertions)"),
    ("exit", "(exit)"),
])
def test_reset_family_zeroes_depth(op, cmd):
    """Test reset, reset-assertions and exit all return depth to 0."""
    q, t = make_query()
    q.push(5)

    getattr(q, op)()

    assert q.get_assertion_stack_depth() == 0
    assert t.sent[-1] == cmd


def test_depth_read_does_not_talk_to_solver():
    q, t = make_query()
    q.get_assertion_stack_depth()
    assert t.commands == []


def test_commands_after_exit_are_rejected():
    """Test the session refuses to talk to an exited solver."""
    q, t = make_query({"(check-sat)": "sat"})
    q.exit()

    with pytest.raises(SessionClosedError):
        q.check_sat()
    with pytest.raises(SessionClosedError):
        q.push(1)

    assert t.commands == ["(exit)"]
    assert q.get_assertion_stack_depth() == 0
