"""
Tests for the subprocess transport and solver discovery.
"""
import shutil
import stat
import sys
import textwrap

import pytest

from smtquery import Query, SolverConfig
from smtquery.control import CheckSatResult, ProtocolError, TransportError
from smtquery.solver import (
    ProcessTransport,
    SolverSpec,
    resolve_solver,
    is_solver_available,
    pick_solver,
)

FAKE_SOLVER = textwrap.dedent('''
    import sys
    for line in sys.stdin:
        cmd = line.strip()
        if cmd == "(exit)":
            print("success", flush=True)
            break
        if cmd == "(check-sat)":
            print("sat", flush=True)
        elif cmd.startswith("(get-value"):
            print("((x", flush=True)
            print("  (- 4))", flush=True)
            print(" (y true))", flush=True)
        elif cmd.startswith("(assert bad"):
            print('(error "unknown constant bad")', flush=True)
        elif cmd == "(crash)":
            sys.exit(3)
        else:
            print("success", flush=True)
''')


@pytest.fixture
def fake_solver(tmp_path):
    script = tmp_path / "fake_solver.py"
    script.write_text(FAKE_SOLVER)
    return SolverSpec("fake", (sys.executable, str(script)))


def test_resolve_known_solver():
    spec = resolve_solver("z3")
    assert spec.name == "z3"
    assert spec.argv[0] == "z3"
    assert "-in" in spec.argv


def test_resolve_path(tmp_path):
    spec = resolve_solver(str(tmp_path / "my-solver"))
    assert spec.name == "my-solver"
    assert spec.argv == (str(tmp_path / "my-solver"),)


def test_is_solver_available_explicit_path(tmp_path):
    exe = tmp_path / "solver"
    exe.write_text("#!/bin/sh\n")
    assert not is_solver_available(str(exe))
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR)
    assert is_solver_available(str(exe))


def test_pick_solver_env_override(tmp_path, monkeypatch):
    exe = tmp_path / "custom"
    exe.write_text("#!/bin/sh\n")
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR)
    monkeypatch.setenv("SMTQUERY_SOLVER", str(exe))
    assert pick_solver().name == "custom"


def test_pick_solver_none_available(monkeypatch):
    monkeypatch.delenv("SMTQUERY_SOLVER", raising=False)
    assert pick_solver(preferred=("definitely-not-a-solver-xyz",)) is None


def test_fake_solver_session(fake_solver):
    """Test a full exchange, including a multi-line response."""
    t = ProcessTransport(fake_solver, timeout_s=10.0)
    with Query.open(SolverConfig(), transport=t) as q:
        q.send("(declare-const x Int)")
        q.push(2)
        assert q.check_sat() is CheckSatResult.SAT
        assert q.get_value(["x", "y"]) == [("x", -4), ("y", True)]
        q.pop(2)
        q.exit()
    assert t.returncode == 0


def test_fake_solver_error_ack(fake_solver):
    t = ProcessTransport(fake_solver, timeout_s=10.0)
    try:
        with pytest.raises(ProtocolError) as exc:
            t.send("(assert bad)")
        assert "unknown constant" in exc.value.response
    finally:
        t.close()


def test_fake_solver_dies(fake_solver):
    t = ProcessTransport(fake_solver, timeout_s=10.0)
    try:
        with pytest.raises(TransportError):
            t.ask("(crash)")
    finally:
        t.close()
    assert t.returncode == 3


def test_missing_executable():
    with pytest.raises(TransportError):
        ProcessTransport(SolverSpec("nope", ("definitely-not-a-solver-xyz",)))


@pytest.mark.skipif(shutil.which("z3") is None, reason="z3 executable not installed")
def test_real_z3_process():
    t = ProcessTransport(resolve_solver("z3"), timeout_s=30.0)
    with Query.open(SolverConfig(solver="z3"), transport=t) as q:
        q.send("(declare-const b Bool)")
        q.send("(assert (and b (not b)))")
        assert q.check_sat() is CheckSatResult.UNSAT
