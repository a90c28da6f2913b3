"""
Tests for model validation and result construction.
"""
import pytest

from smtquery.control import (
    Assignment,
    CheckSatResult,
    Model,
    ProofError,
    Satisfiable,
    SolverConfig,
    TransportError,
    Unknown,
    Unsatisfiable,
    ValidationError,
    validate_assignments,
)
from conftest import make_query


def test_validate_missing_and_duplicate():
    """Test {x, y} with [x=1, x=1] reports y missing and x duplicated."""
    with pytest.raises(ValidationError) as exc:
        validate_assignments([Assignment("x", 1), Assignment("x", 1)], ["x", "y"])

    err = exc.value
    assert err.missing == ["y"]
    assert err.duplicate == ["x"]
    assert err.extra == []


def test_validate_extra():
    """Test {x} with [x=1, z=2] reports only z as extra."""
    with pytest.raises(ValidationError) as exc:
        validate_assignments([Assignment("x", 1), Assignment("z", 2)], ["x"])

    err = exc.value
    assert err.extra == ["z"]
    assert err.missing == []
    assert err.duplicate == []


def test_duplicates_reported_once():
    with pytest.raises(ValidationError) as exc:
        validate_assignments([Assignment("x", 1)] * 3 + [Assignment("y", 0)], ["x", "y"])
    assert exc.value.duplicate == ["x"]


def test_validation_message_alignment():
    """Test the report lists each non-empty category with aligned labels."""
    with pytest.raises(ValidationError) as exc:
        validate_assignments([Assignment("x", 1), Assignment("x", 2), Assignment("z", 0)],
                             ["x", "y", "w"])

    lines = str(exc.value).splitlines()
    rows = [l for l in lines if l.startswith("***   ")]
    assert rows == [
        "***   Missing inputs    : y, w",
        "***   Extra bindings    : z",
        "***   Duplicate bindings: x",
    ]


def test_validation_message_omits_empty_categories():
    with pytest.raises(ValidationError) as exc:
        validate_assignments([], ["a", "b"])

    text = str(exc.value)
    assert "***   Missing inputs: a, b" in text
    assert "Extra" not in text
    assert "Duplicate" not in text


def test_validate_ok_keeps_order():
    model = validate_assignments([Assignment("y", True), Assignment("x", 7)], ["x", "y"])
    assert model == Model(assignments=[("y", True), ("x", 7)], objectives=[])
    assert model.as_dict() == {"x": 7, "y": True}


def test_success_builds_satisfiable(engine):
    """Test success wraps the validated model in a single result."""
    x = engine.declare("x", "Int")
    y = engine.declare("y", "Bool")
    q, t = make_query(engine=engine)

    results = q.success([q.assign(x, 5), q.assign(y, False)])

    assert len(results) == 1
    r = results[0]
    assert isinstance(r, Satisfiable)
    assert r.config is q.config
    assert r.model.assignments == [("x", 5), ("y", False)]
    assert r.model.objectives == []
    assert t.commands == []


def test_success_rejects_bad_model(engine):
    engine.declare("x")
    q, t = make_query(engine=engine)
    with pytest.raises(ValidationError):
        q.success([q.assign("x", True), q.assign("ghost", False)])


def test_result_and_failure_bypass_validation(engine):
    engine.declare("x")
    q, t = make_query(engine=engine)

    r = Unsatisfiable(q.config)
    assert q.result(r) == [r]

    [err] = q.failure(["solver crashed", "no model"])
    assert isinstance(err, ProofError)
    assert err.messages == ["solver crashed", "no model"]
    assert "solver crashed" in str(err)


def test_resume_uses_hook_with_exit_code_flag():
    """Test sbv_resume delegates to the supplied default routine."""
    calls = []

    def hook(ignore):
        calls.append(ignore)
        return ["done"]

    q, t = make_query(config=SolverConfig(ignore_exit_code=True), resume_hook=hook)

    assert q.ignore_exit_code() is True
    assert q.sbv_resume() == ["done"]
    assert calls == [True]


def test_default_resume_sat(engine):
    engine.declare("x", "Int")
    q, t = make_query({"(check-sat)": "sat", "(get-value (x))": "((x 9))"}, engine=engine)

    [r] = q.sbv_resume()

    assert isinstance(r, Satisfiable)
    assert r.model.assignments == [("x", 9)]


def test_default_resume_unsat():
    q, t = make_query({"(check-sat)": "unsat"})
    [r] = q.sbv_resume()
    assert isinstance(r, Unsatisfiable)


def test_default_resume_unknown_reason():
    q, t = make_query({
        "(check-sat)": "unknown",
        "(get-info :reason-unknown)": '(:reason-unknown "canceled")',
    })
    [r] = q.sbv_resume()
    assert isinstance(r, Unknown)
    assert r.reason == "canceled"


def test_default_resume_exit_code():
    """Test a failed solver exit is reported unless ignored."""
    q, t = make_query({"(check-sat)": ["unsat", "unsat"]})
    t.exit_code = 1

    with pytest.raises(TransportError):
        q.sbv_resume()

    q.state.ignore_exit_code = True
    [r] = q.sbv_resume()
    assert isinstance(r, Unsatisfiable)
