"""
Basic test to verify package setup is correct.
"""

def test_package_imports():
    """Test that the package can be imported."""
    import smtquery
    assert smtquery.__version__ == "0.1.0"
    assert hasattr(smtquery, '__version__')


def test_package_structure():
    """Test that subpackages are accessible."""
    from smtquery import control, sexpr, solver
    assert hasattr(control, "Query")
    assert hasattr(sexpr, "parse_sexpr")
    assert hasattr(solver, "make_transport")
