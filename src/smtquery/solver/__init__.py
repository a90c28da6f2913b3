"""Transports that carry SMT-LIB text to a solver.

Note: the Python Z3 bindings are optional. Importing this package should not
require Z3 unless you explicitly use the in-process Z3 transport.
"""

from .base import Transport
from .process import (
    SolverSpec,
    ProcessTransport,
    resolve_solver,
    is_solver_available,
    pick_solver,
)

try:
    from .z3_transport import Z3Transport  # type: ignore
except ImportError:  # pragma: no cover
    Z3Transport = None  # type: ignore

__all__ = [
    "Transport",
    "SolverSpec",
    "ProcessTransport",
    "resolve_solver",
    "is_solver_available",
    "pick_solver",
    "Z3Transport",
    "make_transport",
]


def make_transport(config) -> Transport:
    """Pick a transport for ``config``.

    The "z3" solver runs in-process when the Z3 bindings are installed;
    everything else is started as a subprocess.
    """
    if config.solver == "z3" and Z3Transport is not None:
        return Z3Transport.from_config(config)
    return ProcessTransport.from_config(config)
