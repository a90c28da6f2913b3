"""
Assumption proxies for ``check-sat-assuming``.

SMT-LIB only accepts literals as assumptions, so each assumption is bound
to a fresh Boolean constant and the constants are passed instead. The
proxy name is a pure function of the assumption's symbol, so a proxy is
declared once per scope. Its binding is an assertion and is re-sent on
every call, since assertions do not outlive `pop` or `reset-assertions`.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Sequence

from ..symbolic import SymbolicEngine, TRUE_SYMBOL

logger = logging.getLogger(__name__)

PROXY_PREFIX = "__assumption_proxy_"


def strip_bars(name: str) -> str:
    """Remove SMT-LIB ``|...|`` quoting from a symbol, if present."""
    if name.startswith("|"):
        name = name[1:]
    if name.endswith("|"):
        name = name[:-1]
    return name


def proxy_name(symbol: str) -> str:
    """Canonical proxy constant name for ``symbol``."""
    if symbol.startswith("|") and symbol.endswith("|") and len(symbol) >= 2:
        return f"|{PROXY_PREFIX}{strip_bars(symbol)}|"
    return f"{PROXY_PREFIX}{symbol}"


@dataclass(frozen=True)
class ProxyAssumption:
    """An assumption together with the proxy that stands in for it."""
    symbol: str
    proxy: str
    expr: Any

    def declaration(self) -> str:
        return f"(declare-const {self.proxy} Bool)"

    def binding(self) -> str:
        return f"(assert (= {self.proxy} {self.symbol}))"


def encode_assumptions(engine: SymbolicEngine,
                       assumptions: Iterable[Any]) -> List[ProxyAssumption]:
    """Resolve, deduplicate and proxy the given assumptions.

    The first occurrence of each symbol wins; assumptions that resolve to
    the literal true are dropped.
    """
    seen = set()
    out: List[ProxyAssumption] = []
    for expr in assumptions:
        sym = engine.to_symbol(expr)
        if sym in seen or sym == TRUE_SYMBOL:
            continue
        seen.add(sym)
        out.append(ProxyAssumption(sym, proxy_name(sym), expr))
    logger.debug(f"Encoded {len(out)} assumption proxies: {[p.proxy for p in out]}")
    return out


def check_sat_assuming_command(proxies: Sequence[ProxyAssumption]) -> str:
    return "(check-sat-assuming (" + " ".join(p.proxy for p in proxies) + "))"


def proxy_table(proxies: Sequence[ProxyAssumption]) -> Dict[str, ProxyAssumption]:
    """Map unquoted proxy names back to their assumptions."""
    return {strip_bars(p.proxy): p for p in proxies}
