"""Mutable per-session bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, TYPE_CHECKING

from .config import SolverConfig
from .types import OptionKind

if TYPE_CHECKING:
    from .model import SMTResult

ResumeHook = Callable[[bool], List["SMTResult"]]


@dataclass
class QueryState:
    """State owned by one interactive session.

    Only push/pop/reset/reset_assertions/exit change ``assertion_stack_depth``.
    ``proxy_scopes`` holds the assumption proxies declared at each level so
    a proxy is declared at most once while it is in scope.
    """

    config: SolverConfig
    assertion_stack_depth: int = 0
    ignore_exit_code: bool = False
    resume_hook: Optional[ResumeHook] = None
    exited: bool = False
    started: bool = False
    proxy_scopes: List[Set[str]] = field(default_factory=lambda: [set()])

    @classmethod
    def for_config(cls,
                   config: SolverConfig,
                   resume_hook: Optional[ResumeHook] = None) -> "QueryState":
        return cls(
            config=config,
            ignore_exit_code=config.ignore_exit_code,
            resume_hook=resume_hook,
        )

    @property
    def global_declarations(self) -> bool:
        return any(
            o.kind is OptionKind.GLOBAL_DECLARATIONS and o.args and o.args[0] is True
            for o in self.config.options
        )

    def proxy_declared(self, proxy: str) -> bool:
        return any(proxy in scope for scope in self.proxy_scopes)

    def record_proxy(self, proxy: str) -> None:
        self.proxy_scopes[-1].add(proxy)

    def pushed(self, n: int) -> None:
        self.assertion_stack_depth += n
        if not self.global_declarations:
            self.proxy_scopes.extend(set() for _ in range(n))

    def popped(self, n: int) -> None:
        self.assertion_stack_depth -= n
        if not self.global_declarations:
            del self.proxy_scopes[-n:]

    def cleared(self, keep_declarations: bool) -> None:
        """Return to depth 0, keeping base-level (or global) proxies if asked."""
        self.assertion_stack_depth = 0
        if not keep_declarations:
            self.proxy_scopes = [set()]
        elif not self.global_declarations:
            self.proxy_scopes = self.proxy_scopes[:1]
