"""
Lock-acquisition rules: per-function nested acquisition (E1506) and the
run-wide ABBA lock-order cycle detector (E1217).

Locks are identified syntactically. A lock is acquired by a `with` item whose
terminal name matches the configured pattern, or by any `<expr>.acquire()`
call; it is released at the end of the `with` block or by `<expr>.release()`.
Inside a method, `self.x` / `cls.x` is identified as `ClassName.x` so that
methods of one class agree on lock identity.
"""

import logging
import re
import threading
from dataclasses import dataclass, field
from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_OPERATIONS
from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind, Severity
from hypcheck.domain.rules import CheckContext, Checker, RunScopedChecker, Violation
from hypcheck.domain.rules.node_query import NESTED_SCOPES, NodeQuery

logger = logging.getLogger(__name__)

_OPERATIONS = frozenset({CATEGORY_OPERATIONS})
_FUNCTION = frozenset({NodeKind.FUNCTION})
DEFAULT_LOCK_PATTERN = r"(?i)(lock|mutex|semaphore)"


@dataclass(frozen=True)
class LockTrace:
    """Acquisition facts for one function body."""

    sequence: tuple[str, ...]
    edges: frozenset[tuple[str, str]]
    max_held: int
    widest_hold: tuple[str, ...] = ()


@dataclass
class LockAcquisitionTracker:
    """Single traversal of one function body, in source order."""

    pattern: re.Pattern[str]
    owner_class: str | None
    held: list[str] = field(default_factory=list)
    sequence: list[str] = field(default_factory=list)
    edges: set[tuple[str, str]] = field(default_factory=set)
    widest_hold: tuple[str, ...] = ()

    @classmethod
    def trace(cls, func: astroid.nodes.FunctionDef, pattern: str) -> LockTrace:
        klass = NodeQuery.enclosing_class(func) if NodeQuery.is_method(func) else None
        tracker = cls(pattern=re.compile(pattern), owner_class=klass.name if klass else None)
        for stmt in func.body:
            tracker._visit(stmt)
        return LockTrace(
            sequence=tuple(tracker.sequence),
            edges=frozenset(tracker.edges),
            max_held=len(tracker.widest_hold),
            widest_hold=tracker.widest_hold,
        )

    def _walk(self, node: astroid.nodes.NodeNG) -> None:
        for child in node.get_children():
            self._visit(child)

    def _visit(self, node: astroid.nodes.NodeNG) -> None:
        if isinstance(node, (*NESTED_SCOPES, astroid.nodes.Lambda)):
            return
        if isinstance(node, astroid.nodes.With):
            acquired = []
            for expr, _alias in node.items:
                self._visit(expr)
                if self.pattern.search(NodeQuery.terminal_name(expr)):
                    lock = self._lock_id(expr)
                    if self._acquire(lock):
                        acquired.append(lock)
            for stmt in node.body:
                self._visit(stmt)
            for lock in reversed(acquired):
                self._release(lock)
            return
        self._walk(node)
        if isinstance(node, astroid.nodes.Call) and isinstance(node.func, astroid.nodes.Attribute):
            if node.func.attrname == "acquire":
                self._acquire(self._lock_id(node.func.expr))
            elif node.func.attrname == "release":
                self._release(self._lock_id(node.func.expr))

    def _lock_id(self, expr: astroid.nodes.NodeNG) -> str:
        if (
            self.owner_class
            and isinstance(expr, astroid.nodes.Attribute)
            and isinstance(expr.expr, astroid.nodes.Name)
            and expr.expr.name in ("self", "cls")
        ):
            return f"{self.owner_class}.{expr.attrname}"
        return expr.as_string()

    def _acquire(self, lock: str) -> bool:
        if lock in self.held:
            return False
        for held in self.held:
            self.edges.add((held, lock))
        self.held.append(lock)
        if lock not in self.sequence:
            self.sequence.append(lock)
        if len(self.held) > len(self.widest_hold):
            self.widest_hold = tuple(self.held)
        return True

    def _release(self, lock: str) -> None:
        if lock in self.held:
            self.held.remove(lock)


@dataclass(frozen=True)
class FunctionLockProfile:
    """One function's contribution to the run-wide lock-order graph."""

    function: str
    file_path: str
    line: int
    column: int
    sequence: tuple[str, ...]
    edges: frozenset[tuple[str, str]]

    @property
    def location(self) -> str:
        return f"{self.file_path}:{self.line}"

    @property
    def sort_key(self) -> tuple[str, int, int, str]:
        return (self.file_path, self.line, self.column, self.function)


class LockOrderLedger:
    """Thread-safe collection of lock profiles for one run; a failed file's profiles can be dropped."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._profiles: list[FunctionLockProfile] = []

    def append(self, profile: FunctionLockProfile) -> None:
        with self._lock:
            self._profiles.append(profile)

    def discard(self, file_path: str) -> None:
        with self._lock:
            self._profiles = [p for p in self._profiles if p.file_path != file_path]

    def snapshot(self) -> list[FunctionLockProfile]:
        with self._lock:
            return sorted(self._profiles, key=lambda p: p.sort_key)


class AbbaDeadlock(RunScopedChecker):
    """
    E1217: two functions take the same pair of locks in opposite orders.

    Phase 1 (check) records each function's acquisition edges in the ledger.
    Phase 2 (finish) reports one violation per offending function pair, placed
    at the earlier function and naming both locations.
    """

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1217",
        display_name="ABBA deadlock (lock-order cycle)",
        suggestion="Define one global lock order and acquire locks in that order everywhere.",
        node_kinds=_FUNCTION,
        config_key="e1217_abba_deadlock",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH,
        categories=_OPERATIONS,
        options={"lock_name_pattern": DEFAULT_LOCK_PATTERN},
    )

    def __init__(self) -> None:
        self._ledger = LockOrderLedger()

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        trace = LockAcquisitionTracker.trace(node, str(ctx.config.option("lock_name_pattern")))
        if trace.edges:
            klass = NodeQuery.enclosing_class(node) if NodeQuery.is_method(node) else None
            line, col_offset = Violation.anchor_of(node)
            self._ledger.append(
                FunctionLockProfile(
                    function=f"{klass.name}.{node.name}" if klass else node.name,
                    file_path=ctx.file_path,
                    line=line,
                    column=col_offset + 1,
                    sequence=trace.sequence,
                    edges=trace.edges,
                )
            )
        return []

    def finish(self) -> list[Violation]:
        profiles = self._ledger.snapshot()
        violations = []
        for i, first in enumerate(profiles):
            for second in profiles[i + 1:]:
                if first.sort_key == second.sort_key:
                    continue
                conflicts = sorted((a, b) for (a, b) in first.edges if (b, a) in second.edges)
                if not conflicts:
                    continue
                lock_a, lock_b = conflicts[0]
                violations.append(
                    Violation(
                        code=self.metadata.code,
                        display_name=self.metadata.display_name,
                        severity=self.default_config.severity,
                        message=(
                            f"Lock-order cycle: '{first.function}' acquires '{lock_a}' then "
                            f"'{lock_b}' ({first.location}) while '{second.function}' acquires "
                            f"'{lock_b}' then '{lock_a}' ({second.location}). Potential ABBA deadlock."
                        ),
                        file_path=first.file_path,
                        line=first.line,
                        column=first.column,
                        suggestion=self.metadata.suggestion,
                    )
                )
        logger.debug("Lock-order analysis: %d profiles, %d cycles", len(profiles), len(violations))
        return violations

    def discard(self, file_path: str) -> None:
        self._ledger.discard(file_path)


class NestedLockAcquisition(Checker):
    """E1506: one function holds more than max_held_locks locks at the same time."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1506",
        display_name="Nested lock acquisition",
        suggestion="Hold one lock at a time, or document and enforce a single acquisition order.",
        node_kinds=_FUNCTION,
        config_key="e1506_nested_lock_acquisition",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH,
        categories=_OPERATIONS,
        options={"lock_name_pattern": DEFAULT_LOCK_PATTERN, "max_held_locks": 1},
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        limit = int(ctx.config.option("max_held_locks"))
        trace = LockAcquisitionTracker.trace(node, str(ctx.config.option("lock_name_pattern")))
        if trace.max_held <= limit:
            return []
        held = ", ".join(trace.widest_hold)
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' holds {trace.max_held} locks at once ({held}).",
                node=node,
            )
        ]
