"""Domain models for checkers and violations."""

from dataclasses import dataclass

__all__ = [
    "CheckContext",
    "Checker",
    "RunScopedChecker",
    "Violation",
]

from typing import ClassVar, Protocol, runtime_checkable

import astroid

from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, Severity


@dataclass(frozen=True)
class Violation:
    """One reported instance of a broken rule, with location and resolved severity."""

    code: str
    display_name: str
    severity: Severity
    message: str
    file_path: str
    line: int
    column: int
    suggestion: str | None = None

    @property
    def location(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}"

    @classmethod
    def from_node(
        cls,
        *,
        metadata: CheckerMetadata,
        ctx: "CheckContext",
        message: str,
        node: astroid.nodes.NodeNG,
        line: int | None = None,
        column: int | None = None,
    ) -> "Violation":
        """Build a Violation located at node (1-based line and column). Prefer over manual construction."""
        anchor_line, anchor_col = cls.anchor_of(node)
        lineno = line if line is not None else anchor_line
        col = column if column is not None else anchor_col + 1
        return cls(
            code=metadata.code,
            display_name=metadata.display_name,
            severity=ctx.config.severity,
            message=message,
            file_path=ctx.file_path,
            line=lineno,
            column=col,
            suggestion=metadata.suggestion or None,
        )

    @staticmethod
    def anchor_of(node: astroid.nodes.NodeNG) -> tuple[int, int]:
        """(line, 0-based column) of node; definitions anchor on the def/class keyword, not a decorator."""
        if isinstance(node, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)):
            position = getattr(node, "position", None)
            if position is not None:
                return position.lineno, position.col_offset
            return node.fromlineno or 1, node.col_offset or 0
        return getattr(node, "lineno", None) or 1, getattr(node, "col_offset", None) or 0


@dataclass(frozen=True)
class CheckContext:
    """Read-only view handed to a checker for one invocation."""

    file_path: str
    config: CheckerConfig
    source_lines: tuple[str, ...] = ()


# -----------------------------------------------------------------------------
# Checker protocols: Checker (per node, stateless) and RunScopedChecker
# (accumulates across the whole run, then emits in finish()).
# -----------------------------------------------------------------------------


class Checker(Protocol):
    """Inspect one node with this run's config snapshot and return violations."""

    metadata: ClassVar[CheckerMetadata]
    default_config: ClassVar[CheckerConfig]

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        """Interrogate a node of one of metadata.node_kinds."""
        ...


@runtime_checkable
class RunScopedChecker(Checker, Protocol):
    """
    Two-phase checker: check() records per-node facts into run-scoped state and
    usually returns nothing; finish() runs once after every file is processed.

    One instance is created per run, so the accumulated state never leaks
    across runs. check() may be called from several worker threads.
    """

    def finish(self) -> list[Violation]:
        """Evaluate the accumulated facts and return the run-level violations."""
        ...

    def discard(self, file_path: str) -> None:
        """Forget every fact recorded for file_path; called when check() failed on that file."""
        ...
