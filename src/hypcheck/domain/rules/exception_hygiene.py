"""E13xx error-handling rules: bare except, suppressed and swallowed errors, lost context."""

from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_OPERATIONS
from hypcheck.domain.entities import (
    SCOPE_KINDS,
    CheckerConfig,
    CheckerMetadata,
    NodeKind,
    Severity,
)
from hypcheck.domain.rules import CheckContext, Checker, Violation
from hypcheck.domain.rules.node_query import NodeQuery

_OPERATIONS = frozenset({CATEGORY_OPERATIONS})
_BROAD_EXCEPTIONS = frozenset({"Exception", "BaseException"})


class BareExcept(Checker):
    """E1301: 'except:' catches everything, including KeyboardInterrupt and SystemExit."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1301",
        display_name="Bare except",
        suggestion="Catch the specific exceptions you can handle.",
        node_kinds=SCOPE_KINDS,
        config_key="e1301_bare_except",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message="Bare 'except:' catches all exceptions, including SystemExit and KeyboardInterrupt.",
                node=handler,
            )
            for handler in NodeQuery.own_nodes_of(node, astroid.nodes.ExceptHandler)
            if handler.type is None
        ]


class SuppressedBroadException(Checker):
    """E1303: contextlib.suppress(Exception) silently ignores every error in the block."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1303",
        display_name="Ignored errors",
        suggestion="Suppress only the specific exception you expect, or handle and log it.",
        node_kinds=SCOPE_KINDS,
        config_key="e1303_ignored_errors",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            if NodeQuery.terminal_name(call.func) != "suppress":
                continue
            broad = [a.as_string() for a in call.args if NodeQuery.terminal_name(a) in _BROAD_EXCEPTIONS]
            if broad:
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"suppress({', '.join(broad)}) ignores every error raised in the block.",
                        node=call,
                    )
                )
        return violations


class SwallowedException(Checker):
    """E1306: handler body that only passes, continues or is an ellipsis."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1306",
        display_name="Swallowed errors",
        suggestion="Log the error, re-raise it, or handle it explicitly.",
        node_kinds=SCOPE_KINDS,
        config_key="e1306_swallowed_errors",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for handler in NodeQuery.own_nodes_of(node, astroid.nodes.ExceptHandler):
            if not self._is_empty_body(handler.body):
                continue
            caught = handler.type.as_string() if handler.type is not None else "everything"
            violations.append(
                Violation.from_node(
                    metadata=self.metadata,
                    ctx=ctx,
                    message=f"Handler for {caught} discards the error without handling it.",
                    node=handler,
                )
            )
        return violations

    @staticmethod
    def _is_empty_body(body: list[astroid.nodes.NodeNG]) -> bool:
        for stmt in body:
            if isinstance(stmt, (astroid.nodes.Pass, astroid.nodes.Continue)):
                continue
            if (
                isinstance(stmt, astroid.nodes.Expr)
                and isinstance(stmt.value, astroid.nodes.Const)
                and stmt.value.value is Ellipsis
            ):
                continue
            return False
        return True


class GenericExceptionRaised(Checker):
    """E1307: raising Exception/BaseException forces callers to catch everything."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1307",
        display_name="Generic exception type",
        suggestion="Define a domain-specific exception class, or raise a specific built-in one.",
        node_kinds=SCOPE_KINDS,
        config_key="e1307_generic_exception_type",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for stmt in NodeQuery.own_nodes_of(node, astroid.nodes.Raise):
            exc = stmt.exc
            target = exc.func if isinstance(exc, astroid.nodes.Call) else exc
            if isinstance(target, astroid.nodes.Name) and target.name in _BROAD_EXCEPTIONS:
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"Raising generic {target.name}; callers cannot handle it selectively.",
                        node=stmt,
                    )
                )
        return violations


class RaiseInFinalizer(Checker):
    """E1309: exceptions raised from __del__ are ignored and printed to stderr."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1309",
        display_name="Raise in finalizer",
        suggestion="Make __del__ best-effort, or release resources with a context manager.",
        node_kinds=frozenset({NodeKind.FUNCTION}),
        config_key="e1309_raise_in_finalizer",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef) or node.name != "__del__":
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message="Exception raised in __del__ is never propagated to a caller.",
                node=stmt,
            )
            for stmt in NodeQuery.own_nodes_of(node, astroid.nodes.Raise)
        ]


class ErrorContextLoss(Checker):
    """E1310: a new exception raised inside an except block without 'from'."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1310",
        display_name="Error context loss",
        suggestion="Chain the original error: 'raise NewError(...) from err'.",
        node_kinds=SCOPE_KINDS,
        config_key="e1310_error_context_loss",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for stmt in NodeQuery.own_nodes_of(node, astroid.nodes.Raise):
            if stmt.exc is None or stmt.cause is not None:
                continue
            handler = self._enclosing_handler(stmt)
            if handler is None or self._reraises_caught(stmt, handler):
                continue
            violations.append(
                Violation.from_node(
                    metadata=self.metadata,
                    ctx=ctx,
                    message=f"'raise {stmt.exc.as_string()}' inside an except block drops the original cause.",
                    node=stmt,
                )
            )
        return violations

    @staticmethod
    def _enclosing_handler(stmt: astroid.nodes.Raise) -> astroid.nodes.ExceptHandler | None:
        for ancestor in stmt.node_ancestors():
            if isinstance(ancestor, astroid.nodes.ExceptHandler):
                return ancestor
            if isinstance(ancestor, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef, astroid.nodes.Lambda)):
                return None
        return None

    @staticmethod
    def _reraises_caught(stmt: astroid.nodes.Raise, handler: astroid.nodes.ExceptHandler) -> bool:
        return (
            isinstance(stmt.exc, astroid.nodes.Name)
            and handler.name is not None
            and stmt.exc.name == handler.name.name
        )
