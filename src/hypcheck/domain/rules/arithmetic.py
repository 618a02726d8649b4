"""E14xx arithmetic rules: literal division/modulo by zero and float equality."""

from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_OPERATIONS
from hypcheck.domain.entities import SCOPE_KINDS, CheckerConfig, CheckerMetadata, Severity
from hypcheck.domain.rules import CheckContext, Checker, Violation
from hypcheck.domain.rules.node_query import NodeQuery

_OPERATIONS = frozenset({CATEGORY_OPERATIONS})


class _ZeroOperandRule:
    """Shared scan for binary and augmented operations whose right operand is literal zero."""

    OPERATORS: ClassVar[frozenset[str]] = frozenset()

    def _zero_operations(self, scope: astroid.nodes.NodeNG):
        for node in NodeQuery.own_nodes_of(scope, (astroid.nodes.BinOp, astroid.nodes.AugAssign)):
            op = node.op.rstrip("=")
            right = node.right if isinstance(node, astroid.nodes.BinOp) else node.value
            if op in self.OPERATORS and NodeQuery.number_value(right) == 0:
                yield node, op


class DivisionByZero(_ZeroOperandRule, Checker):
    """E1402: '/' or '//' with a literal zero divisor."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1402",
        display_name="Division by zero",
        suggestion="Guard the divisor, or raise a descriptive error for the zero case.",
        node_kinds=SCOPE_KINDS,
        config_key="e1402_division_by_zero",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )
    OPERATORS: ClassVar[frozenset[str]] = frozenset({"/", "//"})

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"'{op}' by literal zero always raises ZeroDivisionError.",
                node=operation,
            )
            for operation, op in self._zero_operations(node)
        ]


class ModuloByZero(_ZeroOperandRule, Checker):
    """E1403: '%' with a literal zero divisor (string formatting excluded)."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1403",
        display_name="Modulo by zero",
        suggestion="Guard the modulus, or raise a descriptive error for the zero case.",
        node_kinds=SCOPE_KINDS,
        config_key="e1403_modulo_by_zero",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )
    OPERATORS: ClassVar[frozenset[str]] = frozenset({"%"})

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for operation, _op in self._zero_operations(node):
            left = operation.left if isinstance(operation, astroid.nodes.BinOp) else None
            if NodeQuery.is_string_literal(left):
                continue
            violations.append(
                Violation.from_node(
                    metadata=self.metadata,
                    ctx=ctx,
                    message="'%' by literal zero always raises ZeroDivisionError.",
                    node=operation,
                )
            )
        return violations


class FloatEquality(Checker):
    """E1410: == or != against a float literal or float() conversion."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1410",
        display_name="Float equality comparison",
        suggestion="Compare with a tolerance: math.isclose(a, b) or abs(a - b) < eps.",
        node_kinds=SCOPE_KINDS,
        config_key="e1410_float_equality",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for compare in NodeQuery.own_nodes_of(node, astroid.nodes.Compare):
            left = compare.left
            for op, right in compare.ops:
                if op in ("==", "!=") and (self._is_float(left) or self._is_float(right)):
                    violations.append(
                        Violation.from_node(
                            metadata=self.metadata,
                            ctx=ctx,
                            message=f"Exact float comparison '{compare.as_string()}'.",
                            node=compare,
                        )
                    )
                    break
                left = right
        return violations

    @staticmethod
    def _is_float(node: astroid.nodes.NodeNG) -> bool:
        if isinstance(NodeQuery.number_value(node), float):
            return True
        return isinstance(node, astroid.nodes.Call) and NodeQuery.call_name(node) == "float"
