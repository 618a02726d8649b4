"""E17xx performance rules: quadratic string building and repeated expensive setup in loops."""

from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_COMPLEXITY
from hypcheck.domain.entities import SCOPE_KINDS, CheckerConfig, CheckerMetadata, Severity
from hypcheck.domain.rules import CheckContext, Checker, Violation
from hypcheck.domain.rules.node_query import NodeQuery

_COMPLEXITY = frozenset({CATEGORY_COMPLEXITY})


class StringConcatInLoop(Checker):
    """E1703: 'text += <string>' inside a loop body."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1703",
        display_name="String concatenation in loop",
        suggestion="Collect the pieces in a list and ''.join() them once, or write to io.StringIO.",
        node_kinds=SCOPE_KINDS,
        config_key="e1703_string_concat_in_loop",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_COMPLEXITY
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for aug in NodeQuery.own_nodes_of(node, astroid.nodes.AugAssign):
            if aug.op != "+=" or not self._builds_string(aug.value):
                continue
            if NodeQuery.in_loop_body(aug):
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"'{aug.target.as_string()} += ...' rebuilds the string on every iteration.",
                        node=aug,
                    )
                )
        return violations

    @staticmethod
    def _builds_string(value: astroid.nodes.NodeNG) -> bool:
        if NodeQuery.is_string_literal(value):
            return True
        if isinstance(value, astroid.nodes.BinOp) and value.op in ("+", "%"):
            return NodeQuery.is_string_literal(value.left) or NodeQuery.is_string_literal(value.right)
        if isinstance(value, astroid.nodes.Call):
            return NodeQuery.call_name(value) == "str" or NodeQuery.terminal_name(value.func) == "format"
        return False


class ExpensiveOpInLoop(Checker):
    """E1712: regex compilation or deep copies repeated on every iteration."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1712",
        display_name="Expensive operation in loop",
        suggestion="Hoist the operation out of the loop, or compile patterns once at module level.",
        node_kinds=SCOPE_KINDS,
        config_key="e1712_expensive_op_in_loop",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_COMPLEXITY
    )

    EXPENSIVE_CALLS: ClassVar[frozenset[str]] = frozenset({"re.compile", "copy.deepcopy", "deepcopy"})

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name in self.EXPENSIVE_CALLS and NodeQuery.in_loop_body(call):
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"{name}() runs on every loop iteration.",
                        node=call,
                    )
                )
        return violations
