"""E11xx complexity rules built on one body traversal: cyclomatic score and nesting depths."""

from dataclasses import dataclass
from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_COMPLEXITY
from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind, Severity
from hypcheck.domain.rules import CheckContext, Checker, Violation
from hypcheck.domain.rules.node_query import NESTED_SCOPES, NodeQuery

_COMPLEXITY = frozenset({CATEGORY_COMPLEXITY})
_FUNCTION = frozenset({NodeKind.FUNCTION})

_TRY_NODES = tuple(
    klass
    for klass in (getattr(astroid.nodes, "Try", None), getattr(astroid.nodes, "TryStar", None))
    if klass is not None
)
_BLOCK_NODES = (astroid.nodes.For, astroid.nodes.While, astroid.nodes.Match, *_TRY_NODES)


@dataclass(frozen=True)
class ComplexityProfile:
    """Result of one traversal of one function body."""

    cyclomatic: int
    max_depth: int
    max_if_depth: int
    max_match_depth: int


class ComplexityCounter:
    """
    Walk a function body once, counting decision points and nesting.

    Decision points: if/elif, for, while, conditional expressions, except
    handlers, each match case beyond the first, each extra operand of and/or,
    and each comprehension generator and filter. Score = 1 + decision points.

    Nesting depth rises on if (not elif), for, while, try and match blocks.
    Nested function and class definitions are not entered.
    """

    def __init__(self) -> None:
        self._decisions = 0
        self._max_depth = 0
        self._max_if_depth = 0
        self._max_match_depth = 0

    @classmethod
    def profile(cls, func: astroid.nodes.FunctionDef) -> ComplexityProfile:
        counter = cls()
        counter._visit(func, 0, 0, 0)
        return ComplexityProfile(
            cyclomatic=1 + counter._decisions,
            max_depth=counter._max_depth,
            max_if_depth=counter._max_if_depth,
            max_match_depth=counter._max_match_depth,
        )

    def _visit(self, node: astroid.nodes.NodeNG, depth: int, if_depth: int, match_depth: int) -> None:
        for child in node.get_children():
            if isinstance(child, NESTED_SCOPES):
                continue
            self._decisions += self._decision_points(child)
            child_depth, child_if, child_match = depth, if_depth, match_depth
            if isinstance(child, astroid.nodes.If) and not NodeQuery.is_elif(child):
                child_depth += 1
                child_if += 1
            elif isinstance(child, _BLOCK_NODES):
                child_depth += 1
                if isinstance(child, astroid.nodes.Match):
                    child_match += 1
            self._max_depth = max(self._max_depth, child_depth)
            self._max_if_depth = max(self._max_if_depth, child_if)
            self._max_match_depth = max(self._max_match_depth, child_match)
            self._visit(child, child_depth, child_if, child_match)

    @staticmethod
    def _decision_points(node: astroid.nodes.NodeNG) -> int:
        if isinstance(
            node,
            (
                astroid.nodes.If,
                astroid.nodes.For,
                astroid.nodes.While,
                astroid.nodes.IfExp,
                astroid.nodes.ExceptHandler,
            ),
        ):
            return 1
        if isinstance(node, astroid.nodes.Match):
            return max(0, len(node.cases) - 1)
        if isinstance(node, astroid.nodes.BoolOp):
            return max(0, len(node.values) - 1)
        if isinstance(node, astroid.nodes.Comprehension):
            return 1 + len(node.ifs or [])
        return 0


class HighCyclomaticComplexity(Checker):
    """E1101: cyclomatic score or nesting depth over threshold. One violation per function."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1101",
        display_name="High cyclomatic complexity",
        suggestion="Break down the function into smaller, focused functions. Extract conditional logic into helper methods.",
        node_kinds=_FUNCTION,
        config_key="e1101_high_cyclomatic_complexity",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM,
        categories=_COMPLEXITY,
        options={"max_complexity": 25, "max_nesting_depth": 6},
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        max_complexity = int(ctx.config.option("max_complexity"))
        max_nesting = int(ctx.config.option("max_nesting_depth"))
        profile = ComplexityCounter.profile(node)
        problems = []
        if profile.cyclomatic > max_complexity:
            problems.append(f"cyclomatic complexity of {profile.cyclomatic} (limit {max_complexity})")
        if profile.max_depth > max_nesting:
            problems.append(f"nesting depth of {profile.max_depth} (limit {max_nesting})")
        if not problems:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' has {' and '.join(problems)}. High complexity makes code hard to understand and test.",
                node=node,
            )
        ]


class DeeplyNestedLogic(Checker):
    """E1102: block nesting (if/for/while/try/match) deeper than max_depth."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1102",
        display_name="Deeply nested logic",
        suggestion="Use guard clauses and early returns, or extract the inner blocks into functions.",
        node_kinds=_FUNCTION,
        config_key="e1102_deeply_nested_logic",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_COMPLEXITY, options={"max_depth": 5}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        limit = int(ctx.config.option("max_depth"))
        depth = ComplexityCounter.profile(node).max_depth
        if depth <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' nests blocks {depth} levels deep (limit {limit}).",
                node=node,
            )
        ]


class DeeplyNestedConditionals(Checker):
    """E1107: if statements nested deeper than max_if_depth (elif does not nest)."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1107",
        display_name="Deeply nested conditionals",
        suggestion="Combine conditions, invert them into guard clauses, or use a lookup table.",
        node_kinds=_FUNCTION,
        config_key="e1107_deeply_nested_conditionals",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_COMPLEXITY, options={"max_if_depth": 3}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        limit = int(ctx.config.option("max_if_depth"))
        depth = ComplexityCounter.profile(node).max_if_depth
        if depth <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' nests if statements {depth} levels deep (limit {limit}).",
                node=node,
            )
        ]


class DeeplyNestedMatch(Checker):
    """E1108: match statements nested inside match cases."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1108",
        display_name="Deeply nested match",
        suggestion="Match on a tuple of subjects, or move inner matches into helper functions.",
        node_kinds=_FUNCTION,
        config_key="e1108_deeply_nested_match",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_COMPLEXITY, options={"max_match_depth": 2}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        limit = int(ctx.config.option("max_match_depth"))
        depth = ComplexityCounter.profile(node).max_match_depth
        if depth <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' nests match statements {depth} levels deep (limit {limit}).",
                node=node,
            )
        ]
