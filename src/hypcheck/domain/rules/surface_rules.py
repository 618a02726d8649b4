"""E11xx code-surface rules: signatures, class size, function length, chains, closures, literals."""

from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_COMPLEXITY
from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind, Severity
from hypcheck.domain.rules import CheckContext, Checker, Violation
from hypcheck.domain.rules.node_query import NodeQuery

_COMPLEXITY = frozenset({CATEGORY_COMPLEXITY})
_FUNCTION = frozenset({NodeKind.FUNCTION})


class TooManyParameters(Checker):
    """E1103: too many parameters (self/cls, *args and **kwargs not counted)."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1103",
        display_name="Too many parameters",
        suggestion="Group related parameters into a dataclass or split the function.",
        node_kinds=_FUNCTION,
        config_key="e1103_too_many_parameters",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=_COMPLEXITY, options={"max_parameters": 5}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        limit = int(ctx.config.option("max_parameters"))
        count = len(NodeQuery.parameters(node))
        if count <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' takes {count} parameters (limit {limit}).",
                node=node,
            )
        ]


class LargeClass(Checker):
    """E1104: class with too many class-level and instance fields."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1104",
        display_name="Large class",
        suggestion="Split the class by responsibility or group fields into smaller value objects.",
        node_kinds=frozenset({NodeKind.CLASS}),
        config_key="e1104_large_class",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_COMPLEXITY, options={"max_fields": 12}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.ClassDef):
            return []
        limit = int(ctx.config.option("max_fields"))
        fields = self._field_names(node)
        if len(fields) <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Class '{node.name}' has {len(fields)} fields (limit {limit}).",
                node=node,
            )
        ]

    @staticmethod
    def _field_names(klass: astroid.nodes.ClassDef) -> set[str]:
        names: set[str] = set()
        for stmt in klass.body:
            if isinstance(stmt, astroid.nodes.Assign):
                names.update(
                    target.name
                    for target in stmt.targets
                    if isinstance(target, astroid.nodes.AssignName)
                )
            elif isinstance(stmt, astroid.nodes.AnnAssign) and isinstance(
                stmt.target, astroid.nodes.AssignName
            ):
                names.add(stmt.target.name)
            elif isinstance(stmt, astroid.nodes.FunctionDef):
                names.update(
                    attr.attrname
                    for attr in stmt.nodes_of_class(
                        astroid.nodes.AssignAttr, skip_klass=astroid.nodes.ClassDef
                    )
                    if isinstance(attr.expr, astroid.nodes.Name) and attr.expr.name == "self"
                )
        return {name for name in names if not name.startswith("__")}


class BooleanParameterHell(Checker):
    """E1105: several boolean flags in one signature."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1105",
        display_name="Boolean parameter hell",
        suggestion="Replace boolean flags with an Enum, separate functions, or an options object.",
        node_kinds=_FUNCTION,
        config_key="e1105_boolean_parameter_hell",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=_COMPLEXITY, options={"max_bool_params": 1}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        limit = int(ctx.config.option("max_bool_params"))
        flags = [p.name for p in NodeQuery.parameters(node) if self._is_bool(p.annotation, p.default)]
        if len(flags) <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' has {len(flags)} boolean parameters ({', '.join(flags)}); limit {limit}.",
                node=node,
            )
        ]

    @staticmethod
    def _is_bool(annotation: astroid.nodes.NodeNG | None, default: astroid.nodes.NodeNG | None) -> bool:
        if isinstance(annotation, astroid.nodes.Name) and annotation.name == "bool":
            return True
        if isinstance(annotation, astroid.nodes.Const) and annotation.value == "bool":
            return True
        return isinstance(default, astroid.nodes.Const) and isinstance(default.value, bool)


class LongFunction(Checker):
    """E1106: function spanning more than max_lines source lines."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1106",
        display_name="Long function",
        suggestion="Extract cohesive steps into well-named helper functions.",
        node_kinds=_FUNCTION,
        config_key="e1106_long_function",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=_COMPLEXITY, options={"max_lines": 250}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        limit = int(ctx.config.option("max_lines"))
        length = node.tolineno - node.lineno + 1
        if length <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' is {length} lines long (limit {limit}).",
                node=node,
            )
        ]


class ExcessiveChaining(Checker):
    """E1109: long method-call chains such as a.b().c().d().e().f()."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1109",
        display_name="Excessive method chaining",
        suggestion="Name intermediate results so each step can be read and debugged.",
        node_kinds=_FUNCTION,
        config_key="e1109_excessive_chaining",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=_COMPLEXITY, options={"max_chain_length": 5}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        limit = int(ctx.config.option("max_chain_length"))
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            if self._is_chain_link(call):
                continue
            length = self._chain_length(call)
            if length > limit:
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"Method chain of {length} calls (limit {limit}).",
                        node=call,
                    )
                )
        return violations

    @staticmethod
    def _is_chain_link(call: astroid.nodes.Call) -> bool:
        """True if call is the receiver of another call in the same chain."""
        parent = call.parent
        return (
            isinstance(parent, astroid.nodes.Attribute)
            and isinstance(parent.parent, astroid.nodes.Call)
            and parent.parent.func is parent
        )

    @staticmethod
    def _chain_length(call: astroid.nodes.Call) -> int:
        length = 0
        current: astroid.nodes.NodeNG = call
        while isinstance(current, astroid.nodes.Call) and isinstance(current.func, astroid.nodes.Attribute):
            length += 1
            current = current.func.expr
        return length


class DeeplyNestedClosures(Checker):
    """E1110: nested def/lambda levels below an outermost function."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1110",
        display_name="Deeply nested closures",
        suggestion="Lift inner functions to module level or into a small class.",
        node_kinds=_FUNCTION,
        config_key="e1110_deeply_nested_closures",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=_COMPLEXITY, options={"max_depth": 3}
    )

    _CLOSURES = (astroid.nodes.FunctionDef, astroid.nodes.Lambda)

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef) or any(
            isinstance(a, self._CLOSURES) for a in node.node_ancestors()
        ):
            return []
        limit = int(ctx.config.option("max_depth"))
        depth = self._closure_depth(node)
        if depth <= limit:
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"Function '{node.name}' nests closures {depth} levels deep (limit {limit}).",
                node=node,
            )
        ]

    def _closure_depth(self, node: astroid.nodes.NodeNG) -> int:
        deepest = 0
        for child in node.get_children():
            if isinstance(child, astroid.nodes.ClassDef):
                continue
            depth = self._closure_depth(child)
            if isinstance(child, self._CLOSURES):
                depth += 1
            deepest = max(deepest, depth)
        return deepest


class ExcessiveTupleComplexity(Checker):
    """E1111: tuple literals, targets or tuple[...] annotations with too many elements."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1111",
        display_name="Excessive tuple complexity",
        suggestion="Return a dataclass or NamedTuple with named fields instead of a wide tuple.",
        node_kinds=_FUNCTION,
        config_key="e1111_excessive_tuple_complexity",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=_COMPLEXITY, options={"max_tuple_elements": 5}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        limit = int(ctx.config.option("max_tuple_elements"))
        violations = []
        for tup in NodeQuery.own_nodes_of(node, astroid.nodes.Tuple):
            if len(tup.elts) > limit:
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"Tuple with {len(tup.elts)} elements (limit {limit}).",
                        node=tup,
                    )
                )
        return violations


class MagicNumbers(Checker):
    """E1112: unexplained numeric literals inside function bodies."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1112",
        display_name="Magic numbers",
        suggestion="Give the number a name: a module-level UPPER_CASE constant or an Enum member.",
        node_kinds=_FUNCTION,
        config_key="e1112_magic_numbers",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=_COMPLEXITY, options={"allowed_numbers": "-1,0,1,2"}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        allowed = self._allowed(str(ctx.config.option("allowed_numbers")))
        violations = []
        # Body only: defaults and annotations are named by their parameter.
        for stmt in node.body:
            for const in self._numeric_literals(stmt):
                literal = const.parent if self._is_negated(const) else const
                value = NodeQuery.number_value(literal)
                if value is None or value in allowed or self._names_a_constant(literal):
                    continue
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"Magic number {literal.as_string()} in '{node.name}'.",
                        node=literal,
                    )
                )
        return violations

    @staticmethod
    def _numeric_literals(stmt: astroid.nodes.NodeNG) -> list[astroid.nodes.Const]:
        if isinstance(stmt, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)):
            return []
        candidates = [stmt, *NodeQuery.own_nodes(stmt)]
        return [
            n
            for n in candidates
            if isinstance(n, astroid.nodes.Const) and NodeQuery.number_value(n) is not None
        ]

    @staticmethod
    def _is_negated(const: astroid.nodes.Const) -> bool:
        return isinstance(const.parent, astroid.nodes.UnaryOp) and const.parent.op == "-"

    @staticmethod
    def _names_a_constant(literal: astroid.nodes.NodeNG) -> bool:
        parent = literal.parent
        if not isinstance(parent, (astroid.nodes.Assign, astroid.nodes.AnnAssign)):
            return False
        targets = parent.targets if isinstance(parent, astroid.nodes.Assign) else [parent.target]
        return all(
            isinstance(t, astroid.nodes.AssignName) and t.name.isupper() for t in targets
        )

    @staticmethod
    def _allowed(raw: str) -> set[float]:
        allowed: set[float] = set()
        for item in raw.split(","):
            item = item.strip()
            if not item:
                continue
            try:
                allowed.add(float(item))
            except ValueError:
                continue
        return allowed
