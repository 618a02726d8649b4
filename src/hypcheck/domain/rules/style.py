"""E18xx API-style rules: naming, public documentation, mutable defaults."""

import re
from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_COMPLEXITY, CATEGORY_OPERATIONS
from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind, Severity
from hypcheck.domain.rules import CheckContext, Checker, Violation
from hypcheck.domain.rules.node_query import NodeQuery

_DEFINITIONS = frozenset({NodeKind.FUNCTION, NodeKind.CLASS})


class BadNaming(Checker):
    """E1803: functions must be snake_case, classes CapWords."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1803",
        display_name="Bad naming",
        suggestion="Follow PEP 8: snake_case for functions and methods, CapWords for classes.",
        node_kinds=_DEFINITIONS,
        config_key="e1803_bad_naming",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=frozenset({CATEGORY_COMPLEXITY})
    )

    FUNCTION_NAME: ClassVar[re.Pattern[str]] = re.compile(r"^_{0,2}[a-z][a-z0-9_]*$")
    CLASS_NAME: ClassVar[re.Pattern[str]] = re.compile(r"^_{0,2}[A-Z][A-Za-z0-9]*$")

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if isinstance(node, astroid.nodes.ClassDef):
            pattern, style, kind = self.CLASS_NAME, "CapWords", "Class"
        elif isinstance(node, astroid.nodes.FunctionDef):
            pattern, style, kind = self.FUNCTION_NAME, "snake_case", "Function"
        else:
            return []
        if pattern.match(node.name):
            return []
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"{kind} name '{node.name}' is not {style}.",
                node=node,
            )
        ]


class MissingDocumentation(Checker):
    """E1805: public module-level functions, classes and public methods without a docstring."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1805",
        display_name="Missing documentation",
        suggestion="Add a docstring describing purpose, parameters and return value.",
        node_kinds=_DEFINITIONS,
        config_key="e1805_missing_documentation",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        enabled=False, severity=Severity.LOW, categories=frozenset({CATEGORY_COMPLEXITY})
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)):
            return []
        if not self._is_public_api(node) or node.doc_node is not None:
            return []
        kind = "Class" if isinstance(node, astroid.nodes.ClassDef) else "Function"
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"{kind} '{node.name}' is public but has no docstring.",
                node=node,
            )
        ]

    @staticmethod
    def _is_public_api(node: astroid.nodes.FunctionDef | astroid.nodes.ClassDef) -> bool:
        if node.name.startswith("_"):
            return False
        parent = node.parent
        if isinstance(parent, astroid.nodes.Module):
            return True
        return (
            isinstance(parent, astroid.nodes.ClassDef)
            and isinstance(parent.parent, astroid.nodes.Module)
            and not parent.name.startswith("_")
        )


class MutableDefaultArgument(Checker):
    """E1808: list/dict/set defaults are shared between calls."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1808",
        display_name="Mutable default argument",
        suggestion="Default to None and create the container inside the function.",
        node_kinds=frozenset({NodeKind.FUNCTION}),
        config_key="e1808_mutable_default_argument",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=frozenset({CATEGORY_OPERATIONS})
    )

    _MUTABLE_LITERALS = (
        astroid.nodes.List,
        astroid.nodes.Dict,
        astroid.nodes.Set,
        astroid.nodes.ListComp,
        astroid.nodes.DictComp,
        astroid.nodes.SetComp,
    )
    _MUTABLE_FACTORIES: ClassVar[frozenset[str]] = frozenset(
        {"list", "dict", "set", "bytearray", "collections.defaultdict", "defaultdict", "collections.OrderedDict"}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef):
            return []
        violations = []
        for param in NodeQuery.parameters(node, skip_bound=False):
            default = param.default
            if default is None or not self._is_mutable(default):
                continue
            violations.append(
                Violation.from_node(
                    metadata=self.metadata,
                    ctx=ctx,
                    message=f"Parameter '{param.name}' of '{node.name}' defaults to mutable {default.as_string()}.",
                    node=default,
                )
            )
        return violations

    def _is_mutable(self, node: astroid.nodes.NodeNG) -> bool:
        if isinstance(node, self._MUTABLE_LITERALS):
            return True
        return isinstance(node, astroid.nodes.Call) and NodeQuery.call_name(node) in self._MUTABLE_FACTORIES
