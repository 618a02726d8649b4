"""Syntactic helpers shared by the rule modules. Pure functions over astroid nodes."""

from collections.abc import Iterator
from dataclasses import dataclass

import astroid

NESTED_SCOPES = (astroid.nodes.FunctionDef, astroid.nodes.ClassDef)
LOOPS = (astroid.nodes.For, astroid.nodes.While)


@dataclass(frozen=True)
class Parameter:
    name: str
    annotation: astroid.nodes.NodeNG | None
    default: astroid.nodes.NodeNG | None


class NodeQuery:
    """Static helpers for walking scopes and naming nodes. No inference is ever used."""

    @staticmethod
    def own_nodes(scope: astroid.nodes.NodeNG) -> Iterator[astroid.nodes.NodeNG]:
        """
        Yield the descendants of scope in source order, without entering nested
        function or class definitions (those are analyzed as items of their own).
        Lambdas belong to the enclosing scope and are entered.
        """
        stack = list(reversed(list(scope.get_children())))
        while stack:
            node = stack.pop()
            if isinstance(node, NESTED_SCOPES):
                continue
            yield node
            stack.extend(reversed(list(node.get_children())))

    @staticmethod
    def own_nodes_of(
        scope: astroid.nodes.NodeNG, klass: type | tuple[type, ...]
    ) -> Iterator[astroid.nodes.NodeNG]:
        return (n for n in NodeQuery.own_nodes(scope) if isinstance(n, klass))

    @staticmethod
    def dotted_name(node: astroid.nodes.NodeNG | None) -> str:
        """'os.path.join' for a Name/Attribute chain; '' for anything else."""
        if isinstance(node, astroid.nodes.Name):
            return node.name
        if isinstance(node, astroid.nodes.Attribute):
            base = NodeQuery.dotted_name(node.expr)
            return f"{base}.{node.attrname}" if base else ""
        return ""

    @staticmethod
    def call_name(call: astroid.nodes.Call) -> str:
        return NodeQuery.dotted_name(call.func)

    @staticmethod
    def terminal_name(node: astroid.nodes.NodeNG | None) -> str:
        """Last identifier of an expression: 'lock' for self._state.lock or get_lock()."""
        if isinstance(node, astroid.nodes.Name):
            return node.name
        if isinstance(node, astroid.nodes.Attribute):
            return node.attrname
        if isinstance(node, astroid.nodes.Call):
            return NodeQuery.terminal_name(node.func)
        return ""

    @staticmethod
    def keyword(call: astroid.nodes.Call, name: str) -> astroid.nodes.NodeNG | None:
        for keyword in call.keywords or []:
            if keyword.arg == name:
                return keyword.value
        return None

    @staticmethod
    def is_true_const(node: astroid.nodes.NodeNG | None) -> bool:
        return isinstance(node, astroid.nodes.Const) and node.value is True

    @staticmethod
    def number_value(node: astroid.nodes.NodeNG | None) -> int | float | complex | None:
        """Numeric literal value (handling unary minus); None for bools and non-literals."""
        if isinstance(node, astroid.nodes.UnaryOp) and node.op in ("-", "+"):
            inner = NodeQuery.number_value(node.operand)
            if inner is None:
                return None
            return -inner if node.op == "-" else inner
        if isinstance(node, astroid.nodes.Const):
            value = node.value
            if isinstance(value, bool):
                return None
            if isinstance(value, (int, float, complex)):
                return value
        return None

    @staticmethod
    def is_string_literal(node: astroid.nodes.NodeNG | None) -> bool:
        if isinstance(node, astroid.nodes.JoinedStr):
            return True
        return isinstance(node, astroid.nodes.Const) and isinstance(node.value, str)

    @staticmethod
    def in_loop_body(node: astroid.nodes.NodeNG) -> bool:
        """True if node sits in the body of a for/while loop of its own scope."""
        child = node
        parent = node.parent
        while parent is not None:
            if isinstance(parent, NESTED_SCOPES) or isinstance(parent, astroid.nodes.Module):
                return False
            if isinstance(parent, LOOPS) and any(child is stmt for stmt in parent.body):
                return True
            child = parent
            parent = parent.parent
        return False

    @staticmethod
    def is_elif(node: astroid.nodes.NodeNG) -> bool:
        """An If produced by 'elif' shares its parent's column and is its sole orelse."""
        parent = node.parent
        return (
            isinstance(node, astroid.nodes.If)
            and isinstance(parent, astroid.nodes.If)
            and len(parent.orelse) == 1
            and parent.orelse[0] is node
            and node.col_offset == parent.col_offset
        )

    @staticmethod
    def decorator_names(func: astroid.nodes.FunctionDef | astroid.nodes.ClassDef) -> list[str]:
        if not func.decorators:
            return []
        names = []
        for decorator in func.decorators.nodes:
            target = decorator.func if isinstance(decorator, astroid.nodes.Call) else decorator
            names.append(NodeQuery.dotted_name(target) or NodeQuery.terminal_name(target))
        return names

    @staticmethod
    def is_method(func: astroid.nodes.FunctionDef) -> bool:
        return isinstance(func.parent, astroid.nodes.ClassDef)

    @staticmethod
    def enclosing_class(node: astroid.nodes.NodeNG) -> astroid.nodes.ClassDef | None:
        for ancestor in node.node_ancestors():
            if isinstance(ancestor, astroid.nodes.ClassDef):
                return ancestor
        return None

    @staticmethod
    def base_names(klass: astroid.nodes.ClassDef) -> list[str]:
        return [NodeQuery.terminal_name(base) for base in klass.bases]

    @staticmethod
    def parameters(func: astroid.nodes.FunctionDef, skip_bound: bool = True) -> list[Parameter]:
        """
        Positional-only, regular and keyword-only parameters with annotation and default.

        The first parameter of a method that is not a staticmethod (self/cls) is
        dropped when skip_bound is set. *args and **kwargs are never included.
        """
        args = func.args
        positional = list(args.posonlyargs or []) + list(args.args or [])
        annotations = list(args.posonlyargs_annotations or []) + list(args.annotations or [])
        defaults = list(args.defaults or [])
        padded_defaults: list[astroid.nodes.NodeNG | None] = [None] * (
            len(positional) - len(defaults)
        ) + defaults
        params = [
            Parameter(arg.name, annotations[i] if i < len(annotations) else None, padded_defaults[i])
            for i, arg in enumerate(positional)
        ]
        kw_annotations = list(args.kwonlyargs_annotations or [])
        kw_defaults = list(args.kw_defaults or [])
        for i, arg in enumerate(args.kwonlyargs or []):
            params.append(
                Parameter(
                    arg.name,
                    kw_annotations[i] if i < len(kw_annotations) else None,
                    kw_defaults[i] if i < len(kw_defaults) else None,
                )
            )
        if (
            skip_bound
            and params
            and NodeQuery.is_method(func)
            and "staticmethod" not in NodeQuery.decorator_names(func)
            and positional
        ):
            params = params[1:]
        return params

    @staticmethod
    def is_test_item(node: astroid.nodes.NodeNG) -> bool:
        """Functions named test*, classes named Test*, and anything nested in them."""
        for candidate in (node, *node.node_ancestors()):
            if isinstance(candidate, astroid.nodes.FunctionDef) and candidate.name.startswith("test"):
                return True
            if isinstance(candidate, astroid.nodes.ClassDef) and candidate.name.startswith("Test"):
                return True
        return False
