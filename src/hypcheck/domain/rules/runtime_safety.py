"""E10xx runtime-safety rules: process exits, asserts, dynamic execution, unsafe IO calls."""

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


class DirectExit(Checker):
    """E1001: library code that terminates the interpreter instead of raising."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1001",
        display_name="Direct process exit",
        suggestion="Raise an exception and let the program entry point decide the exit status.",
        node_kinds=SCOPE_KINDS,
        config_key="e1001_direct_exit",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH,
        categories=_OPERATIONS,
        options={"allowed_functions": "main"},
    )

    EXIT_CALLS: ClassVar[frozenset[str]] = frozenset(
        {"sys.exit", "os._exit", "os.abort", "exit", "quit"}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        allowed = {
            name.strip()
            for name in str(ctx.config.option("allowed_functions")).split(",")
            if name.strip()
        }
        if isinstance(node, astroid.nodes.FunctionDef) and node.name in allowed:
            return []
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name not in self.EXIT_CALLS or self._under_main_guard(call):
                continue
            violations.append(
                Violation.from_node(
                    metadata=self.metadata,
                    ctx=ctx,
                    message=f"Call to {name}() terminates the process from library code.",
                    node=call,
                )
            )
        return violations

    @staticmethod
    def _under_main_guard(node: astroid.nodes.NodeNG) -> bool:
        for ancestor in node.node_ancestors():
            if isinstance(ancestor, astroid.nodes.If) and "__name__" in ancestor.test.as_string():
                return True
        return False


class AssertForRuntimeChecks(Checker):
    """E1002: assert statements vanish under python -O."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1002",
        display_name="Assert used for runtime checks",
        suggestion="Raise a specific exception (ValueError, TypeError, ...) when the condition fails.",
        node_kinds=SCOPE_KINDS,
        config_key="e1002_assert_runtime_check",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        return [
            Violation.from_node(
                metadata=self.metadata,
                ctx=ctx,
                message=f"'assert {stmt.test.as_string()}' is stripped when optimizations are enabled.",
                node=stmt,
            )
            for stmt in NodeQuery.own_nodes_of(node, astroid.nodes.Assert)
        ]


class DynamicCodeExecution(Checker):
    """E1003: eval/exec/compile/__import__ on runtime strings."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1003",
        display_name="Dynamic code execution",
        suggestion="Use explicit dispatch tables, ast.literal_eval or importlib with an allow-list.",
        node_kinds=SCOPE_KINDS,
        config_key="e1003_dynamic_code_execution",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    DYNAMIC_CALLS: ClassVar[frozenset[str]] = frozenset(
        {"eval", "exec", "compile", "__import__", "builtins.eval", "builtins.exec"}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name in self.DYNAMIC_CALLS:
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"{name}() executes code built at runtime.",
                        node=call,
                    )
                )
        return violations


class NotImplementedStub(Checker):
    """E1004: raise NotImplementedError left in concrete code."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1004",
        display_name="Unimplemented stub",
        suggestion="Implement the function, or declare it abstract (abc.abstractmethod / Protocol).",
        node_kinds=frozenset({NodeKind.FUNCTION}),
        config_key="e1004_not_implemented_stub",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    ABSTRACT_BASES: ClassVar[frozenset[str]] = frozenset({"ABC", "Protocol", "Generic"})

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.FunctionDef) or self._is_abstract(node):
            return []
        violations = []
        for stmt in NodeQuery.own_nodes_of(node, astroid.nodes.Raise):
            if NodeQuery.terminal_name(stmt.exc) == "NotImplementedError":
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"Function '{node.name}' raises NotImplementedError at runtime.",
                        node=stmt,
                    )
                )
        return violations

    def _is_abstract(self, func: astroid.nodes.FunctionDef) -> bool:
        if any(name.endswith("abstractmethod") for name in NodeQuery.decorator_names(func)):
            return True
        klass = func.parent if NodeQuery.is_method(func) else None
        if klass is None:
            return False
        if self.ABSTRACT_BASES.intersection(NodeQuery.base_names(klass)):
            return True
        # astroid moves the metaclass keyword out of ClassDef.keywords.
        return NodeQuery.terminal_name(getattr(klass, "_metaclass", None)) == "ABCMeta"


class UnsafeDeserialization(Checker):
    """E1005: deserializers that can execute arbitrary code."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1005",
        display_name="Unsafe deserialization",
        suggestion="Use json, or yaml.safe_load / Loader=yaml.SafeLoader for untrusted input.",
        node_kinds=SCOPE_KINDS,
        config_key="e1005_unsafe_deserialization",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    UNSAFE_CALLS: ClassVar[frozenset[str]] = frozenset(
        {
            "pickle.load",
            "pickle.loads",
            "pickle.Unpickler",
            "cPickle.load",
            "cPickle.loads",
            "dill.load",
            "dill.loads",
            "marshal.load",
            "marshal.loads",
            "shelve.open",
            "yaml.unsafe_load",
            "yaml.full_load",
        }
    )
    SAFE_LOADERS: ClassVar[frozenset[str]] = frozenset({"SafeLoader", "CSafeLoader", "BaseLoader"})

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name in self.UNSAFE_CALLS or (name == "yaml.load" and not self._has_safe_loader(call)):
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"{name}() can execute arbitrary code from its input.",
                        node=call,
                    )
                )
        return violations

    def _has_safe_loader(self, call: astroid.nodes.Call) -> bool:
        loader = NodeQuery.keyword(call, "Loader")
        if loader is None and len(call.args) > 1:
            loader = call.args[1]
        return NodeQuery.terminal_name(loader) in self.SAFE_LOADERS


class ShellInjection(Checker):
    """E1006: commands run through a shell."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1006",
        display_name="Shell command injection risk",
        suggestion="Pass an argument list to subprocess.run() without shell=True.",
        node_kinds=SCOPE_KINDS,
        config_key="e1006_shell_injection",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.HIGH, categories=_OPERATIONS
    )

    SHELL_CALLS: ClassVar[frozenset[str]] = frozenset(
        {"os.system", "os.popen", "commands.getoutput", "commands.getstatusoutput"}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name in self.SHELL_CALLS:
                message = f"{name}() runs its argument through the system shell."
            elif NodeQuery.is_true_const(NodeQuery.keyword(call, "shell")):
                message = f"{name or 'call'}(..., shell=True) runs its argument through the system shell."
            else:
                continue
            violations.append(
                Violation.from_node(metadata=self.metadata, ctx=ctx, message=message, node=call)
            )
        return violations
