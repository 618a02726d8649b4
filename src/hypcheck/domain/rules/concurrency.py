"""E15xx concurrency rules: sleep-based synchronization, raw threads, blocking calls in async code."""

from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_COMPLIANCE, CATEGORY_OPERATIONS
from hypcheck.domain.entities import (
    SCOPE_KINDS,
    CheckerConfig,
    CheckerMetadata,
    NodeKind,
    Severity,
)
from hypcheck.domain.rules import CheckContext, Checker, Violation
from hypcheck.domain.rules.node_query import NodeQuery

_SLEEP_CALLS = frozenset({"time.sleep", "sleep", "asyncio.sleep"})


class SleepInsteadOfSync(Checker):
    """E1508: polling with sleep() inside a loop instead of waiting on an event."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1508",
        display_name="Sleep instead of synchronization",
        suggestion="Wait on a threading.Event/Condition or asyncio.Event instead of polling with sleep().",
        node_kinds=SCOPE_KINDS,
        config_key="e1508_sleep_instead_of_sync",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.LOW, categories=frozenset({CATEGORY_OPERATIONS})
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name in _SLEEP_CALLS and NodeQuery.in_loop_body(call):
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"{name}() inside a loop polls for a condition.",
                        node=call,
                    )
                )
        return violations


class RawThreadSpawn(Checker):
    """E1512: threads started directly instead of through an executor. Policy rule, off by default."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1512",
        display_name="Raw thread spawning",
        suggestion="Submit work to a concurrent.futures executor so threads are bounded and joined.",
        node_kinds=SCOPE_KINDS,
        config_key="e1512_raw_thread_spawn",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        enabled=False, severity=Severity.HIGH, categories=frozenset({CATEGORY_COMPLIANCE})
    )

    SPAWN_CALLS: ClassVar[frozenset[str]] = frozenset(
        {"threading.Thread", "Thread", "_thread.start_new_thread", "thread.start_new_thread"}
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name in self.SPAWN_CALLS:
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"{name}() spawns an unmanaged thread.",
                        node=call,
                    )
                )
        return violations


class BlockingCallInAsync(Checker):
    """E1513: synchronous blocking calls inside 'async def'."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1513",
        display_name="Blocking call in async function",
        suggestion="Use the async equivalent (asyncio.sleep, aiohttp, asyncio.create_subprocess_exec) or asyncio.to_thread().",
        node_kinds=frozenset({NodeKind.FUNCTION}),
        config_key="e1513_blocking_call_in_async",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM, categories=frozenset({CATEGORY_OPERATIONS})
    )

    BLOCKING_CALLS: ClassVar[frozenset[str]] = frozenset(
        {
            "time.sleep",
            "open",
            "input",
            "os.system",
            "subprocess.run",
            "subprocess.call",
            "subprocess.check_call",
            "subprocess.check_output",
            "requests.get",
            "requests.post",
            "requests.put",
            "requests.patch",
            "requests.delete",
            "requests.request",
            "urllib.request.urlopen",
            "socket.create_connection",
        }
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.AsyncFunctionDef):
            return []
        violations = []
        for call in NodeQuery.own_nodes_of(node, astroid.nodes.Call):
            name = NodeQuery.call_name(call)
            if name in self.BLOCKING_CALLS:
                violations.append(
                    Violation.from_node(
                        metadata=self.metadata,
                        ctx=ctx,
                        message=f"{name}() blocks the event loop inside async '{node.name}'.",
                        node=call,
                    )
                )
        return violations
