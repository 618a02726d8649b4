"""Unit tests for RuleMsgBuilder (domain/rule_msgs.py)."""

import unittest

from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind, Severity
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.domain.rule_msgs import RuleMsgBuilder
from hypcheck.domain.rules.catalog import CheckerCatalog


def _register(registry: CheckerRegistry, code: str, severity: Severity) -> None:
    registry.register(
        CheckerMetadata(
            code=code,
            display_name=f"Rule {code}",
            suggestion="Fix it",
            node_kinds=frozenset({NodeKind.FUNCTION}),
            config_key=f"{code.lower()}_rule_name",
        ),
        CheckerConfig(severity=severity),
        lambda: None,  # type: ignore[arg-type, return-value]
    )


class TestMsgidMap(unittest.TestCase):
    """Tests for RuleMsgBuilder.msgid_map."""

    def test_letter_follows_default_severity_in_registry_order(self) -> None:
        registry = CheckerRegistry()
        _register(registry, "X0001", Severity.HIGH)
        _register(registry, "X0002", Severity.MEDIUM)
        _register(registry, "X0003", Severity.LOW)

        self.assertEqual(
            RuleMsgBuilder.msgid_map(registry),
            {"X0001": "E9500", "X0002": "W9501", "X0003": "C9502"},
        )

    def test_builtin_catalog_ids(self) -> None:
        msgids = RuleMsgBuilder.msgid_map(CheckerCatalog.default_registry())

        self.assertEqual(msgids["E1001"], "E9500")
        self.assertEqual(msgids["E1101"], "W9506")
        self.assertEqual(msgids["E1112"], "C9517")
        self.assertEqual(len(set(msgids.values())), len(msgids))

    def test_entries_past_capacity_are_not_exposed(self) -> None:
        registry = CheckerRegistry()
        for index in range(101):
            _register(registry, f"X{index:04d}", Severity.LOW)

        with self.assertLogs("hypcheck.domain.rule_msgs", level="WARNING"):
            msgids = RuleMsgBuilder.msgid_map(registry)

        self.assertEqual(len(msgids), 100)
        self.assertNotIn("X0100", msgids)
        self.assertEqual(msgids["X0099"], "C9599")


class TestBuildMsgs(unittest.TestCase):
    """Tests for RuleMsgBuilder.build_msgs."""

    def test_message_tuple_shape(self) -> None:
        registry = CheckerRegistry()
        _register(registry, "X0001", Severity.HIGH)

        msgs = RuleMsgBuilder.build_msgs(registry)

        self.assertEqual(
            msgs,
            {"E9500": ("[X0001] %s", "x0001-rule-name", "Rule X0001. Fix it")},
        )

    def test_symbols_are_unique_for_builtins(self) -> None:
        msgs = RuleMsgBuilder.build_msgs(CheckerCatalog.default_registry())
        symbols = [symbol for _, symbol, _ in msgs.values()]

        self.assertEqual(len(msgs), 38)
        self.assertEqual(len(set(symbols)), len(symbols))
