"""Unit tests for CheckerRegistry and the built-in catalog."""

import unittest
from typing import ClassVar

from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind
from hypcheck.domain.errors import DuplicateCode
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.domain.rules import Checker
from hypcheck.domain.rules.catalog import CheckerCatalog


def _metadata(code: str) -> CheckerMetadata:
    return CheckerMetadata(
        code=code,
        display_name=f"Checker {code}",
        suggestion="",
        node_kinds=frozenset({NodeKind.MODULE}),
        config_key=f"{code.lower()}_sample",
    )


class _ExternalChecker(Checker):
    metadata: ClassVar[CheckerMetadata] = _metadata("X0001")
    default_config: ClassVar[CheckerConfig] = CheckerConfig()

    def check(self, node, ctx):
        return []


class TestCheckerRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = CheckerRegistry()
        for code in ("E1001", "E1101", "E1106", "E1217"):
            self.registry.register(_metadata(code), CheckerConfig(), lambda: None)

    def test_all_preserves_registration_order(self) -> None:
        self.assertEqual([e.code for e in self.registry.all()], ["E1001", "E1101", "E1106", "E1217"])

    def test_all_is_lazy(self) -> None:
        entries = self.registry.all()
        self.assertEqual(next(entries).code, "E1001")

    def test_duplicate_code_is_rejected_case_insensitively(self) -> None:
        with self.assertRaises(DuplicateCode) as ctx:
            self.registry.register(_metadata("e1101"), CheckerConfig(), lambda: None)
        self.assertEqual(ctx.exception.code, "e1101")
        self.assertEqual(len(self.registry), 4)

    def test_by_category_prefix_is_string_prefix_match(self) -> None:
        self.assertEqual([e.code for e in self.registry.by_category_prefix("e11")], ["E1101", "E1106"])
        self.assertEqual([e.code for e in self.registry.by_category_prefix("E1")], self.registry.codes())
        self.assertEqual(self.registry.by_category_prefix("E13"), [])

    def test_lookup_by_exact_code(self) -> None:
        self.assertIn("e1217", self.registry)
        self.assertNotIn("E9999", self.registry)
        self.assertIsNone(self.registry.get("E12"))
        self.assertEqual(self.registry.get("e1106").code, "E1106")

    def test_category_prefix_is_derived_from_code(self) -> None:
        self.assertEqual(CheckerRegistry.category_prefix("e1217"), "E12")

    def test_external_checker_class_registers_like_builtins(self) -> None:
        entry = self.registry.register_checker(_ExternalChecker)
        self.assertEqual(entry.code, "X0001")
        self.assertIsInstance(entry.factory(), _ExternalChecker)


class TestCheckerCatalog(unittest.TestCase):
    def test_builtin_codes_are_unique_and_in_code_order(self) -> None:
        registry = CheckerCatalog.default_registry()
        codes = registry.codes()
        self.assertEqual(codes, sorted(codes))
        self.assertEqual(len(codes), len(set(codes)))
        self.assertEqual(len(codes), len(CheckerCatalog.builtin_checkers()))

    def test_every_builtin_has_a_unique_config_key(self) -> None:
        keys = [e.metadata.config_key for e in CheckerCatalog.default_registry().all()]
        self.assertEqual(len(keys), len(set(keys)))
        for entry in CheckerCatalog.default_registry().all():
            self.assertTrue(entry.metadata.config_key.startswith(entry.code.lower()))

    def test_each_registry_is_independent(self) -> None:
        first = CheckerCatalog.default_registry()
        second = CheckerCatalog.default_registry()
        first.register_checker(_ExternalChecker)
        self.assertNotIn("X0001", second)

    def test_policy_checkers_are_disabled_by_default(self) -> None:
        registry = CheckerCatalog.default_registry()
        disabled = [e.code for e in registry.all() if not e.default_config.enabled]
        self.assertEqual(disabled, ["E1512", "E1805"])
