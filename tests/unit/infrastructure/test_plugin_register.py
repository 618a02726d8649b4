"""Tests for the pylint plugin entry point and the DI container."""

import unittest
from unittest.mock import MagicMock

from hypcheck.domain.errors import ConfigFileError
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.infrastructure.checker import register
from hypcheck.infrastructure.config_file_loader import ConfigFileLoader
from hypcheck.infrastructure.di.container import HypCheckContainer
from hypcheck.infrastructure.gateways.astroid_gateway import AstroidGateway
from hypcheck.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from hypcheck.infrastructure.reporters import TerminalReporter
from hypcheck.use_cases.checks.hyp_rules import HypRulesChecker


class TestHypCheckContainer(unittest.TestCase):
    def tearDown(self) -> None:
        HypCheckContainer.reset()

    def test_default_registrations(self) -> None:
        container = HypCheckContainer()
        self.assertIsInstance(container.get_registry(), CheckerRegistry)
        self.assertEqual(len(container.get_registry()), 38)
        self.assertIsInstance(container.get_astroid_gateway(), AstroidGateway)
        self.assertIsInstance(container.get_filesystem_gateway(), FileSystemGateway)
        self.assertIsInstance(container.get_config_source(), ConfigFileLoader)
        self.assertIsInstance(container.get_reporter(), TerminalReporter)

    def test_unknown_dependency(self) -> None:
        with self.assertRaisesRegex(ValueError, "Dependency 'Nope' not registered."):
            HypCheckContainer().get("Nope")

    def test_containers_do_not_share_registries(self) -> None:
        self.assertIsNot(HypCheckContainer().get_registry(), HypCheckContainer().get_registry())

    def test_get_instance_is_a_resettable_singleton(self) -> None:
        first = HypCheckContainer.get_instance()
        self.assertIs(first, HypCheckContainer.get_instance())
        HypCheckContainer.reset()
        self.assertIsNot(first, HypCheckContainer.get_instance())


class TestRegister(unittest.TestCase):
    def setUp(self) -> None:
        HypCheckContainer.reset()
        self.config_source = MagicMock()
        HypCheckContainer.get_instance().register_singleton("ConfigFileLoader", self.config_source)

    def tearDown(self) -> None:
        HypCheckContainer.reset()

    def test_registers_the_bridge_with_resolved_config(self) -> None:
        self.config_source.load_document.return_value = ({"E1001": {"enabled": False}}, "hypcheck.toml")
        linter = MagicMock()
        register(linter)
        linter.register_checker.assert_called_once()
        checker = linter.register_checker.call_args.args[0]
        self.assertIsInstance(checker, HypRulesChecker)
        self.assertFalse(checker._effective["E1001"].enabled)
        self.assertTrue(checker._effective["E1002"].enabled)

    def test_broken_config_file_falls_back_to_defaults(self) -> None:
        self.config_source.load_document.side_effect = ConfigFileError("hypcheck.toml", "malformed document")
        linter = MagicMock()
        with self.assertLogs("hypcheck.infrastructure.checker", level="WARNING"):
            register(linter)
        checker = linter.register_checker.call_args.args[0]
        self.assertTrue(checker._effective["E1001"].enabled)
