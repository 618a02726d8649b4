"""Tests for the analysis engine: ordering, isolation, parallelism and test-code policy."""

import unittest
from typing import ClassVar
from unittest.mock import MagicMock

from hypcheck.domain.config import ConfigurationResolver, EffectiveConfig
from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind, Severity
from hypcheck.domain.errors import InternalCheckerError, ParseFailure
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.domain.rules import Checker
from hypcheck.domain.rules.runtime_safety import AssertForRuntimeChecks, DirectExit
from hypcheck.use_cases.analysis_engine import RUN_SCOPE, AnalysisEngine, TestCodePolicy
from tests.unit.checker_test_utils import parse_source

SOURCE_A = """
import sys

def run(x):
    assert x
    sys.exit(1)
"""

SOURCE_B = """
def check(y):
    assert y > 0
"""


class _ExplodingChecker(Checker):
    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E2999",
        display_name="Exploding",
        suggestion="",
        node_kinds=frozenset({NodeKind.FUNCTION}),
        config_key="e2999_exploding",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig()

    def check(self, node, ctx):
        raise RuntimeError("boom")


def _registry(*checker_classes) -> CheckerRegistry:
    registry = CheckerRegistry()
    for checker_cls in checker_classes:
        registry.register_checker(checker_cls)
    return registry


def _trees(*sources: tuple[str, str]):
    return [(path, parse_source(source, path)) for path, source in sources]


class TestAnalysisEngine(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = _registry(DirectExit, AssertForRuntimeChecks)
        self.effective = ConfigurationResolver(self.registry).defaults()
        self.engine = AnalysisEngine(self.registry)

    def test_violations_ordered_by_file_then_position(self) -> None:
        report = self.engine.run_trees(
            _trees(("src/b.py", SOURCE_B), ("src/a.py", SOURCE_A)), self.effective
        )
        located = [(v.file_path, v.line, v.code) for v in report.violations]
        self.assertEqual(
            located,
            [("src/b.py", 3, "E1002"), ("src/a.py", 5, "E1002"), ("src/a.py", 6, "E1001")],
        )
        self.assertEqual(report.files_analyzed, 2)
        self.assertEqual(report.lines_analyzed, 3 + 6)

    def test_only_newlines_count_as_line_breaks(self) -> None:
        source = 'import os\n\f\nlabel = "a\u2028b\x1cc"\nvalue = 1\r\n'
        report = self.engine.run_trees(_trees(("src/feed.py", source)), self.effective)
        self.assertEqual(report.lines_analyzed, 4)

    def test_disabled_checker_never_runs(self) -> None:
        effective = self.effective.replace("E1001", CheckerConfig(enabled=False))
        report = self.engine.run_trees(_trees(("src/a.py", SOURCE_A)), effective)
        self.assertEqual([v.code for v in report.violations], ["E1002"])

    def test_severity_comes_from_effective_config(self) -> None:
        effective = self.effective.replace(
            "E1002", self.effective["E1002"].with_changes(severity=Severity.LOW)
        )
        report = self.engine.run_trees(_trees(("src/b.py", SOURCE_B)), effective)
        self.assertEqual(report.violations[0].severity, Severity.LOW)

    def test_runs_are_idempotent(self) -> None:
        trees = _trees(("src/a.py", SOURCE_A), ("src/b.py", SOURCE_B))
        first = self.engine.run_trees(trees, self.effective)
        second = self.engine.run_trees(trees, self.effective)
        self.assertEqual(first.violations, second.violations)

    def test_parallel_jobs_match_sequential_results(self) -> None:
        sources = [(f"src/m{i}.py", SOURCE_A if i % 2 else SOURCE_B) for i in range(6)]
        sequential = self.engine.run_trees(_trees(*sources), self.effective)
        parallel = AnalysisEngine(self.registry, jobs=4).run_trees(_trees(*sources), self.effective)
        self.assertEqual(sequential.violations, parallel.violations)

    def test_failing_checker_is_isolated(self) -> None:
        registry = _registry(DirectExit, _ExplodingChecker, AssertForRuntimeChecks)
        effective = ConfigurationResolver(registry).defaults()
        report = AnalysisEngine(registry).run_trees(_trees(("src/a.py", SOURCE_A)), effective)
        self.assertEqual([v.code for v in report.violations], ["E1002", "E1001"])
        self.assertEqual(len(report.errors), 1)
        error = report.errors[0]
        self.assertIsInstance(error, InternalCheckerError)
        self.assertEqual((error.code, error.file_path), ("E2999", "src/a.py"))
        self.assertIsInstance(error.cause, RuntimeError)

    def test_factory_failure_is_a_run_level_error(self) -> None:
        registry = _registry(AssertForRuntimeChecks)
        registry.register(_ExplodingChecker.metadata, CheckerConfig(), MagicMock(side_effect=TypeError("bad")))
        effective = ConfigurationResolver(registry).defaults()
        report = AnalysisEngine(registry).run_trees(_trees(("src/b.py", SOURCE_B)), effective)
        self.assertEqual([v.code for v in report.violations], ["E1002"])
        self.assertEqual([(e.code, e.file_path) for e in report.errors], [("E2999", RUN_SCOPE)])

    def test_parse_failure_skips_the_file(self) -> None:
        good = parse_source(SOURCE_B, "src/b.py")

        def parse_file(path):
            if path == "src/broken.py":
                raise ParseFailure(path, "invalid syntax")
            return good

        parser = MagicMock()
        parser.parse_file.side_effect = parse_file
        report = self.engine.run_files(["src/broken.py", "src/b.py"], parser, self.effective)
        self.assertEqual([v.file_path for v in report.violations], ["src/b.py"])
        self.assertEqual(report.files_analyzed, 1)
        self.assertIsInstance(report.errors[0], ParseFailure)

    def test_test_files_and_functions_skipped_unless_requested(self) -> None:
        source = """
        def test_thing():
            assert True

        def helper(x):
            assert x
        """
        trees = _trees(("tests/test_mod.py", source), ("src/mod.py", source))
        report = self.engine.run_trees(trees, self.effective)
        self.assertEqual([(v.file_path, v.line) for v in report.violations], [("src/mod.py", 6)])
        self.assertEqual(report.files_analyzed, 1)
        everything = self.engine.run_trees(trees, self.effective, check_tests=True)
        self.assertEqual(len(everything.violations), 4)

    def test_checker_sees_only_requested_node_kinds(self) -> None:
        factory = MagicMock()
        factory.return_value.check.return_value = []
        meta = CheckerMetadata("E2000", "Classes", "", frozenset({NodeKind.CLASS}), "e2000_classes")
        registry = CheckerRegistry()
        registry.register(meta, CheckerConfig(), factory)
        source = "class A:\n    def f(self):\n        pass\nclass B:\n    pass\n"
        AnalysisEngine(registry).run_trees(_trees(("src/c.py", source)), EffectiveConfig({"E2000": CheckerConfig()}))
        visited = [call.args[0].name for call in factory.return_value.check.call_args_list]
        self.assertEqual(visited, ["A", "B"])


class TestTestCodePolicy(unittest.TestCase):
    def test_recognizes_test_files(self) -> None:
        for path in ("tests/unit/helpers.py", "pkg/test_api.py", "pkg/api_test.py", "conftest.py"):
            with self.subTest(path=path):
                self.assertTrue(TestCodePolicy.is_test_file(path))
        for path in ("src/pkg/api.py", "src/testing_tools.py", "src/latest.py"):
            with self.subTest(path=path):
                self.assertFalse(TestCodePolicy.is_test_file(path))
