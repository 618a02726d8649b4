"""Tests for TerminalReporter output formats."""

import json
import unittest
from unittest.mock import patch

from hypcheck.domain.config import ConfigurationResolver
from hypcheck.domain.entities import AnalysisReport, RunRequest, Severity
from hypcheck.domain.errors import ParseFailure, UnknownConfigKey
from hypcheck.domain.rules import Violation
from hypcheck.domain.rules.catalog import CheckerCatalog
from hypcheck.domain.selection import SelectionFilter
from hypcheck.infrastructure.config_file_loader import toml_lib
from hypcheck.infrastructure.reporters import TerminalReporter
from hypcheck.use_cases.validate_examples import (
    KIND_BAD,
    FixtureFunction,
    FixtureResult,
    ValidationSummary,
)


def _report() -> AnalysisReport:
    return AnalysisReport(
        violations=[
            Violation("E1001", "Direct process exit", Severity.HIGH, "Call to sys.exit()", "a.py", 3, 5, "Raise instead."),
            Violation("E1112", "Magic numbers", Severity.LOW, "Magic number 7", "a.py", 9, 12),
        ],
        errors=[ParseFailure("b.py", "invalid syntax")],
        warnings=[UnknownConfigKey("E77")],
        files_analyzed=1,
        lines_analyzed=40,
    )


class _Captured:
    """Collects typer.echo output split by stream."""

    def __init__(self) -> None:
        self.out: list[str] = []
        self.err: list[str] = []

    def __call__(self, message: str = "", err: bool = False) -> None:
        (self.err if err else self.out).append(message)

    @property
    def text(self) -> str:
        return "\n".join(self.out)


class TestTerminalReporter(unittest.TestCase):
    def setUp(self) -> None:
        self.reporter = TerminalReporter()
        self.echo = _Captured()
        patcher = patch("hypcheck.infrastructure.reporters.typer.echo", self.echo)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.registry = CheckerCatalog.default_registry()
        self.defaults = ConfigurationResolver(self.registry).defaults()

    def test_text_format(self) -> None:
        self.reporter.report_analysis(_report())
        self.assertIn("[E1001] Direct process exit - HIGH", self.echo.out)
        self.assertIn("  File: a.py:3:5", self.echo.out)
        self.assertIn("  Suggestion: Raise instead.", self.echo.out)
        self.assertEqual(self.echo.out[-1], "Found 2 violation(s) in 1 file(s) (40 lines analyzed).")
        self.assertEqual(
            self.echo.err,
            [
                "WARNING Unknown checker code or prefix 'E77' in configuration",
                "ERROR Cannot analyze b.py: invalid syntax",
            ],
        )

    def test_text_format_clean_run(self) -> None:
        self.reporter.report_analysis(AnalysisReport(files_analyzed=3, lines_analyzed=10))
        self.assertEqual(
            self.echo.out, ["No violations found.", "Found 0 violation(s) in 3 file(s) (10 lines analyzed)."]
        )

    def test_structured_format_groups_by_severity(self) -> None:
        self.reporter.report_analysis(_report(), format="structured")
        headers = [line for line in self.echo.out if line.startswith("==")]
        self.assertEqual(headers, ["== HIGH (1) ==", "== MEDIUM (0) ==", "== LOW (1) =="])
        self.assertEqual(self.echo.out[-1], "Quality score: 20.0 lines per violation")

    def test_json_format(self) -> None:
        self.reporter.report_analysis(_report(), format="json")
        payload = json.loads(self.echo.text)
        self.assertEqual(payload["summary"]["total_violations"], 2)
        self.assertEqual(payload["summary"]["by_severity"], {"LOW": 1, "MEDIUM": 0, "HIGH": 1})
        self.assertEqual(payload["violations"][0]["file"], "a.py")
        self.assertIsNone(payload["violations"][1]["suggestion"])
        self.assertEqual(payload["errors"], ["Cannot analyze b.py: invalid syntax"])
        self.assertEqual(self.echo.err, [])

    def test_checker_list_and_guidelines_follow_selection(self) -> None:
        effective = SelectionFilter.apply(self.defaults, RunRequest(include=("E1217",)))
        self.reporter.report_checkers(self.registry, effective)
        self.assertTrue(self.echo.out[0].startswith("E1217  ABBA deadlock"))
        self.assertEqual(self.echo.out[-1], "\n1 checker(s) enabled.")
        self.echo.out.clear()
        self.reporter.report_guidelines(self.registry, effective)
        self.assertEqual(self.echo.out[0], "Do not use the following patterns:")
        self.assertTrue(self.echo.out[1].startswith("- E1217 - ABBA deadlock (lock-order cycle) - "))

    def test_empty_selection(self) -> None:
        effective = SelectionFilter.apply(self.defaults, RunRequest(exclude=("E",)))
        self.reporter.report_checkers(self.registry, effective)
        self.assertEqual(self.echo.out, ["No checkers match the selection."])

    def test_default_config_is_loadable_toml(self) -> None:
        self.reporter.report_default_config(self.registry)
        document = toml_lib.loads(self.echo.text)
        checkers = document["checkers"]
        self.assertEqual(len(checkers), len(self.registry))
        self.assertEqual(checkers["e1512_raw_thread_spawn"]["enabled"], False)
        self.assertEqual(checkers["e1217_abba_deadlock"]["severity"], "high")
        resolution = ConfigurationResolver(self.registry).resolve(checkers)
        self.assertEqual(resolution.warnings, ())
        self.assertEqual(dict(resolution.effective), dict(self.defaults))

    def test_validation_summary(self) -> None:
        fixture = FixtureFunction("f.py", "e1001_bad_exit", "E1001", KIND_BAD, 4, 6)
        summary = ValidationSummary(results=[FixtureResult(fixture, passed=False)], skipped=2)
        self.reporter.report_validation(summary, verbose=True)
        self.assertEqual(
            self.echo.out,
            [
                "Validated 1 fixture(s): 0 passed (0.0%), 1 failed (100.0%), 2 skipped",
                "FAIL f.py:4 e1001_bad_exit: expected E1001 to fire, got none",
                "  E1001: 0 passed, 1 failed [FAILED]",
            ],
        )
