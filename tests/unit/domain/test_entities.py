"""Unit tests for domain entities: Severity, CheckerConfig, AnalysisReport, Violation."""

import unittest
from dataclasses import FrozenInstanceError

import astroid

from hypcheck.domain.entities import (
    AnalysisReport,
    CheckerConfig,
    CheckerMetadata,
    NodeKind,
    Severity,
)
from hypcheck.domain.rules import CheckContext, Violation


def _violation(severity: Severity = Severity.LOW, line: int = 1) -> Violation:
    return Violation(
        code="E9999",
        display_name="Sample",
        severity=severity,
        message="msg",
        file_path="a.py",
        line=line,
        column=1,
    )


class TestSeverity(unittest.TestCase):
    def test_parse_accepts_names_numbers_and_digit_strings(self) -> None:
        self.assertEqual(Severity.parse("high"), Severity.HIGH)
        self.assertEqual(Severity.parse("Medium"), Severity.MEDIUM)
        self.assertEqual(Severity.parse(1), Severity.LOW)
        self.assertEqual(Severity.parse(" 3 "), Severity.HIGH)
        self.assertIs(Severity.parse(Severity.LOW), Severity.LOW)

    def test_parse_rejects_bool_and_out_of_range(self) -> None:
        for bad in (True, 0, 4, "critical", 2.0, None):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    Severity.parse(bad)

    def test_ordering_supports_a_floor(self) -> None:
        self.assertLess(Severity.LOW, Severity.MEDIUM)
        self.assertGreaterEqual(Severity.HIGH, Severity.MEDIUM)
        self.assertEqual(Severity.HIGH.label, "HIGH")


class TestCheckerConfig(unittest.TestCase):
    def test_options_are_read_only_and_categories_lowercased(self) -> None:
        config = CheckerConfig(categories=frozenset({"Complexity"}), options={"max_lines": 10})
        self.assertEqual(config.categories, frozenset({"complexity"}))
        with self.assertRaises(TypeError):
            config.options["max_lines"] = 20  # type: ignore[index]

    def test_with_option_returns_a_new_config(self) -> None:
        config = CheckerConfig(options={"max_lines": 10})
        changed = config.with_option("max_lines", 20)
        self.assertEqual(config.option("max_lines"), 10)
        self.assertEqual(changed.option("max_lines"), 20)

    def test_config_is_frozen(self) -> None:
        config = CheckerConfig()
        with self.assertRaises(FrozenInstanceError):
            config.enabled = False  # type: ignore[misc]

    def test_missing_option_is_a_key_error(self) -> None:
        with self.assertRaises(KeyError):
            CheckerConfig().option("nope")


class TestCheckerMetadata(unittest.TestCase):
    def test_category_prefix_and_pylint_symbol(self) -> None:
        meta = CheckerMetadata(
            code="E1101",
            display_name="High cyclomatic complexity",
            suggestion="Split it.",
            node_kinds=frozenset({NodeKind.FUNCTION}),
            config_key="e1101_high_cyclomatic_complexity",
        )
        self.assertEqual(meta.category_prefix, "E11")
        self.assertEqual(meta.pylint_symbol, "e1101-high-cyclomatic-complexity")


class TestAnalysisReport(unittest.TestCase):
    def test_empty_report_has_no_quality_score(self) -> None:
        report = AnalysisReport(lines_analyzed=100)
        self.assertFalse(report.has_violations())
        self.assertIsNone(report.quality_score())

    def test_counts_and_quality_score(self) -> None:
        report = AnalysisReport(
            violations=[_violation(Severity.HIGH), _violation(Severity.LOW), _violation(Severity.LOW)],
            lines_analyzed=100,
        )
        counts = report.count_by_severity()
        self.assertEqual(counts[Severity.HIGH], 1)
        self.assertEqual(counts[Severity.MEDIUM], 0)
        self.assertEqual(counts[Severity.LOW], 2)
        self.assertEqual(report.quality_score(), 33.3)


class TestViolationFromNode(unittest.TestCase):
    def test_positions_are_one_based_and_severity_comes_from_config(self) -> None:
        module = astroid.parse("x = 1\nif x:\n    y = 2\n")
        assign = module.body[1].body[0]
        meta = CheckerMetadata("E9999", "Sample", "Fix it.", frozenset({NodeKind.MODULE}), "e9999_sample")
        ctx = CheckContext(file_path="m.py", config=CheckerConfig(severity=Severity.HIGH))
        violation = Violation.from_node(metadata=meta, ctx=ctx, message="m", node=assign)
        self.assertEqual((violation.line, violation.column), (3, 5))
        self.assertEqual(violation.severity, Severity.HIGH)
        self.assertEqual(violation.location, "m.py:3:5")
        self.assertEqual(violation.suggestion, "Fix it.")

    def test_decorated_definitions_anchor_on_their_keyword(self) -> None:
        module = astroid.parse(
            "import functools\n\n@functools.cache\ndef f():\n    pass\n\n"
            "class Box:\n    @property\n    def size(self):\n        return 1\n"
        )
        meta = CheckerMetadata("E9999", "Sample", "", frozenset({NodeKind.FUNCTION}), "e9999_sample")
        ctx = CheckContext(file_path="m.py", config=CheckerConfig())
        func = module.body[1]
        method = module.body[2].body[0]
        located = [
            (v.line, v.column)
            for v in (
                Violation.from_node(metadata=meta, ctx=ctx, message="m", node=func),
                Violation.from_node(metadata=meta, ctx=ctx, message="m", node=method),
            )
        ]
        self.assertEqual(located, [(4, 1), (9, 5)])
