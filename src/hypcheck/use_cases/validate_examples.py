"""
Use Case: Validate Examples - cross-check every checker against a labeled fixture corpus.

Fixture functions are named ``<code>_bad_<description>`` (must trigger the code
inside the function's line span), ``<code>_good_<description>`` (must never
trigger it there) or ``<code>_entry<...>`` (exempt helpers, not evaluated).
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field

import astroid

from hypcheck.domain.config import ConfigurationResolver
from hypcheck.domain.entities import RunRequest
from hypcheck.domain.errors import HypCheckError, ParseFailure
from hypcheck.domain.protocols import AstroidProtocol, FileSystemProtocol
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.domain.rules import Violation
from hypcheck.domain.selection import SelectionFilter
from hypcheck.use_cases.analysis_engine import AnalysisEngine

logger = logging.getLogger(__name__)

FIXTURE_NAME = re.compile(r"^(e\d{4})_(bad|good|entry)(_\w+)?$", re.IGNORECASE)

KIND_BAD = "bad"
KIND_GOOD = "good"
KIND_ENTRY = "entry"


@dataclass(frozen=True)
class FixtureFunction:
    """One labeled function in the corpus."""

    file_path: str
    name: str
    code: str
    kind: str
    start_line: int
    end_line: int

    def contains(self, violation: Violation) -> bool:
        return (
            violation.file_path == self.file_path
            and self.start_line <= violation.line <= self.end_line
        )


@dataclass(frozen=True)
class FixtureResult:
    fixture: FixtureFunction
    passed: bool
    matching: tuple[Violation, ...] = ()
    in_span: tuple[Violation, ...] = ()

    def describe(self) -> str:
        f = self.fixture
        if f.kind == KIND_BAD:
            expectation = f"expected {f.code} to fire, got none"
        else:
            lines = ", ".join(str(v.line) for v in self.matching)
            expectation = f"expected no {f.code}, got {len(self.matching)} at line(s) {lines}"
        return f"{f.file_path}:{f.start_line} {f.name}: {expectation}"


@dataclass
class ValidationSummary:
    """Aggregated harness outcome with individually listed failures."""

    results: list[FixtureResult] = field(default_factory=list)
    errors: list[HypCheckError] = field(default_factory=list)
    skipped: int = 0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def failures(self) -> list[FixtureResult]:
        return [r for r in self.results if not r.passed]

    @property
    def success(self) -> bool:
        return self.failed == 0 and not self.errors

    def percentage(self, count: int) -> float:
        if not self.total:
            return 0.0
        return round(100.0 * count / self.total, 1)

    def by_code(self) -> dict[str, tuple[int, int]]:
        """Return { code: (passed, failed) } in code order."""
        counts: dict[str, list[int]] = defaultdict(lambda: [0, 0])
        for result in self.results:
            counts[result.fixture.code][0 if result.passed else 1] += 1
        return {code: (p, f) for code, (p, f) in sorted(counts.items())}


class FixtureScanner:
    """Find labeled fixture functions at any depth of a module tree."""

    @staticmethod
    def scan(module: astroid.nodes.Module, file_path: str) -> list[FixtureFunction]:
        fixtures: list[FixtureFunction] = []
        for func in module.nodes_of_class(astroid.nodes.FunctionDef):
            match = FIXTURE_NAME.match(func.name)
            if match is None:
                continue
            fixtures.append(
                FixtureFunction(
                    file_path=file_path,
                    name=func.name,
                    code=match.group(1).upper(),
                    kind=match.group(2).lower(),
                    start_line=func.fromlineno or func.lineno,
                    end_line=func.tolineno,
                )
            )
        return fixtures


class SelfValidationHarness:
    """Run every checker over the corpus once and judge each fixture function."""

    def __init__(
        self,
        registry: CheckerRegistry,
        parser: AstroidProtocol,
        filesystem: FileSystemProtocol,
        jobs: int = 1,
    ) -> None:
        self.registry = registry
        self.parser = parser
        self.filesystem = filesystem
        self.engine = AnalysisEngine(registry, jobs=jobs)

    def execute(self, corpus_dir: str) -> ValidationSummary:
        summary = ValidationSummary()
        trees: list[tuple[str, astroid.nodes.Module]] = []
        fixtures: list[FixtureFunction] = []
        for file_path in self.filesystem.collect_python_files([corpus_dir]):
            try:
                module = self.parser.parse_file(file_path)
            except ParseFailure as failure:
                logger.warning("%s", failure)
                summary.errors.append(failure)
                continue
            trees.append((file_path, module))
            fixtures.extend(FixtureScanner.scan(module, file_path))

        effective = SelectionFilter.apply(
            ConfigurationResolver(self.registry).defaults(),
            RunRequest(select_all=True, check_tests=True),
        )
        report = self.engine.run_trees(trees, effective, check_tests=True)
        summary.errors.extend(report.errors)

        for fixture in fixtures:
            if fixture.kind == KIND_ENTRY:
                summary.skipped += 1
                continue
            if fixture.code not in self.registry:
                logger.warning("Fixture %s names unregistered code %s", fixture.name, fixture.code)
                summary.skipped += 1
                continue
            summary.results.append(self.judge(fixture, report.violations))
        logger.debug(
            "Validated %d fixture(s): %d passed, %d failed", summary.total, summary.passed, summary.failed
        )
        return summary

    @staticmethod
    def judge(fixture: FixtureFunction, violations: list[Violation]) -> FixtureResult:
        in_span = tuple(v for v in violations if fixture.contains(v))
        matching = tuple(v for v in in_span if v.code.upper() == fixture.code)
        passed = bool(matching) if fixture.kind == KIND_BAD else not matching
        return FixtureResult(fixture=fixture, passed=passed, matching=matching, in_span=in_span)
