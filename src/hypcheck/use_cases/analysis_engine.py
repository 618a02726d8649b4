"""
Analysis engine: run enabled checkers over module trees and collect ordered violations.

Phase 1 is per file and may run on a thread pool; phase 2 finishes run-scoped
checkers (lock-order cycles) once every file has been processed.
"""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import PurePath

import astroid

from hypcheck.domain.config import EffectiveConfig
from hypcheck.domain.constants import (
    TEST_DIRECTORY_NAMES,
    TEST_FILE_NAMES,
    TEST_FILE_PREFIXES,
    TEST_FILE_SUFFIXES,
)
from hypcheck.domain.entities import AnalysisReport, CheckerConfig, NodeKind
from hypcheck.domain.errors import HypCheckError, InternalCheckerError, ParseFailure
from hypcheck.domain.protocols import AstroidProtocol
from hypcheck.domain.registry import CheckerRegistry, RegistryEntry
from hypcheck.domain.rules import CheckContext, Checker, RunScopedChecker, Violation
from hypcheck.domain.rules.node_query import NodeQuery

logger = logging.getLogger(__name__)

RUN_SCOPE = "<run>"

_ITEM_KINDS: tuple[tuple[type, NodeKind], ...] = (
    (astroid.nodes.FunctionDef, NodeKind.FUNCTION),
    (astroid.nodes.ClassDef, NodeKind.CLASS),
    (astroid.nodes.Import, NodeKind.IMPORT),
    (astroid.nodes.ImportFrom, NodeKind.IMPORT),
)


@dataclass(frozen=True)
class FileOutcome:
    """Phase-1 result for one input file."""

    file_path: str
    violations: tuple[Violation, ...] = ()
    errors: tuple[HypCheckError, ...] = ()
    lines: int = 0
    analyzed: bool = True


@dataclass(frozen=True)
class _ActiveChecker:
    entry: RegistryEntry
    checker: Checker
    config: CheckerConfig


class TestCodePolicy:
    """Decides what counts as test code when test checking is off."""

    @staticmethod
    def is_test_file(file_path: str) -> bool:
        path = PurePath(file_path)
        name = path.name
        if name in TEST_FILE_NAMES or name.startswith(TEST_FILE_PREFIXES) or name.endswith(TEST_FILE_SUFFIXES):
            return True
        return any(part in TEST_DIRECTORY_NAMES for part in path.parts[:-1])


class AnalysisSession:
    """
    One run's worth of instantiated checkers over a fixed effective config.

    Checkers run one at a time per file in registry order. A failure is
    isolated to its (checker, file) pair: partial results from that checker
    for that file are dropped and an InternalCheckerError is recorded.
    """

    def __init__(
        self,
        registry: CheckerRegistry,
        effective: EffectiveConfig,
        check_tests: bool = False,
    ) -> None:
        self._check_tests = check_tests
        self._active: list[_ActiveChecker] = []
        self.setup_errors: list[HypCheckError] = []
        for entry in registry.all():
            config = effective.get(entry.code)
            if config is None or not config.enabled:
                continue
            try:
                checker = entry.factory()
            except Exception as exc:
                error = InternalCheckerError(entry.code, RUN_SCOPE, exc)
                logger.warning("%s", error)
                self.setup_errors.append(error)
                continue
            self._active.append(_ActiveChecker(entry, checker, config))

    @property
    def active_codes(self) -> list[str]:
        return [active.entry.code for active in self._active]

    def check_file(self, module: astroid.nodes.Module, file_path: str) -> FileOutcome:
        if not self._check_tests and TestCodePolicy.is_test_file(file_path):
            logger.debug("Skipping test file %s", file_path)
            return FileOutcome(file_path=file_path, analyzed=False)
        source_lines = self._source_lines(module)
        items = self._collect_items(module)
        violations: list[Violation] = []
        errors: list[HypCheckError] = []
        for active in self._active:
            kinds = active.entry.metadata.node_kinds
            nodes = [node for kind, node in items if kind in kinds]
            if not nodes:
                continue
            ctx = CheckContext(file_path=file_path, config=active.config, source_lines=source_lines)
            try:
                found = [v for node in nodes for v in active.checker.check(node, ctx)]
            except Exception as exc:
                error = InternalCheckerError(active.entry.code, file_path, exc)
                logger.warning("%s", error)
                errors.append(error)
                if isinstance(active.checker, RunScopedChecker):
                    active.checker.discard(file_path)
                continue
            violations.extend(replace(v, severity=active.config.severity) for v in found)
        violations.sort(key=lambda v: (v.line, v.column))
        return FileOutcome(
            file_path=file_path,
            violations=tuple(violations),
            errors=tuple(errors),
            lines=len(source_lines),
        )

    def finish(self) -> tuple[list[Violation], list[HypCheckError]]:
        """Phase 2: evaluate run-scoped checkers after every file has been checked."""
        violations: list[Violation] = []
        errors: list[HypCheckError] = []
        for active in self._active:
            if not isinstance(active.checker, RunScopedChecker):
                continue
            try:
                found = active.checker.finish()
            except Exception as exc:
                error = InternalCheckerError(active.entry.code, RUN_SCOPE, exc)
                logger.warning("%s", error)
                errors.append(error)
                continue
            violations.extend(replace(v, severity=active.config.severity) for v in found)
        return violations, errors

    def _collect_items(self, module: astroid.nodes.Module) -> list[tuple[NodeKind, astroid.nodes.NodeNG]]:
        items: list[tuple[NodeKind, astroid.nodes.NodeNG]] = [(NodeKind.MODULE, module)]
        for node in module.nodes_of_class(tuple(klass for klass, _ in _ITEM_KINDS)):
            if not self._check_tests and NodeQuery.is_test_item(node):
                continue
            kind = next(kind for klass, kind in _ITEM_KINDS if isinstance(node, klass))
            items.append((kind, node))
        return items

    @staticmethod
    def _source_lines(module: astroid.nodes.Module) -> tuple[str, ...]:
        try:
            stream = module.stream()
        except OSError as exc:
            logger.debug("No source available for %s: %s", module.name, exc)
            return ()
        if stream is None:
            return ()
        with stream:
            text = stream.read().decode("utf-8-sig", errors="replace")
        # Only physical line breaks count; str.splitlines() also splits on form feeds and unicode separators.
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        if lines[-1] == "":
            lines.pop()
        return tuple(lines)


class AnalysisEngine:
    """Drives sessions over many files and assembles the ordered report."""

    def __init__(self, registry: CheckerRegistry, jobs: int = 1) -> None:
        self._registry = registry
        self._jobs = max(1, jobs)

    def open_session(self, effective: EffectiveConfig, check_tests: bool = False) -> AnalysisSession:
        return AnalysisSession(self._registry, effective, check_tests=check_tests)

    def run_trees(
        self,
        trees: Iterable[tuple[str, astroid.nodes.Module]],
        effective: EffectiveConfig,
        check_tests: bool = False,
    ) -> AnalysisReport:
        """Analyze already-parsed trees, in the given order."""
        session = self.open_session(effective, check_tests)
        outcomes = self._map(lambda item: session.check_file(item[1], item[0]), list(trees))
        return self._assemble(session, outcomes)

    def run_files(
        self,
        files: Sequence[str],
        parser: AstroidProtocol,
        effective: EffectiveConfig,
        check_tests: bool = False,
    ) -> AnalysisReport:
        """Parse and analyze files; unparsable files are skipped with a ParseFailure."""
        session = self.open_session(effective, check_tests)

        def analyze(file_path: str) -> FileOutcome:
            try:
                module = parser.parse_file(file_path)
            except ParseFailure as failure:
                logger.warning("%s", failure)
                return FileOutcome(file_path=file_path, errors=(failure,), analyzed=False)
            return session.check_file(module, file_path)

        return self._assemble(session, self._map(analyze, list(files)))

    def _map(self, func, items: list) -> list[FileOutcome]:
        if self._jobs == 1 or len(items) < 2:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=self._jobs) as pool:
            return list(pool.map(func, items))

    def _assemble(self, session: AnalysisSession, outcomes: list[FileOutcome]) -> AnalysisReport:
        run_violations, run_errors = session.finish()
        per_file: dict[str, list[Violation]] = {}
        order: list[str] = []
        for outcome in outcomes:
            if outcome.file_path not in per_file:
                order.append(outcome.file_path)
                per_file[outcome.file_path] = []
            per_file[outcome.file_path].extend(outcome.violations)
        for violation in run_violations:
            if violation.file_path not in per_file:
                order.append(violation.file_path)
                per_file[violation.file_path] = []
            per_file[violation.file_path].append(violation)
        report = AnalysisReport()
        for file_path in order:
            report.violations.extend(sorted(per_file[file_path], key=lambda v: (v.line, v.column)))
        report.errors.extend(session.setup_errors)
        for outcome in outcomes:
            report.errors.extend(outcome.errors)
        report.errors.extend(run_errors)
        report.files_analyzed = sum(1 for o in outcomes if o.analyzed)
        report.lines_analyzed = sum(o.lines for o in outcomes)
        logger.debug(
            "Analyzed %d file(s): %d violation(s), %d error(s)",
            report.files_analyzed,
            len(report.violations),
            len(report.errors),
        )
        return report
