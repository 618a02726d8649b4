"""Use Case: Analyze Files - resolve configuration, select checkers, run the engine."""

import logging
from collections.abc import Mapping

from hypcheck.domain.config import ConfigurationResolver, EffectiveConfig, ResolutionResult
from hypcheck.domain.entities import AnalysisReport, RunRequest
from hypcheck.domain.protocols import AstroidProtocol, FileSystemProtocol
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.domain.selection import SelectionFilter
from hypcheck.use_cases.analysis_engine import AnalysisEngine

logger = logging.getLogger(__name__)


class AnalyzeFilesUseCase:
    """Orchestrate one analysis run from a configuration document and target paths."""

    def __init__(
        self,
        registry: CheckerRegistry,
        parser: AstroidProtocol,
        filesystem: FileSystemProtocol,
        jobs: int = 1,
        strict_config: bool = False,
    ) -> None:
        self.registry = registry
        self.parser = parser
        self.filesystem = filesystem
        self.engine = AnalysisEngine(registry, jobs=jobs)
        self.resolver = ConfigurationResolver(registry, strict=strict_config)

    def select(
        self, document: Mapping[str, object] | None, request: RunRequest
    ) -> tuple[EffectiveConfig, ResolutionResult]:
        """Resolve the document and apply the run request's selection."""
        resolution = self.resolver.resolve(document)
        return SelectionFilter.apply(resolution.effective, request), resolution

    def execute(
        self,
        paths: list[str],
        document: Mapping[str, object] | None = None,
        request: RunRequest | None = None,
    ) -> AnalysisReport:
        """
        Run every selected checker over the Python files under paths.

        Args:
            paths: Files and/or directories to analyze.
            document: Parsed configuration document ({key: {field: value}}).
            request: Run-time selection; defaults to configured checkers only.

        Returns:
            AnalysisReport with ordered violations, errors and config warnings.
        """
        request = request or RunRequest()
        effective, resolution = self.select(document, request)
        enabled = effective.enabled_codes()
        files = self.filesystem.collect_python_files(paths)
        logger.info("Analyzing %d file(s) with %d checker(s)", len(files), len(enabled))
        report = self.engine.run_files(files, self.parser, effective, check_tests=request.check_tests)
        report.warnings.extend(resolution.warnings)
        return report
