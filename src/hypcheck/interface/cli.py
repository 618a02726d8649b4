"""CLI entry points for hypcheck - Thin Controller using Typer."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import typer

from hypcheck.domain.entities import RunRequest, Severity
from hypcheck.domain.errors import ConfigFileError, ConfigurationIssue
from hypcheck.domain.protocols import AstroidProtocol, ConfigSourceProtocol, FileSystemProtocol
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.interface.reporters import RunReporter
from hypcheck.use_cases.analyze_files import AnalyzeFilesUseCase
from hypcheck.use_cases.validate_examples import SelfValidationHarness

DEFAULT_CORPUS_DIR = Path("tests") / "fixtures" / "problem_examples"
OUTPUT_FORMATS = ("text", "structured", "json")
EXIT_VIOLATIONS = 1
EXIT_USAGE = 2


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    registry: CheckerRegistry
    astroid_gateway: AstroidProtocol
    filesystem: FileSystemProtocol
    config_source: ConfigSourceProtocol
    reporter: RunReporter


class CLIAppFactory:
    """Creates the Typer app. No top-level functions."""

    @staticmethod
    def split_values(values: list[str] | None) -> tuple[str, ...]:
        """Flatten repeated and comma-separated option values."""
        if not values:
            return ()
        return tuple(part.strip() for value in values for part in value.split(",") if part.strip())

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.ERROR,
            format="%(levelname)s %(name)s: %(message)s",
        )

    @staticmethod
    def build_request(
        include: list[str] | None,
        exclude: list[str] | None,
        severity: int | None,
        category: list[str] | None,
        select_all: bool,
        check_tests: bool = False,
    ) -> RunRequest:
        return RunRequest(
            include=CLIAppFactory.split_values(include),
            exclude=CLIAppFactory.split_values(exclude),
            min_severity=Severity(severity) if severity is not None else None,
            categories=CLIAppFactory.split_values(category),
            select_all=select_all,
            check_tests=check_tests,
        )

    @staticmethod
    def load_document(deps: CLIDependencies, config: Path | None) -> Mapping[str, object]:
        """Load the configuration document; a broken file degrades to defaults."""
        try:
            document, used = deps.config_source.load_document(str(config) if config else None)
        except ConfigFileError as exc:
            typer.echo(f"WARNING {exc}; using checker defaults", err=True)
            return {}
        if used:
            logging.getLogger(__name__).debug("Configuration loaded from %s", used)
        return document

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="hypcheck",
            help="hypcheck: rule-based static analysis for Python. Run 'hypcheck check PATH' to analyze.",
            add_completion=False,
        )

        def _use_case(jobs: int = 1, strict: bool = False) -> AnalyzeFilesUseCase:
            return AnalyzeFilesUseCase(
                registry=deps.registry,
                parser=deps.astroid_gateway,
                filesystem=deps.filesystem,
                jobs=jobs,
                strict_config=strict,
            )

        @app.command()
        def check(
            paths: list[Path] = typer.Argument(..., help="Files or directories to analyze"),  # noqa: B008
            include: list[str] | None = typer.Option(None, "--include", "-i", help="Only these codes/prefixes (comma-separated)"),  # noqa: B008
            exclude: list[str] | None = typer.Option(None, "--exclude", "-e", help="Disable these codes/prefixes"),  # noqa: B008
            severity: int | None = typer.Option(None, "--severity", "-s", min=1, max=3, help="Minimum severity: 1=low, 2=medium, 3=high"),
            category: list[str] | None = typer.Option(None, "--category", "-c", help="Only checkers tagged with these categories"),  # noqa: B008
            select_all: bool = typer.Option(False, "--all", help="Enable every checker, including those disabled by default"),
            check_tests: bool = typer.Option(False, "--check-tests", help="Also analyze test files and test functions"),
            output_format: str = typer.Option("text", "--format", "-f", help="Output: text, structured or json"),
            config: Path | None = typer.Option(None, "--config", help="Configuration file (default: discovered upwards from cwd)"),  # noqa: B008
            jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Parallel workers for per-file analysis"),
            strict_config: bool = typer.Option(False, "--strict-config", help="Fail on the first configuration problem"),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
        ) -> None:
            """Analyze PATHS and report violations. Exits 1 when any violation is found."""
            CLIAppFactory.configure_logging(verbose)
            if output_format not in OUTPUT_FORMATS:
                raise typer.BadParameter(f"must be one of {', '.join(OUTPUT_FORMATS)}", param_hint="--format")
            request = CLIAppFactory.build_request(include, exclude, severity, category, select_all, check_tests)
            document = CLIAppFactory.load_document(deps, config)
            try:
                report = _use_case(jobs, strict_config).execute([str(p) for p in paths], document, request)
            except ConfigurationIssue as exc:
                typer.echo(f"ERROR {exc}", err=True)
                raise typer.Exit(code=EXIT_USAGE) from exc
            deps.reporter.report_analysis(report, format=output_format)
            if report.has_violations():
                raise typer.Exit(code=EXIT_VIOLATIONS)

        @app.command("list")
        def list_checkers(
            include: list[str] | None = typer.Option(None, "--include", "-i"),  # noqa: B008
            exclude: list[str] | None = typer.Option(None, "--exclude", "-e"),  # noqa: B008
            severity: int | None = typer.Option(None, "--severity", "-s", min=1, max=3),
            category: list[str] | None = typer.Option(None, "--category", "-c"),  # noqa: B008
            select_all: bool = typer.Option(False, "--all"),
            config: Path | None = typer.Option(None, "--config"),  # noqa: B008
        ) -> None:
            """List the checkers that would run with these filters."""
            request = CLIAppFactory.build_request(include, exclude, severity, category, select_all)
            effective, _ = _use_case().select(CLIAppFactory.load_document(deps, config), request)
            deps.reporter.report_checkers(deps.registry, effective)

        @app.command()
        def guidelines(
            include: list[str] | None = typer.Option(None, "--include", "-i"),  # noqa: B008
            exclude: list[str] | None = typer.Option(None, "--exclude", "-e"),  # noqa: B008
            severity: int | None = typer.Option(None, "--severity", "-s", min=1, max=3),
            category: list[str] | None = typer.Option(None, "--category", "-c"),  # noqa: B008
            select_all: bool = typer.Option(False, "--all"),
            config: Path | None = typer.Option(None, "--config"),  # noqa: B008
        ) -> None:
            """Print coding guidelines derived from the selected checkers."""
            request = CLIAppFactory.build_request(include, exclude, severity, category, select_all)
            effective, _ = _use_case().select(CLIAppFactory.load_document(deps, config), request)
            deps.reporter.report_guidelines(deps.registry, effective)

        @app.command("default-config")
        def default_config() -> None:
            """Print every checker's default configuration as TOML."""
            deps.reporter.report_default_config(deps.registry)

        @app.command()
        def validate(
            directory: Path | None = typer.Argument(None, help="Fixture corpus (default: tests/fixtures/problem_examples)"),  # noqa: B008
            jobs: int = typer.Option(1, "--jobs", "-j", min=1),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Per-code results and debug logging"),
        ) -> None:
            """Check every checker against the labeled fixture corpus. Exits 1 on any mismatch."""
            CLIAppFactory.configure_logging(verbose)
            corpus = directory or DEFAULT_CORPUS_DIR
            if not deps.filesystem.is_directory(str(corpus)):
                typer.echo(f"ERROR fixture directory not found: {corpus}", err=True)
                raise typer.Exit(code=EXIT_USAGE)
            harness = SelfValidationHarness(
                registry=deps.registry,
                parser=deps.astroid_gateway,
                filesystem=deps.filesystem,
                jobs=jobs,
            )
            summary = harness.execute(str(corpus))
            deps.reporter.report_validation(summary, verbose=verbose)
            if not summary.success:
                raise typer.Exit(code=EXIT_VIOLATIONS)

        return app
