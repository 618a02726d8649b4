"""Terminal reporter implementation - lives in infrastructure (writes to the console)."""

import json
from collections import defaultdict
from collections.abc import Iterator
from typing import TYPE_CHECKING

import typer

from hypcheck.domain.entities import CheckerConfig, Severity
from hypcheck.domain.registry import RegistryEntry
from hypcheck.interface.reporters import RunReporter

if TYPE_CHECKING:
    from hypcheck.domain.config import EffectiveConfig
    from hypcheck.domain.entities import AnalysisReport
    from hypcheck.domain.registry import CheckerRegistry
    from hypcheck.domain.rules import Violation
    from hypcheck.use_cases.validate_examples import ValidationSummary


class TerminalReporter(RunReporter):
    """Plain-text, grouped and JSON rendering through typer.echo."""

    def report_analysis(self, report: "AnalysisReport", format: str = "text") -> None:
        if format == "json":
            typer.echo(json.dumps(self.to_dict(report), indent=2))
            return
        if format == "structured":
            self._report_structured(report)
        else:
            self._report_text(report)
        self._report_diagnostics(report)

    def report_checkers(self, registry: "CheckerRegistry", effective: "EffectiveConfig") -> None:
        rows = list(self._enabled(registry, effective))
        if not rows:
            typer.echo("No checkers match the selection.")
            return
        for entry, config in rows:
            categories = ", ".join(sorted(config.categories)) or "-"
            typer.echo(
                f"{entry.code}  {entry.metadata.display_name:<40} "
                f"{config.severity.label:<7} {categories}"
            )
        typer.echo(f"\n{len(rows)} checker(s) enabled.")

    def report_guidelines(self, registry: "CheckerRegistry", effective: "EffectiveConfig") -> None:
        typer.echo("Do not use the following patterns:")
        for entry, _ in self._enabled(registry, effective):
            meta = entry.metadata
            typer.echo(f"- {meta.code} - {meta.display_name} - {meta.suggestion}")

    def report_default_config(self, registry: "CheckerRegistry") -> None:
        blocks = []
        for entry in registry.all():
            lines = [f"[checkers.{entry.metadata.config_key}]"]
            lines.extend(self._toml_fields(entry.default_config))
            blocks.append("\n".join(lines))
        typer.echo("\n\n".join(blocks))

    def report_validation(self, summary: "ValidationSummary", verbose: bool = False) -> None:
        typer.echo(
            f"Validated {summary.total} fixture(s): "
            f"{summary.passed} passed ({summary.percentage(summary.passed)}%), "
            f"{summary.failed} failed ({summary.percentage(summary.failed)}%), "
            f"{summary.skipped} skipped"
        )
        for result in summary.failures:
            typer.echo(f"FAIL {result.describe()}")
            if verbose:
                for violation in result.in_span:
                    typer.echo(f"    saw {violation.code} at {violation.location}")
        if verbose:
            for code, (passed, failed) in summary.by_code().items():
                status = "ok" if not failed else "FAILED"
                typer.echo(f"  {code}: {passed} passed, {failed} failed [{status}]")
        for error in summary.errors:
            typer.echo(f"ERROR {error}", err=True)

    @staticmethod
    def to_dict(report: "AnalysisReport") -> dict[str, object]:
        counts = report.count_by_severity()
        return {
            "violations": [
                {
                    "code": v.code,
                    "name": v.display_name,
                    "severity": v.severity.label,
                    "message": v.message,
                    "file": v.file_path,
                    "line": v.line,
                    "column": v.column,
                    "suggestion": v.suggestion,
                }
                for v in report.violations
            ],
            "errors": [str(e) for e in report.errors],
            "warnings": [str(w) for w in report.warnings],
            "summary": {
                "files_analyzed": report.files_analyzed,
                "lines_analyzed": report.lines_analyzed,
                "total_violations": len(report.violations),
                "by_severity": {s.label: counts[s] for s in Severity},
                "quality_score": report.quality_score(),
            },
        }

    def _report_text(self, report: "AnalysisReport") -> None:
        for violation in report.violations:
            self._echo_violation(violation)
        if not report.violations:
            typer.echo("No violations found.")
        typer.echo(
            f"Found {len(report.violations)} violation(s) in {report.files_analyzed} file(s) "
            f"({report.lines_analyzed} lines analyzed)."
        )

    def _report_structured(self, report: "AnalysisReport") -> None:
        grouped: dict[Severity, list["Violation"]] = defaultdict(list)
        for violation in report.violations:
            grouped[violation.severity].append(violation)
        for severity in sorted(Severity, reverse=True):
            items = grouped.get(severity, [])
            typer.echo(f"== {severity.label} ({len(items)}) ==")
            for v in items:
                typer.echo(f"  {v.location} [{v.code}] {v.display_name}: {v.message}")
        score = report.quality_score()
        typer.echo(
            f"Files: {report.files_analyzed}  Lines: {report.lines_analyzed}  "
            f"Violations: {len(report.violations)}"
        )
        if score is None:
            typer.echo("Quality score: clean")
        else:
            typer.echo(f"Quality score: {score} lines per violation")

    @staticmethod
    def _echo_violation(violation: "Violation") -> None:
        typer.echo(f"[{violation.code}] {violation.display_name} - {violation.severity.label}")
        typer.echo(f"  File: {violation.location}")
        typer.echo(f"  {violation.message}")
        if violation.suggestion:
            typer.echo(f"  Suggestion: {violation.suggestion}")
        typer.echo("")

    @staticmethod
    def _report_diagnostics(report: "AnalysisReport") -> None:
        for warning in report.warnings:
            typer.echo(f"WARNING {warning}", err=True)
        for error in report.errors:
            typer.echo(f"ERROR {error}", err=True)

    @staticmethod
    def _enabled(
        registry: "CheckerRegistry", effective: "EffectiveConfig"
    ) -> Iterator[tuple[RegistryEntry, CheckerConfig]]:
        for entry in registry.all():
            config = effective.get(entry.code)
            if config is not None and config.enabled:
                yield entry, config

    @staticmethod
    def _toml_fields(config: CheckerConfig) -> list[str]:
        categories = ", ".join(json.dumps(c) for c in sorted(config.categories))
        lines = [
            f"enabled = {'true' if config.enabled else 'false'}",
            f'severity = "{config.severity.label.lower()}"',
            f"categories = [{categories}]",
        ]
        for name, value in config.options.items():
            if isinstance(value, bool):
                rendered = "true" if value else "false"
            elif isinstance(value, str):
                rendered = json.dumps(value)
            else:
                rendered = repr(value)
            lines.append(f"{name} = {rendered}")
        return lines
