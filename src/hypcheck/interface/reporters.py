"""Protocol for run reporting - no infrastructure imports."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from hypcheck.domain.config import EffectiveConfig
    from hypcheck.domain.entities import AnalysisReport
    from hypcheck.domain.registry import CheckerRegistry
    from hypcheck.use_cases.validate_examples import ValidationSummary


class RunReporter(Protocol):
    """Protocol for presenting analysis results, checker listings and harness outcomes."""

    def report_analysis(self, report: "AnalysisReport", format: str = "text") -> None:
        """Render one run's violations and diagnostics. format: text, structured or json."""
        ...

    def report_checkers(self, registry: "CheckerRegistry", effective: "EffectiveConfig") -> None:
        """List checkers enabled under the effective configuration."""
        ...

    def report_guidelines(self, registry: "CheckerRegistry", effective: "EffectiveConfig") -> None:
        ...

    def report_default_config(self, registry: "CheckerRegistry") -> None:
        """Print every checker default as a TOML document."""
        ...

    def report_validation(self, summary: "ValidationSummary", verbose: bool = False) -> None:
        ...
