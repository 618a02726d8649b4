"""Domain entities: severities, node kinds, checker metadata/config, run requests and reports."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Union

from hypcheck.domain.constants import CATEGORY_PREFIX_LENGTH

if TYPE_CHECKING:
    from hypcheck.domain.errors import ConfigurationIssue, HypCheckError
    from hypcheck.domain.rules import Violation

ScalarValue = Union[bool, int, float, str]


class Severity(IntEnum):
    """Violation severity. Ordered so a floor can be compared numerically."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: object) -> "Severity":
        """Accept a Severity, an int 1-3, a digit string, or a case-insensitive name."""
        if isinstance(value, Severity):
            return value
        if isinstance(value, bool):
            raise ValueError(f"not a severity: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                raise ValueError(f"not a severity: {value!r}") from None
        raise ValueError(f"not a severity: {value!r}")


class NodeKind(str, Enum):
    """Syntax-node categories a checker may ask to visit."""

    MODULE = "module"
    CLASS = "class"
    FUNCTION = "function"
    IMPORT = "import"


SCOPE_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.MODULE, NodeKind.CLASS, NodeKind.FUNCTION}
)


@dataclass(frozen=True)
class CheckerMetadata:
    """Static description of a checker. Created once at registration time."""

    code: str
    display_name: str
    suggestion: str
    node_kinds: frozenset[NodeKind]
    config_key: str

    @property
    def category_prefix(self) -> str:
        """Leading letter and group digits of the code, e.g. 'E11' for 'E1101'."""
        return self.code[:CATEGORY_PREFIX_LENGTH]

    @property
    def pylint_symbol(self) -> str:
        return self.config_key.replace("_", "-")


@dataclass(frozen=True)
class CheckerConfig:
    """Per-checker configuration. Immutable once resolved for a run."""

    enabled: bool = True
    severity: Severity = Severity.MEDIUM
    categories: frozenset[str] = frozenset()
    options: Mapping[str, ScalarValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))
        object.__setattr__(
            self, "categories", frozenset(c.lower() for c in self.categories)
        )

    def option(self, name: str) -> ScalarValue:
        """Return a checker-specific option. Missing options are a programming error."""
        return self.options[name]

    def with_changes(self, **changes: object) -> "CheckerConfig":
        return replace(self, **changes)  # type: ignore[arg-type]

    def with_option(self, name: str, value: ScalarValue) -> "CheckerConfig":
        merged = dict(self.options)
        merged[name] = value
        return replace(self, options=merged)


@dataclass(frozen=True)
class RunRequest:
    """Selection parameters supplied by the caller for one run."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    min_severity: Severity | None = None
    categories: tuple[str, ...] = ()
    select_all: bool = False
    check_tests: bool = False


@dataclass
class AnalysisReport:
    """Aggregated result of one run: ordered violations plus diagnostics."""

    violations: list["Violation"] = field(default_factory=list)
    errors: list["HypCheckError"] = field(default_factory=list)
    warnings: list["ConfigurationIssue"] = field(default_factory=list)
    files_analyzed: int = 0
    lines_analyzed: int = 0

    def has_violations(self) -> bool:
        return bool(self.violations)

    def count_by_severity(self) -> dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for violation in self.violations:
            counts[violation.severity] += 1
        return counts

    def quality_score(self) -> float | None:
        """Lines of code per violation; None when the run is clean."""
        if not self.violations:
            return None
        return round(self.lines_analyzed / len(self.violations), 1)
