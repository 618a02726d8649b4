"""Run-time selection: final enabled state from a RunRequest over the effective config."""

from collections.abc import Iterable

from hypcheck.domain.config import EffectiveConfig
from hypcheck.domain.entities import CheckerConfig, RunRequest


class SelectionFilter:
    """
    Apply run-time overrides in a fixed order:

    1. select_all forces enabled=True (severity and categories untouched).
    2. A non-empty include list keeps only matching codes; with select_all it
       narrows the selection (intersection).
    3. The exclude list disables matching codes.
    4. The severity floor and the category allow-list are independent filters;
       a checker must pass both.
    """

    @staticmethod
    def matches(code: str, patterns: Iterable[str]) -> bool:
        """Case-insensitive prefix match of code against any pattern."""
        lowered = code.lower()
        return any(lowered.startswith(p.strip().lower()) for p in patterns if p.strip())

    @classmethod
    def apply(cls, effective: EffectiveConfig, request: RunRequest) -> EffectiveConfig:
        selected = {code: cls._select(code, cfg, request) for code, cfg in effective.items()}
        return EffectiveConfig(selected)

    @classmethod
    def _select(cls, code: str, cfg: CheckerConfig, request: RunRequest) -> CheckerConfig:
        enabled = True if request.select_all else cfg.enabled
        include = [p for p in request.include if p.strip()]
        if include:
            # Exactly the listed codes; under select_all this is the intersection.
            enabled = cls.matches(code, include)
        if request.exclude and cls.matches(code, request.exclude):
            enabled = False
        if request.min_severity is not None and cfg.severity < request.min_severity:
            enabled = False
        if request.categories:
            allowed = {c.strip().lower() for c in request.categories if c.strip()}
            if allowed and not (cfg.categories & allowed):
                enabled = False
        if enabled == cfg.enabled:
            return cfg
        return cfg.with_changes(enabled=enabled)
