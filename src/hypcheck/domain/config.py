"""
Cascading configuration resolution.

Turns compiled-in checker defaults plus a loaded configuration document into one
effective CheckerConfig per registered checker. Document keys are applied from
least to most specific (prefix length), so narrower keys override wider ones.
Run-time selection is applied afterwards by SelectionFilter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from hypcheck.domain.constants import CORE_CONFIG_FIELDS
from hypcheck.domain.entities import CheckerConfig, ScalarValue, Severity
from hypcheck.domain.errors import (
    ConfigurationIssue,
    InvalidConfigValue,
    UnknownConfigKey,
)
from hypcheck.domain.registry import CheckerRegistry, RegistryEntry

logger = logging.getLogger(__name__)


class EffectiveConfig(Mapping[str, CheckerConfig]):
    """Read-only mapping from code to resolved config; one entry per registered code."""

    def __init__(self, configs: Mapping[str, CheckerConfig]) -> None:
        self._configs = {code.upper(): cfg for code, cfg in configs.items()}

    def __getitem__(self, code: str) -> CheckerConfig:
        return self._configs[code.upper()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def enabled_codes(self) -> list[str]:
        return [code for code, cfg in self._configs.items() if cfg.enabled]

    def replace(self, code: str, config: CheckerConfig) -> EffectiveConfig:
        updated = dict(self._configs)
        updated[code.upper()] = config
        return EffectiveConfig(updated)


@dataclass(frozen=True)
class ResolutionResult:
    effective: EffectiveConfig
    warnings: tuple[ConfigurationIssue, ...] = ()


@dataclass(frozen=True)
class _DocumentLayer:
    """One document entry with the registry entries it applies to."""

    key: str
    fields: Mapping[str, object]
    targets: tuple[RegistryEntry, ...]
    specificity: int
    is_alias: bool


class ConfigurationResolver:
    """
    Resolve effective configuration for a registry.

    Configuration problems degrade to the previous layer's value and are
    collected as warnings; with strict=True the first problem is raised.
    """

    def __init__(self, registry: CheckerRegistry, strict: bool = False) -> None:
        self._registry = registry
        self._strict = strict

    def defaults(self) -> EffectiveConfig:
        return EffectiveConfig({e.code: e.default_config for e in self._registry.all()})

    def resolve(self, document: Mapping[str, object] | None) -> ResolutionResult:
        """Overlay the document onto defaults, least specific key first."""
        configs = {e.code.upper(): e.default_config for e in self._registry.all()}
        warnings: list[ConfigurationIssue] = []
        for layer in self._layers(document or {}, warnings):
            for entry in layer.targets:
                code = entry.code.upper()
                configs[code] = self._apply_fields(entry, configs[code], layer, warnings)
        return ResolutionResult(effective=EffectiveConfig(configs), warnings=tuple(warnings))

    def _layers(
        self, document: Mapping[str, object], warnings: list[ConfigurationIssue]
    ) -> list[_DocumentLayer]:
        entries = list(self._registry.all())
        layers: list[_DocumentLayer] = []
        for raw_key, raw_fields in document.items():
            key = str(raw_key).strip()
            lowered = key.lower()
            if not isinstance(raw_fields, Mapping):
                self._report(
                    InvalidConfigValue(key, "*", raw_fields, "a table of fields"), warnings
                )
                continue
            alias_targets = tuple(e for e in entries if e.metadata.config_key.lower() == lowered)
            if alias_targets:
                layers.append(
                    _DocumentLayer(
                        key=key,
                        fields=raw_fields,
                        targets=alias_targets,
                        specificity=len(alias_targets[0].code),
                        is_alias=True,
                    )
                )
                continue
            targets = tuple(e for e in entries if e.code.lower().startswith(lowered))
            if not lowered or not targets:
                self._report(UnknownConfigKey(key), warnings)
                continue
            layers.append(
                _DocumentLayer(
                    key=key,
                    fields=raw_fields,
                    targets=targets,
                    specificity=len(lowered),
                    is_alias=False,
                )
            )
        # Least specific first; an exact code precedes its config_key alias.
        layers.sort(key=lambda layer: (layer.specificity, layer.is_alias, layer.key.lower()))
        for layer in layers:
            self._check_unknown_fields(layer, warnings)
        return layers

    def _check_unknown_fields(
        self, layer: _DocumentLayer, warnings: list[ConfigurationIssue]
    ) -> None:
        for field_name in layer.fields:
            if field_name in CORE_CONFIG_FIELDS:
                continue
            if not any(field_name in t.default_config.options for t in layer.targets):
                self._report(UnknownConfigKey(layer.key, str(field_name)), warnings)

    def _apply_fields(
        self,
        entry: RegistryEntry,
        current: CheckerConfig,
        layer: _DocumentLayer,
        warnings: list[ConfigurationIssue],
    ) -> CheckerConfig:
        """Overwrite only the fields present in this layer; bad values keep the prior value."""
        code = entry.code
        result = current
        for field_name, value in layer.fields.items():
            if field_name == "enabled":
                if isinstance(value, bool):
                    result = result.with_changes(enabled=value)
                else:
                    self._report(InvalidConfigValue(code, field_name, value, "a boolean"), warnings)
            elif field_name == "severity":
                try:
                    result = result.with_changes(severity=Severity.parse(value))
                except ValueError:
                    self._report(
                        InvalidConfigValue(code, field_name, value, "1-3 or low/medium/high"),
                        warnings,
                    )
            elif field_name == "categories":
                categories = self._coerce_categories(value)
                if categories is None:
                    self._report(
                        InvalidConfigValue(code, field_name, value, "a list of strings"), warnings
                    )
                else:
                    result = result.with_changes(categories=categories)
            elif field_name in entry.default_config.options:
                default = entry.default_config.options[field_name]
                coerced = self._coerce_option(default, value)
                if coerced is None:
                    self._report(
                        InvalidConfigValue(code, field_name, value, type(default).__name__),
                        warnings,
                    )
                else:
                    result = result.with_option(field_name, coerced)
        return result

    @staticmethod
    def _coerce_categories(value: object) -> frozenset[str] | None:
        if isinstance(value, str):
            return frozenset({value.strip().lower()})
        if isinstance(value, (list, tuple, set, frozenset)) and all(
            isinstance(item, str) for item in value
        ):
            return frozenset(item.strip().lower() for item in value)
        return None

    @staticmethod
    def _coerce_option(default: ScalarValue, value: object) -> ScalarValue | None:
        """Return value converted to the default's type, or None on mismatch. bool is not int."""
        if isinstance(default, bool):
            return value if isinstance(value, bool) else None
        if isinstance(default, int):
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            return None
        if isinstance(default, float):
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
            return None
        if isinstance(default, str):
            return value if isinstance(value, str) else None
        return None

    def _report(self, issue: ConfigurationIssue, warnings: list[ConfigurationIssue]) -> None:
        if self._strict:
            raise issue
        logger.warning("Configuration Warning: %s", issue)
        warnings.append(issue)
