"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.
"""

import logging

from pylint.lint import PyLinter

from hypcheck.domain.config import ConfigurationResolver
from hypcheck.domain.errors import ConfigFileError
from hypcheck.infrastructure.di.container import HypCheckContainer
from hypcheck.use_cases.checks.hyp_rules import HypRulesChecker

logger = logging.getLogger(__name__)


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = HypCheckContainer.get_instance()
    registry = container.get_registry()
    try:
        document, _ = container.get_config_source().load_document()
    except ConfigFileError as exc:
        logger.warning("%s; using checker defaults", exc)
        document = {}
    resolution = ConfigurationResolver(registry).resolve(document)
    linter.register_checker(HypRulesChecker(linter, registry=registry, effective=resolution.effective))
