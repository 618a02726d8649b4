from typing import TYPE_CHECKING, Any, Optional, cast

from hypcheck.domain.rules.catalog import CheckerCatalog
from hypcheck.infrastructure.config_file_loader import ConfigFileLoader
from hypcheck.infrastructure.gateways.astroid_gateway import AstroidGateway
from hypcheck.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from hypcheck.infrastructure.reporters import TerminalReporter

if TYPE_CHECKING:
    from hypcheck.domain.protocols import (
        AstroidProtocol,
        ConfigSourceProtocol,
        FileSystemProtocol,
    )
    from hypcheck.domain.registry import CheckerRegistry
    from hypcheck.interface.reporters import RunReporter


class HypCheckContainer:
    """Dependency Injection Container for hypcheck."""

    _instance: Optional["HypCheckContainer"] = None

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        # Each container owns its registry so independent runs never share checker state.
        self.register_singleton("CheckerRegistry", CheckerCatalog.default_registry())
        self.register_singleton("AstroidGateway", AstroidGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("ConfigFileLoader", ConfigFileLoader())
        self.register_singleton("RunReporter", TerminalReporter())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_registry(self) -> "CheckerRegistry":
        return cast("CheckerRegistry", self.get("CheckerRegistry"))

    def get_astroid_gateway(self) -> "AstroidProtocol":
        """Return the Astroid gateway."""
        return cast("AstroidProtocol", self.get("AstroidGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_config_source(self) -> "ConfigSourceProtocol":
        return cast("ConfigSourceProtocol", self.get("ConfigFileLoader"))

    def get_reporter(self) -> "RunReporter":
        return cast("RunReporter", self.get("RunReporter"))

    @classmethod
    def get_instance(cls) -> "HypCheckContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = HypCheckContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
