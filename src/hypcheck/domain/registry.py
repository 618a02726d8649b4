"""Checker registry: ordered bookkeeping of (metadata, default config, factory) entries."""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from hypcheck.domain.constants import CATEGORY_PREFIX_LENGTH
from hypcheck.domain.entities import CheckerConfig, CheckerMetadata
from hypcheck.domain.errors import DuplicateCode
from hypcheck.domain.rules import Checker

logger = logging.getLogger(__name__)

CheckerFactory = Callable[[], Checker]


@dataclass(frozen=True)
class RegistryEntry:
    """One registered checker."""

    metadata: CheckerMetadata
    default_config: CheckerConfig
    factory: CheckerFactory

    @property
    def code(self) -> str:
        return self.metadata.code


class CheckerRegistry:
    """
    Ordered mapping from checker code to its registry entry.

    Built once before a run (built-ins plus any externally supplied checkers)
    and only read afterwards. Never executes checker logic.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}

    def register(
        self,
        metadata: CheckerMetadata,
        default_config: CheckerConfig,
        factory: CheckerFactory,
    ) -> RegistryEntry:
        """Add a checker. Raises DuplicateCode if the code is taken (case-insensitive)."""
        key = metadata.code.upper()
        if key in self._entries:
            raise DuplicateCode(metadata.code)
        entry = RegistryEntry(metadata=metadata, default_config=default_config, factory=factory)
        self._entries[key] = entry
        logger.debug("Registered checker %s (%s)", metadata.code, metadata.display_name)
        return entry

    def register_checker(self, checker_cls: type[Checker]) -> RegistryEntry:
        """Register a checker class using its class-level metadata and defaults."""
        return self.register(checker_cls.metadata, checker_cls.default_config, checker_cls)

    def all(self) -> Iterator[RegistryEntry]:
        """Yield entries in registration order."""
        yield from list(self._entries.values())

    def by_category_prefix(self, prefix: str) -> list[RegistryEntry]:
        """Entries whose code starts with prefix (string match, case-insensitive)."""
        wanted = prefix.upper()
        return [entry for key, entry in self._entries.items() if key.startswith(wanted)]

    def get(self, code: str) -> RegistryEntry | None:
        return self._entries.get(code.upper())

    def codes(self) -> list[str]:
        return [entry.code for entry in self._entries.values()]

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def category_prefix(code: str) -> str:
        """Derive the category prefix from a code without a side table."""
        return code[:CATEGORY_PREFIX_LENGTH].upper()
