"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import logging
from pathlib import Path

from hypcheck.domain.constants import SKIPPED_DIRECTORY_NAMES
from hypcheck.domain.protocols import FileSystemProtocol

logger = logging.getLogger(__name__)


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def is_directory(self, path: str) -> bool:
        return Path(path).is_dir()

    def collect_python_files(self, paths: list[str]) -> list[str]:
        """
        Expand paths into .py files: directories recursively in sorted order,
        explicit files as given. Duplicates keep their first position.
        """
        seen: set[str] = set()
        files: list[str] = []
        for raw in paths:
            for candidate in self._expand(Path(raw)):
                key = str(candidate.resolve())
                if key in seen:
                    continue
                seen.add(key)
                files.append(str(candidate))
        return files

    def _expand(self, path: Path) -> list[Path]:
        if path.is_dir():
            return sorted(
                p
                for p in path.rglob("*.py")
                if p.is_file()
                and not any(part in SKIPPED_DIRECTORY_NAMES for part in p.relative_to(path).parts[:-1])
            )
        if path.is_file():
            return [path] if path.suffix == ".py" else []
        logger.warning("Path does not exist: %s", path)
        return []
