"""Load the checkers document from hypcheck.toml/.yaml or [tool.hypcheck] in pyproject.toml. Infrastructure I/O only."""

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

import yaml

from hypcheck.domain.constants import CONFIG_CHECKERS_TABLE, CONFIG_FILE_NAMES, PYPROJECT_TOOL_KEY
from hypcheck.domain.errors import ConfigFileError
from hypcheck.domain.protocols import ConfigSourceProtocol

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

logger = logging.getLogger(__name__)

PYPROJECT_FILE = "pyproject.toml"


class ConfigFileLoader(ConfigSourceProtocol):
    """
    Finds and decodes the configuration document. No top-level functions.

    With no explicit path the loader walks up from start_dir (default: cwd)
    and uses the first directory holding a hypcheck config file, or a
    pyproject.toml with a [tool.hypcheck] table.
    """

    def __init__(self, start_dir: str | None = None) -> None:
        self._start_dir = start_dir

    def load_document(self, explicit_path: str | None = None) -> tuple[dict[str, object], str | None]:
        if explicit_path is not None:
            path = Path(explicit_path)
            if not path.is_file():
                raise ConfigFileError(explicit_path, "file not found")
            return self._checkers_table(path, self._decode(path)), str(path)
        found = self.find_config_file()
        if found is None:
            logger.debug("No configuration file found; using checker defaults")
            return {}, None
        path, data = found
        logger.debug("Using configuration file %s", path)
        return self._checkers_table(path, data), str(path)

    def find_config_file(self) -> tuple[Path, Mapping[str, object]] | None:
        current = Path(self._start_dir or Path.cwd()).resolve()
        for directory in (current, *current.parents):
            for name in CONFIG_FILE_NAMES:
                candidate = directory / name
                if candidate.is_file():
                    return candidate, self._decode(candidate)
            pyproject = directory / PYPROJECT_FILE
            if pyproject.is_file():
                data = self._decode(pyproject)
                tool = data.get("tool")
                if isinstance(tool, Mapping) and PYPROJECT_TOOL_KEY in tool:
                    return pyproject, data
        return None

    @staticmethod
    def _decode(path: Path) -> Mapping[str, object]:
        try:
            if path.suffix in (".yaml", ".yml"):
                with path.open(encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            else:
                with path.open("rb") as f:
                    data = toml_lib.load(f)
        except OSError as exc:
            raise ConfigFileError(str(path), str(exc)) from exc
        except (toml_lib.TOMLDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigFileError(str(path), f"malformed document: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ConfigFileError(str(path), "top level must be a table")
        return data

    @staticmethod
    def _checkers_table(path: Path, data: Mapping[str, object]) -> dict[str, object]:
        section: object = data
        if path.name == PYPROJECT_FILE:
            tool = data.get("tool", {})
            section = tool.get(PYPROJECT_TOOL_KEY, {}) if isinstance(tool, Mapping) else {}
        if not isinstance(section, Mapping):
            raise ConfigFileError(str(path), f"[{PYPROJECT_TOOL_KEY}] must be a table")
        checkers = section.get(CONFIG_CHECKERS_TABLE, {})
        if checkers is None:
            return {}
        if not isinstance(checkers, Mapping):
            raise ConfigFileError(str(path), f"'{CONFIG_CHECKERS_TABLE}' must be a table")
        return dict(checkers)
