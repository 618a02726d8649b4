"""Astroid Gateway - Infrastructure implementation of AstroidProtocol."""

import logging
from pathlib import Path

import astroid

from hypcheck.domain.errors import ParseFailure
from hypcheck.domain.protocols import AstroidProtocol

logger = logging.getLogger(__name__)


class AstroidGateway(AstroidProtocol):
    """Turns source files into astroid module trees. Unanalyzable input raises ParseFailure."""

    def parse_file(self, file_path: str) -> astroid.nodes.Module:
        try:
            source = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseFailure(file_path, str(exc)) from exc
        return self.parse_source(source, file_path)

    def parse_source(self, source: str, file_path: str) -> astroid.nodes.Module:
        module_name = Path(file_path).stem
        try:
            module = astroid.parse(source, module_name=module_name, path=file_path)
        except astroid.AstroidBuildingError as exc:
            raise ParseFailure(file_path, str(exc)) from exc
        except (ValueError, RecursionError) as exc:
            # Null bytes and pathologically deep expressions fail inside the parser.
            raise ParseFailure(file_path, f"{type(exc).__name__}: {exc}") from exc
        logger.debug("Parsed %s", file_path)
        return module
