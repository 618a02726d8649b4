from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import astroid


class AstroidProtocol(Protocol):
    """Parser collaborator: one file in, one module tree out."""

    def parse_file(self, file_path: str) -> "astroid.nodes.Module":
        """Return the module tree; raise ParseFailure when the file is unanalyzable."""
        ...

    def parse_source(self, source: str, file_path: str) -> "astroid.nodes.Module":
        ...


class FileSystemProtocol(Protocol):
    def collect_python_files(self, paths: list[str]) -> list[str]:
        """Expand files and directories into Python source files, in a stable order."""
        ...

    def is_directory(self, path: str) -> bool:
        ...


class ConfigSourceProtocol(Protocol):
    def load_document(self, explicit_path: str | None = None) -> tuple[dict[str, object], str | None]:
        """Return (checkers document, path used). Absent file gives ({}, None)."""
        ...
