"""Error taxonomy for registration, configuration, parsing and checker execution."""


class HypCheckError(Exception):
    """Base class for every error raised by hypcheck."""


class DuplicateCode(HypCheckError):
    """Two checkers claim the same code. Fatal: indicates a wiring defect."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Checker code '{code}' is already registered")
        self.code = code


class ConfigurationIssue(HypCheckError):
    """A problem in a configuration document. Reported as a warning unless strict."""


class UnknownConfigKey(ConfigurationIssue):
    """A document key (or a field under it) matches no registered checker."""

    def __init__(self, key: str, field: str | None = None) -> None:
        if field is None:
            message = f"Unknown checker code or prefix '{key}' in configuration"
        else:
            message = f"Unknown field '{field}' for '{key}' in configuration"
        super().__init__(message)
        self.key = key
        self.field = field


class InvalidConfigValue(ConfigurationIssue):
    """A field value has the wrong type or is out of range for a checker."""

    def __init__(self, code: str, field: str, value: object, expected: str) -> None:
        super().__init__(
            f"Invalid value {value!r} for '{field}' of {code}: expected {expected}"
        )
        self.code = code
        self.field = field
        self.value = value
        self.expected = expected


class ConfigFileError(HypCheckError):
    """A configuration file exists but cannot be read or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot load configuration file {path}: {reason}")
        self.path = path
        self.reason = reason


class InternalCheckerError(HypCheckError):
    """A checker raised while inspecting a file. Isolated to that (checker, file) pair."""

    def __init__(self, code: str, file_path: str, cause: BaseException | None = None) -> None:
        detail = f": {type(cause).__name__}: {cause}" if cause is not None else ""
        super().__init__(f"Checker {code} failed on {file_path}{detail}")
        self.code = code
        self.file_path = file_path
        self.cause = cause


class ParseFailure(HypCheckError):
    """A source file could not be read or parsed; the file is skipped."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(f"Cannot analyze {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason
