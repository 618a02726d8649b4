"""Shared constants for the hypcheck rule engine."""

CATEGORY_OPERATIONS: str = "operations"
CATEGORY_COMPLEXITY: str = "complexity"
CATEGORY_COMPLIANCE: str = "compliance"

KNOWN_CATEGORIES: frozenset[str] = frozenset(
    {CATEGORY_OPERATIONS, CATEGORY_COMPLEXITY, CATEGORY_COMPLIANCE}
)

# Checker codes look like "E1101": the category prefix is the letter plus group digits.
CATEGORY_PREFIX_LENGTH: int = 3

# Fields every checker config understands; anything else is a checker option.
CORE_CONFIG_FIELDS: frozenset[str] = frozenset({"enabled", "severity", "categories"})

# Pylint plugin message ids are <C|W|E>95NN; all share checker id 95.
PYLINT_MSGID_BASE: int = 9500
PYLINT_MSGID_CAPACITY: int = 100

TEST_FILE_PREFIXES: tuple[str, ...] = ("test_",)
TEST_FILE_SUFFIXES: tuple[str, ...] = ("_test.py",)
TEST_FILE_NAMES: frozenset[str] = frozenset({"conftest.py"})
TEST_DIRECTORY_NAMES: frozenset[str] = frozenset({"tests", "test"})

CONFIG_FILE_NAMES: tuple[str, ...] = (
    "hypcheck.toml",
    ".hypcheck.toml",
    "hypcheck.yaml",
    "hypcheck.yml",
)
PYPROJECT_TOOL_KEY: str = "hypcheck"
CONFIG_CHECKERS_TABLE: str = "checkers"

SKIPPED_DIRECTORY_NAMES: frozenset[str] = frozenset(
    {"__pycache__", ".git", ".hg", ".tox", ".venv", "venv", "build", "dist", "node_modules"}
)
