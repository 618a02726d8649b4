"""Inline suppression fixtures (E1902)."""

import os


def e1902_bad_noqa_comment(path):
    return os.path.join(path, "data")  # noqa: E501


def e1902_bad_type_ignore(value):
    result: int = value  # type: ignore
    return result


def e1902_bad_pylint_disable(value):
    # pylint: disable=broad-except
    return value


def e1902_good_directive_in_string():
    return "append '# noqa' to silence the linter"


def e1902_good_plain_comment(value):
    # Normalize before returning.
    return value.strip()
