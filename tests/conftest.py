"""Pytest configuration.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
and the project root on sys.path so tests import hypcheck and tests.unit helpers.
"""

import pytest

from hypcheck.infrastructure.di.container import HypCheckContainer


@pytest.fixture(autouse=True)
def _fresh_container():
    """Never let one test's container singleton leak into another."""
    HypCheckContainer.reset()
    yield
    HypCheckContainer.reset()
