"""Pytest configuration.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
and the root on sys.path so ``tests.unit`` helpers import cleanly.
"""

from collections.abc import Iterator

import pytest

from checked_exceptions_linter.infrastructure.di.container import CheckedExceptionsContainer


@pytest.fixture(autouse=True)
def reset_container() -> Iterator[None]:
    """Keep the global container from leaking configuration between tests."""
    CheckedExceptionsContainer.reset()
    yield
    CheckedExceptionsContainer.reset()
