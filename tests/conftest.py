"""
Pytest configuration.

The project uses a ``src/`` layout (package code lives in ``src/semantria``).
Normally, developers run tests after installing the package (e.g.
``pip install -e .[test]``). When the package cannot be imported that way,
``src/`` is added to ``sys.path`` so the tests still run from a checkout.
"""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    try:
        import semantria  # noqa: F401
        return
    except ModuleNotFoundError:
        pass

    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


_ensure_src_on_path()

import os

import pytest

from semantria.auth import Credentials
from semantria.config import Settings
from semantria.executor import RequestExecutor


@pytest.fixture
def settings(mocker):
    """Fixture to create a Settings object for tests."""
    mocker.patch.dict(
        os.environ,
        {
            "SEMANTRIA_CONSUMER_KEY": "key",
            "SEMANTRIA_CONSUMER_SECRET": "secret",
            "REQUEST_TIMEOUT": "5",
        },
        clear=True,
    )
    return Settings()


@pytest.fixture
def credentials():
    return Credentials.create("key", "secret", "tests", False)


@pytest.fixture
def executor(credentials):
    """A RequestExecutor that is shut down after the test."""
    with RequestExecutor(credentials, timeout=5) as executor:
        yield executor
