"""Shared pytest fixtures and configuration for the der-cli test suite.

Guidelines
----------
* No internet access in any test; the registry is always faked.
* Privilege de-escalation is never performed for real.
* Process settings are plain dicts, never ``os.environ``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from der_cli.core.models import RuntimeEnvironment


@pytest.fixture(autouse=True)
def _reset_cli_logger() -> Iterator[None]:
    """Keep ``der_cli`` records flowing to caplog at INFO between tests."""
    logger = logging.getLogger("der_cli")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.INFO)
    yield
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.INFO)


@pytest.fixture(autouse=True)
def _no_privilege_drop(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    downgrade = MagicMock(return_value=False)
    monkeypatch.setattr("der_cli.cli.prepare.downgrade_root", downgrade)
    return downgrade


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def runtime(home: Path) -> RuntimeEnvironment:
    return RuntimeEnvironment(
        home_directory=home,
        cli_working_directory=home / ".der-cli",
    )


def fake_lookup(versions: Iterable[str]):
    """Return an async registry lookup that yields *versions*."""
    published = list(versions)

    async def lookup(package: str) -> list[str]:
        return published

    return lookup


@pytest.fixture
def make_lookup():
    return fake_lookup
