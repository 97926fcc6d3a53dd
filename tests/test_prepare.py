"""Tests for the preparation pipeline (cli/prepare.py).

The registry lookup and home resolver are injected; privilege
de-escalation is mocked by the autouse fixture in ``conftest.py``.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from der_cli.cli import prepare as prepare_module
from der_cli.cli.prepare import prepare
from der_cli.core.models import UpdateInfo
from der_cli.exceptions import RegistryError, RootUserError, UserHomeNotFoundError
from der_cli.version import PACKAGE_NAME, __version__


class TestPrepare:
    def test_returns_runtime_and_publishes(self, home: Path, make_lookup) -> None:
        environ: dict[str, str] = {}
        runtime = asyncio.run(
            prepare(environ, lookup=make_lookup([]), home_resolver=lambda: home)
        )

        assert runtime.home_directory == home
        assert runtime.cli_working_directory == home / ".der-cli"
        assert environ["DER_CLI_HOME_PATH"] == str(home / ".der-cli")

    def test_dotenv_override_applied_before_config(
        self, home: Path, make_lookup
    ) -> None:
        (home / ".env").write_text("DER_CLI_HOME=.custom\n")
        environ: dict[str, str] = {}

        runtime = asyncio.run(
            prepare(environ, lookup=make_lookup([]), home_resolver=lambda: home)
        )
        assert runtime.cli_working_directory == home / ".custom"

    def test_missing_home_aborts_before_update_check(self, tmp_path: Path) -> None:
        lookup = AsyncMock(return_value=[])
        environ: dict[str, str] = {}

        with pytest.raises(UserHomeNotFoundError):
            asyncio.run(
                prepare(environ, lookup=lookup, home_resolver=lambda: tmp_path / "gone")
            )
        lookup.assert_not_awaited()
        assert "DER_CLI_HOME_PATH" not in environ

    def test_root_failure_aborts(self, home: Path, _no_privilege_drop: MagicMock) -> None:
        _no_privilege_drop.side_effect = RootUserError("cannot drop")
        lookup = AsyncMock(return_value=[])

        with pytest.raises(RootUserError):
            asyncio.run(prepare({}, lookup=lookup, home_resolver=lambda: home))
        lookup.assert_not_awaited()

    def test_registry_failure_propagates(self, home: Path) -> None:
        lookup = AsyncMock(side_effect=RegistryError("offline"))
        with pytest.raises(RegistryError):
            asyncio.run(prepare({}, lookup=lookup, home_resolver=lambda: home))

    def test_reports_version(
        self, home: Path, make_lookup, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="der_cli"):
            asyncio.run(prepare({}, lookup=make_lookup([]), home_resolver=lambda: home))
        assert f"{PACKAGE_NAME}@{__version__}" in caplog.text

    def test_banner_printed(
        self, home: Path, make_lookup, capsys: pytest.CaptureFixture[str]
    ) -> None:
        asyncio.run(prepare({}, lookup=make_lookup([]), home_resolver=lambda: home))
        assert "|" in capsys.readouterr().err

    @patch("der_cli.cli.prepare.PyPIVersionLookup")
    def test_default_lookup_uses_registry_override(
        self, mock_lookup_cls: MagicMock, home: Path
    ) -> None:
        mock_lookup_cls.return_value = AsyncMock(return_value=[])
        environ = {"DER_CLI_REGISTRY": "https://mirror.example/pypi"}

        asyncio.run(prepare(environ, home_resolver=lambda: home))
        mock_lookup_cls.assert_called_once_with("https://mirror.example/pypi")


class TestStepOrder:
    def test_fixed_sequence(
        self, home: Path, monkeypatch: pytest.MonkeyPatch, runtime
    ) -> None:
        order = MagicMock()
        order.check_user_home.return_value = home
        order.check_env.return_value = runtime
        order.check_global_update = AsyncMock(
            return_value=UpdateInfo(__version__, None)
        )
        for name in (
            "print_banner",
            "check_pkg_version",
            "check_root",
            "check_user_home",
            "check_env",
            "check_global_update",
        ):
            monkeypatch.setattr(prepare_module, name, getattr(order, name))

        result = asyncio.run(prepare({}, lookup=AsyncMock(), home_resolver=lambda: home))

        assert result is runtime
        assert [c[0] for c in order.mock_calls] == [
            "print_banner",
            "check_pkg_version",
            "check_root",
            "check_user_home",
            "check_env",
            "check_global_update",
        ]
