"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

import pytest

from der_cli import __version__
from der_cli.cli import exit_codes
from der_cli.cli.app import cli, main
from der_cli.exceptions import (
    CommandNotFoundError,
    ConfigurationError,
    DerCliError,
    ExecutorError,
    RegistryError,
    RootUserError,
    UserHomeNotFoundError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            UserHomeNotFoundError,
            RootUserError,
            ConfigurationError,
            RegistryError,
            ExecutorError,
            CommandNotFoundError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[DerCliError]
    ) -> None:
        assert issubclass(exc_class, DerCliError)

    def test_command_not_found_is_executor_error(self) -> None:
        assert issubclass(CommandNotFoundError, ExecutorError)

    def test_home_error_kind(self) -> None:
        assert UserHomeNotFoundError.kind == "Error_USER_HOME_NOT_EXISTS"

    def test_hint_is_stored(self) -> None:
        err = DerCliError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert DerCliError("boom").hint is None


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_unexpected_error_is_one(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 1

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130


class TestEntryPoints:
    def test_callables(self) -> None:
        assert callable(main)
        assert callable(cli)
