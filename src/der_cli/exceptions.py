"""Custom exception hierarchy for der-cli.

All exceptions that cross layer boundaries must inherit from
:class:`DerCliError`.  Raw standard-library exceptions (``URLError``,
``OSError``, ``JSONDecodeError``) must NEVER propagate beyond the
infrastructure layer; they are caught and re-raised as a typed subclass
defined here.

Hierarchy
---------
DerCliError
├── UserHomeNotFoundError
├── RootUserError
├── ConfigurationError
├── RegistryError
└── ExecutorError
    └── CommandNotFoundError
"""

from __future__ import annotations


class DerCliError(Exception):
    """Base exception for all der-cli errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    kind: str = "Error_DER_CLI"
    """Stable error code shown alongside the message."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Preparation guards ----------------------------------------------------

class UserHomeNotFoundError(DerCliError):
    """Raised when the caller's home directory is unknown or missing."""

    kind = "Error_USER_HOME_NOT_EXISTS"


class RootUserError(DerCliError):
    """Raised when superuser privileges cannot be dropped."""

    kind = "Error_ROOT_USER"


class ConfigurationError(DerCliError):
    """Raised when environment overrides produce an invalid configuration."""

    kind = "Error_CONFIG"


# --- Registry --------------------------------------------------------------

class RegistryError(DerCliError):
    """Raised when the package registry cannot be queried or parsed."""

    kind = "Error_NPM_VERSION"


# --- Command execution -----------------------------------------------------

class ExecutorError(DerCliError):
    """Raised when a subcommand implementation cannot be run."""

    kind = "Error_EXEC"


class CommandNotFoundError(ExecutorError):
    """Raised when no implementation is installed for a subcommand."""

    kind = "Error_UNKNOWN_CMD"
