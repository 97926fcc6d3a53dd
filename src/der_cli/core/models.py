"""Domain models for der-cli.

All models are **frozen** dataclasses: immutable value objects built
once during startup and passed explicitly between the preparation
pipeline, the command router and the executor.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from packaging.version import Version

from der_cli.utils.constants import ENV_CLI_HOME_PATH


# ---------------------------------------------------------------------------
# Runtime environment
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RuntimeEnvironment:
    """Resolved home and working directories for this process."""

    home_directory: Path
    """The caller's home directory."""

    cli_working_directory: Path
    """Private cache/state directory, always below :attr:`home_directory`."""

    def publish(self, environ: MutableMapping[str, str] | None = None) -> None:
        """Expose the working directory to out-of-process collaborators."""
        target = os.environ if environ is None else environ
        target[ENV_CLI_HOME_PATH] = str(self.cli_working_directory)


# ---------------------------------------------------------------------------
# Parsed invocation
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options accepted before any subcommand."""

    debug: bool = False
    target_path: str = ""


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """A boolean flag accepted by a subcommand."""

    flags: tuple[str, ...]
    dest: str
    help: str


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Declarative description of one subcommand."""

    name: str
    description: str
    options: tuple[OptionSpec, ...] = ()
    positional: str | None = None
    """Name of the single optional positional argument, if any."""


# ---------------------------------------------------------------------------
# Update check
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UpdateInfo:
    """Outcome of a registry version lookup."""

    current_version: str
    latest_version: str | None

    @property
    def is_outdated(self) -> bool:
        """``True`` when a strictly newer release was found."""
        if self.latest_version is None:
            return False
        return Version(self.latest_version) > Version(self.current_version)


# ---------------------------------------------------------------------------
# Executor request
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExecRequest:
    """Everything a subcommand implementation needs to run."""

    command: str
    args: tuple[str, ...]
    options: Mapping[str, Any]
    environment: RuntimeEnvironment
    global_options: GlobalOptions = field(default_factory=GlobalOptions)
