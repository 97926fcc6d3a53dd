"""Core layer — configuration derivation and update-eligibility logic.

Rules
-----
* No ``print()`` calls.
* No network I/O; registry access goes through an injected lookup.
* No imports from ``cli`` or ``infra``.
"""

from der_cli.core.environment import build_runtime_environment, load_env_overrides
from der_cli.core.models import (
    CommandSpec,
    ExecRequest,
    GlobalOptions,
    OptionSpec,
    RuntimeEnvironment,
    UpdateInfo,
)
from der_cli.core.protocols import Executor, HomeResolver, VersionLookup
from der_cli.core.update_checker import check_for_update, select_latest_compatible

__all__: list[str] = [
    "CommandSpec",
    "ExecRequest",
    "Executor",
    "GlobalOptions",
    "HomeResolver",
    "OptionSpec",
    "RuntimeEnvironment",
    "UpdateInfo",
    "VersionLookup",
    "build_runtime_environment",
    "check_for_update",
    "load_env_overrides",
    "select_latest_compatible",
]
