"""Preparation pipeline — everything that must happen before routing.

Steps run in a fixed order and each may raise a
:class:`~der_cli.exceptions.DerCliError`, which aborts startup before
any subcommand is registered::

    print_banner -> check_pkg_version -> check_root -> check_user_home
        -> check_env -> check_global_update

``check_global_update`` is the only step that awaits network I/O.
"""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from pathlib import Path

from der_cli.cli.console import console
from der_cli.cli.log import log
from der_cli.core.environment import build_runtime_environment, load_env_overrides
from der_cli.core.models import RuntimeEnvironment, UpdateInfo
from der_cli.core.protocols import HomeResolver, VersionLookup
from der_cli.core.update_checker import check_for_update
from der_cli.infra.registry import PyPIVersionLookup
from der_cli.infra.system import downgrade_root, require_user_home, resolve_user_home
from der_cli.utils.constants import DEFAULT_REGISTRY, DOTENV_FILENAME, ENV_REGISTRY, LOGO
from der_cli.version import PACKAGE_NAME, __version__


# ---------------------------------------------------------------------------
# Individual steps
# ---------------------------------------------------------------------------

def print_banner() -> None:
    console.print(LOGO, style="cyan", highlight=False, markup=False)


def check_pkg_version() -> None:
    log.info("[core/cli] %s@%s", PACKAGE_NAME, __version__)


def check_root(environ: MutableMapping[str, str]) -> None:
    downgrade_root(environ)


def check_user_home(resolver: HomeResolver) -> Path:
    return require_user_home(resolver)


def check_env(home: Path, environ: MutableMapping[str, str]) -> RuntimeEnvironment:
    """Load ``~/.env`` overrides, then derive and publish the runtime config."""
    if load_env_overrides(home, environ):
        log.verbose("[core/cli] loaded overrides from %s", home / DOTENV_FILENAME)

    runtime = build_runtime_environment(home, environ)
    runtime.publish(environ)
    log.verbose("[core/cli] cli home: %s", runtime.cli_working_directory)
    return runtime


async def check_global_update(lookup: VersionLookup) -> UpdateInfo:
    return await check_for_update(__version__, PACKAGE_NAME, lookup)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

async def prepare(
    environ: MutableMapping[str, str] | None = None,
    *,
    lookup: VersionLookup | None = None,
    home_resolver: HomeResolver = resolve_user_home,
) -> RuntimeEnvironment:
    """Run every preparation step and return the runtime configuration.

    Parameters
    ----------
    environ:
        Process settings to read overrides from and publish into.
        Defaults to :data:`os.environ`.
    lookup:
        Registry backend.  Defaults to :class:`PyPIVersionLookup`
        pointed at ``$DER_CLI_REGISTRY`` when set; it is built after
        ``~/.env`` has been applied.
    home_resolver:
        Returns the caller's home directory.

    Raises
    ------
    UserHomeNotFoundError
        When the home directory is unknown or missing.
    RootUserError
        When superuser privileges cannot be dropped.
    RegistryError
        When the version lookup fails.
    """
    settings = os.environ if environ is None else environ

    print_banner()
    check_pkg_version()
    check_root(settings)
    home = check_user_home(home_resolver)
    runtime = check_env(home, settings)

    if lookup is None:
        lookup = PyPIVersionLookup(settings.get(ENV_REGISTRY) or DEFAULT_REGISTRY)
    await check_global_update(lookup)
    return runtime
