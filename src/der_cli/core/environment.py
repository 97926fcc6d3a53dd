"""Environment config builder.

Derives the CLI working directory from the caller's home directory and
an optional override name, and applies ``~/.env`` overrides to the
process settings mapping before the derivation runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from pathlib import Path, PurePath

from dotenv import dotenv_values

from der_cli.core.models import RuntimeEnvironment
from der_cli.exceptions import ConfigurationError
from der_cli.utils.constants import DEFAULT_CLI_HOME, DOTENV_FILENAME, ENV_CLI_HOME, VERBOSE

logger = logging.getLogger(__name__)


def build_runtime_environment(
    home: Path,
    environ: Mapping[str, str],
) -> RuntimeEnvironment:
    """Return the :class:`RuntimeEnvironment` for *home*.

    The working directory is ``home / $DER_CLI_HOME`` when the override
    is set, otherwise ``home / .der-cli``.

    Raises
    ------
    ConfigurationError
        If the override would place the working directory outside *home*.
    """
    override = environ.get(ENV_CLI_HOME, "").strip()
    name = override or DEFAULT_CLI_HOME

    relative = PurePath(name)
    if (
        relative.is_absolute()
        or relative.anchor
        or not relative.parts
        or ".." in relative.parts
    ):
        raise ConfigurationError(
            f"{ENV_CLI_HOME}={override!r} must name a directory inside {home}.",
            hint=f"Use a relative name such as {DEFAULT_CLI_HOME!r}.",
        )

    return RuntimeEnvironment(
        home_directory=home,
        cli_working_directory=home / relative,
    )


def load_env_overrides(home: Path, environ: MutableMapping[str, str]) -> bool:
    """Apply ``home/.env`` to *environ* if the file exists.

    Values already present in *environ* win, matching ``load_dotenv``'s
    default of not overriding the real environment.  Returns whether a
    file was loaded.

    A file that cannot be read is treated as absent.  This is the usual
    outcome after privileges were dropped while ``HOME`` still points at
    root's private home.
    """
    dotenv_path = home / DOTENV_FILENAME
    try:
        if not dotenv_path.is_file():
            return False
        values = dotenv_values(dotenv_path)
    except OSError as exc:
        logger.log(VERBOSE, "[core/cli] skipping unreadable %s: %s", dotenv_path, exc)
        return False

    for key, value in values.items():
        if value is None or key in environ:
            continue
        environ[key] = value
    return True
