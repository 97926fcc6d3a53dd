"""Infrastructure: operating-system guards run before any subcommand.

Rules
-----
* No ``print()``; callers handle user-facing output.
* Every failure is raised as a :class:`~der_cli.exceptions.DerCliError`
  subclass.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path

from der_cli.exceptions import RootUserError, UserHomeNotFoundError
from der_cli.utils.constants import VERBOSE

logger = logging.getLogger(__name__)

_FALLBACK_ACCOUNT = "nobody"


# ---------------------------------------------------------------------------
# Home directory
# ---------------------------------------------------------------------------

def resolve_user_home() -> Path:
    """Return the caller's home directory.

    Raises
    ------
    UserHomeNotFoundError
        When the platform cannot determine a home directory.
    """
    try:
        return Path.home()
    except (RuntimeError, KeyError) as exc:
        raise UserHomeNotFoundError(
            "Current login user's home directory could not be determined.",
            hint="Set the HOME environment variable.",
        ) from exc


def require_user_home(resolver: Callable[[], Path] = resolve_user_home) -> Path:
    """Return the home directory from *resolver* if it exists on disk.

    Raises
    ------
    UserHomeNotFoundError
        When the directory is unknown or missing.
    """
    home = resolver()
    if not str(home) or not home.is_dir():
        raise UserHomeNotFoundError(
            f"Current login user's home directory does not exist: {home}",
            hint="Create the directory or point HOME at an existing one.",
        )
    return home


# ---------------------------------------------------------------------------
# Privilege de-escalation
# ---------------------------------------------------------------------------

def _fallback_ids() -> tuple[int, int]:
    import pwd

    try:
        entry = pwd.getpwnam(_FALLBACK_ACCOUNT)
    except KeyError as exc:
        raise RootUserError(
            f"Cannot drop root privileges: no {_FALLBACK_ACCOUNT!r} account.",
            hint="Run der as a regular user.",
        ) from exc
    return entry.pw_uid, entry.pw_gid


def _target_ids(environ: Mapping[str, str]) -> tuple[int, int]:
    """Return the (uid, gid) to switch to: the sudo caller, else ``nobody``."""
    sudo_uid = environ.get("SUDO_UID", "")
    sudo_gid = environ.get("SUDO_GID", "")
    if sudo_uid.isdigit() and int(sudo_uid) != 0:
        uid = int(sudo_uid)
        gid = int(sudo_gid) if sudo_gid.isdigit() else uid
        return uid, gid
    return _fallback_ids()


def downgrade_root(environ: Mapping[str, str] | None = None) -> bool:
    """Drop superuser privileges for the rest of the process.

    Returns ``True`` when privileges were dropped, ``False`` when the
    process is unprivileged or the host has no POSIX user ids.

    Raises
    ------
    RootUserError
        When running as root and the switch fails.
    """
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None or geteuid() != 0:
        return False

    uid, gid = _target_ids(os.environ if environ is None else environ)
    try:
        # gid must change while we are still root.
        if hasattr(os, "setgroups"):
            os.setgroups([])
        os.setgid(gid)
        os.setuid(uid)
    except OSError as exc:
        raise RootUserError(
            f"Cannot drop root privileges: {exc}",
            hint="Run der as a regular user.",
        ) from exc

    logger.log(VERBOSE, "[core/cli] root privileges dropped to uid=%s gid=%s", uid, gid)
    return True
