"""Update checker — decides whether a newer compatible release exists.

Compatibility follows the caret rule used by npm-style ranges
(``^current``): a candidate must share the leftmost non-zero component
of the current version and be strictly greater than it.  Pre-releases
and strings that are not valid versions are ignored.

Guarantees
----------
* :func:`select_latest_compatible` is pure and deterministic.
* Registry failures are not swallowed; they propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from packaging.version import InvalidVersion, Version

from der_cli.core.models import UpdateInfo
from der_cli.core.protocols import VersionLookup

logger = logging.getLogger(__name__)


def _same_caret_line(candidate: Version, current: Version) -> bool:
    """Return ``True`` if *candidate* satisfies ``^current``'s upper bound."""
    if current.major > 0:
        return candidate.major == current.major
    if current.minor > 0:
        return candidate.major == 0 and candidate.minor == current.minor
    return (
        candidate.major == 0
        and candidate.minor == 0
        and candidate.micro == current.micro
    )


def select_latest_compatible(current: str, versions: Iterable[str]) -> str | None:
    """Return the greatest version in *versions* compatible with *current*.

    Returns ``None`` when no candidate is both on the same caret line and
    strictly greater than *current*.
    """
    current_version = Version(current)
    best: Version | None = None
    best_raw: str | None = None

    for raw in versions:
        try:
            candidate = Version(raw)
        except InvalidVersion:
            continue
        if candidate.is_prerelease or candidate.is_devrelease:
            continue
        if candidate <= current_version:
            continue
        if not _same_caret_line(candidate, current_version):
            continue
        if best is None or candidate > best:
            best, best_raw = candidate, raw

    return best_raw


async def check_for_update(
    current: str,
    package: str,
    lookup: VersionLookup,
) -> UpdateInfo:
    """Query *lookup* and warn if a newer compatible *package* exists.

    Raises
    ------
    RegistryError
        Propagated unchanged from *lookup*.
    """
    versions = await lookup(package)
    latest = select_latest_compatible(current, versions)
    info = UpdateInfo(current_version=current, latest_version=latest)

    if info.is_outdated:
        logger.warning(
            "Please update %s manually, current version: %s, latest version: %s. "
            "Run: pip install -U %s",
            package,
            current,
            latest,
            package,
        )
    return info
