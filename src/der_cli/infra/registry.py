"""PyPI-backed implementation of :class:`~der_cli.core.protocols.VersionLookup`.

This module is the **only** place in the codebase that talks to the
package registry.  Transport and decoding errors are caught here and
re-raised as :class:`~der_cli.exceptions.RegistryError`, so nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request
from typing import Any

from der_cli.exceptions import RegistryError
from der_cli.utils.constants import DEFAULT_REGISTRY, REGISTRY_TIMEOUT_SECONDS, VERBOSE
from der_cli.version import __version__

logger = logging.getLogger(__name__)

USER_AGENT_HEADERS = {"User-Agent": f"der-cli/{__version__}"}


class PyPIVersionLookup:
    """Fetch published versions from the PyPI JSON API.

    Usage::

        lookup = PyPIVersionLookup()
        versions = await lookup("der-cli")

    The blocking HTTP request runs in a worker thread so the caller's
    event loop is only suspended, never blocked.
    """

    def __init__(
        self,
        registry: str = DEFAULT_REGISTRY,
        *,
        timeout: float = REGISTRY_TIMEOUT_SECONDS,
    ) -> None:
        self.registry = registry.rstrip("/")
        self.timeout = timeout

    def url_for(self, package: str) -> str:
        return f"{self.registry}/{package}/json"

    async def __call__(self, package: str) -> list[str]:
        return await asyncio.to_thread(self.fetch_versions, package)

    # ------------------------------------------------------------------
    # Blocking implementation
    # ------------------------------------------------------------------

    def fetch_versions(self, package: str) -> list[str]:
        """Return all release versions of *package*.

        An unpublished package (HTTP 404) has no versions.

        Raises
        ------
        RegistryError
            On network failures or a response that is not the expected JSON.
        """
        url = self.url_for(package)
        logger.log(VERBOSE, "[core/cli] querying %s", url)
        req = urllib.request.Request(url, headers=USER_AGENT_HEADERS)

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                return []
            raise RegistryError(
                f"Registry returned HTTP {exc.code} for {package}.",
            ) from exc
        except (urllib.error.URLError, OSError) as exc:
            raise RegistryError(
                f"Could not reach the package registry: {exc}",
                hint="Check your network connection or set DER_CLI_REGISTRY.",
            ) from exc

        try:
            data: Any = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise RegistryError(
                f"Registry returned malformed JSON for {package}.",
            ) from exc

        return self._parse_versions(data, package)

    @staticmethod
    def _parse_versions(data: Any, package: str) -> list[str]:
        if not isinstance(data, dict) or not isinstance(data.get("releases"), dict):
            raise RegistryError(
                f"Registry response for {package} has no 'releases' table.",
            )
        return [str(version) for version in data["releases"]]
