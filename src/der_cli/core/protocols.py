"""Protocols (interfaces) consumed by the core and CLI layers.

These define the contracts that infrastructure adapters must satisfy.
Callers depend ONLY on these protocols, never on concrete
implementations, so tests can substitute plain callables.
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterable
from pathlib import Path
from typing import Protocol

from der_cli.core.models import ExecRequest


class VersionLookup(Protocol):
    """Contract for package registry backends."""

    def __call__(self, package: str) -> Awaitable[Iterable[str]]:
        """Return every version string published for *package*.

        Implementations must map transport and decoding failures to
        :class:`~der_cli.exceptions.RegistryError`.
        """
        ...  # pragma: no cover


class Executor(Protocol):
    """Contract for the component that runs a subcommand."""

    def __call__(self, request: ExecRequest) -> None:
        """Run the subcommand described by *request*.

        Raises
        ------
        ExecutorError
            When no implementation can be resolved or it cannot be run.
        """
        ...  # pragma: no cover


class HomeResolver(Protocol):
    """Contract for locating the caller's home directory."""

    def __call__(self) -> Path:
        ...  # pragma: no cover
