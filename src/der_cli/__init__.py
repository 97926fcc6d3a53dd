"""der-cli — bootstrap and command router for the der scaffolding tool.

Prepares a safe runtime environment, checks for a newer release, and
routes the invocation to one of the ``init``, ``go`` or ``clean``
subcommands.
"""

from der_cli.version import __version__

__all__: list[str] = ["__version__"]
