"""Shared Rich console for the banner and log output.

The banner and log records go to stderr so stdout stays free for
subcommand output.  ``--help`` and ``--version`` are printed by
:mod:`argparse` and go to stdout.
"""

from __future__ import annotations

from rich.console import Console

console = Console(stderr=True)
