"""Allow ``python -m der_cli`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m der_cli`` behaves identically to the ``der`` console script.
"""

from __future__ import annotations

from der_cli.cli.app import cli

if __name__ == "__main__":
    cli()
