"""CLI application entry point for der.

This module is the **sole error boundary** for the entire application.
It catches :class:`~der_cli.exceptions.DerCliError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, logs them, and returns well-defined
exit codes.

Architecture notes
------------------
* :func:`bootstrap` is the process's main task: the preparation
  pipeline is awaited to completion before the router is built, so a
  fatal preparation error means no subcommand is ever dispatched.
* Failures in stray asyncio tasks are logged by the event loop's
  exception handler and re-raised here, so they end the process with
  status 1 like any other unexpected error.
* This module is the only place that translates between the domain
  world and the OS process exit code.
"""

from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import MutableMapping, Sequence
from typing import Any

from der_cli.cli import exit_codes
from der_cli.cli.console import console
from der_cli.cli.log import log, setup_logging
from der_cli.cli.prepare import prepare
from der_cli.cli.router import route
from der_cli.core.protocols import Executor, HomeResolver, VersionLookup
from der_cli.exceptions import DerCliError
from der_cli.infra.executor import PackageExecutor
from der_cli.infra.system import resolve_user_home


class StrayTaskMonitor:
    """Event loop exception handler for tasks nobody awaited.

    Every failure is logged as it is reported and remembered, so the run
    can still end with a nonzero status once the loop has moved on.
    """

    def __init__(self) -> None:
        self.failures: list[BaseException] = []

    def __call__(
        self,
        loop: asyncio.AbstractEventLoop,
        context: dict[str, Any],
    ) -> None:
        exc = context.get("exception")
        message = context.get("message", "unhandled error in background task")
        log.error("unhandledRejection: %s", exc if exc is not None else message)
        self.failures.append(exc if isinstance(exc, BaseException) else RuntimeError(message))

    def raise_first(self) -> None:
        """Re-raise the first recorded failure, if any."""
        if self.failures:
            raise self.failures[0]


async def bootstrap(
    argv: Sequence[str],
    *,
    environ: MutableMapping[str, str] | None = None,
    executor: Executor | None = None,
    lookup: VersionLookup | None = None,
    home_resolver: HomeResolver = resolve_user_home,
    monitor: StrayTaskMonitor | None = None,
) -> int:
    """Prepare the runtime, then route *argv*.

    A stray task failure reported during preparation stops the run
    before anything is dispatched.

    Raises
    ------
    DerCliError
        Any fatal preparation or dispatch error, for the boundary in
        :func:`cli` to report.
    """
    monitor = monitor if monitor is not None else StrayTaskMonitor()
    asyncio.get_running_loop().set_exception_handler(monitor)

    runtime = await prepare(environ, lookup=lookup, home_resolver=home_resolver)
    monitor.raise_first()

    return route(
        argv,
        runtime,
        executor if executor is not None else PackageExecutor(),
        environ,
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: list[str] | None = None,
    *,
    environ: MutableMapping[str, str] | None = None,
    executor: Executor | None = None,
    lookup: VersionLookup | None = None,
    home_resolver: HomeResolver = resolve_user_home,
) -> int:
    """Run the der CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    environ, executor, lookup, home_resolver:
        Collaborators forwarded to :func:`bootstrap`.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    Exception
        The first failure of a task nobody awaited, even one reported
        while the loop shuts down.
    """
    args = sys.argv[1:] if argv is None else argv
    monitor = StrayTaskMonitor()
    code = asyncio.run(
        bootstrap(
            args,
            environ=environ,
            executor=executor,
            lookup=lookup,
            home_resolver=home_resolver,
            monitor=monitor,
        )
    )
    monitor.raise_first()
    return code


# ---------------------------------------------------------------------------
# Process-wide error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace unless debug logging is on.
    """
    setup_logging(os.environ)
    try:
        code = main()
        sys.exit(code)
    except DerCliError as exc:
        log.error("%s: %s", exc.kind, exc)
        if exc.hint:
            log.warn("Hint: %s", exc.hint)
        if log.is_verbose:
            console.print_exception()
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception:  # noqa: BLE001
        log.error("uncaughtException", exc_info=True)
        sys.exit(exit_codes.UNEXPECTED_ERROR)
