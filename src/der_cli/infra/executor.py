"""Infrastructure: resolve and run subcommand implementations.

A subcommand implementation is any module exposing ``run(request)``.
It is taken from a local path when ``--targetPath`` is given, otherwise
from the entry point named after the command in the
``der_cli.commands`` group of an installed distribution.
"""

from __future__ import annotations

import importlib.util
import logging
from collections.abc import Callable
from importlib.metadata import entry_points
from pathlib import Path
from types import ModuleType
from typing import Any

from der_cli.core.models import ExecRequest
from der_cli.exceptions import CommandNotFoundError, ExecutorError
from der_cli.utils.constants import COMMAND_ENTRY_POINT_GROUP, VERBOSE

logger = logging.getLogger(__name__)


class PackageExecutor:
    """Concrete :class:`~der_cli.core.protocols.Executor`.

    Satisfies the protocol structurally, without explicit inheritance.
    """

    def __init__(self, group: str = COMMAND_ENTRY_POINT_GROUP) -> None:
        self.group = group

    def __call__(self, request: ExecRequest) -> None:
        target_path = request.global_options.target_path
        if target_path:
            runner = self._load_local(Path(target_path), request.command)
        else:
            runner = self._load_installed(request.command)

        logger.log(VERBOSE, "[core/cli] exec %s %s", request.command, list(request.args))
        runner(request)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _load_installed(self, command: str) -> Callable[[ExecRequest], Any]:
        matches = entry_points(group=self.group, name=command)
        entry = next(iter(matches), None)
        if entry is None:
            raise CommandNotFoundError(
                f"No implementation installed for command '{command}'.",
                hint=f"Install it with: pip install der-cli-{command}",
            )
        try:
            loaded = entry.load()
        except ImportError as exc:
            raise ExecutorError(
                f"Failed to import implementation of '{command}': {exc}",
            ) from exc
        return self._runner_from(loaded, entry.value)

    def _load_local(self, path: Path, command: str) -> Callable[[ExecRequest], Any]:
        file_path = path / "__init__.py" if path.is_dir() else path
        if not file_path.is_file():
            raise CommandNotFoundError(
                f"Target path does not contain a module: {path}",
                hint="Point --targetPath at a .py file or a package directory.",
            )

        spec = importlib.util.spec_from_file_location(
            f"der_cli_local_{command}",
            file_path,
            submodule_search_locations=[str(path)] if path.is_dir() else None,
        )
        if spec is None or spec.loader is None:
            raise ExecutorError(f"Cannot load module from {file_path}.")

        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise ExecutorError(
                f"Failed to import {file_path}: {exc}",
            ) from exc
        return self._runner_from(module, str(file_path))

    @staticmethod
    def _runner_from(loaded: Any, origin: str) -> Callable[[ExecRequest], Any]:
        """Accept either a callable or a module exposing ``run``."""
        if isinstance(loaded, ModuleType):
            loaded = getattr(loaded, "run", None)
        if not callable(loaded):
            raise ExecutorError(
                f"{origin} does not expose a callable 'run(request)'.",
            )
        return loaded
