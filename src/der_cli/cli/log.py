"""Logging setup for the der CLI.

Records from every ``der_cli.*`` logger are rendered by a single
:class:`~rich.logging.RichHandler`.  :data:`log` is the small facade
the bootstrap uses: a settable :attr:`CliLog.level` by name and
``error``/``warn``/``info``/``verbose`` reporting methods.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rich.logging import RichHandler

from der_cli.cli.console import console
from der_cli.utils.constants import ENV_LOG_LEVEL, VERBOSE

logging.addLevelName(VERBOSE, "VERBOSE")

LEVELS: dict[str, int] = {
    "verbose": VERBOSE,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}
DEFAULT_LEVEL = "info"

ROOT_LOGGER_NAME = "der_cli"


def level_from_name(name: str | None) -> int:
    """Map a level name to its ``logging`` value, defaulting to INFO."""
    return LEVELS.get((name or "").strip().lower(), LEVELS[DEFAULT_LEVEL])


class CliLog:
    """Level-by-name facade over the ``der_cli`` logger."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def level(self) -> str:
        value = self._logger.level
        for name, number in LEVELS.items():
            if number == value:
                return name
        return logging.getLevelName(value).lower()

    @level.setter
    def level(self, name: str) -> None:
        self._logger.setLevel(level_from_name(name))

    @property
    def is_verbose(self) -> bool:
        return self._logger.isEnabledFor(VERBOSE)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **kwargs)

    def warn(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **kwargs)

    def verbose(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.log(VERBOSE, msg, *args, **kwargs)


log = CliLog(logging.getLogger(ROOT_LOGGER_NAME))


def setup_logging(environ: Mapping[str, str]) -> None:
    """Attach the Rich handler and apply ``DER_CLI_LOG_LEVEL``."""
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers = [handler]
    logger.propagate = False
    log.level = environ.get(ENV_LOG_LEVEL, DEFAULT_LEVEL)
