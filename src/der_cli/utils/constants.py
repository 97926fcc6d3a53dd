"""Names and defaults shared across layers."""

from __future__ import annotations

DEFAULT_CLI_HOME: str = ".der-cli"
"""Working directory name under the user's home when no override is set."""

DOTENV_FILENAME: str = ".env"
"""Settings file loaded from the user's home directory at startup."""

# Process settings read or published by the bootstrap.
ENV_CLI_HOME: str = "DER_CLI_HOME"
ENV_CLI_HOME_PATH: str = "DER_CLI_HOME_PATH"
ENV_LOG_LEVEL: str = "DER_CLI_LOG_LEVEL"
ENV_TARGET_PATH: str = "DER_CLI_TARGET_PATH"
ENV_REGISTRY: str = "DER_CLI_REGISTRY"

DEFAULT_REGISTRY: str = "https://pypi.org/pypi"
REGISTRY_TIMEOUT_SECONDS: float = 10.0

COMMAND_ENTRY_POINT_GROUP: str = "der_cli.commands"
"""Entry-point group that published subcommand packages register under."""

LOGO: str = r"""
     _                     _ _
  __| | ___ _ __       ___| (_)
 / _` |/ _ \ '__|____ / __| | |
| (_| |  __/ | |_____| (__| | |
 \__,_|\___|_|        \___|_|_|
"""

VERBOSE: int = 15
"""Log level between DEBUG and INFO, enabled by ``--debug``."""
