"""Command router — declares the CLI surface and dispatches.

The three subcommands are declared as data in :data:`COMMANDS` and
registered by one loop.  Global options given before the command are
read in a first pass so their effects (log level, local target path)
are applied before the subcommand is resolved, whether or not it
exists.  Every subparser accepts them as well, so they may also follow
the command.
"""

from __future__ import annotations

import argparse
import os
from collections.abc import MutableMapping, Sequence

from der_cli.cli import exit_codes
from der_cli.cli.log import log
from der_cli.core.models import (
    CommandSpec,
    ExecRequest,
    GlobalOptions,
    OptionSpec,
    RuntimeEnvironment,
)
from der_cli.core.protocols import Executor
from der_cli.utils.constants import ENV_LOG_LEVEL, ENV_TARGET_PATH
from der_cli.version import __version__

PROG = "der"

COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        name="init",
        description="Initialize a project.",
        positional="projectName",
        options=(
            OptionSpec(("-f", "--force"), "force", "Force initialization, clearing the target folder."),
        ),
    ),
    CommandSpec(
        name="go",
        description="Publish the project.",
        options=(
            OptionSpec(("-rs", "--refreshServer"), "refreshServer", "Refresh the cached Git server."),
            OptionSpec(("-rt", "--refreshToken"), "refreshToken", "Refresh the cached Git token."),
            OptionSpec(("-ro", "--refreshOwner"), "refreshOwner", "Refresh the cached Git owner."),
            OptionSpec(("-re", "--release"), "release", "Publish a release tag."),
            OptionSpec(("-f", "--force"), "force", "Refresh every cached value."),
        ),
    ),
    CommandSpec(
        name="clean",
        description="Remove cached files.",
        options=(
            OptionSpec(("-a", "--all"), "all", "Remove everything."),
            OptionSpec(("--dep",), "dep", "Remove downloaded dependencies."),
        ),
    ),
)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def _add_global_options(parser: argparse.ArgumentParser, *, default: object) -> None:
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        default=default,
        help="Enable debug mode.",
    )
    parser.add_argument(
        "-tp",
        "--targetPath",
        dest="target_path",
        metavar="<targetPath>",
        default=default,
        help="Load subcommands from a local path instead of the installed package.",
    )


def build_parser(commands: Sequence[CommandSpec] = COMMANDS) -> argparse.ArgumentParser:
    """Construct the full parser: global options plus one subparser per command."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage="%(prog)s <command> [options]",
        description="Project scaffolding CLI.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=__version__,
    )
    _add_global_options(parser, default=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for spec in commands:
        sub = subparsers.add_parser(
            spec.name,
            help=spec.description,
            description=spec.description,
            allow_abbrev=False,
        )
        _add_global_options(sub, default=argparse.SUPPRESS)
        if spec.positional:
            sub.add_argument(spec.positional, nargs="?", default=None)
        for option in spec.options:
            sub.add_argument(
                *option.flags,
                dest=option.dest,
                action="store_true",
                default=False,
                help=option.help,
            )
    return parser


def _build_global_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, add_help=False, allow_abbrev=False)
    _add_global_options(parser, default=None)
    return parser


_VALUE_OPTIONS = frozenset({"-tp", "--targetPath"})


def split_at_command(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split *argv* into the tokens before the command and the rest.

    The command is the first token that is neither an option nor the
    value of ``--targetPath``.
    """
    takes_value = False
    for index, token in enumerate(argv):
        if takes_value:
            takes_value = False
        elif token in _VALUE_OPTIONS:
            takes_value = True
        elif not token.startswith("-"):
            return list(argv[:index]), list(argv[index:])
    return list(argv), []


def parse_global_options(argv: Sequence[str]) -> tuple[GlobalOptions, list[str]]:
    """Read the global options given before the command in *argv*.

    Returns the options and the tokens from the command onward.  Options
    after the command belong to the subcommand's parser, which also
    accepts the global ones, so ``der init app -df`` keeps working.
    """
    head, tail = split_at_command(argv)
    namespace, _unknown = _build_global_parser().parse_known_args(head)
    options = GlobalOptions(
        debug=bool(namespace.debug),
        target_path=namespace.target_path or "",
    )
    return options, tail


def _global_options_from(namespace: argparse.Namespace) -> GlobalOptions:
    return GlobalOptions(
        debug=bool(getattr(namespace, "debug", False)),
        target_path=getattr(namespace, "target_path", "") or "",
    )


# ---------------------------------------------------------------------------
# Global option effects
# ---------------------------------------------------------------------------

def apply_global_options(
    options: GlobalOptions,
    environ: MutableMapping[str, str] | None = None,
) -> str:
    """Apply *options* to the logger and process settings.

    Returns the effective log level name.
    """
    settings = os.environ if environ is None else environ

    if options.debug:
        settings[ENV_LOG_LEVEL] = "verbose"
        log.level = settings[ENV_LOG_LEVEL]
        log.verbose("[core/cli] debug mode enabled")

    if options.target_path:
        settings[ENV_TARGET_PATH] = options.target_path

    return log.level


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def warn_unknown_command(token: str, commands: Sequence[CommandSpec] = COMMANDS) -> None:
    log.warn("Unknown command: %s", token)
    if commands:
        names = ", ".join(spec.name for spec in commands)
        log.warn("Available commands: %s", names)


def build_request(
    spec: CommandSpec,
    namespace: argparse.Namespace,
    runtime: RuntimeEnvironment,
    global_options: GlobalOptions,
) -> ExecRequest:
    """Translate a parsed subcommand into an :class:`ExecRequest`."""
    args: tuple[str, ...] = ()
    if spec.positional:
        value = getattr(namespace, spec.positional, None)
        if value is not None:
            args = (value,)

    return ExecRequest(
        command=spec.name,
        args=args,
        options={option.dest: getattr(namespace, option.dest) for option in spec.options},
        environment=runtime,
        global_options=global_options,
    )


def route(
    argv: Sequence[str],
    runtime: RuntimeEnvironment,
    executor: Executor,
    environ: MutableMapping[str, str] | None = None,
    commands: Sequence[CommandSpec] = COMMANDS,
) -> int:
    """Parse *argv* and dispatch to *executor*.

    * No command: print help, return :data:`exit_codes.SUCCESS`.
    * Unknown command: warn with the available names, no dispatch.
    * Known command: build an :class:`ExecRequest` and run it.

    ``--help``, ``--version`` and parse errors raise ``SystemExit``
    from :mod:`argparse`.
    """
    parser = build_parser(commands)
    global_options, rest = parse_global_options(argv)

    if not rest:
        apply_global_options(global_options, environ)
        parser.parse_args(list(argv))
        parser.print_help()
        return exit_codes.SUCCESS

    by_name = {spec.name: spec for spec in commands}
    spec = by_name.get(rest[0])
    if spec is None:
        apply_global_options(global_options, environ)
        warn_unknown_command(rest[0], commands)
        return exit_codes.SUCCESS

    namespace = parser.parse_args(list(argv))
    global_options = _global_options_from(namespace)
    apply_global_options(global_options, environ)
    request = build_request(spec, namespace, runtime, global_options)
    log.verbose("[core/cli] dispatching %s", request.command)
    executor(request)
    return exit_codes.SUCCESS
