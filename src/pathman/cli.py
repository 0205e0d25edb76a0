"""CLI entry point: argparse setup and command dispatch."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pathman import __version__
from pathman.errors import PathmanError
from pathman.manager import Outcome, PathAction, PathManager, validate_directory
from pathman.pathline import path_entries
from pathman.profile import ShellProfile, locate
from pathman.shell import read_rc, source_rc
from pathman.utils import error, info, print_table, warn


def _directory_arg(value: str) -> str:
    try:
        return validate_directory(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _profile(args: argparse.Namespace) -> ShellProfile:
    override = Path(args.shell_config) if args.shell_config else None
    return locate(rc_override=override)


def _report(outcome: Outcome) -> int:
    if not outcome.ok:
        error(outcome.message)
        return 1

    info(outcome.message)
    if outcome.source_error is not None:
        warn(f"Could not source {outcome.profile.path}: {outcome.source_error}")
        info(f"Run '{outcome.hint}' or open a new terminal to apply the change.")
    elif outcome.changed and outcome.hint:
        info(f"Run '{outcome.hint}' or open a new terminal to apply the change.")
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """Add a directory to PATH."""
    manager = PathManager(_profile(args), runner=source_rc)
    return _report(manager.modify(PathAction.add(args.directory), not args.skip_source))


def cmd_remove(args: argparse.Namespace) -> int:
    """Remove a directory from PATH."""
    manager = PathManager(_profile(args), runner=source_rc)
    return _report(manager.modify(PathAction.remove(args.directory), not args.skip_source))


def cmd_list(args: argparse.Namespace) -> int:
    """List the directories exported on PATH lines in the startup file."""
    profile = _profile(args)
    entries = path_entries(read_rc(profile.path))

    info(f"PATH entries in {profile.path}:")
    rows = [
        [str(lineno), entry]
        for lineno, values in entries
        for entry in values
        if entry not in ("$PATH", "${PATH}")
    ]
    print_table(["Line", "Directory"], rows)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathman",
        description="Manage the PATH exported by your shell startup file",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    # shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--shell-config",
        help="Path to shell config file (default: ~/.bashrc or ~/.zshrc from $SHELL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # add
    p_add = subparsers.add_parser("add", parents=[common], help="Add a directory to PATH")
    p_add.add_argument("directory", type=_directory_arg, help="Directory to add to the PATH")
    p_add.add_argument(
        "-s", "--skip-source", action="store_true",
        help="Do not source the startup file after adding the directory",
    )

    # remove
    p_remove = subparsers.add_parser(
        "remove", parents=[common], help="Remove a directory from PATH"
    )
    p_remove.add_argument(
        "directory", type=_directory_arg, help="Directory to remove from the PATH"
    )
    p_remove.add_argument(
        "-s", "--skip-source", action="store_true",
        help="Do not source the startup file after removing the directory",
    )

    # list
    subparsers.add_parser("list", parents=[common], help="List PATH entries in the startup file")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    dispatch = {
        "add": cmd_add,
        "remove": cmd_remove,
        "list": cmd_list,
    }

    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        code = handler(args)
    except PathmanError as e:
        error(str(e))
        code = 1
    sys.exit(code)
