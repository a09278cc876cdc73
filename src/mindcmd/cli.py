"""
Command line entry point for inspecting the command engine.

The CLI does not execute editor commands (it has no editor to act on); it
exposes the parser, the key-sequence matcher and the shortcut table so
keymaps and command lines can be checked from a shell.
"""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from mindcmd.core.commands.key_sequence import (
    NUMBERED_SEPARATOR,
    KeyPatternTable,
    KeySequenceMatcher,
)
from mindcmd.core.commands.parser import parse_command
from mindcmd.core.commands.shortcuts import ShortcutMap
from mindcmd.core.common.exceptions import MindCmdError
from mindcmd.core.common.logging_utils import configure_logging
from mindcmd.core.config.app_config import EngineConfig, LogLevel, load_config

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="mindcmd", description="Inspect command lines, key sequences and shortcuts"
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        metavar="FILE",
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[level.value for level in LogLevel],
        type=str.upper,
        help="Override the configured log level",
    )

    subparsers = parser.add_subparsers(dest="action", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a textual command line")
    parse_cmd.add_argument("line", help="Command line, e.g. 'add-child --text \"Hi\"'")

    keys_cmd = subparsers.add_parser("keys", help="Match a vim-style key sequence")
    keys_cmd.add_argument("sequence", help="Key sequence, e.g. '3j' or 'dd'")

    shortcuts_cmd = subparsers.add_parser("shortcuts", help="List or look up shortcuts")
    shortcuts_cmd.add_argument(
        "combo", nargs="?", help="Shortcut to look up, e.g. 'ctrl+shift+z'"
    )

    return parser


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def _run_parse(args: argparse.Namespace) -> int:
    result = parse_command(args.line)
    if not result.success or result.command is None:
        _emit({"success": False, "error": result.error})
        return 1
    _emit(
        {
            "success": True,
            "name": result.command.name,
            "args": dict(result.command.args),
        }
    )
    return 0


def _run_keys(args: argparse.Namespace, config: EngineConfig) -> int:
    keymap = config.keymap
    matcher = KeySequenceMatcher(
        KeyPatternTable(keymap.patterns), numbered_key=keymap.numbered_key
    )
    result = matcher.match(args.sequence)

    payload: dict[str, Any] = {
        "complete": result.is_complete,
        "partial": result.is_partial,
        "command": result.command,
        "count": result.count,
        "dot_repeat": result.is_dot_repeat,
    }
    if result.is_complete and result.command and not result.is_dot_repeat:
        numbered_prefix = f"{keymap.numbered_key}{NUMBERED_SEPARATOR}"
        if result.command.startswith(numbered_prefix):
            payload["resolves_to"] = keymap.numbered_command
        else:
            payload["resolves_to"] = keymap.commands.get(result.command)
    _emit(payload)
    return 0 if not result.is_invalid else 1


def _run_shortcuts(args: argparse.Namespace) -> int:
    shortcuts = ShortcutMap()
    if not args.combo:
        print(shortcuts.help_text(), end="")
        return 0

    try:
        definition = shortcuts.match(args.combo)
    except ValueError as exc:
        _emit({"success": False, "error": str(exc)})
        return 1
    if definition is None:
        _emit({"success": False, "error": f"No shortcut bound to '{args.combo}'"})
        return 1
    _emit(
        {
            "success": True,
            "shortcut": definition.display(),
            "command": definition.command,
            "args": dict(definition.args),
            "category": definition.category.value,
            "description": definition.description,
        }
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_cli_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config_file)
    except MindCmdError as exc:
        print(f"Configuration error: {exc.message}", file=sys.stderr)
        return 2

    level = args.log_level or config.logging.level.value
    configure_logging(level, log_file=config.logging.log_file)
    logger.debug("Running '%s' with config %s", args.action, args.config_file)

    if args.action == "parse":
        return _run_parse(args)
    if args.action == "keys":
        return _run_keys(args, config)
    return _run_shortcuts(args)


if __name__ == "__main__":
    sys.exit(main())
