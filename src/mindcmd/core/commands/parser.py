"""
Parses textual command lines into ``ParsedCommand`` values.

Grammar: ``<name> [--flag] [--name value] [positional ...]``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from mindcmd.core.commands.tokenizer import QUOTE_CHARS, tokenize
from mindcmd.core.common.exceptions import ParseError
from mindcmd.core.domain.parsed_command import ArgsMap, ParsedCommand, ParseResult

logger = logging.getLogger(__name__)

NAMED_PREFIX = "--"


def positional_key(index: int) -> str:
    """Return the synthesized key for the positional token at ``index``."""
    return f"_{index}"


def _strip_wrapping_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] in QUOTE_CHARS and value[-1] == value[0]:
        return value[1:-1]
    return value


def _is_named(token: str) -> bool:
    return token.startswith(NAMED_PREFIX) and len(token) > len(NAMED_PREFIX)


def parse_arguments(tokens: Sequence[str]) -> ArgsMap:
    """
    Parse the tokens following the command name.

    ``--name value`` stores the raw value, ``--name`` followed by another
    ``--`` token (or nothing) is a boolean flag. Every other token is
    positional and keyed by its index in ``tokens``, so flags and their
    values advance the index too: in ``--x 1 bar`` the positional ``bar`` is
    stored under ``_2``. Values stay strings; typing happens in validation.
    """
    args: ArgsMap = {}
    i = 0

    while i < len(tokens):
        token = tokens[i]

        if _is_named(token):
            arg_name = token[len(NAMED_PREFIX) :]
            if i + 1 < len(tokens) and not tokens[i + 1].startswith(NAMED_PREFIX):
                args[arg_name] = _strip_wrapping_quotes(tokens[i + 1])
                i += 2
            else:
                args[arg_name] = True
                i += 1
        else:
            args[positional_key(i)] = _strip_wrapping_quotes(token)
            i += 1

    return args


def parse_command(input_str: str) -> ParseResult:
    """
    Parse a command line.

    Returns:
        A successful ``ParseResult`` carrying the ``ParsedCommand``, or a failed
        one with the parse error message. Never raises for malformed input.
    """
    trimmed = input_str.strip()
    if not trimmed:
        return ParseResult(success=False, error="Empty command")

    try:
        tokens = tokenize(trimmed)
    except ParseError as exc:
        logger.debug("Failed to tokenize %r: %s", trimmed, exc.message)
        return ParseResult(success=False, error=exc.message)

    if not tokens or not tokens[0]:
        return ParseResult(success=False, error="No valid tokens found")

    parsed = ParsedCommand(
        name=tokens[0],
        args=parse_arguments(tokens[1:]),
        raw_input=trimmed,
    )
    return ParseResult(success=True, command=parsed)
