"""
Schema-driven argument normalization and validation.

The validator is the only place where raw token strings are narrowed into
typed argument values; command implementations receive the typed map.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from mindcmd.constants import ArgType
from mindcmd.core.common.exceptions import ArgumentValidationError
from mindcmd.core.domain.commands.command import ArgumentSpec, Command
from mindcmd.core.domain.parsed_command import (
    ArgPrimitive,
    ArgsMap,
    ParsedCommand,
    ParseResult,
)

logger = logging.getLogger(__name__)

_POSITIONAL_KEY = re.compile(r"^_(\d+)$")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_number(value: str) -> int | float | None:
    text = value.strip()
    # Only the ``Infinity`` spelling is infinite; digit separators are rejected
    if not text or "_" in text:
        return None
    if text in ("Infinity", "+Infinity", "-Infinity"):
        return float(text.replace("Infinity", "inf"))
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_argument_value(value: Any, spec: ArgumentSpec) -> ArgPrimitive:
    """
    Coerce a raw argument value to the type declared by ``spec``.

    Raises:
        ArgumentValidationError: If the value cannot be coerced.
    """
    if spec.type is ArgType.STRING:
        return value if isinstance(value, str) else _stringify(value)

    if spec.type is ArgType.NUMBER:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if not (isinstance(value, float) and math.isnan(value)):
                return value
        elif isinstance(value, str):
            number = _to_number(value)
            if number is not None:
                return number
        raise ArgumentValidationError(
            f"Argument {spec.name} must be a number", argument=spec.name
        )

    if spec.type is ArgType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
        raise ArgumentValidationError(
            f"Argument {spec.name} must be a boolean", argument=spec.name
        )

    if spec.type is ArgType.NODE_ID:
        text = value if isinstance(value, str) else _stringify(value)
        if text.strip():
            return text
        raise ArgumentValidationError(
            f"Argument {spec.name} must be a valid node ID", argument=spec.name
        )

    return value


def _positional_values(args: ArgsMap) -> list[tuple[str, ArgPrimitive]]:
    found: list[tuple[int, str, ArgPrimitive]] = []
    for key, value in args.items():
        match = _POSITIONAL_KEY.match(key)
        if match:
            found.append((int(match.group(1)), key, value))
    return [(key, value) for _, key, value in sorted(found)]


def validate_command(parsed: ParsedCommand, command: Command) -> ParseResult:
    """
    Validate and type the arguments of ``parsed`` against ``command.args``.

    Positional values are bound, in order of appearance, to schema arguments
    that were not given by name; unbound positionals keep their ``_N`` keys.
    Then, for each schema argument: a missing required one is an error, a
    missing one with a default takes the default, and a present one is
    normalized. All problems are reported together, joined by ``", "``.
    Commands without a schema pass their arguments through unchanged.
    """
    if not command.args:
        return ParseResult(success=True, command=parsed)

    processed: ArgsMap = dict(parsed.args)

    positionals = _positional_values(processed)
    for spec in command.args:
        if not positionals:
            break
        if spec.name in processed:
            continue
        key, value = positionals.pop(0)
        del processed[key]
        processed[spec.name] = value

    errors: list[str] = []
    for spec in command.args:
        has_value = spec.name in processed

        if spec.required and not has_value:
            errors.append(f"Required argument '{spec.name}' is missing")
            continue

        if not has_value:
            if spec.default is not None:
                processed[spec.name] = spec.default
            continue

        try:
            processed[spec.name] = normalize_argument_value(processed[spec.name], spec)
        except ArgumentValidationError as exc:
            errors.append(exc.message)

    if errors:
        logger.debug("Validation of '%s' failed: %s", command.name, errors)
        return ParseResult(success=False, error=", ".join(errors))

    return ParseResult(
        success=True,
        command=ParsedCommand(
            name=parsed.name, args=processed, raw_input=parsed.raw_input
        ),
    )
