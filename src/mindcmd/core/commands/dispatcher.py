"""
Resolves textual commands and key sequences against a registry and runs them.

Every public entry point returns a ``CommandResult``; parse, lookup,
validation, guard and execution failures never escape as exceptions.
"""

from __future__ import annotations

import dataclasses
import inspect
import json
import logging
from collections.abc import Mapping
from typing import Any

from mindcmd.constants import (
    COUNT_ARGUMENT,
    DEFAULT_KEY_COMMANDS,
    DEFAULT_MAX_EDIT_DISTANCE,
    DEFAULT_REPORTED_SUGGESTIONS,
    DEFAULT_SUGGESTION_LIMIT,
    ESCAPE_KEY,
    GUARD_FAILED_MESSAGE,
    NUMBERED_LIST_ARGUMENT,
    NUMBERED_LIST_COMMAND,
    UNKNOWN_EXECUTION_ERROR,
)
from mindcmd.core.commands.key_sequence import (
    NUMBERED_SEPARATOR,
    KeyPatternTable,
    KeySequenceBuffer,
    KeySequenceMatcher,
)
from mindcmd.core.commands.parser import parse_command
from mindcmd.core.commands.registry import CommandRegistry
from mindcmd.core.commands.repeat import RepeatRegistry
from mindcmd.core.commands.shortcuts import ShortcutMap
from mindcmd.core.commands.suggestions import (
    generate_suggestions,
    levenshtein_distance,
)
from mindcmd.core.commands.validation import validate_command
from mindcmd.core.config.app_config import EngineConfig
from mindcmd.core.domain.command_results import CommandResult
from mindcmd.core.domain.commands.command import Command
from mindcmd.core.domain.parsed_command import (
    ArgsMap,
    ExecuteOptions,
    KeySequenceResult,
    ParsedCommand,
    ParseResult,
)

logger = logging.getLogger(__name__)


def _normalize_result(outcome: Any) -> CommandResult:
    """Turn whatever ``execute`` returned into a ``CommandResult``."""
    if isinstance(outcome, CommandResult):
        return outcome
    if outcome is None:
        return CommandResult.ok()
    if isinstance(outcome, bool):
        return CommandResult.ok() if outcome else CommandResult.fail("Command reported failure")
    if isinstance(outcome, Mapping):
        success = bool(outcome.get("success", True))
        error = outcome.get("error")
        if not success and error is None:
            error = "Command reported failure"
        return CommandResult(
            success=success,
            message=outcome.get("message"),
            error=error,
            data=outcome.get("data"),
        )
    return CommandResult.ok(data=outcome)


class CommandDispatcher:
    """
    Runs commands from text lines, key sequences and keyboard shortcuts.

    The dispatcher owns the per-session state: the pending key buffer and the
    dot-repeat memory. The registry is shared and treated as read-only.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        *,
        matcher: KeySequenceMatcher | None = None,
        key_commands: Mapping[str, str] | None = None,
        numbered_command: str = NUMBERED_LIST_COMMAND,
        numbered_argument: str = NUMBERED_LIST_ARGUMENT,
        shortcuts: ShortcutMap | None = None,
        repeat_registry: RepeatRegistry | None = None,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
        max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
        reported_suggestions: int = DEFAULT_REPORTED_SUGGESTIONS,
    ) -> None:
        self.registry = registry
        self.matcher = matcher if matcher is not None else KeySequenceMatcher()
        self.key_commands: dict[str, str] = dict(
            key_commands if key_commands is not None else DEFAULT_KEY_COMMANDS
        )
        self.numbered_command = numbered_command
        self.numbered_argument = numbered_argument
        self.shortcuts = shortcuts if shortcuts is not None else ShortcutMap()
        self.repeat_registry = (
            repeat_registry if repeat_registry is not None else RepeatRegistry()
        )
        self.suggestion_limit = suggestion_limit
        self.max_edit_distance = max_edit_distance
        self.reported_suggestions = reported_suggestions
        self._buffer = KeySequenceBuffer(self.matcher)

    @classmethod
    def from_config(
        cls,
        registry: CommandRegistry,
        config: EngineConfig,
        **kwargs: Any,
    ) -> CommandDispatcher:
        keymap = config.keymap
        matcher = KeySequenceMatcher(
            KeyPatternTable(keymap.patterns), numbered_key=keymap.numbered_key
        )
        return cls(
            registry,
            matcher=matcher,
            key_commands=keymap.commands,
            numbered_command=keymap.numbered_command,
            numbered_argument=keymap.numbered_argument,
            suggestion_limit=config.suggestions.limit,
            max_edit_distance=config.suggestions.max_distance,
            reported_suggestions=config.suggestions.reported,
            **kwargs,
        )

    @property
    def pending_keys(self) -> str:
        return self._buffer.pending

    # Introspection used by host UIs

    def parse(self, input_str: str) -> ParseResult:
        return parse_command(input_str)

    def get_suggestions(self, partial_input: str) -> list[str]:
        return generate_suggestions(
            partial_input,
            self.registry.get_all(),
            limit=self.suggestion_limit,
            max_distance=self.max_edit_distance,
        )

    def get_help(self, command_name: str | None = None) -> str:
        return self.registry.get_help(command_name)

    def get_available_commands(self) -> list[str]:
        return self.registry.get_available_names()

    def is_valid_command(self, command_name: str) -> bool:
        return self.registry.get(command_name) is not None

    # Entry points

    async def execute(
        self,
        input_str: str,
        context: Any = None,
        options: ExecuteOptions | None = None,
    ) -> CommandResult:
        """
        Parse and run a textual command line.

        Pipeline: parse, resolve, validate, dry-run short circuit, guard,
        execute. The first failing step produces the returned result.
        """
        parse_result = parse_command(input_str)
        if not parse_result.success or parse_result.command is None:
            return CommandResult.fail(parse_result.error or "Failed to parse command")

        return await self._dispatch(parse_result.command, context, options)

    async def execute_key_sequence(
        self,
        keys: str,
        context: Any = None,
        options: ExecuteOptions | None = None,
    ) -> CommandResult:
        """Match a complete key sequence (e.g. ``"3j"``, ``"dd"``) and run it."""
        result = self.matcher.match(keys)
        return await self._dispatch_key_result(result, keys, context, options)

    async def feed_key(
        self,
        key: str,
        context: Any = None,
        options: ExecuteOptions | None = None,
    ) -> CommandResult | None:
        """
        Feed a single keystroke into the pending key buffer.

        Returns:
            The dispatch result once a sequence completes, otherwise ``None``
            (the key was buffered, or the buffer was discarded as invalid).
        """
        if len(key) > 1 and key.lower() != ESCAPE_KEY and key in self.key_commands:
            return await self._dispatch_named_key(key, context, options)

        sequence = self._buffer.pending + key
        result = self._buffer.feed(key)
        if not result.is_complete:
            return None
        return await self._dispatch_key_result(result, sequence, context, options)

    def reset_keys(self) -> None:
        self._buffer.reset()

    async def execute_shortcut(
        self,
        combo: str,
        context: Any = None,
        options: ExecuteOptions | None = None,
    ) -> CommandResult:
        """Run the command bound to a keyboard shortcut such as ``ctrl+z``."""
        try:
            definition = self.shortcuts.match(combo)
        except ValueError as exc:
            return CommandResult.fail(str(exc))

        if definition is None:
            return CommandResult.fail(f"No shortcut bound to '{combo}'")

        if definition.is_vim:
            return await self.execute_key_sequence(definition.command, context, options)

        parsed = ParsedCommand(
            name=definition.command, args=dict(definition.args), raw_input=combo
        )
        return await self._dispatch(parsed, context, options)

    # Internals

    async def _dispatch_named_key(
        self, key: str, context: Any, options: ExecuteOptions | None
    ) -> CommandResult:
        pending = self._buffer.pending
        count = int(pending) if pending.isdigit() else None
        self._buffer.reset()
        parsed = ParsedCommand(name=self.key_commands[key], raw_input=key)
        return await self._dispatch(parsed, context, options, count=count)

    async def _dispatch_key_result(
        self,
        result: KeySequenceResult,
        keys: str,
        context: Any,
        options: ExecuteOptions | None,
    ) -> CommandResult:
        if result.is_partial:
            return CommandResult.fail(f"Incomplete key sequence: {keys}")
        if not result.is_complete or result.command is None:
            return CommandResult.fail(f"Unknown key sequence: {keys}")

        if result.is_dot_repeat:
            return await self._repeat_last(context, options, result.count)

        identifier = result.command
        args: ArgsMap = {}
        numbered_prefix = f"{self.matcher.numbered_key}{NUMBERED_SEPARATOR}"
        if identifier.startswith(numbered_prefix) and result.count is not None:
            name = self.numbered_command
            args[self.numbered_argument] = result.count
        else:
            mapped = self.key_commands.get(identifier)
            if mapped is None:
                logger.debug("No command mapped to key sequence %r", identifier)
                return CommandResult.fail(f"Unknown key command: {identifier}")
            name = mapped

        parsed = ParsedCommand(name=name, args=args, raw_input=keys)
        return await self._dispatch(parsed, context, options, count=result.count)

    async def _repeat_last(
        self, context: Any, options: ExecuteOptions | None, count: int | None
    ) -> CommandResult:
        record = self.repeat_registry.last()
        if record is None:
            return CommandResult.fail("No previous change to repeat")

        command = self.registry.get(record.command_name)
        if command is None:
            return CommandResult.fail(f"Command not found: {record.command_name}")
        if not command.repeatable:
            return CommandResult.fail(f"Command '{command.name}' is not repeatable")

        parsed = ParsedCommand(name=command.name, args=dict(record.args), raw_input=".")
        return await self._dispatch(
            parsed,
            context,
            options,
            count=count if count is not None else record.count,
        )

    def _unknown_command(self, name: str) -> CommandResult:
        commands = self.registry.get_all()
        suggestions = generate_suggestions(
            name,
            commands,
            limit=self.suggestion_limit,
            max_distance=self.max_edit_distance,
        )[: self.reported_suggestions]

        error = f"Command '{name}' not found"
        if suggestions:
            error += f". Did you mean: {', '.join(suggestions)}?"
        elif commands and self.reported_suggestions:
            query = name.lower()
            # sorted() is stable, so ties keep registration order
            closest = sorted(
                commands, key=lambda cmd: levenshtein_distance(query, cmd.name.lower())
            )[: self.reported_suggestions]
            error += f". Closest commands: {', '.join(cmd.name for cmd in closest)}"

        logger.warning("Unknown command '%s'", name)
        return CommandResult(success=False, error=error, data={"suggestions": suggestions})

    async def _dispatch(
        self,
        parsed: ParsedCommand,
        context: Any,
        options: ExecuteOptions | None,
        *,
        count: int | None = None,
    ) -> CommandResult:
        options = options or ExecuteOptions()

        command = self.registry.get(parsed.name)
        if command is None:
            return self._unknown_command(parsed.name)

        raw_args: ArgsMap = dict(parsed.args)
        if count is not None:
            if command.countable:
                raw_args.setdefault(COUNT_ARGUMENT, count)
            else:
                logger.debug("Ignoring count %d for non-countable '%s'", count, command.name)

        validation = validate_command(
            ParsedCommand(name=parsed.name, args=raw_args, raw_input=parsed.raw_input),
            command,
        )
        if not validation.success or validation.command is None:
            return CommandResult(
                success=False,
                error=validation.error or "Command validation failed",
                name=command.name,
            )
        args: ArgsMap = dict(validation.command.args)

        if options.dry_run:
            return CommandResult(
                success=True,
                message=f"Would execute: {command.name} with args: {json.dumps(args)}",
                data={"command": command.name, "args": args},
                name=command.name,
            )

        logger.debug("Dispatching '%s' args=%s count=%s", command.name, args, count)
        result = await self._run(command, context, args)
        if not result.name:
            result = dataclasses.replace(result, name=command.name)

        if result.success:
            if command.repeatable:
                recorded = dict(parsed.args)
                self.repeat_registry.record(
                    command.name, recorded, count if command.countable else None
                )
            if options.verbose:
                logger.info("Command executed: %s -> %s", parsed.raw_input, result.to_dict())

        return result

    async def _run(self, command: Command, context: Any, args: ArgsMap) -> CommandResult:
        try:
            if command.guard is not None and not command.guard(context, args):
                logger.warning("Guard rejected command '%s'", command.name)
                return CommandResult.fail(GUARD_FAILED_MESSAGE)

            outcome = command.execute(context, args)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return _normalize_result(outcome)
        except Exception as exc:  # noqa: BLE001 - dispatch boundary
            logger.warning("Command '%s' raised: %s", command.name, exc, exc_info=True)
            return CommandResult.fail(str(exc) or UNKNOWN_EXECUTION_ERROR)
