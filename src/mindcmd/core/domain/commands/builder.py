"""
Helpers that cut boilerplate out of command definitions.

Provides a fluent ``CommandBuilder``, a ``command()`` quick factory, guard
combinators and typed argument getters for use inside ``execute`` bodies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from mindcmd.constants import CommandCategory
from mindcmd.core.domain.command_results import CommandResult
from mindcmd.core.domain.commands.command import (
    ArgumentSpec,
    Command,
    CommandExecutor,
    CommandGuard,
)
from mindcmd.core.domain.parsed_command import ArgsMap


class CommandBuilder:
    """Fluent API for building commands."""

    def __init__(self, name: str, description: str = "") -> None:
        self._name = name
        self._description = description
        self._execute: CommandExecutor | None = None
        self._guard: CommandGuard | None = None
        self._category: CommandCategory | str | None = None
        self._aliases: tuple[str, ...] = ()
        self._examples: tuple[str, ...] = ()
        self._args: tuple[ArgumentSpec, ...] = ()
        self._repeatable = False
        self._countable = False

    def with_execute(self, execute: CommandExecutor) -> CommandBuilder:
        self._execute = execute
        return self

    def with_guard(self, guard: CommandGuard) -> CommandBuilder:
        self._guard = guard
        return self

    def with_category(self, category: CommandCategory | str) -> CommandBuilder:
        self._category = category
        return self

    def with_aliases(self, *aliases: str) -> CommandBuilder:
        self._aliases = aliases
        return self

    def with_examples(self, *examples: str) -> CommandBuilder:
        self._examples = examples
        return self

    def with_args(self, *args: ArgumentSpec) -> CommandBuilder:
        self._args = args
        return self

    def repeatable(self, value: bool = True) -> CommandBuilder:
        self._repeatable = value
        return self

    def countable(self, value: bool = True) -> CommandBuilder:
        self._countable = value
        return self

    def build(self) -> Command:
        """
        Create the command.

        Raises:
            ValueError: If no execute function was supplied.
        """
        if self._execute is None:
            raise ValueError(f"Command {self._name} must have an execute function")

        return Command(
            name=self._name,
            description=self._description,
            execute=self._execute,
            guard=self._guard,
            category=self._category,
            aliases=self._aliases,
            examples=self._examples,
            args=self._args,
            repeatable=self._repeatable,
            countable=self._countable,
        )


def command(
    name: str,
    description: str,
    execute: CommandExecutor,
    **options: Any,
) -> Command:
    """Quick factory for simple commands."""
    return Command(name=name, description=description, execute=execute, **options)


# Guards


def always(context: Any, args: ArgsMap) -> bool:
    return True


def never(context: Any, args: ArgsMap) -> bool:
    return False


def all_guards(*guards: CommandGuard) -> CommandGuard:
    """Combine guards with AND logic."""

    def guard(context: Any, args: ArgsMap) -> bool:
        return all(g(context, args) for g in guards)

    return guard


def any_guard(*guards: CommandGuard) -> CommandGuard:
    """Combine guards with OR logic."""

    def guard(context: Any, args: ArgsMap) -> bool:
        return any(g(context, args) for g in guards)

    return guard


def negate(guard: CommandGuard) -> CommandGuard:
    def negated(context: Any, args: ArgsMap) -> bool:
        return not guard(context, args)

    return negated


def require_attribute(name: str) -> CommandGuard:
    """
    Guard that passes when the context exposes a non-``None`` value for ``name``.

    Mapping contexts are looked up by key, anything else by attribute.
    """

    def guard(context: Any, args: ArgsMap) -> bool:
        if isinstance(context, Mapping):
            return context.get(name) is not None
        return getattr(context, name, None) is not None

    return guard


# Argument accessors


def get_string_arg(args: Mapping[str, Any], name: str, default: str = "") -> str:
    value = args.get(name)
    return value if isinstance(value, str) else default


def get_number_arg(
    args: Mapping[str, Any], name: str, default: int | float = 0
) -> int | float:
    value = args.get(name)
    if isinstance(value, bool):
        return default
    return value if isinstance(value, (int, float)) else default


def get_boolean_arg(args: Mapping[str, Any], name: str, default: bool = False) -> bool:
    value = args.get(name)
    return value if isinstance(value, bool) else default


def validate_choice(
    value: str, choices: Sequence[str] | Iterable[str], arg_name: str
) -> CommandResult | None:
    """
    Check ``value`` against the allowed ``choices``.

    Returns:
        ``None`` when the value is allowed, otherwise a failed result that can
        be returned straight from ``execute``.
    """
    allowed = list(choices)
    if value in allowed:
        return None
    return CommandResult.fail(
        f'Invalid {arg_name} "{value}". Expected: {", ".join(allowed)}'
    )
