"""
Command definitions stored in the registry.

A command is a plain record: metadata, an ordered argument schema, and the
``execute``/``guard`` callables supplied by the host application.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import ConfigDict, field_validator

from mindcmd.constants import ArgType, CommandCategory
from mindcmd.core.domain.command_results import CommandResult
from mindcmd.core.domain.model_bases import DomainModel, InternalDTO
from mindcmd.core.domain.parsed_command import ArgPrimitive, ArgsMap

# ``execute`` may return a result directly or an awaitable of one. Plain
# ``None``/``bool``/``dict`` returns are normalized by the dispatcher.
ExecuteResult = Union[CommandResult, dict[str, Any], bool, None]
CommandExecutor = Callable[[Any, ArgsMap], Union[ExecuteResult, Awaitable[ExecuteResult]]]
CommandGuard = Callable[[Any, ArgsMap], bool]


class ArgumentSpec(DomainModel):
    """One entry of a command's argument schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ArgType = ArgType.STRING
    required: bool = False
    default: ArgPrimitive | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Argument name must be a non-empty string")
        return v


@dataclass(eq=False)
class Command(InternalDTO):
    """
    A named, invokable operation.

    Attributes:
        name: Unique primary key in the registry.
        execute: Called with ``(context, args)`` once arguments validate.
        description: One-line summary used by help and search.
        aliases: Secondary lookup keys.
        category: Help grouping; ``None`` is shown as ``general``.
        examples: Sample invocations for help output.
        args: Ordered argument schema.
        guard: Precondition checked right before ``execute``.
        repeatable: Whether dot-repeat may re-invoke this command.
        countable: Whether a numeric key prefix is passed through.
    """

    name: str
    execute: CommandExecutor
    description: str = ""
    aliases: tuple[str, ...] = ()
    category: CommandCategory | str | None = None
    examples: tuple[str, ...] = ()
    args: tuple[ArgumentSpec, ...] = field(default_factory=tuple)
    guard: CommandGuard | None = None
    repeatable: bool = False
    countable: bool = False

    def __post_init__(self) -> None:
        # A bare string is one alias or example, not a sequence of characters
        if isinstance(self.aliases, str):
            self.aliases = (self.aliases,)
        if isinstance(self.examples, str):
            self.examples = (self.examples,)
        self.aliases = tuple(self.aliases)
        self.examples = tuple(self.examples)
        self.args = tuple(self.args)

    @property
    def category_name(self) -> str:
        if self.category is None:
            return "general"
        if isinstance(self.category, CommandCategory):
            return self.category.value
        return str(self.category)

    def __repr__(self) -> str:
        return f'<Command name="{self.name}">'
