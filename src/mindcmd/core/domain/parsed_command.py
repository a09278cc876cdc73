"""
Core data structures produced by the textual parser and the key matcher.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from mindcmd.core.domain.model_bases import InternalDTO

ArgPrimitive = Union[str, int, float, bool]
ArgsMap = dict[str, ArgPrimitive]


@dataclass(frozen=True)
class ParsedCommand(InternalDTO):
    """
    Represents a parsed command with its name and arguments.

    Attributes:
        name: The command name as typed (not yet resolved through aliases).
        args: Named arguments plus positional ones under ``_0``, ``_1``, ...
        raw_input: The trimmed input line.
    """

    name: str
    args: Mapping[str, ArgPrimitive] = field(default_factory=dict)
    raw_input: str = ""


@dataclass(frozen=True)
class ParseResult(InternalDTO):
    """Outcome of parsing or validating a command line."""

    success: bool
    command: ParsedCommand | None = None
    error: str | None = None
    suggestions: tuple[str, ...] = ()


@dataclass(frozen=True)
class KeySequenceResult(InternalDTO):
    """
    Outcome of matching a buffered key sequence.

    Exactly one of ``is_complete``/``is_partial`` is set for a recognised
    sequence. Both unset together with ``should_clear`` means the buffer
    holds nothing that can ever match and must be discarded.
    """

    is_complete: bool = False
    is_partial: bool = False
    command: str | None = None
    count: int | None = None
    should_clear: bool = False
    is_dot_repeat: bool = False

    @property
    def is_invalid(self) -> bool:
        return not self.is_complete and not self.is_partial


@dataclass(frozen=True)
class ExecuteOptions(InternalDTO):
    """Per-call dispatch switches."""

    dry_run: bool = False
    verbose: bool = False
