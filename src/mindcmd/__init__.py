"""
mindcmd: a command and modal-editing engine.

Typical wiring::

    registry = CommandRegistry()
    registry.register(command("center", "Center the view", center_view))
    dispatcher = CommandDispatcher(registry)
    result = await dispatcher.execute("center", context)
"""

from mindcmd.core.commands.dispatcher import CommandDispatcher
from mindcmd.core.commands.key_sequence import (
    KeyPatternTable,
    KeySequenceBuffer,
    KeySequenceMatcher,
)
from mindcmd.core.commands.parser import parse_command
from mindcmd.core.commands.registry import CommandRegistry
from mindcmd.core.commands.tokenizer import tokenize
from mindcmd.core.config.app_config import EngineConfig, load_config
from mindcmd.core.domain.command_results import CommandResult
from mindcmd.core.domain.commands import ArgumentSpec, Command, CommandBuilder, command
from mindcmd.core.domain.parsed_command import ExecuteOptions, ParsedCommand, ParseResult

__version__ = "0.1.0"

__all__ = [
    "ArgumentSpec",
    "Command",
    "CommandBuilder",
    "CommandDispatcher",
    "CommandRegistry",
    "CommandResult",
    "EngineConfig",
    "ExecuteOptions",
    "KeyPatternTable",
    "KeySequenceBuffer",
    "KeySequenceMatcher",
    "ParseResult",
    "ParsedCommand",
    "command",
    "load_config",
    "parse_command",
    "tokenize",
]
