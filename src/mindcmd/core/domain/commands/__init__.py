"""Command definition records and builders."""

from mindcmd.core.domain.commands.builder import CommandBuilder, command
from mindcmd.core.domain.commands.command import ArgumentSpec, Command

__all__ = ["ArgumentSpec", "Command", "CommandBuilder", "command"]
