"""
Registry of command definitions.

The registry is an explicit object owned by the composition root and handed to
the dispatcher; there is no module-level instance. Names and aliases share one
namespace and lookups are exact and case-sensitive.
"""

from __future__ import annotations

import logging
from typing import Any

from mindcmd.constants import DEFAULT_MAX_EDIT_DISTANCE, DEFAULT_SUGGESTION_LIMIT
from mindcmd.core.commands.suggestions import generate_suggestions
from mindcmd.core.common.exceptions import CommandRegistrationError
from mindcmd.core.domain.commands.command import Command
from mindcmd.core.domain.parsed_command import ArgsMap

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Stores commands by name and indexes their aliases.

    Registration is append-only by name: registering a name twice, or an
    alias that collides with any existing name or alias, raises
    ``CommandRegistrationError`` and leaves the registry unchanged.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._aliases: dict[str, str] = {}

    def __contains__(self, name_or_alias: object) -> bool:
        return isinstance(name_or_alias, str) and self.get(name_or_alias) is not None

    def __len__(self) -> int:
        return len(self._commands)

    def register(self, command: Command) -> None:
        """
        Register a command and its aliases.

        Raises:
            CommandRegistrationError: If the name is empty or already used, or
                an alias collides with an existing name or alias.
        """
        name = command.name
        if not isinstance(name, str) or not name.strip():
            raise CommandRegistrationError("Command name is required")
        if name in self._commands:
            raise CommandRegistrationError(
                f"Command '{name}' is already registered", command_name=name
            )
        if name in self._aliases:
            raise CommandRegistrationError(
                f"Command '{name}' conflicts with an existing alias",
                command_name=name,
            )

        seen: set[str] = set()
        for alias in command.aliases:
            if (
                alias == name
                or alias in seen
                or alias in self._aliases
                or alias in self._commands
            ):
                raise CommandRegistrationError(
                    f"Alias '{alias}' conflicts with existing command or alias",
                    command_name=name,
                )
            seen.add(alias)

        self._commands[name] = command
        for alias in command.aliases:
            self._aliases[alias] = name

        logger.debug("Registered command: %s (aliases: %s)", name, list(command.aliases))

    def register_all(self, *commands: Command) -> None:
        for command in commands:
            self.register(command)

    def unregister(self, name: str) -> None:
        """Remove a command and all of its aliases. Unknown names are ignored."""
        command = self._commands.pop(name, None)
        if command is None:
            logger.warning("Attempted to unregister unknown command: %s", name)
            return

        for alias in command.aliases:
            self._aliases.pop(alias, None)
        logger.debug("Unregistered command: %s", name)

    def get(self, name_or_alias: str) -> Command | None:
        command = self._commands.get(name_or_alias)
        if command is not None:
            return command
        target = self._aliases.get(name_or_alias)
        return self._commands.get(target) if target is not None else None

    def get_all(self) -> list[Command]:
        """Return all commands in registration order."""
        return list(self._commands.values())

    def get_by_category(self, category: str) -> list[Command]:
        wanted = getattr(category, "value", category)
        return [cmd for cmd in self._commands.values() if cmd.category_name == wanted]

    def get_available_names(self) -> list[str]:
        """Return every name and alias, sorted."""
        return sorted([*self._commands.keys(), *self._aliases.keys()])

    def can_execute(
        self, name_or_alias: str, context: Any, args: ArgsMap | None = None
    ) -> bool:
        command = self.get(name_or_alias)
        if command is None:
            return False
        return command.guard is None or bool(command.guard(context, args or {}))

    def search(self, query: str) -> list[Command]:
        """
        Return commands matching ``query`` ordered by relevance.

        Names, aliases, descriptions and categories all contribute to the
        score; an empty query returns every command.
        """
        lowered = query.strip().lower()
        if not lowered:
            return self.get_all()

        scored: list[tuple[int, Command]] = []
        for command in self._commands.values():
            score = self._search_score(command, lowered)
            if score > 0:
                scored.append((score, command))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [command for _, command in scored]

    def suggest(
        self,
        query: str,
        *,
        limit: int = DEFAULT_SUGGESTION_LIMIT,
        max_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
    ) -> list[str]:
        return generate_suggestions(
            query, self.get_all(), limit=limit, max_distance=max_distance
        )

    def get_help(self, name_or_alias: str | None = None) -> str:
        if name_or_alias:
            command = self.get(name_or_alias)
            if command is None:
                return f"Command '{name_or_alias}' not found"
            return self._format_command_help(command)

        lines = ["Available Commands:", ""]
        for category, commands in self._group_by_category().items():
            lines.append(f"{category.upper()}:")
            for command in commands:
                entry = f"  {command.name}"
                if command.aliases:
                    entry += f" ({', '.join(command.aliases)})"
                entry += f" - {command.description}"
                lines.append(entry)
            lines.append("")

        lines.append(
            'Use "help <command>" for detailed information about a specific command.'
        )
        return "\n".join(lines)

    @staticmethod
    def _search_score(command: Command, query: str) -> int:
        name = command.name.lower()
        score = 0

        if name == query:
            score += 100
        elif name.startswith(query):
            score += 80
        elif query in name:
            score += 60

        for alias in command.aliases:
            lowered = alias.lower()
            if lowered == query:
                score += 90
            elif lowered.startswith(query):
                score += 70
            elif query in lowered:
                score += 50

        if query in command.description.lower():
            score += 30
        if command.category is not None and query in command.category_name.lower():
            score += 20

        return score

    @staticmethod
    def _format_command_help(command: Command) -> str:
        lines = [f"Command: {command.name}"]

        if command.aliases:
            lines.append(f"Aliases: {', '.join(command.aliases)}")
        lines.append(f"Description: {command.description}")
        if command.category is not None:
            lines.append(f"Category: {command.category_name}")

        if command.args:
            lines.extend(["", "Arguments:"])
            for arg in command.args:
                entry = f"  --{arg.name} ({arg.type.value})"
                if arg.required:
                    entry += " [required]"
                if arg.default is not None:
                    entry += f" [default: {arg.default}]"
                if arg.description:
                    entry += f" - {arg.description}"
                lines.append(entry)

        if command.examples:
            lines.extend(["", "Examples:"])
            lines.extend(f"  {example}" for example in command.examples)

        return "\n".join(lines)

    def _group_by_category(self) -> dict[str, list[Command]]:
        categories: dict[str, list[Command]] = {}
        for command in self._commands.values():
            categories.setdefault(command.category_name, []).append(command)

        for commands in categories.values():
            commands.sort(key=lambda cmd: cmd.name)

        return categories
