"""
Keyboard shortcut to command mapping.

Shortcuts are written as ``+``-joined combos such as ``ctrl+shift+z``. Named
keys (``arrowup``, ``f2``, ``enter``) are case-insensitive; single character
keys keep their case so ``o`` and ``O`` stay distinct.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from mindcmd.constants import CommandCategory
from mindcmd.core.domain.model_bases import InternalDTO
from mindcmd.core.domain.parsed_command import ArgsMap

MODIFIERS = frozenset({"ctrl", "shift", "alt", "meta"})
_MODIFIER_ORDER = ("ctrl", "shift", "alt", "meta")


def _normalize_key(key: str) -> str:
    return key if len(key) == 1 else key.lower()


def parse_key_combo(combo: str) -> tuple[str, frozenset[str]]:
    """
    Split ``combo`` into its key and modifier set.

    Raises:
        ValueError: For an empty combo or an unknown modifier.
    """
    if not combo:
        raise ValueError("Key combination must not be empty")
    if combo == "+":
        return "+", frozenset()
    if combo.endswith("++"):
        head, key = combo[:-2], "+"
        parts = head.split("+") if head else []
    else:
        *parts, key = combo.split("+")

    if not key:
        raise ValueError(f"Key combination '{combo}' has no key")

    modifiers = {part.lower() for part in parts if part}
    unknown = modifiers - MODIFIERS
    if unknown:
        raise ValueError(f"Unknown modifier(s) in '{combo}': {', '.join(sorted(unknown))}")

    return _normalize_key(key), frozenset(modifiers)


@dataclass(frozen=True)
class ShortcutDefinition(InternalDTO):
    key: str
    command: str
    modifiers: frozenset[str] = frozenset()
    args: ArgsMap = field(default_factory=dict)
    description: str | None = None
    category: CommandCategory = CommandCategory.UTILITY

    @classmethod
    def from_combo(cls, combo: str, command: str, **kwargs) -> ShortcutDefinition:
        key, modifiers = parse_key_combo(combo)
        return cls(key=key, command=command, modifiers=modifiers, **kwargs)

    @property
    def is_vim(self) -> bool:
        return self.category is CommandCategory.VIM

    def display(self) -> str:
        parts = [mod.capitalize() for mod in _MODIFIER_ORDER if mod in self.modifiers]
        parts.append(self.key)
        return "+".join(parts)


def _shortcut(
    combo: str, command: str, category: CommandCategory, description: str, **kwargs
) -> ShortcutDefinition:
    return ShortcutDefinition.from_combo(
        combo, command, category=category, description=description, **kwargs
    )


_VIM = CommandCategory.VIM
_NAV = CommandCategory.NAVIGATION
_EDIT = CommandCategory.EDITING
_APP = CommandCategory.APPLICATION
_UI = CommandCategory.UI

DEFAULT_SHORTCUTS: tuple[ShortcutDefinition, ...] = (
    _shortcut("h", "h", _VIM, "Navigate left"),
    _shortcut("j", "j", _VIM, "Navigate down"),
    _shortcut("k", "k", _VIM, "Navigate up"),
    _shortcut("l", "l", _VIM, "Navigate right"),
    _shortcut("i", "i", _VIM, "Insert mode (cursor at start)"),
    _shortcut("a", "a", _VIM, "Append mode (cursor at end)"),
    _shortcut("o", "o", _VIM, "Open new child node"),
    _shortcut("m", "m", _VIM, "Convert markdown node"),
    _shortcut("arrowup", "arrow-navigate", _NAV, "Navigate up", args={"direction": "up"}),
    _shortcut("arrowdown", "arrow-navigate", _NAV, "Navigate down", args={"direction": "down"}),
    _shortcut("arrowleft", "arrow-navigate", _NAV, "Navigate left", args={"direction": "left"}),
    _shortcut("arrowright", "arrow-navigate", _NAV, "Navigate right", args={"direction": "right"}),
    _shortcut("space", "start-edit", _EDIT, "Start editing (Space)"),
    _shortcut("f2", "start-edit-end", _EDIT, "Start editing (F2)"),
    _shortcut("tab", "add-child", _EDIT, "Add child node"),
    _shortcut("enter", "add-sibling", _EDIT, "Add sibling node"),
    _shortcut("delete", "delete", _EDIT, "Delete node"),
    _shortcut("backspace", "delete", _EDIT, "Delete node"),
    _shortcut("ctrl+z", "undo", _APP, "Undo (Ctrl+Z)"),
    _shortcut("ctrl+shift+z", "redo", _APP, "Redo (Ctrl+Shift+Z)"),
    _shortcut("ctrl+y", "redo", _APP, "Redo (Ctrl+Y)"),
    _shortcut("ctrl+c", "copy", _APP, "Copy (Ctrl+C)"),
    _shortcut("ctrl+v", "paste", _APP, "Paste (Ctrl+V)"),
    _shortcut("ctrl+m", "toggle-markdown-panel", _UI, "Toggle Markdown panel (Ctrl+M)"),
    _shortcut("f1", "help", _UI, "Toggle help panel"),
    _shortcut("escape", "close-panels", _UI, "Close all panels"),
)


class ShortcutMap:
    """Ordered collection of shortcut definitions; the first match wins."""

    def __init__(self, definitions: Iterable[ShortcutDefinition] = DEFAULT_SHORTCUTS) -> None:
        self._definitions = tuple(definitions)

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def match(self, combo: str) -> ShortcutDefinition | None:
        key, modifiers = parse_key_combo(combo)
        return self.match_key(key, modifiers)

    def match_key(
        self, key: str, modifiers: Iterable[str] = ()
    ) -> ShortcutDefinition | None:
        wanted_key = _normalize_key(key)
        wanted_mods = frozenset(mod.lower() for mod in modifiers)
        for definition in self._definitions:
            if definition.key == wanted_key and definition.modifiers == wanted_mods:
                return definition
        return None

    def by_category(self, category: CommandCategory | str) -> list[ShortcutDefinition]:
        wanted = CommandCategory(category)
        return [d for d in self._definitions if d.category is wanted]

    def help_text(self) -> str:
        lines = ["Keyboard Shortcuts:", ""]
        for category in (_VIM, _NAV, _EDIT, _APP, _UI):
            definitions = self.by_category(category)
            if not definitions:
                continue
            lines.append(f"{category.value.upper()}:")
            for definition in definitions:
                lines.append(
                    f"  {definition.display()} - {definition.description or definition.command}"
                )
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"
