import logging
from pathlib import Path
from typing import Any

import pytest
import yaml
from mindcmd.constants import ArgType, CommandCategory
from mindcmd.core.commands.dispatcher import CommandDispatcher
from mindcmd.core.commands.registry import CommandRegistry
from mindcmd.core.domain.command_results import CommandResult
from mindcmd.core.domain.commands import ArgumentSpec, Command, command


class FakeEditor:
    """Minimal stand-in for a host editor that records what commands did."""

    def __init__(self) -> None:
        self.selected_node_id: str | None = "root"
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def record(self, name: str, args: dict[str, Any]) -> None:
        self.calls.append((name, dict(args)))


def _recording(name: str):
    def execute(context: FakeEditor, args: dict[str, Any]) -> CommandResult:
        context.record(name, args)
        return CommandResult.ok(message=f"{name} done")

    return execute


@pytest.fixture
def editor() -> FakeEditor:
    return FakeEditor()


@pytest.fixture
def sample_commands() -> list[Command]:
    return [
        command(
            "format",
            "Format the current node",
            _recording("format"),
            category=CommandCategory.EDITING,
        ),
        command(
            "add-child",
            "Add a child node",
            _recording("add-child"),
            aliases=("ac", "child"),
            category=CommandCategory.STRUCTURE,
            args=(ArgumentSpec(name="text", type=ArgType.STRING, default="New Node"),),
            repeatable=True,
        ),
        command(
            "down",
            "Move selection down",
            _recording("down"),
            category=CommandCategory.NAVIGATION,
            countable=True,
            args=(ArgumentSpec(name="count", type=ArgType.NUMBER, default=1),),
        ),
        command(
            "delete",
            "Delete the selected node",
            _recording("delete"),
            aliases=("del",),
            category=CommandCategory.EDITING,
            repeatable=True,
            countable=True,
        ),
        command(
            "convert-ordered",
            "Convert the node to an ordered list item",
            _recording("convert-ordered"),
            category=CommandCategory.EDITING,
            args=(ArgumentSpec(name="number", type=ArgType.NUMBER, required=True),),
        ),
    ]


@pytest.fixture
def registry(sample_commands: list[Command]) -> CommandRegistry:
    reg = CommandRegistry()
    reg.register_all(*sample_commands)
    return reg


@pytest.fixture
def dispatcher(registry: CommandRegistry) -> CommandDispatcher:
    return CommandDispatcher(
        registry,
        key_commands={"j": "down", "dd": "delete", "a": "add-child", "enter": "add-child"},
    )


@pytest.fixture
def temp_config_path(tmp_path: Path) -> Path:
    """Create a minimal valid YAML config file and return its path."""
    cfg = {
        "logging": {"level": "debug"},
        "keymap": {"commands": {"j": "move-down"}},
        "suggestions": {"limit": 5, "reported": 2},
    }
    p = tmp_path / "mindcmd.yaml"
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(cfg, f, sort_keys=False)
    return p


@pytest.fixture
def restore_root_logging():
    """Undo root logger changes made by ``configure_logging``."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
