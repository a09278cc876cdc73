from enum import Enum

DEFAULT_SUGGESTION_LIMIT: int = 10
DEFAULT_MAX_EDIT_DISTANCE: int = 2
DEFAULT_REPORTED_SUGGESTIONS: int = 3

DOT_REPEAT_KEY: str = "."
ESCAPE_KEY: str = "escape"
NUMBERED_LIST_KEY: str = "m"
NUMBERED_LIST_COMMAND: str = "convert-ordered"
NUMBERED_LIST_ARGUMENT: str = "number"

# Reserved argument through which countable commands receive a numeric prefix.
COUNT_ARGUMENT: str = "count"

GUARD_FAILED_MESSAGE: str = "Command guard failed: preconditions not met"
UNKNOWN_EXECUTION_ERROR: str = "Unknown error executing command"


class ArgType(str, Enum):
    """Declared argument types understood by the validator."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NODE_ID = "node-id"


class CommandCategory(str, Enum):
    """Categories used to group commands in help output."""

    NAVIGATION = "navigation"
    EDITING = "editing"
    STRUCTURE = "structure"
    VIM = "vim"
    UTILITY = "utility"
    UI = "ui"
    APPLICATION = "application"


# Key sequence -> key-command identifier. Every identifier equals its sequence
# in the default table; hosts may point several sequences at one identifier.
DEFAULT_KEY_PATTERNS: dict[str, str] = {
    seq: seq
    for seq in (
        # chords
        "zz", "zt", "za", "zo", "zc", "zR", "zM",
        "dd", "yy",
        "gg", "gt", "gT", "gv",
        "ciw",
        ">>", "<<",
        # single keys
        "r", "h", "j", "k", "l",
        "i", "a", "A", "I", "o", "O", "X",
        "p", "P", "m", "M", "G", "t", "T", "0",
        "/", "n", "N", "s", "x", "u",
        "S", "B", "~",
        ".",
    )
}

# Key-command identifier -> textual command name resolved through the registry.
DEFAULT_KEY_COMMANDS: dict[str, str] = {
    "zz": "center",
    "zt": "center-left",
    "dd": "cut",
    "yy": "copy",
    "za": "toggle",
    "zo": "expand",
    "zc": "collapse",
    "zR": "expand-all",
    "zM": "collapse-all",
    "gg": "select-root",
    "gt": "next-map",
    "gT": "prev-map",
    "gv": "show-knowledge-graph",
    "ctrl-u": "scroll-up",
    "ctrl-d": "scroll-down",
    "r": "redo",
    "ciw": "edit",
    "i": "append",
    "a": "add-child",
    "A": "append-end",
    "I": "insert",
    "o": "open",
    "O": "open-above",
    "X": "insert-checkbox-child",
    "h": "left",
    "j": "down",
    "k": "up",
    "l": "right",
    "p": "paste-sibling-after",
    "P": "paste-sibling-before",
    "tab": "add-child",
    "enter": "add-sibling",
    "m": "convert",
    "M": "select-center",
    "G": "select-bottom",
    "0": "select-current-root",
    "/": "search",
    "n": "next-search-result",
    "N": "prev-search-result",
    "s": "jumpy",
    "delete": "delete",
    "backspace": "delete",
    "x": "toggle-checkbox",
    "u": "undo",
    ">>": "move-as-child-of-sibling",
    "<<": "move-as-next-sibling-of-parent",
    "S": "toggle-strikethrough",
    "B": "toggle-bold",
    "~": "toggle-italic",
}
