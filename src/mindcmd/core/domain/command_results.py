"""
Command Results Domain Model

This module defines the single value every dispatch path hands back to its
caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mindcmd.core.domain.model_bases import InternalDTO


@dataclass
class CommandResult(InternalDTO):
    """
    Result of a command execution.

    ``message`` carries user-facing text for successful runs and ``error``
    the reason for a failure. ``name`` is filled in by the dispatcher with the
    resolved command name when one is known.
    """

    success: bool
    message: str | None = None
    error: str | None = None
    data: Any = None
    name: str = ""

    @classmethod
    def ok(cls, message: str | None = None, data: Any = None) -> CommandResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> CommandResult:
        return cls(success=False, error=error, data=data)

    def to_dict(self) -> dict[str, Any]:
        """Return the result as a plain mapping without unset fields."""
        result: dict[str, Any] = {"success": self.success}
        if self.message is not None:
            result["message"] = self.message
        if self.error is not None:
            result["error"] = self.error
        if self.data is not None:
            result["data"] = self.data
        if self.name:
            result["name"] = self.name
        return result
