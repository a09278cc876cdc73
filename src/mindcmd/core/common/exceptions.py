"""
Common exception classes for the command engine.

This module defines custom exception classes used throughout the package.
Library code raises these; the dispatcher converts them into failed
``CommandResult`` values at its boundary.
"""

from __future__ import annotations

from typing import Any


class MindCmdError(Exception):
    """Base exception class for all command engine errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        **kwargs: Any,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        # Extra attributes are exposed on the instance and in to_dict()
        for key, value in (kwargs or {}).items():
            setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        error_dict: dict[str, Any] = {
            "message": self.message,
            "type": self.__class__.__name__,
            "details": self.details,
        }

        for attr_name in dir(self):
            if (
                not attr_name.startswith("_")
                and attr_name not in ["message", "details", "args"]
                and not callable(getattr(self, attr_name))
            ):
                error_dict[attr_name] = getattr(self, attr_name)

        return {"error": error_dict}


class ParseError(MindCmdError):
    """Raised when a command line cannot be tokenized or parsed."""

    def __init__(
        self, message: str = "Parse error", details: dict | None = None, **kwargs
    ):
        super().__init__(message, details, **kwargs)


class CommandRegistrationError(MindCmdError):
    """Raised when a command cannot be added to a registry."""

    def __init__(
        self,
        message: str = "Command registration failed",
        command_name: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)
        self.command_name = command_name


class KeySequenceError(MindCmdError):
    """Raised when a key pattern table is malformed."""

    def __init__(
        self,
        message: str = "Invalid key sequence table",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)


class ConfigurationError(MindCmdError):
    """Raised when there's a configuration issue."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)


class ArgumentValidationError(MindCmdError):
    """Raised when a single argument value does not match its declared type."""

    def __init__(
        self,
        message: str = "Invalid argument",
        argument: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, **kwargs)
        self.argument = argument
