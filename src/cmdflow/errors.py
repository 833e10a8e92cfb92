"""Application-level exception types for cmdflow."""

from __future__ import annotations


class CmdflowError(Exception):
    """Base exception for cmdflow."""


class PromptCancelledError(CmdflowError):
    """Raised when the user dismisses a prompt before a run starts."""

    def __init__(self, token: str) -> None:
        super().__init__(f"prompt cancelled: {token}")
        self.token = token


class CommandNotFoundError(CmdflowError, KeyError):
    """Raised when a command name is not in the effective set."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"command named: {self.name} not found"


class PersistenceError(CmdflowError):
    """Raised when command definitions cannot be loaded or saved."""


class StatusDecodeError(CmdflowError, ValueError):
    """Raised when a string does not name a debugger status."""


class VariableKindError(CmdflowError, ValueError):
    """Raised when a variable's kind does not fit its content."""
