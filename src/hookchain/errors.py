"""Exceptions raised by the filter chain machinery."""

from __future__ import annotations


class ChainError(Exception):
    """Base class for hookchain errors."""


class UsageError(ChainError):
    """Raised when the chain API is called out of protocol.

    Typical causes: calling a continuation outside of a running chain,
    calling it twice, or hooking an operation without a name.
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        if operation:
            message = f"{message} (operation {operation!r})"
        super().__init__(message)
        self.operation = operation


class OperationNotFound(ChainError, LookupError):
    """Raised by strict dispatch when the receiver has no such operation."""

    def __init__(self, receiver: str, operation: str) -> None:
        super().__init__(f"{receiver} has no operation {operation!r}")
        self.receiver = receiver
        self.operation = operation


class ConfigError(ChainError):
    """Raised when configuration or extension loading fails."""
