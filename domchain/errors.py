"""
Exception types for domchain.

Only genuine argument and collaborator failures are exceptions. Empty
results ("nothing matched") are returned as ``[]``, ``None`` or ``False``.
"""

from __future__ import annotations


class DomChainError(Exception):
    """Base class for all domchain errors."""

    pass


class InvalidArgumentError(DomChainError, ValueError):
    """An argument given to a chain or step is not acceptable."""

    pass


class CDPEvaluationError(DomChainError):
    """JavaScript evaluated through CDP raised an exception."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(DomChainError):
    """Configuration loading or parsing error."""

    pass


__all__ = [
    "DomChainError",
    "InvalidArgumentError",
    "CDPEvaluationError",
    "ConfigurationError",
]
