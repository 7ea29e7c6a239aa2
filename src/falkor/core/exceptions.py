"""
Falkor Exception Hierarchy

Defines the exceptions raised and handled inside the test case engine.
"""

from typing import Any, Dict, Optional


class FalkorException(Exception):
    """Base exception for all Falkor errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ConfigurationError(FalkorException):
    """Usage errors, e.g. running a test case without an asserter."""

    pass


class NetworkError(FalkorException):
    """Request could not be sent or the response could not be read."""

    pass


class SchemaError(FalkorException):
    """Schema file could not be read, parsed or normalized."""

    pass


class ChainAbortedError(FalkorException):
    """
    A failure has already been recorded on the asserter and the rest of the
    chain must not run.
    """

    pass
