"""
Falkor Core Data Models

Defines the request/response structures handed to evaluators and the test
case execution states.
"""

from datetime import datetime, UTC
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, ConfigDict


class TestState(str, Enum):
    """Execution states of a test case."""

    __test__ = False

    IDLE = "idle"
    SENT = "sent"
    BUFFERING = "buffering"
    EVALUATING = "evaluating"
    DONE = "done"


class HTTPRequest(BaseModel):
    """HTTP request data model."""

    method: str = Field(description="HTTP method")
    url: str = Field(description="Resolved request URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="HTTP headers")
    body: Optional[bytes] = Field(default=None, description="Request body")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Request timestamp"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        # Any verb is allowed, only the case is normalized.
        return v.upper()


class HTTPResponse(BaseModel):
    """HTTP response data model."""

    url: str = Field(description="URL the response was received from")
    status_code: int = Field(description="HTTP status code")
    headers: Dict[str, str] = Field(default_factory=dict, description="HTTP headers")
    body: Optional[bytes] = Field(default=None, description="Response body")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Response timestamp"
    )
    duration_ms: int = Field(default=0, description="Response time in milliseconds")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("status_code")
    @classmethod
    def validate_status_code(cls, v: int) -> int:
        # Any three digit code, not only the registered ones.
        if not (100 <= v <= 999):
            raise ValueError(f"Invalid HTTP status code: {v}")
        return v

    @property
    def text(self) -> str:
        """UTF-8 decoded body, empty string when there is no body."""
        if not self.body:
            return ""
        return self.body.decode("utf-8", errors="replace")

    def get_header(self, name: str) -> Optional[str]:
        """
        Look up a response header, ignoring case.

        Args:
            name: Header name

        Returns:
            The header value or None when the header was not received
        """
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None
