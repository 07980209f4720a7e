"""
Shared error handling for the Request Gatekeeper.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class GatekeeperException(Exception):
    """Base exception for gatekeeper components."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class GatingConfigurationError(GatekeeperException):
    """Invalid gating pipeline wiring."""

    status_code = 500

    def __init__(self, message: str = "Invalid gating configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("GATING_CONFIGURATION_ERROR", message, details)


class GatingNotAppliedError(GatekeeperException):
    """A handler asked for a sanitized view on a request the pipeline never saw."""

    status_code = 500

    def __init__(self, message: str = "Request did not pass through the gating pipeline", details: Optional[Dict[str, Any]] = None):
        super().__init__("GATING_NOT_APPLIED", message, details)
