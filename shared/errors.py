"""
Shared error handling for the Token Gateway.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class TokenGatewayException(Exception):
    """Base exception for Token Gateway services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class UpstreamError(TokenGatewayException):
    """Transport failure or non-success status from an upstream provider."""

    def __init__(
        self,
        service: str,
        message: str = "Upstream request failed",
        status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.service = service
        self.status = status
        payload = dict(details or {})
        payload.setdefault("service", service)
        payload.setdefault("status", status)
        super().__init__("UPSTREAM_ERROR", f"{service}: {message}", payload)


class EmptyResultError(TokenGatewayException):
    """An upstream query returned no data points."""

    def __init__(
        self,
        message: str = "No data available for the specified parameters",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__("EMPTY_RESULT", message, details)


class TransformError(TokenGatewayException):
    """Upstream payload did not have the expected shape."""

    def __init__(self, field: str, message: str = "Unexpected upstream payload", details: Optional[Dict[str, Any]] = None):
        payload = dict(details or {})
        payload.setdefault("field", field)
        super().__init__("TRANSFORM_ERROR", f"{field}: {message}", payload)


class FieldResolutionError(TokenGatewayException):
    """Field-scoped failure surfaced to the query layer."""

    def __init__(
        self,
        field: str,
        message: str,
        cause_code: str,
        arguments: Optional[Dict[str, Any]] = None,
    ):
        self.field = field
        self.cause_code = cause_code
        self.arguments = dict(arguments or {})
        super().__init__(
            "FIELD_RESOLUTION_ERROR",
            message,
            {"field": field, "cause": cause_code, "arguments": self.arguments},
        )
