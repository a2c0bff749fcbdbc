"""Structured error response schemas."""
from datetime import datetime, timezone
from typing import Any
from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    field: str | None = Field(default=None, description="Field that caused the error (for validation errors)")
    value: Any | None = Field(default=None, description="Invalid value (for validation errors)")


class ErrorResponse(BaseModel):
    """Standard error response structure.

    This provides consistent error responses across the API with:
    - Machine-readable error codes
    - Human-readable messages
    - Remediation hints
    - Request tracing information
    """

    error: str = Field(..., description="Error type (e.g., 'InvalidInput', 'NotEntitled', 'CapacityExceeded')")
    message: str = Field(..., description="Primary error message")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Detailed error information (for validation errors)"
    )
    remediation: str | None = Field(default=None, description="Suggestion for fixing the error")
    request_id: str | None = Field(default=None, description="Request ID for tracing")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "NotEntitled",
                "message": "text_summarization is not available on the basic plan; upgrade to professional",
                "details": [
                    {
                        "code": "not_entitled",
                        "message": "text_summarization requires the professional plan",
                    }
                ],
                "remediation": "Upgrade your subscription to a plan that includes this capability.",
                "request_id": "req_1234567890",
                "timestamp": "2024-01-15T10:30:00Z",
            }
        }
    )


# Error codes enum for consistency
class ErrorCode:
    """Standard error codes used across the API."""

    # Validation errors (400/422)
    INVALID_INPUT = "invalid_input"
    EMPTY_TEXT = "empty_text"
    TEXT_TOO_LONG = "text_too_long"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    VALUE_TOO_SMALL = "value_too_small"
    VALUE_TOO_LARGE = "value_too_large"

    # Authorization errors (401/403)
    AUTHENTICATION_REQUIRED = "authentication_required"
    NOT_ENTITLED = "not_entitled"

    # Quota and throttling errors (429)
    CAPACITY_EXCEEDED = "capacity_exceeded"
    RATE_LIMITED = "rate_limited"

    # External service errors (503)
    PERSISTENCE_ERROR = "persistence_error"
    DATABASE_ERROR = "database_error"

    # Internal errors (500)
    INTERNAL_ERROR = "internal_error"


# Remediation hints for common errors
REMEDIATION_HINTS = {
    ErrorCode.INVALID_INPUT: "Check the request body against the API documentation at /docs",
    ErrorCode.EMPTY_TEXT: "Provide a non-empty text to analyze.",
    ErrorCode.TEXT_TOO_LONG: "Shorten the text or upgrade to a plan with a higher content length limit.",
    ErrorCode.NOT_ENTITLED: "Upgrade your subscription to a plan that includes this capability.",
    ErrorCode.CAPACITY_EXCEEDED: "Monthly quota reached. Wait for the next period or upgrade your plan.",
    ErrorCode.RATE_LIMITED: "Too many requests. Retry after the number of seconds in the Retry-After header.",
    ErrorCode.PERSISTENCE_ERROR: "Usage data is temporarily unavailable. Please try again in a few moments.",
    ErrorCode.DATABASE_ERROR: "Database temporarily unavailable. Please try again in a few moments.",
}
