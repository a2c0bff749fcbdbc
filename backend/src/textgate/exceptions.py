"""Error kinds raised by the capability engine.

Every kind maps to one HTTP status and one machine-readable code, so the API
layer renders them with a single exception handler.
"""
from typing import Optional

from textgate.schemas.error import ErrorCode


class CapabilityError(Exception):
    """Base class for errors surfaced to callers of the engine."""

    error_type = "CapabilityError"
    status_code = 500
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        """Initialize with a human-readable message."""
        self.message = message
        super().__init__(message)


class InvalidInputError(CapabilityError):
    """Missing, empty or out-of-range input. Raised before any processing."""

    error_type = "InvalidInput"
    status_code = 400
    code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, field: Optional[str] = None, code: Optional[str] = None) -> None:
        """Initialize with the offending field and an optional specific code."""
        self.field = field
        if code is not None:
            self.code = code
        super().__init__(message)


class NotEntitledError(CapabilityError):
    """The user's plan does not include the requested capability."""

    error_type = "NotEntitled"
    status_code = 403
    code = ErrorCode.NOT_ENTITLED

    def __init__(
        self,
        capability: str,
        plan_type: str,
        required_plan: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        """Initialize with the capability, the current plan and the plan that unlocks it."""
        if message is None:
            message = f"{capability} is not available on the {plan_type} plan"
            if required_plan is not None:
                message += f"; upgrade to {required_plan}"
        self.capability = capability
        self.plan_type = plan_type
        self.required_plan = required_plan
        super().__init__(message)


class CapacityExceededError(CapabilityError):
    """The monthly quota for the capability has been reached."""

    error_type = "CapacityExceeded"
    status_code = 429
    code = ErrorCode.CAPACITY_EXCEEDED

    def __init__(
        self,
        capability: str,
        limit: int,
        current_usage: int,
        message: Optional[str] = None,
    ) -> None:
        """Initialize with capability, limit, and current usage."""
        if message is None:
            message = f"Monthly limit reached for {capability}: {current_usage}/{limit}"
        self.capability = capability
        self.limit = limit
        self.current_usage = current_usage
        super().__init__(message)


class PersistenceError(CapabilityError):
    """The usage store could not be read or written."""

    error_type = "PersistenceError"
    status_code = 503
    code = ErrorCode.PERSISTENCE_ERROR


class InternalError(CapabilityError):
    """Unexpected failure while processing well-formed input."""

    error_type = "InternalError"
    status_code = 500
    code = ErrorCode.INTERNAL_ERROR


class RateLimitedError(CapabilityError):
    """Too many requests in the current minute or hour window of the plan."""

    error_type = "RateLimited"
    status_code = 429
    code = ErrorCode.RATE_LIMITED

    def __init__(self, limit: int, window: str, reset_at: int, retry_after: int) -> None:
        """Initialize with the exhausted window and when it resets."""
        self.limit = limit
        self.window = window
        self.reset_at = reset_at
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded: maximum {limit} requests per {window}")
