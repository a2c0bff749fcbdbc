"""FastAPI application entry point."""
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sqlalchemy.exc import SQLAlchemyError

from textgate import __version__
from textgate.api.v1 import analysis, health, plans, usage
from textgate.config import settings
from textgate.exceptions import CapabilityError, InvalidInputError, PersistenceError, RateLimitedError
from textgate.middleware.logging import LoggingMiddleware, request_id_for, setup_logging
from textgate.middleware.metrics import MetricsMiddleware
from textgate.schemas.error import REMEDIATION_HINTS, ErrorCode, ErrorDetail, ErrorResponse

# Setup structured logging
setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info("application_starting", env=settings.app_env, storage_backend=settings.storage_backend)
    yield
    logger.info("application_shutting_down")


app = FastAPI(
    title="Text Analytics Capability Engine",
    description="Keyword extraction, sentiment analysis and summarization gated by subscription plan",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)

# Mount Prometheus metrics endpoint
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[list[ErrorDetail]] = None,
    remediation: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """Render an ErrorResponse body."""
    body = ErrorResponse(
        error=error,
        message=message,
        details=details,
        remediation=remediation,
        request_id=request_id_for(request),
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


@app.exception_handler(CapabilityError)
async def capability_exception_handler(request: Request, exc: CapabilityError) -> JSONResponse:
    """
    Handle engine errors with structured response.

    Status and code come from the exception class: InvalidInput 400,
    NotEntitled 403, CapacityExceeded and RateLimited 429, PersistenceError 503,
    InternalError 500.
    """
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "capability_error",
        path=request.url.path,
        method=request.method,
        error_type=exc.error_type,
        code=exc.code,
        status_code=exc.status_code,
    )

    field = exc.field if isinstance(exc, InvalidInputError) else None
    headers = None
    if isinstance(exc, PersistenceError):
        headers = {"Retry-After": "30"}
    elif isinstance(exc, RateLimitedError):
        headers = {
            "X-RateLimit-Limit": str(exc.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(exc.reset_at),
            "Retry-After": str(exc.retry_after),
        }

    return error_response(
        request,
        status_code=exc.status_code,
        error=exc.error_type,
        message=exc.message,
        details=[ErrorDetail(code=exc.code, message=exc.message, field=field)],
        remediation=REMEDIATION_HINTS.get(exc.code),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors with structured response.

    Returns 422 with field-level validation errors.
    """
    code_mapping = {
        "missing": ErrorCode.MISSING_REQUIRED_FIELD,
        "literal_error": ErrorCode.INVALID_ENUM_VALUE,
        "enum": ErrorCode.INVALID_ENUM_VALUE,
        "greater_than_equal": ErrorCode.VALUE_TOO_SMALL,
        "less_than_equal": ErrorCode.VALUE_TOO_LARGE,
    }

    details = []
    for error in exc.errors():
        details.append(
            ErrorDetail(
                code=code_mapping.get(error["type"], ErrorCode.INVALID_INPUT),
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
                value=error.get("input"),
            )
        )

    logger.warning(
        "validation_error",
        path=request.url.path,
        method=request.method,
        error_count=len(details),
    )

    return error_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        error="ValidationError",
        message="Request validation failed",
        details=details,
        remediation=REMEDIATION_HINTS[ErrorCode.INVALID_INPUT],
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle database errors that escaped the stores.

    Returns 503 Service Unavailable.
    """
    logger.error(
        "database_error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error_message=str(exc),
    )

    # Don't expose internal database details in production
    error_message = "Database temporarily unavailable" if settings.app_env == "production" else str(exc)

    return error_response(
        request,
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        error="DatabaseError",
        message="A database error occurred",
        details=[ErrorDetail(code=ErrorCode.DATABASE_ERROR, message=error_message)],
        remediation=REMEDIATION_HINTS.get(ErrorCode.DATABASE_ERROR),
        headers={"Retry-After": "30"},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all other uncaught exceptions.

    Logs the stack trace and returns a safe message.
    """
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        stack_trace=traceback.format_exc(),
    )

    return error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="InternalServerError",
        message="An unexpected error occurred",
        details=[
            ErrorDetail(
                code=ErrorCode.INTERNAL_ERROR,
                message=str(exc) if settings.debug else "Internal server error",
            )
        ],
        remediation="Please contact support with the request ID",
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "Text Analytics Capability Engine",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
    }


app.include_router(health.router)
app.include_router(analysis.dashboard_router, prefix="/v1")
app.include_router(analysis.api_router, prefix="/v1")
app.include_router(usage.router, prefix="/v1")
app.include_router(plans.router, prefix="/v1")
