"""FastAPI dependencies for authentication and service wiring."""
from typing import Optional

import jwt
import redis.asyncio as redis
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from textgate.analysis.summarizer import Summarizer
from textgate.auth.jwt import jwt_auth
from textgate.config import settings
from textgate.database import AsyncSessionLocal
from textgate.services.analysis_service import AnalysisService
from textgate.services.capability_gate import CapabilityGate
from textgate.services.plan_catalog import PlanCatalog
from textgate.services.rate_limiter import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitStoreProtocol,
    RedisRateLimitStore,
)
from textgate.services.subscription_reader import (
    InMemorySubscriptionReader,
    SqlSubscriptionReader,
    SubscriptionReaderProtocol,
)
from textgate.services.usage_ledger import UsageLedger
from textgate.services.usage_store import InMemoryUsageStore, SqlUsageStore, UsageStoreProtocol

logger = structlog.get_logger(__name__)

# HTTP Bearer token security scheme. Missing credentials are handled below
# so that they answer 401 like any other authentication failure.
security = HTTPBearer(auto_error=False)

plan_catalog = PlanCatalog()

# Process-wide backends for storage_backend=memory
memory_usage_store = InMemoryUsageStore()
memory_subscription_reader = InMemorySubscriptionReader()
memory_rate_limit_store = InMemoryRateLimitStore()

# Connects lazily on first command
redis_client = redis.from_url(
    str(settings.redis_url),
    encoding="utf-8",
    decode_responses=True,
    socket_connect_timeout=5,
    socket_timeout=5,
)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Get current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token from request header

    Returns:
        dict: Decoded token claims, ``sub`` is the user id

    Raises:
        HTTPException: If token is invalid, expired, or missing
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials

    try:
        payload = jwt_auth.verify_access_token(token)
        logger.debug("user_authenticated", user_id=payload.get("sub"))
        return payload

    except jwt.ExpiredSignatureError:
        logger.warning("token_expired", token_preview=token[:20] + "...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        logger.warning("invalid_token", error=str(e), token_preview=token[:20] + "...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user_id(current_user: dict = Depends(get_current_user)) -> str:
    """User id of the authenticated caller."""
    return str(current_user["sub"])


def get_plan_catalog() -> PlanCatalog:
    """Plan catalog shared by every request."""
    return plan_catalog


def get_usage_store() -> UsageStoreProtocol:
    """Usage store for the configured backend."""
    if settings.storage_backend == "memory":
        return memory_usage_store
    return SqlUsageStore(AsyncSessionLocal)


def get_subscription_reader() -> SubscriptionReaderProtocol:
    """Subscription source for the configured backend."""
    if settings.storage_backend == "memory":
        return memory_subscription_reader
    return SqlSubscriptionReader(AsyncSessionLocal)


def get_rate_limit_store() -> RateLimitStoreProtocol:
    """Rate limit counters for the configured backend."""
    if settings.storage_backend == "memory":
        return memory_rate_limit_store
    return RedisRateLimitStore(redis_client)


def get_rate_limiter(
    store: RateLimitStoreProtocol = Depends(get_rate_limit_store),
) -> Optional[RateLimiter]:
    """Per-plan throttle, None when rate limiting is disabled."""
    if not settings.rate_limit_enabled:
        return None
    return RateLimiter(store)


def get_usage_ledger(store: UsageStoreProtocol = Depends(get_usage_store)) -> UsageLedger:
    """Usage ledger over the configured store."""
    return UsageLedger(store)


def get_capability_gate(catalog: PlanCatalog = Depends(get_plan_catalog)) -> CapabilityGate:
    """Capability gate over the plan catalog."""
    return CapabilityGate(catalog)


def get_analysis_service(
    ledger: UsageLedger = Depends(get_usage_ledger),
    subscriptions: SubscriptionReaderProtocol = Depends(get_subscription_reader),
    gate: CapabilityGate = Depends(get_capability_gate),
    rate_limiter: Optional[RateLimiter] = Depends(get_rate_limiter),
) -> AnalysisService:
    """Request orchestration service."""
    return AnalysisService(
        ledger=ledger,
        subscriptions=subscriptions,
        gate=gate,
        default_max_keywords=settings.default_max_keywords,
        summarizer=Summarizer(sentence_count=settings.summary_sentence_count),
        rate_limiter=rate_limiter,
    )
