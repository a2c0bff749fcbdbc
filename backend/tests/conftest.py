"""Pytest configuration and fixtures for the capability engine."""
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from textgate.auth.jwt import jwt_auth
from textgate.main import app
from textgate.services.analysis_service import AnalysisService
from textgate.services.capability_gate import CapabilityGate
from textgate.services.plan_catalog import PlanCatalog
from textgate.services.rate_limiter import InMemoryRateLimitStore, RateLimiter
from textgate.services.subscription_reader import InMemorySubscriptionReader
from textgate.services.usage_ledger import UsageLedger
from textgate.services.usage_store import InMemoryUsageStore


@pytest.fixture(scope="function")
def usage_store() -> InMemoryUsageStore:
    """
    Empty in-memory usage store.

    Returns:
        InMemoryUsageStore: Store isolated to one test
    """
    return InMemoryUsageStore()


@pytest.fixture(scope="function")
def rate_limit_store() -> InMemoryRateLimitStore:
    """Empty in-memory rate limit counters."""
    return InMemoryRateLimitStore()


@pytest.fixture(scope="function")
def ledger(usage_store: InMemoryUsageStore) -> UsageLedger:
    """Usage ledger over the in-memory store."""
    return UsageLedger(usage_store)


@pytest.fixture(scope="function")
def subscriptions() -> InMemorySubscriptionReader:
    """
    Subscription reader with no subscriptions.

    Tests register plans with ``subscriptions.set(user_id, plan_type)``.
    """
    return InMemorySubscriptionReader()


@pytest.fixture(scope="function")
def catalog() -> PlanCatalog:
    """Default plan catalog."""
    return PlanCatalog()


@pytest.fixture(scope="function")
def gate(catalog: PlanCatalog) -> CapabilityGate:
    """Capability gate over the default catalog."""
    return CapabilityGate(catalog)


@pytest.fixture(scope="function")
def service(
    ledger: UsageLedger,
    subscriptions: InMemorySubscriptionReader,
    gate: CapabilityGate,
    rate_limit_store: InMemoryRateLimitStore,
) -> AnalysisService:
    """Analysis service wired to in-memory backends with the default rate limits."""
    return AnalysisService(
        ledger=ledger,
        subscriptions=subscriptions,
        gate=gate,
        rate_limiter=RateLimiter(rate_limit_store),
    )


@pytest.fixture(scope="function")
def client(
    usage_store: InMemoryUsageStore,
    subscriptions: InMemorySubscriptionReader,
    rate_limit_store: InMemoryRateLimitStore,
) -> Generator[TestClient, None, None]:
    """
    Create a FastAPI test client backed by in-memory stores and reader.

    Returns:
        TestClient: Synchronous test client for FastAPI
    """
    from textgate.api.deps import get_rate_limit_store, get_subscription_reader, get_usage_store

    app.dependency_overrides[get_usage_store] = lambda: usage_store
    app.dependency_overrides[get_subscription_reader] = lambda: subscriptions
    app.dependency_overrides[get_rate_limit_store] = lambda: rate_limit_store

    with TestClient(app) as test_client:
        yield test_client

    # Clean up
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def auth_headers() -> Callable[[str], dict[str, str]]:
    """
    Build bearer headers for a user.

    Returns:
        Callable: ``auth_headers(user_id)`` -> Authorization header dict
    """

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {jwt_auth.create_access_token(user_id)}"}

    return _headers
