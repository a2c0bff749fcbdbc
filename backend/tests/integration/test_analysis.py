"""Integration tests for the text analytics endpoints."""
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from textgate.main import app
from textgate.services.rate_limiter import InMemoryRateLimitStore, RateLimiter
from textgate.services.subscription_reader import InMemorySubscriptionReader
from utils.factories import SubscriptionFactory, TextFactory

HeaderFactory = Callable[[str], dict[str, str]]


def _subscribe(subscriptions: InMemorySubscriptionReader, plan_type: str) -> str:
    data = SubscriptionFactory.create({"plan_type": plan_type})
    subscriptions.set(data["user_id"], data["plan_type"], data["status"])
    return data["user_id"]


def test_keywords_endpoint(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test keyword extraction on the dashboard channel."""
    user_id = _subscribe(subscriptions, "basic")

    response = client.post(
        "/v1/analysis/keywords",
        json={"text": "This is good good good"},
        headers=auth_headers(user_id),
    )

    assert response.status_code == 200
    assert response.json() == {"keywords": ["good"]}


def test_keywords_accepts_camel_case_limit(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test that maxKeywords is accepted alongside max_keywords."""
    user_id = _subscribe(subscriptions, "basic")

    response = client.post(
        "/v1/analysis/keywords",
        json={"text": "alpha bravo charlie delta", "maxKeywords": 2},
        headers=auth_headers(user_id),
    )

    assert response.status_code == 200
    assert response.json()["keywords"] == ["alpha", "bravo"]


def test_sentiment_endpoint(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test sentiment analysis returns label and score."""
    user_id = _subscribe(subscriptions, "basic")

    response = client.post(
        "/v1/analysis/sentiment",
        json={"text": "I love this! It is amazing and wonderful."},
        headers=auth_headers(user_id),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["label"] == "positive"
    assert body["score"] > 0.1


def test_summarize_endpoint(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test summarization with the optional validation-only parameters."""
    user_id = _subscribe(subscriptions, "professional")

    response = client.post(
        "/v1/analysis/summarize",
        json={
            "text": (
                "Python is a popular language. Python supports many paradigms. Cats sleep. "
                "Python has a large community of Python users. Dogs bark."
            ),
            "maxLength": 120,
            "type": "extractive",
            "language": "en",
        },
        headers=auth_headers(user_id),
    )

    assert response.status_code == 200
    assert response.json()["summary"] == (
        "Python is a popular language. Python supports many paradigms. "
        "Python has a large community of Python users."
    )


def test_not_entitled_returns_403(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test that a plan without the capability gets a structured 403 naming the upgrade."""
    user_id = _subscribe(subscriptions, "basic")

    response = client.post(
        "/v1/analysis/summarize",
        json=TextFactory.create(),
        headers=auth_headers(user_id),
    )

    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "NotEntitled"
    assert "professional" in body["message"]
    assert body["details"][0]["code"] == "not_entitled"
    assert body["remediation"]


@pytest.mark.parametrize("path", ["/v1/api/keywords", "/v1/api/sentiment", "/v1/api/summarize"])
def test_api_channel_needs_api_access(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
    path: str,
) -> None:
    """Test that programmatic routes are refused below professional and allowed from it."""
    basic_user = _subscribe(subscriptions, "basic")
    professional_user = _subscribe(subscriptions, "professional")
    body = TextFactory.create()

    assert client.post(path, json=body, headers=auth_headers(basic_user)).status_code == 403
    assert client.post(path, json=body, headers=auth_headers(professional_user)).status_code == 200


def test_empty_text_returns_400(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test that blank text is invalid input, not a schema error."""
    user_id = _subscribe(subscriptions, "professional")

    response = client.post("/v1/analysis/sentiment", json={"text": "   "}, headers=auth_headers(user_id))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "InvalidInput"
    assert body["details"][0]["code"] == "empty_text"
    assert body["details"][0]["field"] == "text"


def test_text_over_plan_length_returns_400(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test that the plan's max content length is enforced."""
    user_id = _subscribe(subscriptions, "basic")

    response = client.post(
        "/v1/analysis/keywords",
        json={"text": "word " * 1000},
        headers=auth_headers(user_id),
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["code"] == "text_too_long"


def test_analysis_is_metered(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test that successful requests show up in current usage."""
    user_id = _subscribe(subscriptions, "professional")
    headers = auth_headers(user_id)

    for _ in range(3):
        client.post("/v1/analysis/keywords", json=TextFactory.create(), headers=headers)
    client.post("/v1/api/sentiment", json=TextFactory.create(), headers=headers)

    usage = client.get("/v1/usage/current", headers=headers).json()["usage"]
    assert usage["keyword_extraction_used"] == 3
    assert usage["sentiment_analysis_used"] == 1
    # first use creates the row, each later use also counts an api call
    assert usage["api_calls"] == 3


def test_over_length_text_outside_plan_returns_403(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    auth_headers: HeaderFactory,
) -> None:
    """Test that entitlement is reported before the plan's length limit."""
    user_id = _subscribe(subscriptions, "free")

    response = client.post(
        "/v1/analysis/summarize",
        json={"text": "Sentence. " * 500},
        headers=auth_headers(user_id),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "NotEntitled"
    assert "professional" in response.json()["message"]


def test_rate_limit_returns_429(
    client: TestClient,
    subscriptions: InMemorySubscriptionReader,
    rate_limit_store: InMemoryRateLimitStore,
    auth_headers: HeaderFactory,
) -> None:
    """Test that the basic plan's thirty-first request in a minute gets a 429 with retry headers."""
    from textgate.api.deps import get_rate_limiter

    app.dependency_overrides[get_rate_limiter] = lambda: RateLimiter(rate_limit_store, clock=lambda: 1_700_000_000.0)
    user_id = _subscribe(subscriptions, "basic")
    headers = auth_headers(user_id)
    payload = {"text": "What a great and wonderful day."}

    for _ in range(30):
        assert client.post("/v1/analysis/sentiment", json=payload, headers=headers).status_code == 200

    response = client.post("/v1/analysis/sentiment", json=payload, headers=headers)

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "40"
    assert response.headers["X-RateLimit-Limit"] == "30"
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert response.headers["X-RateLimit-Reset"] == "1700000040"
    body = response.json()
    assert body["error"] == "RateLimited"
    assert body["details"][0]["code"] == "rate_limited"

    usage = client.get("/v1/usage/current", headers=headers).json()["usage"]
    assert usage["sentiment_analysis_used"] == 30
