"""Unit tests for request orchestration: validate, gate, run, record."""
from typing import Optional

import pytest

from textgate.analysis.summarizer import Summarizer
from textgate.exceptions import (
    CapacityExceededError,
    InternalError,
    InvalidInputError,
    NotEntitledError,
    PersistenceError,
    RateLimitedError,
)
from textgate.schemas.plan import PlanType
from textgate.schemas.usage_record import UsageRecord
from textgate.services.analysis_service import AnalysisService
from textgate.services.rate_limiter import InMemoryRateLimitStore, RateLimiter, RateLimitWindow
from textgate.services.subscription_reader import InMemorySubscriptionReader
from textgate.services.usage_ledger import UsageLedger
from textgate.services.usage_store import InMemoryUsageStore
from textgate.types import AccessChannel, current_period_key
from utils.factories import TextFactory, UsageRecordFactory

USER_ID = "user-123"


class WriteFailingStore(InMemoryUsageStore):
    """Store that reads fine but cannot write."""

    async def increment(self, user_id: str, period_key: str, counter: str) -> UsageRecord:
        raise PersistenceError("disk full")


class BrokenPoolStore(InMemoryUsageStore):
    """Store whose writes fail with an error it does not translate."""

    async def increment(self, user_id: str, period_key: str, counter: str) -> UsageRecord:
        raise RuntimeError("pool exhausted")


class ReadFailingStore(InMemoryUsageStore):
    """Store that cannot be read."""

    async def get(self, user_id: str, period_key: str) -> Optional[UsageRecord]:
        raise PersistenceError("connection refused")


class ExplodingSummarizer(Summarizer):
    """Summarizer with a defect."""

    def summarize(self, text: str) -> str:
        raise RuntimeError("regex engine exploded")


async def _usage(usage_store: InMemoryUsageStore) -> Optional[UsageRecord]:
    return await usage_store.get(USER_ID, current_period_key())


@pytest.mark.asyncio
async def test_keywords_run_and_recorded(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test that an entitled request returns keywords and is metered once."""
    subscriptions.set(USER_ID, "basic")

    keywords = await service.extract_keywords(USER_ID, "This is good good good")

    assert keywords == ["good"]
    assert (await _usage(usage_store)).keyword_extraction_used == 1


@pytest.mark.asyncio
async def test_default_max_keywords_applies(
    ledger: UsageLedger,
    subscriptions: InMemorySubscriptionReader,
) -> None:
    """Test that the configured default caps the keyword count."""
    subscriptions.set(USER_ID, "basic")
    service = AnalysisService(ledger, subscriptions, default_max_keywords=2)

    keywords = await service.extract_keywords(USER_ID, "alpha bravo charlie delta echo")

    assert keywords == ["alpha", "bravo"]


@pytest.mark.asyncio
async def test_not_entitled_request_not_recorded(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test that a denied request raises NotEntitled and records nothing."""
    subscriptions.set(USER_ID, "free")

    with pytest.raises(NotEntitledError) as exc_info:
        await service.analyze_sentiment(USER_ID, "I love this")

    assert exc_info.value.required_plan == "basic"
    assert await _usage(usage_store) is None


@pytest.mark.asyncio
async def test_user_without_subscription_is_free(service: AnalysisService) -> None:
    """Test that a user with no subscription row gets free plan entitlements."""
    with pytest.raises(NotEntitledError):
        await service.summarize(USER_ID, "One. Two. Three. Four.")


@pytest.mark.asyncio
async def test_empty_text_rejected_before_gate(
    service: AnalysisService,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test that empty text is invalid input even for a plan without the capability."""
    with pytest.raises(InvalidInputError):
        await service.extract_keywords(USER_ID, "")

    assert await _usage(usage_store) is None


@pytest.mark.asyncio
async def test_text_longer_than_plan_allows_rejected(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
) -> None:
    """Test that the plan's max_content_length bounds the text."""
    subscriptions.set(USER_ID, "basic")

    with pytest.raises(InvalidInputError) as exc_info:
        await service.analyze_sentiment(USER_ID, "good " * 700)

    assert exc_info.value.code == "text_too_long"

    result = await service.analyze_sentiment(USER_ID, "good " * 500)
    assert result.label == "positive"


@pytest.mark.asyncio
async def test_api_channel_requires_api_access(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
) -> None:
    """Test that the programmatic channel is refused without api access."""
    subscriptions.set(USER_ID, "basic")

    with pytest.raises(NotEntitledError):
        await service.extract_keywords(USER_ID, "good good", channel=AccessChannel.API)

    subscriptions.set(USER_ID, "professional")
    assert await service.extract_keywords(USER_ID, "good good", channel=AccessChannel.API) == ["good"]


@pytest.mark.asyncio
async def test_summary_returned_and_recorded(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test summarization on a plan that includes it."""
    subscriptions.set(USER_ID, "professional")
    body = TextFactory.create()

    summary = await service.summarize(USER_ID, body["text"])

    assert summary
    assert (await _usage(usage_store)).text_summarization_used == 1


@pytest.mark.asyncio
async def test_content_generation_quota(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
) -> None:
    """Test that the free plan allows five generations per month, then refuses."""
    subscriptions.set(USER_ID, "free")

    remaining = []
    for _ in range(5):
        receipt = await service.record_content_generation(USER_ID)
        assert receipt.recorded
        remaining.append(receipt.content_remaining)

    assert remaining == [4, 3, 2, 1, 0]

    with pytest.raises(CapacityExceededError) as exc_info:
        await service.record_content_generation(USER_ID)

    assert exc_info.value.limit == 5
    assert exc_info.value.current_usage == 5


@pytest.mark.asyncio
async def test_content_generation_unlimited(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test that enterprise usage is metered but never capped."""
    subscriptions.set(USER_ID, "enterprise")
    usage_store.seed(UsageRecord(**UsageRecordFactory.create({"user_id": USER_ID, "content_generated": 5000})))

    receipt = await service.record_content_generation(USER_ID)

    assert receipt.usage.content_generated == 5001
    assert receipt.content_remaining is None


@pytest.mark.asyncio
async def test_recording_failure_does_not_block_result() -> None:
    """Test that a computed result is delivered when the ledger write fails."""
    subscriptions = InMemorySubscriptionReader()
    subscriptions.set(USER_ID, "basic")
    service = AnalysisService(UsageLedger(WriteFailingStore()), subscriptions)

    assert await service.extract_keywords(USER_ID, "This is good good good") == ["good"]

    receipt = await service.record_content_generation(USER_ID)
    assert not receipt.recorded
    assert receipt.usage.content_generated == 0


@pytest.mark.asyncio
async def test_usage_read_failure_fails_closed() -> None:
    """Test that the quota check aborts when usage cannot be read."""
    subscriptions = InMemorySubscriptionReader()
    subscriptions.set(USER_ID, "free")
    service = AnalysisService(UsageLedger(ReadFailingStore()), subscriptions)

    with pytest.raises(PersistenceError):
        await service.record_content_generation(USER_ID)


@pytest.mark.asyncio
async def test_unexpected_analyzer_failure_is_internal_error(
    ledger: UsageLedger,
    subscriptions: InMemorySubscriptionReader,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test that analyzer defects surface as InternalError and are not recorded."""
    subscriptions.set(USER_ID, "professional")
    service = AnalysisService(ledger, subscriptions, summarizer=ExplodingSummarizer())

    with pytest.raises(InternalError) as exc_info:
        await service.summarize(USER_ID, "One. Two. Three. Four.")

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert await _usage(usage_store) is None


@pytest.mark.asyncio
async def test_current_usage_summary(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
) -> None:
    """Test the usage summary for the current period."""
    subscriptions.set(USER_ID, "basic")
    await service.record_content_generation(USER_ID)
    await service.extract_keywords(USER_ID, "keyword keyword")

    summary = await service.current_usage_summary(USER_ID)

    assert summary.plan.plan_type.value == "basic"
    assert summary.usage.content_generated == 1
    assert summary.usage.keyword_extraction_used == 1
    assert summary.content_remaining == 19


@pytest.mark.asyncio
async def test_history(
    service: AnalysisService,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test that history lists stored periods newest first."""
    usage_store.seed(UsageRecord(user_id=USER_ID, period_key="2024-01", content_generated=3))
    usage_store.seed(UsageRecord(user_id=USER_ID, period_key="2024-02", content_generated=1))

    history = await service.history(USER_ID)

    assert history.total == 2
    assert [record.period_key for record in history.items] == ["2024-02", "2024-01"]


@pytest.mark.asyncio
async def test_unexpected_write_error_does_not_block_result() -> None:
    """Test that the result is delivered when the store fails with a non-persistence error."""
    subscriptions = InMemorySubscriptionReader()
    subscriptions.set(USER_ID, "professional")
    service = AnalysisService(UsageLedger(BrokenPoolStore()), subscriptions)

    result = await service.analyze_sentiment(USER_ID, "I love this! It is amazing and wonderful.")

    assert result.label == "positive"


@pytest.mark.asyncio
async def test_entitlement_checked_before_length(
    service: AnalysisService,
    subscriptions: InMemorySubscriptionReader,
) -> None:
    """Test that an over-long request for a capability outside the plan names the plan to upgrade to."""
    subscriptions.set(USER_ID, "free")

    with pytest.raises(NotEntitledError) as exc_info:
        await service.summarize(USER_ID, "Sentence. " * 500)

    assert exc_info.value.required_plan == "professional"


@pytest.mark.asyncio
async def test_requests_over_rate_limit_are_refused_and_not_recorded(
    ledger: UsageLedger,
    subscriptions: InMemorySubscriptionReader,
    usage_store: InMemoryUsageStore,
) -> None:
    """Test that the plan's rate limit refuses requests before the analyzer runs."""
    subscriptions.set(USER_ID, "basic")
    limiter = RateLimiter(
        InMemoryRateLimitStore(clock=lambda: 120.0),
        limits={PlanType.FREE: (RateLimitWindow("minute", 2, 60),)},
        clock=lambda: 120.0,
    )
    service = AnalysisService(ledger, subscriptions, rate_limiter=limiter)

    await service.extract_keywords(USER_ID, "good good day")
    await service.extract_keywords(USER_ID, "good good day")

    with pytest.raises(RateLimitedError) as exc_info:
        await service.extract_keywords(USER_ID, "good good day")

    assert exc_info.value.limit == 2
    assert exc_info.value.retry_after == 60
    assert (await _usage(usage_store)).keyword_extraction_used == 2


@pytest.mark.asyncio
async def test_content_generation_is_not_rate_limited(
    ledger: UsageLedger,
    subscriptions: InMemorySubscriptionReader,
) -> None:
    """Test that content generation is bounded by its monthly quota only."""
    subscriptions.set(USER_ID, "free")
    limiter = RateLimiter(
        InMemoryRateLimitStore(),
        limits={PlanType.FREE: (RateLimitWindow("minute", 1, 60),)},
    )
    service = AnalysisService(ledger, subscriptions, rate_limiter=limiter)

    for _ in range(3):
        receipt = await service.record_content_generation(USER_ID)
        assert receipt.recorded
