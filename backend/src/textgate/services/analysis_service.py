"""Service that gates, runs and meters the text analytics capabilities."""
from collections.abc import Callable
from typing import Optional, TypeVar

import structlog

from textgate.analysis.keywords import DEFAULT_MAX_KEYWORDS, KeywordRanker
from textgate.analysis.sentiment import SentimentResult, SentimentScorer
from textgate.analysis.summarizer import Summarizer
from textgate.analysis.tokenizer import require_text
from textgate.exceptions import (
    CapabilityError,
    InternalError,
    InvalidInputError,
    PersistenceError,
    RateLimitedError,
)
from textgate.metrics import capability_requests_total
from textgate.schemas.error import ErrorCode
from textgate.schemas.plan import PlanLimits
from textgate.schemas.usage_record import (
    ContentGenerationReceipt,
    UsageRecord,
    UsageRecordList,
    UsageSummary,
)
from textgate.services.capability_gate import CapabilityGate, GateDecision
from textgate.services.rate_limiter import RateLimiter
from textgate.services.subscription_reader import SubscriptionReaderProtocol
from textgate.services.usage_ledger import UsageLedger
from textgate.types import THROTTLED_CAPABILITIES, AccessChannel, Capability, current_period_key

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def content_remaining(plan: PlanLimits, usage: UsageRecord) -> Optional[int]:
    """Content generations left in the period, None when the plan is unlimited."""
    if plan.is_unlimited:
        return None
    return max(0, plan.monthly_content_limit - usage.content_generated)


class AnalysisService:
    """
    Runs one capability request end to end.

    Order per request: validate the text, read the subscription (and the
    usage snapshot for metered capabilities), authorize, check the plan's
    length limit, throttle, run the analyzer, record the use. Nothing is
    recorded for a request that fails earlier.
    """

    def __init__(
        self,
        ledger: UsageLedger,
        subscriptions: SubscriptionReaderProtocol,
        gate: Optional[CapabilityGate] = None,
        keyword_ranker: Optional[KeywordRanker] = None,
        sentiment_scorer: Optional[SentimentScorer] = None,
        summarizer: Optional[Summarizer] = None,
        default_max_keywords: int = DEFAULT_MAX_KEYWORDS,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """Initialize with the ledger, the subscription source and the analyzers.

        Without a rate_limiter requests are not throttled.
        """
        self.ledger = ledger
        self.subscriptions = subscriptions
        self.gate = gate or CapabilityGate()
        self.keyword_ranker = keyword_ranker or KeywordRanker()
        self.sentiment_scorer = sentiment_scorer or SentimentScorer()
        self.summarizer = summarizer or Summarizer()
        self.default_max_keywords = default_max_keywords
        self.rate_limiter = rate_limiter

    async def _authorize(
        self,
        user_id: str,
        capability: Capability,
        channel: AccessChannel,
        text: Optional[str] = None,
    ) -> tuple[GateDecision, Optional[UsageRecord]]:
        """Validate, gate and count the request. Raises on denial."""
        if text is not None:
            require_text(text)

        try:
            subscription = await self.subscriptions.get(user_id)
            usage = None
            if capability == Capability.CONTENT_GENERATION:
                usage = await self.ledger.get_usage(user_id)
        except PersistenceError:
            capability_requests_total.labels(
                capability=capability.value, channel=channel.value, outcome="unavailable"
            ).inc()
            logger.error(
                "capability_authorization_unavailable",
                user_id=user_id,
                capability=capability.value,
                exc_info=True,
            )
            raise

        decision = self.gate.authorize(user_id, capability, subscription, usage, channel)
        if not decision.allowed:
            capability_requests_total.labels(
                capability=capability.value, channel=channel.value, outcome=decision.outcome
            ).inc()
            decision.raise_for_denial()

        plan = decision.plan
        if text is not None and len(text) > plan.max_content_length:
            raise InvalidInputError(
                f"Text exceeds the {plan.max_content_length} character limit of the {plan.plan_type.value} plan",
                field="text",
                code=ErrorCode.TEXT_TOO_LONG,
            )

        if self.rate_limiter is not None and capability in THROTTLED_CAPABILITIES:
            try:
                await self.rate_limiter.check(user_id, plan.plan_type)
            except RateLimitedError:
                capability_requests_total.labels(
                    capability=capability.value, channel=channel.value, outcome="rate_limited"
                ).inc()
                raise

        capability_requests_total.labels(
            capability=capability.value, channel=channel.value, outcome=decision.outcome
        ).inc()
        return decision, usage

    @staticmethod
    def _run(capability: Capability, user_id: str, analyzer: Callable[..., T], *args) -> T:
        """Run a pure analyzer, turning unexpected failures into InternalError."""
        try:
            return analyzer(*args)
        except CapabilityError:
            raise
        except Exception as exc:
            logger.exception("capability_failed", user_id=user_id, capability=capability.value)
            raise InternalError(f"{capability.value} failed unexpectedly") from exc

    async def extract_keywords(
        self,
        user_id: str,
        text: str,
        max_keywords: Optional[int] = None,
        channel: AccessChannel = AccessChannel.DASHBOARD,
    ) -> list[str]:
        """Return the most frequent keywords of *text*."""
        capability = Capability.KEYWORD_EXTRACTION
        await self._authorize(user_id, capability, channel, text)
        limit = max_keywords if max_keywords is not None else self.default_max_keywords
        keywords = self._run(capability, user_id, self.keyword_ranker.rank, text, limit)
        await self.ledger.record_use(user_id, capability)
        return keywords

    async def analyze_sentiment(
        self,
        user_id: str,
        text: str,
        channel: AccessChannel = AccessChannel.DASHBOARD,
    ) -> SentimentResult:
        """Return the sentiment label and score of *text*."""
        capability = Capability.SENTIMENT_ANALYSIS
        await self._authorize(user_id, capability, channel, text)
        result = self._run(capability, user_id, self.sentiment_scorer.score, text)
        await self.ledger.record_use(user_id, capability)
        return result

    async def summarize(
        self,
        user_id: str,
        text: str,
        channel: AccessChannel = AccessChannel.DASHBOARD,
    ) -> str:
        """Return the extractive summary of *text*."""
        capability = Capability.TEXT_SUMMARIZATION
        await self._authorize(user_id, capability, channel, text)
        summary = self._run(capability, user_id, self.summarizer.summarize, text)
        await self.ledger.record_use(user_id, capability)
        return summary

    async def record_content_generation(
        self,
        user_id: str,
        channel: AccessChannel = AccessChannel.DASHBOARD,
    ) -> ContentGenerationReceipt:
        """
        Check the monthly quota and meter one content generation.

        Raises:
            CapacityExceededError: If the plan's monthly limit is reached
            PersistenceError: If the current usage cannot be read
        """
        capability = Capability.CONTENT_GENERATION
        decision, usage = await self._authorize(user_id, capability, channel)
        record = await self.ledger.record_use(user_id, capability)
        current = record if record is not None else usage
        return ContentGenerationReceipt(
            recorded=record is not None,
            usage=current,
            content_remaining=content_remaining(decision.plan, current),
        )

    async def current_usage_summary(self, user_id: str, period_key: Optional[str] = None) -> UsageSummary:
        """Usage for the period with the plan that governs it."""
        subscription = await self.subscriptions.get(user_id)
        plan = self.gate.resolve_plan(subscription)
        usage = await self.ledger.get_usage(user_id, period_key or current_period_key())
        return UsageSummary(usage=usage, plan=plan, content_remaining=content_remaining(plan, usage))

    async def history(self, user_id: str) -> UsageRecordList:
        """Every recorded period for the user, newest first."""
        records = await self.ledger.history(user_id)
        return UsageRecordList(items=records, total=len(records))
