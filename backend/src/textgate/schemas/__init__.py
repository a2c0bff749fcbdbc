"""Pydantic schemas for API request/response validation."""

from textgate.schemas.analysis import (
    KeywordRequest,
    KeywordResponse,
    SentimentRequest,
    SentimentResponse,
    SummaryRequest,
    SummaryResponse,
)
from textgate.schemas.error import ErrorCode, ErrorDetail, ErrorResponse
from textgate.schemas.plan import PlanLimits, PlanList, PlanType
from textgate.schemas.subscription import SubscriptionSnapshot, SubscriptionStatus
from textgate.schemas.usage_record import ContentGenerationReceipt, UsageRecord, UsageRecordList, UsageSummary

__all__ = [
    # Analysis schemas
    "KeywordRequest",
    "KeywordResponse",
    "SentimentRequest",
    "SentimentResponse",
    "SummaryRequest",
    "SummaryResponse",
    # Error schemas
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    # Plan schemas
    "PlanLimits",
    "PlanList",
    "PlanType",
    # Subscription schemas
    "SubscriptionSnapshot",
    "SubscriptionStatus",
    # Usage Record schemas
    "ContentGenerationReceipt",
    "UsageRecord",
    "UsageRecordList",
    "UsageSummary",
]
