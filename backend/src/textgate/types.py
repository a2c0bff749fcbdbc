"""Capability types and pure helpers shared by the gate, the ledger and the API.

Constants, enums, and pure functions only. No IO.
"""
import enum
from datetime import datetime, timezone
from typing import Optional


class Capability(str, enum.Enum):
    """Metered capability a request can ask for."""

    KEYWORD_EXTRACTION = "keyword_extraction"
    SENTIMENT_ANALYSIS = "sentiment_analysis"
    TEXT_SUMMARIZATION = "text_summarization"
    CONTENT_GENERATION = "content_generation"


class AccessChannel(str, enum.Enum):
    """Surface a request arrived on."""

    DASHBOARD = "dashboard"
    API = "api"


# Capability -> UsageRecord counter column
USAGE_COUNTER_FOR_CAPABILITY: dict[Capability, str] = {
    Capability.CONTENT_GENERATION: "content_generated",
    Capability.SENTIMENT_ANALYSIS: "sentiment_analysis_used",
    Capability.KEYWORD_EXTRACTION: "keyword_extraction_used",
    Capability.TEXT_SUMMARIZATION: "text_summarization_used",
}

# Text analytics capabilities; content generation is bounded by its monthly quota only
THROTTLED_CAPABILITIES = frozenset(
    {Capability.KEYWORD_EXTRACTION, Capability.SENTIMENT_ANALYSIS, Capability.TEXT_SUMMARIZATION}
)

USAGE_COUNTERS: tuple[str, ...] = (
    "content_generated",
    "sentiment_analysis_used",
    "keyword_extraction_used",
    "text_summarization_used",
    "api_calls",
)


def current_period_key(now: Optional[datetime] = None) -> str:
    """Return the accounting period for *now* as ``YYYY-MM`` (UTC)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{now.year:04d}-{now.month:02d}"
