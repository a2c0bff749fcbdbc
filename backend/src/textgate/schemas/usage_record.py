"""Pydantic schemas for UsageRecord model."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from textgate.schemas.plan import PlanLimits


class UsageRecord(BaseModel):
    """Counters for one user in one period. Counters are never null."""

    user_id: str = Field(..., min_length=1, description="User the counters belong to")
    period_key: str = Field(..., min_length=1, description="Accounting period, YYYY-MM")
    content_generated: int = Field(default=0, ge=0)
    sentiment_analysis_used: int = Field(default=0, ge=0)
    keyword_extraction_used: int = Field(default=0, ge=0)
    text_summarization_used: int = Field(default=0, ge=0)
    api_calls: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = Field(default=None, description="Unset for a period with no recorded use")
    updated_at: Optional[datetime] = Field(default=None, description="Unset for a period with no recorded use")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def empty(cls, user_id: str, period_key: str) -> "UsageRecord":
        """Zero counters for a period that has no stored record yet."""
        return cls(user_id=user_id, period_key=period_key)


class UsageRecordList(BaseModel):
    """Schema for a user's usage history, newest period first."""

    items: list[UsageRecord]
    total: int


class UsageSummary(BaseModel):
    """Current period usage together with the plan that governs it."""

    usage: UsageRecord
    plan: PlanLimits
    content_remaining: Optional[int] = Field(
        default=None, description="Content generations left this period, null when unlimited"
    )


class ContentGenerationReceipt(BaseModel):
    """Result of metering one content generation."""

    recorded: bool = Field(..., description="False when the counter could not be persisted")
    usage: UsageRecord
    content_remaining: Optional[int] = Field(
        default=None, description="Content generations left this period, null when unlimited"
    )
