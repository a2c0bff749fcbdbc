"""Pydantic schemas for plan limits and entitlements."""
import enum

from pydantic import BaseModel, ConfigDict, Field

UNLIMITED = -1


class PlanType(str, enum.Enum):
    """Subscription tiers, cheapest first."""

    FREE = "free"
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class PlanLimits(BaseModel):
    """Quota and entitlement flags for one plan. Immutable."""

    plan_type: PlanType = Field(..., description="Plan this entry describes")
    monthly_content_limit: int = Field(..., ge=UNLIMITED, description="Content generations per period, -1 for unlimited")
    max_content_length: int = Field(..., gt=0, description="Longest accepted input text in characters")
    sentiment_analysis_enabled: bool = Field(..., description="Sentiment analysis entitlement")
    keyword_extraction_enabled: bool = Field(..., description="Keyword extraction entitlement")
    text_summarization_enabled: bool = Field(..., description="Text summarization entitlement")
    api_access_enabled: bool = Field(..., description="Programmatic API entitlement")

    model_config = ConfigDict(frozen=True)

    @property
    def is_unlimited(self) -> bool:
        """True when the content quota is unlimited."""
        return self.monthly_content_limit == UNLIMITED


class PlanList(BaseModel):
    """Schema for the plan catalog listing."""

    items: list[PlanLimits]
    total: int
