"""Static catalog of plan limits and entitlements."""
from collections.abc import Mapping
from typing import Optional

import structlog

from textgate.schemas.plan import UNLIMITED, PlanLimits, PlanType
from textgate.types import AccessChannel, Capability

logger = structlog.get_logger(__name__)

DEFAULT_PLAN_LIMITS: Mapping[PlanType, PlanLimits] = {
    PlanType.FREE: PlanLimits(
        plan_type=PlanType.FREE,
        monthly_content_limit=5,
        max_content_length=1000,
        sentiment_analysis_enabled=False,
        keyword_extraction_enabled=False,
        text_summarization_enabled=False,
        api_access_enabled=False,
    ),
    PlanType.BASIC: PlanLimits(
        plan_type=PlanType.BASIC,
        monthly_content_limit=20,
        max_content_length=3000,
        sentiment_analysis_enabled=True,
        keyword_extraction_enabled=True,
        text_summarization_enabled=False,
        api_access_enabled=False,
    ),
    PlanType.PROFESSIONAL: PlanLimits(
        plan_type=PlanType.PROFESSIONAL,
        monthly_content_limit=100,
        max_content_length=10000,
        sentiment_analysis_enabled=True,
        keyword_extraction_enabled=True,
        text_summarization_enabled=True,
        api_access_enabled=True,
    ),
    PlanType.ENTERPRISE: PlanLimits(
        plan_type=PlanType.ENTERPRISE,
        monthly_content_limit=UNLIMITED,
        max_content_length=50000,
        sentiment_analysis_enabled=True,
        keyword_extraction_enabled=True,
        text_summarization_enabled=True,
        api_access_enabled=True,
    ),
}

# Capability -> PlanLimits flag that unlocks it. Content generation is
# available on every plan and only metered.
ENTITLEMENT_FLAGS: dict[Capability, str] = {
    Capability.SENTIMENT_ANALYSIS: "sentiment_analysis_enabled",
    Capability.KEYWORD_EXTRACTION: "keyword_extraction_enabled",
    Capability.TEXT_SUMMARIZATION: "text_summarization_enabled",
}

API_ACCESS_FLAG = "api_access_enabled"


class PlanCatalog:
    """Read-only lookup of plan limits by plan type."""

    def __init__(self, limits: Optional[Mapping[PlanType, PlanLimits]] = None) -> None:
        """Initialize with a plan table. The table must contain a free entry."""
        self._limits = dict(limits if limits is not None else DEFAULT_PLAN_LIMITS)
        if PlanType.FREE not in self._limits:
            raise ValueError("Plan catalog requires a free plan entry")

    def get(self, plan_type: Optional[str]) -> PlanLimits:
        """
        Return limits for *plan_type*.

        Unknown or missing plan types resolve to the free plan.
        """
        try:
            return self._limits[PlanType(plan_type)]
        except (ValueError, KeyError):
            if plan_type is not None:
                logger.info("unknown_plan_type_defaulted", plan_type=plan_type, fallback=PlanType.FREE.value)
            return self._limits[PlanType.FREE]

    def all(self) -> list[PlanLimits]:
        """All plans, cheapest first."""
        return [self._limits[plan] for plan in PlanType if plan in self._limits]

    def required_flags(self, capability: Capability, channel: AccessChannel = AccessChannel.DASHBOARD) -> list[str]:
        """Entitlement flags a request for *capability* on *channel* needs."""
        flags = []
        if capability in ENTITLEMENT_FLAGS:
            flags.append(ENTITLEMENT_FLAGS[capability])
        if channel == AccessChannel.API:
            flags.append(API_ACCESS_FLAG)
        return flags

    def minimum_plan_for(
        self, capability: Capability, channel: AccessChannel = AccessChannel.DASHBOARD
    ) -> Optional[PlanType]:
        """Cheapest plan that grants every flag *capability* needs, if any."""
        flags = self.required_flags(capability, channel)
        for limits in self.all():
            if all(getattr(limits, flag) for flag in flags):
                return limits.plan_type
        return None
