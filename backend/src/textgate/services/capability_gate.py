"""Authorization of a capability request against plan limits and usage."""
from dataclasses import dataclass
from typing import Optional

import structlog

from textgate.exceptions import CapabilityError, CapacityExceededError, NotEntitledError
from textgate.schemas.plan import PlanLimits, PlanType
from textgate.schemas.subscription import SubscriptionSnapshot
from textgate.schemas.usage_record import UsageRecord
from textgate.services.plan_catalog import PlanCatalog
from textgate.types import AccessChannel, Capability

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of a gate check. A denial carries the error to surface."""

    allowed: bool
    plan: PlanLimits
    error: Optional[CapabilityError] = None

    @property
    def outcome(self) -> str:
        """Metric label for the decision."""
        if self.allowed:
            return "allowed"
        if isinstance(self.error, CapacityExceededError):
            return "capacity_exceeded"
        return "not_entitled"

    def raise_for_denial(self) -> None:
        """Raise the carried error when the request was denied."""
        if not self.allowed and self.error is not None:
            raise self.error


class CapabilityGate:
    """Decides whether a user may invoke a capability right now."""

    def __init__(self, catalog: Optional[PlanCatalog] = None) -> None:
        """Initialize with the plan catalog, the default catalog when omitted."""
        self.catalog = catalog or PlanCatalog()

    def resolve_plan(self, subscription: Optional[SubscriptionSnapshot]) -> PlanLimits:
        """Plan limits in force for *subscription*.

        No subscription, or one that is not active or trialing, means free.
        """
        if subscription is None or not subscription.is_entitling:
            return self.catalog.get(PlanType.FREE.value)
        return self.catalog.get(subscription.plan_type)

    def authorize(
        self,
        user_id: str,
        capability: Capability,
        subscription: Optional[SubscriptionSnapshot],
        usage: Optional[UsageRecord] = None,
        channel: AccessChannel = AccessChannel.DASHBOARD,
    ) -> GateDecision:
        """
        Check entitlement, then capacity.

        Args:
            user_id: Requesting user
            capability: Capability being requested
            subscription: Current subscription, None when the user has none
            usage: Current period usage. Required for content generation.
            channel: Surface the request arrived on

        Returns:
            GateDecision: allowed, or denied with the error to raise
        """
        plan = self.resolve_plan(subscription)

        for flag in self.catalog.required_flags(capability, channel):
            if not getattr(plan, flag):
                required = self.catalog.minimum_plan_for(capability, channel)
                logger.info(
                    "capability_not_entitled",
                    user_id=user_id,
                    capability=capability.value,
                    channel=channel.value,
                    plan_type=plan.plan_type.value,
                    missing_flag=flag,
                )
                return GateDecision(
                    allowed=False,
                    plan=plan,
                    error=NotEntitledError(
                        capability=capability.value,
                        plan_type=plan.plan_type.value,
                        required_plan=required.value if required is not None else None,
                    ),
                )

        if capability == Capability.CONTENT_GENERATION and not plan.is_unlimited:
            if usage is None:
                raise ValueError("Usage snapshot is required to check content generation capacity")
            if usage.content_generated >= plan.monthly_content_limit:
                logger.info(
                    "capability_capacity_exceeded",
                    user_id=user_id,
                    capability=capability.value,
                    limit=plan.monthly_content_limit,
                    current_usage=usage.content_generated,
                )
                return GateDecision(
                    allowed=False,
                    plan=plan,
                    error=CapacityExceededError(
                        capability=capability.value,
                        limit=plan.monthly_content_limit,
                        current_usage=usage.content_generated,
                    ),
                )

        return GateDecision(allowed=True, plan=plan)
