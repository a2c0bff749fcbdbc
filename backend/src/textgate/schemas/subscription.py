"""Pydantic schema for the subscription snapshot read from billing."""
import enum

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionStatus(str, enum.Enum):
    """Subscription lifecycle status as written by the billing subsystem."""

    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELLED = "cancelled"
    PAUSED = "paused"


# Statuses that keep the subscribed plan in force
ENTITLING_STATUSES = frozenset({SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value})


class SubscriptionSnapshot(BaseModel):
    """The two subscription fields the capability gate reads."""

    user_id: str
    plan_type: str = Field(default="free", description="Plan name as stored by billing")
    status: str = Field(default=SubscriptionStatus.ACTIVE.value, description="Lifecycle status as stored by billing")

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def is_entitling(self) -> bool:
        """True when the status keeps the subscribed plan in force."""
        return self.status in ENTITLING_STATUSES
