"""Read-only mapping of the billing subsystem's subscriptions table."""
from sqlalchemy import Column, String

from textgate.models.base import Base
from textgate.schemas.subscription import SubscriptionStatus


class Subscription(Base):
    """
    A user's subscription to a plan.

    Owned by billing; this service only reads ``plan_type`` and ``status``.
    Both are stored as plain strings so unknown values written upstream
    do not break reads.
    """

    __tablename__ = "subscriptions"

    user_id = Column(String, nullable=False, unique=True, index=True)
    plan_type = Column(String, nullable=False, default="free")
    status = Column(String, nullable=False, default=SubscriptionStatus.ACTIVE.value, index=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Subscription(user_id={self.user_id}, plan_type={self.plan_type}, status={self.status})>"
