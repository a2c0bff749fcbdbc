"""Read access to the subscription snapshot the gate decides on."""
from typing import Optional, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from textgate.exceptions import PersistenceError
from textgate.models.subscription import Subscription
from textgate.schemas.subscription import SubscriptionSnapshot


@runtime_checkable
class SubscriptionReaderProtocol(Protocol):
    """Lookup of a user's current subscription."""

    async def get(self, user_id: str) -> Optional[SubscriptionSnapshot]:
        """Return the user's subscription, or None if they have none."""
        ...


class SqlSubscriptionReader(SubscriptionReaderProtocol):
    """Reads the billing-owned ``subscriptions`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with the session factory owning the connections."""
        self._session_factory = session_factory

    async def get(self, user_id: str) -> Optional[SubscriptionSnapshot]:
        """Return the user's subscription, or None."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Subscription).where(Subscription.user_id == user_id))
                subscription = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(f"Failed to read subscription for {user_id}") from exc

        if subscription is None:
            return None
        return SubscriptionSnapshot.model_validate(subscription)


class InMemorySubscriptionReader(SubscriptionReaderProtocol):
    """Dict-backed reader for development and tests."""

    def __init__(self, subscriptions: Optional[dict[str, SubscriptionSnapshot]] = None) -> None:
        """Initialize with optional subscriptions keyed by user id."""
        self._subscriptions = dict(subscriptions or {})

    def set(self, user_id: str, plan_type: str, status: str = "active") -> SubscriptionSnapshot:
        """Create or replace the user's subscription."""
        snapshot = SubscriptionSnapshot(user_id=user_id, plan_type=plan_type, status=status)
        self._subscriptions[user_id] = snapshot
        return snapshot

    async def get(self, user_id: str) -> Optional[SubscriptionSnapshot]:
        """Return the user's subscription, or None."""
        return self._subscriptions.get(user_id)
