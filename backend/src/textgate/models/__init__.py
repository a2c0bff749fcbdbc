"""SQLAlchemy ORM models for the capability engine."""
# Import all models here to ensure they are registered with the metadata

from textgate.models.base import Base
from textgate.models.subscription import Subscription
from textgate.models.usage_record import UsageRecord

__all__ = [
    "Base",
    "Subscription",
    "UsageRecord",
]
