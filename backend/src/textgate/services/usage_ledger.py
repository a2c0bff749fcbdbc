"""Per-user, per-period usage accounting.

Recording is fail-open: an already computed result is never withheld because
the counter could not be written. Reads are fail-closed and raise
PersistenceError, because the capacity check depends on them.
"""
from typing import Optional

import structlog

from textgate.metrics import usage_record_failures_total, usage_records_written_total
from textgate.schemas.usage_record import UsageRecord
from textgate.services.usage_store import UsageStoreProtocol
from textgate.types import USAGE_COUNTER_FOR_CAPABILITY, Capability, current_period_key

logger = structlog.get_logger(__name__)


class UsageLedger:
    """Records capability use against a UsageStore."""

    def __init__(self, store: UsageStoreProtocol) -> None:
        """Initialize with the store that owns the UsageRecords."""
        self.store = store

    async def record_use(
        self,
        user_id: str,
        capability: Capability,
        period_key: Optional[str] = None,
    ) -> Optional[UsageRecord]:
        """
        Count one use of *capability* for the user in *period_key*.

        Args:
            user_id: User the use is billed to
            capability: Capability that was used
            period_key: Accounting period, defaults to the current month

        Returns:
            The updated record, or None when the store write failed
        """
        period_key = period_key or current_period_key()
        counter = USAGE_COUNTER_FOR_CAPABILITY[capability]

        try:
            record = await self.store.increment(user_id, period_key, counter)
        except Exception as exc:
            usage_record_failures_total.labels(capability=capability.value).inc()
            logger.error(
                "usage_record_failed",
                user_id=user_id,
                capability=capability.value,
                period_key=period_key,
                error_type=type(exc).__name__,
                error=str(exc),
                exc_info=True,
            )
            return None

        usage_records_written_total.labels(capability=capability.value).inc()
        logger.info(
            "usage_recorded",
            user_id=user_id,
            capability=capability.value,
            period_key=period_key,
            count=getattr(record, counter),
        )
        return record

    async def get_usage(self, user_id: str, period_key: Optional[str] = None) -> UsageRecord:
        """
        Return the user's counters for the period.

        A period with nothing recorded yet is returned as zero counters.

        Raises:
            PersistenceError: If the store cannot be read
        """
        period_key = period_key or current_period_key()
        record = await self.store.get(user_id, period_key)
        if record is None:
            return UsageRecord.empty(user_id, period_key)
        return record

    async def history(self, user_id: str) -> list[UsageRecord]:
        """Return every recorded period for the user, newest first."""
        return await self.store.list_for_user(user_id)
