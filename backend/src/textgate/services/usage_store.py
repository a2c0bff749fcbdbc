"""Persistent store contract for usage counters, with SQL and in-memory backends.

The ledger needs exactly three things from storage: read one period, list a
user's periods, and an atomic upsert-increment of one counter.
"""
import threading
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from textgate.exceptions import PersistenceError
from textgate.models.base import utcnow
from textgate.models.usage_record import UsageRecord as UsageRecordModel
from textgate.schemas.usage_record import UsageRecord
from textgate.types import USAGE_COUNTERS


def _check_counter(counter: str) -> None:
    if counter not in USAGE_COUNTERS:
        raise ValueError(f"Unknown usage counter: {counter}")


@runtime_checkable
class UsageStoreProtocol(Protocol):
    """Read/upsert access to UsageRecords keyed by (user_id, period_key)."""

    async def get(self, user_id: str, period_key: str) -> Optional[UsageRecord]:
        """Return the record for the period, or None if nothing was recorded."""
        ...

    async def list_for_user(self, user_id: str) -> list[UsageRecord]:
        """Return every period recorded for the user, newest first."""
        ...

    async def increment(self, user_id: str, period_key: str, counter: str) -> UsageRecord:
        """Atomically create-or-increment *counter* and return the updated record.

        A new record starts with every counter at zero and *counter* at 1.
        An existing record gets *counter* and ``api_calls`` incremented.
        """
        ...


class SqlUsageStore(UsageStoreProtocol):
    """PostgreSQL store. The increment is one ``INSERT ... ON CONFLICT DO UPDATE``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with the session factory the store opens sessions from."""
        self._session_factory = session_factory

    @staticmethod
    def build_increment_statement(
        user_id: str,
        period_key: str,
        counter: str,
        now: Optional[datetime] = None,
    ) -> Insert:
        """Build the upsert-increment for one counter."""
        _check_counter(counter)
        now = now or utcnow()

        initial = {name: 0 for name in USAGE_COUNTERS}
        initial[counter] = 1

        stmt = insert(UsageRecordModel).values(
            id=uuid4(),
            user_id=user_id,
            period_key=period_key,
            created_at=now,
            updated_at=now,
            **initial,
        )

        # Increments reference the stored row, so concurrent upserts serialize
        # on the row lock instead of overwriting each other.
        columns = UsageRecordModel.__table__.c
        updates = {
            counter: columns[counter] + 1,
            "api_calls": columns.api_calls + 1,
            "updated_at": now,
        }
        return stmt.on_conflict_do_update(
            index_elements=["user_id", "period_key"],
            set_=updates,
        ).returning(UsageRecordModel)

    async def get(self, user_id: str, period_key: str) -> Optional[UsageRecord]:
        """Return the record for the period, or None."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(UsageRecordModel).where(
                        UsageRecordModel.user_id == user_id,
                        UsageRecordModel.period_key == period_key,
                    )
                )
                record = result.scalar_one_or_none()
                return UsageRecord.model_validate(record) if record is not None else None
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(f"Failed to read usage for {user_id} in {period_key}") from exc

    async def list_for_user(self, user_id: str) -> list[UsageRecord]:
        """Return every period recorded for the user, newest first."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(UsageRecordModel)
                    .where(UsageRecordModel.user_id == user_id)
                    .order_by(UsageRecordModel.period_key.desc())
                )
                return [UsageRecord.model_validate(record) for record in result.scalars().all()]
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(f"Failed to list usage for {user_id}") from exc

    async def increment(self, user_id: str, period_key: str, counter: str) -> UsageRecord:
        """Run the upsert-increment in its own transaction."""
        stmt = self.build_increment_statement(user_id, period_key, counter)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                record = UsageRecord.model_validate(result.scalar_one())
                await session.commit()
                return record
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(f"Failed to record {counter} for {user_id} in {period_key}") from exc


class InMemoryUsageStore(UsageStoreProtocol):
    """Process-local store for development and tests.

    The mutation runs under a ``threading.Lock`` with no await inside, so it
    is atomic for both threads and coroutines.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._records: dict[tuple[str, str], UsageRecord] = {}
        self._lock = threading.Lock()

    def seed(self, record: UsageRecord) -> None:
        """Insert or replace a record directly."""
        with self._lock:
            self._records[(record.user_id, record.period_key)] = record

    async def get(self, user_id: str, period_key: str) -> Optional[UsageRecord]:
        """Return the record for the period, or None."""
        with self._lock:
            return self._records.get((user_id, period_key))

    async def list_for_user(self, user_id: str) -> list[UsageRecord]:
        """Return every period recorded for the user, newest first."""
        with self._lock:
            records = [record for (owner, _), record in self._records.items() if owner == user_id]
        return sorted(records, key=lambda record: record.period_key, reverse=True)

    async def increment(self, user_id: str, period_key: str, counter: str) -> UsageRecord:
        """Create-or-increment under the lock."""
        _check_counter(counter)
        now = utcnow()
        key = (user_id, period_key)
        with self._lock:
            existing = self._records.get(key)
            if existing is None:
                record = UsageRecord(
                    user_id=user_id,
                    period_key=period_key,
                    created_at=now,
                    updated_at=now,
                    **{counter: 1},
                )
            else:
                updates = {
                    counter: getattr(existing, counter) + 1,
                    "api_calls": existing.api_calls + 1,
                    "updated_at": now,
                }
                record = existing.model_copy(update=updates)
            self._records[key] = record
            return record
