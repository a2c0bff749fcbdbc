"""Usage record model: one row of capability counters per user and period."""
from sqlalchemy import CheckConstraint, Column, Integer, String, UniqueConstraint

from textgate.models.base import Base


class UsageRecord(Base):
    """
    Per-user, per-period capability counters.

    Exactly one row exists per (user_id, period_key). Rows are created by the
    first recorded use in a period, incremented in place afterwards and never
    deleted, so past periods stay available for reporting.
    """

    __tablename__ = "usage_records"
    __table_args__ = (
        UniqueConstraint("user_id", "period_key", name="uq_usage_records_user_period"),
        CheckConstraint(
            "content_generated >= 0 AND sentiment_analysis_used >= 0 AND keyword_extraction_used >= 0 "
            "AND text_summarization_used >= 0 AND api_calls >= 0",
            name="ck_usage_records_non_negative",
        ),
    )

    user_id = Column(String, nullable=False, index=True)
    period_key = Column(String, nullable=False, index=True)  # YYYY-MM by default
    content_generated = Column(Integer, nullable=False, default=0, server_default="0")
    sentiment_analysis_used = Column(Integer, nullable=False, default=0, server_default="0")
    keyword_extraction_used = Column(Integer, nullable=False, default=0, server_default="0")
    text_summarization_used = Column(Integer, nullable=False, default=0, server_default="0")
    api_calls = Column(Integer, nullable=False, default=0, server_default="0")

    def __repr__(self) -> str:
        """String representation."""
        return f"<UsageRecord(user_id={self.user_id}, period_key={self.period_key}, api_calls={self.api_calls})>"
