from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint
from daily_forge.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DayEntryRecord(Base):
    __tablename__ = "daily_entries"
    __table_args__ = (UniqueConstraint("user_id", "date_key", name="uq_daily_entries_user_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, index=True, nullable=False)
    date_key = Column(String(10), nullable=False)  # YYYY-MM-DD, no time component

    data_content = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
