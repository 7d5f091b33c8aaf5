import logging
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from daily_forge.core.dates import date_key, parse_date_key
from daily_forge.core.errors import RepositoryError
from daily_forge.entries.models import DayEntryRecord
from daily_forge.entries.repository import EntryRepository
from daily_forge.entries.schemas import DayEntry

logger = logging.getLogger(__name__)


# Row CRUD
def get_entry_record(db: Session, user_id: str, entry_date: date) -> Optional[DayEntryRecord]:
    """
    Retrieves the stored row for one user and date.

    Args:
        db (Session): SQLAlchemy session.
        user_id (str): Owner of the entry.
        entry_date (date): Calendar date of the entry.

    Returns:
        Optional[DayEntryRecord]: The row if found, else None.
    """
    return db.query(DayEntryRecord).filter(
        DayEntryRecord.user_id == user_id,
        DayEntryRecord.date_key == date_key(entry_date),
    ).first()


def get_user_entry_records(db: Session, user_id: str) -> List[DayEntryRecord]:
    """
    Retrieves a user's rows sorted by date descending.

    Args:
        db (Session): SQLAlchemy session.
        user_id (str): Owner of the entries.

    Returns:
        List[DayEntryRecord]: Rows, newest date first.
    """
    return (
        db.query(DayEntryRecord)
        .filter(DayEntryRecord.user_id == user_id)
        .order_by(DayEntryRecord.date_key.desc())
        .all()
    )


def upsert_entry_record(db: Session, user_id: str, entry_date: date, data: Dict[str, Any]) -> DayEntryRecord:
    """
    Creates or fully replaces the document stored for one user and date.
    """
    record = get_entry_record(db, user_id, entry_date)
    if record:
        record.data_content = data
    else:
        record = DayEntryRecord(user_id=user_id, date_key=date_key(entry_date), data_content=data)
        db.add(record)

    db.commit()
    db.refresh(record)
    return record


def record_to_entry(record: DayEntryRecord) -> Optional[DayEntry]:
    """
    Converts a row to a DayEntry; rows that fail validation are skipped with a warning.
    """
    try:
        entry_date = parse_date_key(record.date_key)
    except ValueError:
        logger.warning(f"Skipping entry {record.id} of user {record.user_id}: malformed date {record.date_key!r}")
        return None

    data = dict(record.data_content or {})
    data["date"] = entry_date
    try:
        return DayEntry.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Skipping entry {record.date_key} of user {record.user_id}: {e}")
        return None


def entry_to_document(entry: DayEntry) -> Dict[str, Any]:
    data = entry.model_dump(mode="json", by_alias=True)
    data.pop("date", None)  # stored as date_key
    return data


class SqlEntryRepository(EntryRepository):
    def __init__(self, db: Session):
        self.db = db

    def get_all_entries(self, user_id: str) -> List[DayEntry]:
        try:
            records = get_user_entry_records(self.db, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load entries for user {user_id}: {e}")
            raise RepositoryError("Failed to load entries", user_id) from e
        return [entry for entry in map(record_to_entry, records) if entry is not None]

    def get_entry(self, user_id: str, entry_date: date) -> Optional[DayEntry]:
        try:
            record = get_entry_record(self.db, user_id, entry_date)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load entry {entry_date} for user {user_id}: {e}")
            raise RepositoryError("Failed to load entry", user_id, entry_date) from e
        return record_to_entry(record) if record else None

    def upsert_entry(self, user_id: str, entry_date: date, entry: DayEntry) -> DayEntry:
        document = entry_to_document(entry)
        try:
            record = upsert_entry_record(self.db, user_id, entry_date, document)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save entry {entry_date} for user {user_id}: {e}")
            raise RepositoryError("Failed to save entry", user_id, entry_date) from e
        return record_to_entry(record)
