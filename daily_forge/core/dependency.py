from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from daily_forge.core.config import ENTRIES_LIST_LIMIT
from daily_forge.core.database import get_db
from daily_forge.entries.db import SqlEntryRepository
from daily_forge.entries.repository import EntryRepository
from daily_forge.entries.service import JournalService
from daily_forge.reading_plans.scripture import ApiBibleScriptureProvider, ScriptureProvider


def get_entry_repository(db: Session = Depends(get_db)) -> EntryRepository:
    return SqlEntryRepository(db)


def get_journal_service(repository: EntryRepository = Depends(get_entry_repository)) -> JournalService:
    return JournalService(repository, list_limit=ENTRIES_LIST_LIMIT)


@lru_cache(maxsize=None)
def get_scripture_provider() -> ScriptureProvider:
    return ApiBibleScriptureProvider()
