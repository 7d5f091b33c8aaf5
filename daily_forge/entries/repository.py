import copy
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional, Tuple

from daily_forge.entries.schemas import DayEntry


class EntryRepository(ABC):
    """Reads and writes one user's day entries, keyed by (user, date)."""

    @abstractmethod
    def get_all_entries(self, user_id: str) -> List[DayEntry]:
        """Returns every entry of the user, newest date first."""
        pass

    @abstractmethod
    def get_entry(self, user_id: str, entry_date: date) -> Optional[DayEntry]:
        pass

    @abstractmethod
    def upsert_entry(self, user_id: str, entry_date: date, entry: DayEntry) -> DayEntry:
        """Replaces the whole document stored for that date and returns it."""
        pass


class InMemoryEntryRepository(EntryRepository):
    def __init__(self):
        self._entries: Dict[Tuple[str, date], DayEntry] = {}
        self.upserts = 0

    def get_all_entries(self, user_id: str) -> List[DayEntry]:
        entries = [copy.deepcopy(e) for (uid, _), e in self._entries.items() if uid == user_id]
        return sorted(entries, key=lambda e: e.date, reverse=True)

    def get_entry(self, user_id: str, entry_date: date) -> Optional[DayEntry]:
        entry = self._entries.get((user_id, entry_date))
        return copy.deepcopy(entry) if entry is not None else None

    def upsert_entry(self, user_id: str, entry_date: date, entry: DayEntry) -> DayEntry:
        stored = entry.model_copy(update={"date": entry_date}, deep=True)
        self._entries[(user_id, entry_date)] = stored
        self.upserts += 1
        return copy.deepcopy(stored)
