import logging
from datetime import date
from typing import List, Optional

from daily_forge.entries.orchestrator import EntryWriteOrchestrator
from daily_forge.entries.repository import EntryRepository
from daily_forge.entries.schemas import DayEntry, DayStateUpdate
from daily_forge.goals.schemas import GoalsByType
from daily_forge.goals.service import aggregate_goals
from daily_forge.reading_plans.schemas import ReadingPlanProgress
from daily_forge.reading_plans.service import resolve_progress
from daily_forge.stats.schemas import StatsResponse
from daily_forge.stats.service import compute_stats

logger = logging.getLogger(__name__)


class JournalService:
    """
    Read and write operations exposed to the API layer.

    Every read recomputes its answer from the user's full entry set instead
    of trusting a cached goal list or progress record. `list_limit` only caps
    the entry listing, never the scans behind goals, plans and stats.
    """

    def __init__(
        self,
        repository: EntryRepository,
        orchestrator: Optional[EntryWriteOrchestrator] = None,
        list_limit: int = 0,
    ):
        self.repository = repository
        self.orchestrator = orchestrator or EntryWriteOrchestrator(repository)
        self.list_limit = list_limit

    def get_entries(self, user_id: str) -> List[DayEntry]:
        entries = self.repository.get_all_entries(user_id)
        return entries[: self.list_limit] if self.list_limit else entries

    def get_entry(self, user_id: str, entry_date: date) -> Optional[DayEntry]:
        return self.repository.get_entry(user_id, entry_date)

    def get_current_goals(self, user_id: str, reference_date: date) -> GoalsByType:
        entries = self.repository.get_all_entries(user_id)
        return aggregate_goals(entries, reference_date)

    def get_reading_plan_state(self, user_id: str, plan_id: str) -> Optional[ReadingPlanProgress]:
        entries = self.repository.get_all_entries(user_id)
        return resolve_progress(entries, plan_id)

    def get_stats(self, user_id: str, reference_date: date) -> StatsResponse:
        entries = self.repository.get_all_entries(user_id)
        return compute_stats(entries, reference_date)

    def save_day(self, user_id: str, entry_date: date, update: DayStateUpdate) -> DayEntry:
        return self.orchestrator.save_day(user_id, entry_date, update)
