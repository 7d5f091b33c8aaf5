"""
The single write path for day entries.

Each save trigger turns the in-memory day state into exactly one upsert.
Reading plan switches, restarts and closes persist the outgoing plan state
before it is dropped from memory.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Dict, List, Optional

from daily_forge.core.config import COMPLETION_MIN_SECTIONS
from daily_forge.entries.repository import EntryRepository
from daily_forge.entries.schemas import DayEntry, DayState, DayStateUpdate
from daily_forge.entries.session import DaySession, new_goal_id
from daily_forge.goals.schemas import GOAL_KINDS, GoalsByType
from daily_forge.goals.service import aggregate_goals
from daily_forge.reading_plans import service as plans
from daily_forge.reading_plans.catalog import ReadingPlanDefinition
from daily_forge.reading_plans.schemas import ReadingPlanProgress

logger = logging.getLogger(__name__)


class CompletionPolicy(ABC):
    """Decides the stored `completed` flag of an entry."""

    @abstractmethod
    def is_complete(self, state: DayState) -> bool:
        pass


class SectionCountPolicy(CompletionPolicy):
    """
    Heuristic completeness signal, not a validation rule: an entry counts as
    completed when at least `min_sections` of its sections carry content.
    """

    def __init__(self, min_sections: int = COMPLETION_MIN_SECTIONS):
        self.min_sections = min_sections

    @staticmethod
    def sections(state: DayState) -> Dict[str, bool]:
        soap = state.soap
        check_in = state.check_in
        rating = state.leadership_rating
        return {
            "soap": bool(soap) and any(
                (value or "").strip()
                for value in (soap.scripture, soap.observation, soap.application, soap.prayer)
            ),
            "gratitude": any((item or "").strip() for item in state.gratitude),
            "check_in": bool(check_in) and (bool(check_in.feeling.strip()) or bool(check_in.emotions)),
            "daily_intention": bool((state.daily_intention or "").strip()),
            "leadership_rating": bool(rating) and any(
                value > 0 for value in (rating.wisdom, rating.courage, rating.patience, rating.integrity)
            ),
            "goals": not state.goals.is_empty(),
        }

    def is_complete(self, state: DayState) -> bool:
        return sum(self.sections(state).values()) >= self.min_sections


class EntryWriteOrchestrator:
    def __init__(self, repository: EntryRepository, policy: Optional[CompletionPolicy] = None):
        self.repository = repository
        self.policy = policy or SectionCountPolicy()

    def build_entry(self, entry_date: date, state: DayState) -> DayEntry:
        """
        Builds the document to persist for a day. Deterministic in its input,
        so saving the same state twice writes the same document.
        """
        tombstones = sorted(set(state.deleted_goal_ids))
        goals = GoalsByType(
            **{
                kind: [g for g in state.goals.of_kind(kind) if g.id not in tombstones]
                for kind in GOAL_KINDS
            }
        )
        stored = state.model_copy(update={"goals": goals, "deleted_goal_ids": tombstones}, deep=True)
        return DayEntry(
            **dict(stored),
            date=entry_date,
            completed=self.policy.is_complete(stored),
        )

    def save(self, user_id: str, entry_date: date, state: DayState) -> DayEntry:
        """
        Persists one day with a single upsert.

        Raises:
            RepositoryError: If the entry store rejects the write.
        """
        entry = self.build_entry(entry_date, state)
        saved = self.repository.upsert_entry(user_id, entry_date, entry)
        logger.info(f"Saved entry {entry_date} for user {user_id} (completed={entry.completed})")
        return saved

    def save_session(self, session: DaySession) -> DayEntry:
        return self.save(session.user_id, session.entry_date, session.snapshot())

    def save_day(self, user_id: str, entry_date: date, update: DayStateUpdate) -> DayEntry:
        """
        Applies a partial day state on top of the stored entry and saves it.
        Tombstones and shelved plan progress only accumulate, and goals sent
        without an id get a fresh one.
        """
        stored = self.repository.get_entry(user_id, entry_date)
        state = DayState(**dict(stored)) if stored else DayState()

        changes = update.model_dump(exclude_unset=True)
        if "deleted_goal_ids" in changes:
            merged: List[str] = list(state.deleted_goal_ids)
            merged += [i for i in changes.pop("deleted_goal_ids") or [] if i not in merged]
            changes["deleted_goal_ids"] = merged
        if "plan_progress" in changes:
            shelved = {plan_id: p.model_dump() for plan_id, p in state.plan_progress.items()}
            changes["plan_progress"] = {**shelved, **(changes["plan_progress"] or {})}
        state = DayState.model_validate({**state.model_dump(), **changes})

        for kind in GOAL_KINDS:
            for goal in state.goals.of_kind(kind):
                if goal.id is None:
                    goal.id = new_goal_id()
        return self.save(user_id, entry_date, state)

    def open_session(
        self,
        user_id: str,
        entry_date: date,
        today: date,
        on_change: Optional[Callable[[DaySession], None]] = None,
    ) -> DaySession:
        """
        Starts a session from the stored entry for that date, or an empty day.

        The session's goals are the aggregated view of the day, so weekly and
        monthly goals stored on other days of the window are editable here and
        the next save gives this day its own copy of them.
        """
        entries = self.repository.get_all_entries(user_id)
        stored = next((entry for entry in entries if entry.date == entry_date), None)
        state = DayState(**dict(stored)) if stored else DayState()
        state.goals = aggregate_goals(entries, entry_date, current_goals=state.goals)
        return DaySession(user_id, entry_date, today, state=state, on_change=on_change)

    # Reading plan transitions
    #
    # Each transition is split into the state to persist before it happens
    # and the change applied to the session once that write succeeded, so
    # AutosaveQueue can run the write through its single writer.
    def incoming_progress(
        self, session: DaySession, plan: ReadingPlanDefinition, bible_id: Optional[str] = None
    ) -> ReadingPlanProgress:
        """Furthest progress found for the plan in any entry, or a fresh start."""
        entries = self.repository.get_all_entries(session.user_id)
        progress = plans.resolve_progress(entries, plan.id)
        if progress is None:
            return plans.new_progress(plan.id, plan.name, plan.duration, session.today, bible_id)
        if bible_id:
            progress = progress.model_copy(update={"bible_id": bible_id})
        return progress

    def activate_plan(self, session: DaySession, progress: ReadingPlanProgress) -> ReadingPlanProgress:
        current = session.reading_plan
        if current is not None and current.plan_id != progress.plan_id:
            logger.info(
                f"Plan '{current.plan_id}' {plans.plan_status(current, progress.plan_id).value} "
                f"on switch to '{progress.plan_id}' by user {session.user_id}"
            )
        session.switch_reading_plan(progress)
        return progress

    def start_plan(
        self, session: DaySession, plan: ReadingPlanDefinition, bible_id: Optional[str] = None
    ) -> ReadingPlanProgress:
        """
        Activates a plan. The same plan already in progress is kept as is; a
        different one is shelved under its id in the day's `plan_progress` and
        saved before it is replaced. The new plan resumes from the furthest
        progress found in any entry, or starts at day 1.

        Writes directly through the repository; sessions that autosave go
        through `AutosaveQueue.start_plan` instead.

        Raises:
            RepositoryError: If the outgoing plan cannot be saved; the session
                is left unchanged.
        """
        current = session.reading_plan
        if current is not None and current.plan_id == plan.id:
            return current
        if current is not None:
            self.save(session.user_id, session.entry_date, session.shelved_snapshot())
        return self.activate_plan(session, self.incoming_progress(session, plan, bible_id))

    def restart_plan(self, session: DaySession) -> Optional[ReadingPlanProgress]:
        if session.reading_plan is None:
            logger.warning(f"No reading plan to restart for user {session.user_id}")
            return None
        self.save_session(session)
        return self.apply_restart(session)

    def apply_restart(self, session: DaySession) -> ReadingPlanProgress:
        session.set_reading_plan(plans.restart(session.reading_plan, session.today))
        return session.reading_plan

    def close_plan(self, session: DaySession) -> None:
        """Saves the active plan, then hides it from the session."""
        if session.reading_plan is None:
            return
        self.save_session(session)
        session.park_reading_plan()
