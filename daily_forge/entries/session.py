import logging
import uuid
from datetime import date
from typing import Any, Callable, Optional, Set

from daily_forge.entries.schemas import DayState
from daily_forge.goals.schemas import Goal, GoalKind, normalize_goal_id
from daily_forge.reading_plans import service as plans
from daily_forge.reading_plans.schemas import ReadingPlanProgress

logger = logging.getLogger(__name__)

REFLECTION_FIELDS = (
    "check_in",
    "gratitude",
    "soap",
    "daily_intention",
    "growth_question",
    "leadership_rating",
)


def new_goal_id() -> str:
    return uuid.uuid4().hex


class DaySession:
    """
    The in-memory state of the day being edited, owned by one writer.

    Every mutation ends by calling `on_change(self)`, which is how callers
    request a save (typically `AutosaveQueue.request_save`).
    """

    def __init__(
        self,
        user_id: str,
        entry_date: date,
        today: date,
        state: Optional[DayState] = None,
        on_change: Optional[Callable[["DaySession"], None]] = None,
    ):
        self.user_id = user_id
        self.entry_date = entry_date
        self.today = today
        self.state = state or DayState()
        self.on_change = on_change
        # A closed plan leaves the view but stays in the stored entry.
        self.parked_plan: Optional[ReadingPlanProgress] = None

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    @property
    def tombstones(self) -> Set[str]:
        return set(self.state.deleted_goal_ids)

    def snapshot(self) -> DayState:
        """Deep copy of the state to persist."""
        state = self.state.model_copy(deep=True)
        if state.reading_plan is None and self.parked_plan is not None:
            state.reading_plan = self.parked_plan.model_copy(deep=True)
        return state

    # Goals
    def add_goal(self, kind: GoalKind, goal: Goal) -> Goal:
        if goal.id is None:
            goal = goal.model_copy(update={"id": new_goal_id()})
        self.state.goals.of_kind(kind).append(goal)
        self._changed()
        return goal

    def edit_goal(self, kind: GoalKind, goal_id: Any, **changes: Any) -> Optional[Goal]:
        goal_id = normalize_goal_id(goal_id)
        goals = self.state.goals.of_kind(kind)
        for index, goal in enumerate(goals):
            if goal.id == goal_id:
                changes.pop("id", None)
                goals[index] = Goal.model_validate({**goal.model_dump(), **changes})
                self._changed()
                return goals[index]
        logger.warning(f"No {kind} goal {goal_id} on {self.entry_date} to edit")
        return None

    def delete_goal(self, kind: GoalKind, goal_id: Any) -> None:
        """Removes the goal from this day's list and tombstones its id."""
        goal_id = normalize_goal_id(goal_id)
        if goal_id is None:
            logger.warning(f"Ignoring delete of a {kind} goal without id on {self.entry_date}")
            return
        goals = self.state.goals.of_kind(kind)
        goals[:] = [goal for goal in goals if goal.id != goal_id]
        if goal_id not in self.state.deleted_goal_ids:
            self.state.deleted_goal_ids.append(goal_id)
        self._changed()

    # Reflection
    def update_reflection(self, **fields: Any) -> None:
        unknown = set(fields) - set(REFLECTION_FIELDS)
        if unknown:
            raise ValueError(f"Unknown reflection fields: {sorted(unknown)}")
        self.state = DayState.model_validate({**self.state.model_dump(), **fields})
        self._changed()

    # Reading plan
    @property
    def reading_plan(self) -> Optional[ReadingPlanProgress]:
        return self.state.reading_plan

    def set_reading_plan(self, progress: Optional[ReadingPlanProgress]) -> None:
        self.state.reading_plan = progress
        if progress is not None:
            self.parked_plan = None
            self.state.plan_progress.pop(progress.plan_id, None)
        self._changed()

    def shelved_snapshot(self) -> DayState:
        """Snapshot that also records the active plan under its id, ready for a switch."""
        state = self.snapshot()
        if self.reading_plan is not None:
            state.plan_progress[self.reading_plan.plan_id] = self.reading_plan.model_copy(deep=True)
        return state

    def switch_reading_plan(self, progress: ReadingPlanProgress) -> None:
        """Shelves the active plan in `plan_progress` and activates another one."""
        current = self.reading_plan
        if current is not None and current.plan_id != progress.plan_id:
            self.state.plan_progress[current.plan_id] = current.model_copy(deep=True)
        self.set_reading_plan(progress)

    def park_reading_plan(self) -> None:
        if self.state.reading_plan is not None:
            self.parked_plan = self.state.reading_plan
            self.state.reading_plan = None

    def advance_reading_day(self) -> None:
        if self.reading_plan is not None:
            self.set_reading_plan(plans.advance_day(self.reading_plan))

    def retreat_reading_day(self) -> None:
        if self.reading_plan is not None:
            self.set_reading_plan(plans.retreat_day(self.reading_plan))

    def mark_reading_day_complete(self) -> None:
        if self.reading_plan is not None:
            self.set_reading_plan(plans.mark_current_day_complete(self.reading_plan))
