from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from daily_forge.core.schemas import BaseSchema
from daily_forge.goals.schemas import GoalsByType, normalize_goal_id
from daily_forge.reading_plans.schemas import ReadingPlanProgress

Emotion = Literal["sad", "angry", "scared", "happy", "excited", "tender"]


class CheckIn(BaseSchema):
    emotions: List[Emotion] = []
    feeling: str = ""


class Soap(BaseSchema):
    scripture: str = ""
    observation: str = ""
    application: str = ""
    prayer: str = ""
    thoughts: Optional[str] = None


class LeadershipRating(BaseSchema):
    wisdom: int = 0
    courage: int = 0
    patience: int = 0
    integrity: int = 0


def _normalize_tombstones(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        seen = []
        for raw in value:
            goal_id = normalize_goal_id(raw)
            if goal_id is not None and goal_id not in seen:
                seen.append(goal_id)
        return seen
    return value


class DayState(BaseSchema):
    """In-memory state of one day: goals, reading plan and reflection fields."""

    goals: GoalsByType = Field(default_factory=GoalsByType)
    deleted_goal_ids: List[str] = []
    reading_plan: Optional[ReadingPlanProgress] = None
    # Progress of plans switched away from on this day, keyed by plan id.
    plan_progress: Dict[str, ReadingPlanProgress] = {}
    check_in: Optional[CheckIn] = None
    gratitude: List[str] = []
    soap: Optional[Soap] = None
    daily_intention: Optional[str] = None
    growth_question: Optional[str] = None
    leadership_rating: Optional[LeadershipRating] = None

    normalize_tombstones = field_validator("deleted_goal_ids", mode="before")(_normalize_tombstones)


class DayEntry(DayState):
    date: date
    completed: bool = False


class DayStateUpdate(BaseSchema):
    """Partial day state; only the fields that are set are applied."""

    goals: Optional[GoalsByType] = None
    deleted_goal_ids: Optional[List[str]] = None
    reading_plan: Optional[ReadingPlanProgress] = None
    plan_progress: Optional[Dict[str, ReadingPlanProgress]] = None
    check_in: Optional[CheckIn] = None
    gratitude: Optional[List[str]] = None
    soap: Optional[Soap] = None
    daily_intention: Optional[str] = None
    growth_question: Optional[str] = None
    leadership_rating: Optional[LeadershipRating] = None

    normalize_tombstones = field_validator("deleted_goal_ids", mode="before")(_normalize_tombstones)
