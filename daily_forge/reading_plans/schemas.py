import logging
from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from daily_forge.core.schemas import BaseSchema

logger = logging.getLogger(__name__)


class PlanStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    # Left unfinished for another plan.
    ABANDONED = "abandoned"


class ReadingPlanProgress(BaseSchema):
    plan_id: str
    plan_name: str = ""
    current_day: int = 1
    total_days: int = Field(ge=1)
    start_date: date
    completed_days: List[int] = []
    bible_id: Optional[str] = None

    @field_validator("completed_days", mode="before")
    @classmethod
    def _unique_days(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set, frozenset)):
            return sorted({int(day) for day in value})
        return value

    @model_validator(mode="after")
    def _within_plan(self) -> "ReadingPlanProgress":
        in_range = [day for day in self.completed_days if 1 <= day <= self.total_days]
        if len(in_range) != len(self.completed_days):
            logger.warning(
                f"Dropping out-of-range completed days for plan '{self.plan_id}': "
                f"{sorted(set(self.completed_days) - set(in_range))}"
            )
            self.completed_days = in_range
        if not 1 <= self.current_day <= self.total_days:
            clamped = min(max(self.current_day, 1), self.total_days)
            logger.warning(
                f"Clamping current day {self.current_day} of plan '{self.plan_id}' to {clamped}"
            )
            self.current_day = clamped
        return self


class ReadingPlanSummary(BaseSchema):
    id: str
    name: str
    description: str
    duration: int


class Verse(BaseSchema):
    reference: str
    content: str
    verse_id: str


class Devotion(BaseSchema):
    date: date
    plan_id: str
    day: int
    title: str
    reference: str
    verses: List[Verse] = []
