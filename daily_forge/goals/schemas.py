from typing import Any, List, Literal, Optional

from pydantic import field_validator

from daily_forge.core.schemas import BaseSchema

GoalKind = Literal["daily", "weekly", "monthly"]
GOAL_KINDS = ("daily", "weekly", "monthly")

Priority = Literal["low", "medium", "high"]
Category = Literal["spiritual", "personal", "outreach", "health", "work"]


def normalize_goal_id(value: Any) -> Optional[str]:
    """
    Returns the canonical string form of a goal id, or None when absent.

    Numeric ids (e.g. 1700000000000 or 1700000000000.0) and their string
    spellings normalize to the same value.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


class Goal(BaseSchema):
    id: Optional[str] = None
    text: str = ""
    description: Optional[str] = None
    completed: bool = False
    priority: Priority = "medium"
    category: Category = "spiritual"

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Optional[str]:
        return normalize_goal_id(value)


class GoalsByType(BaseSchema):
    daily: List[Goal] = []
    weekly: List[Goal] = []
    monthly: List[Goal] = []

    def of_kind(self, kind: GoalKind) -> List[Goal]:
        return getattr(self, kind)

    def is_empty(self) -> bool:
        return not (self.daily or self.weekly or self.monthly)
