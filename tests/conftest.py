"""Shared fixtures and configuration for pytest."""

import os

# Configure before any daily_forge module reads the environment.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["SCRIPTURE_API_KEY"] = "test-key"
os.environ["AUTOSAVE_DEBOUNCE_SECONDS"] = "0"

from datetime import date
from typing import Any, Dict, Iterable, Optional

import pytest
from jose import jwt

from daily_forge.entries.repository import InMemoryEntryRepository
from daily_forge.entries.schemas import DayEntry
from daily_forge.goals.schemas import Goal, GoalsByType
from daily_forge.reading_plans.schemas import ReadingPlanProgress


# =============================================================================
# Builders
# =============================================================================

def make_goal(goal_id: Any, text: str = "", completed: bool = False, **fields: Any) -> Goal:
    return Goal(id=goal_id, text=text or f"goal {goal_id}", completed=completed, **fields)


def make_entry(
    day: date,
    daily: Iterable[Goal] = (),
    weekly: Iterable[Goal] = (),
    monthly: Iterable[Goal] = (),
    deleted: Iterable[Any] = (),
    reading_plan: Optional[ReadingPlanProgress] = None,
    **fields: Any,
) -> DayEntry:
    return DayEntry(
        date=day,
        goals=GoalsByType(daily=list(daily), weekly=list(weekly), monthly=list(monthly)),
        deleted_goal_ids=list(deleted),
        reading_plan=reading_plan,
        **fields,
    )


def make_progress(
    plan_id: str = "warrior-psalms",
    completed_days: Iterable[int] = (),
    current_day: int = 1,
    total_days: int = 30,
    start_date: date = date(2024, 1, 1),
) -> ReadingPlanProgress:
    return ReadingPlanProgress(
        plan_id=plan_id,
        plan_name=plan_id.replace("-", " ").title(),
        current_day=current_day,
        total_days=total_days,
        start_date=start_date,
        completed_days=list(completed_days),
    )


def make_token(claims: Dict[str, Any], secret: str = "test-secret") -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def repository() -> InMemoryEntryRepository:
    return InMemoryEntryRepository()


@pytest.fixture
def user_id() -> str:
    return "user-1"


@pytest.fixture
def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token({'sub': user_id})}"}
