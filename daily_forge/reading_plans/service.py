import logging
from datetime import date
from typing import Iterable, List, Optional

from daily_forge.core.config import DEFAULT_BIBLE_ID
from daily_forge.entries.schemas import DayEntry
from daily_forge.reading_plans.schemas import PlanStatus, ReadingPlanProgress

logger = logging.getLogger(__name__)


def _plan_records(entry: DayEntry) -> List[ReadingPlanProgress]:
    records = [entry.reading_plan] if entry.reading_plan is not None else []
    return records + list(entry.plan_progress.values())


def resolve_progress(entries: Iterable[DayEntry], plan_id: str) -> Optional[ReadingPlanProgress]:
    """
    Finds the furthest-advanced progress record for a plan across all entries.

    Both the active plan of each entry and the progress of plans switched
    away from on that day are candidates.

    Only records with at least one completed day are candidates, so a freshly
    started record never overrides progress made elsewhere. The record with
    the most completed days wins; ties go to the most recent entry date.

    Args:
        entries (Iterable[DayEntry]): All of the user's entries.
        plan_id (str): Plan identifier to look for.

    Returns:
        Optional[ReadingPlanProgress]: A copy of the best record, or None.
    """
    best: Optional[ReadingPlanProgress] = None
    best_date: Optional[date] = None

    for entry in entries:
        for progress in _plan_records(entry):
            if progress.plan_id != plan_id:
                continue
            done = len(progress.completed_days)
            if done == 0:
                continue
            if best is None or done > len(best.completed_days) or (
                done == len(best.completed_days) and entry.date > best_date
            ):
                best, best_date = progress, entry.date

    if best is None:
        return None
    logger.debug(f"Resolved plan '{plan_id}' from entry {best_date} with {len(best.completed_days)} completed days")
    return best.model_copy(deep=True)


def new_progress(
    plan_id: str,
    plan_name: str,
    total_days: int,
    today: date,
    bible_id: Optional[str] = None,
) -> ReadingPlanProgress:
    return ReadingPlanProgress(
        plan_id=plan_id,
        plan_name=plan_name,
        current_day=1,
        total_days=total_days,
        start_date=today,
        completed_days=[],
        bible_id=bible_id,
    )


def _with_day_completed(progress: ReadingPlanProgress, day: int) -> List[int]:
    return sorted(set(progress.completed_days) | {day})


def advance_day(progress: ReadingPlanProgress) -> ReadingPlanProgress:
    """
    Marks the current day complete and moves to the next one.

    No-op at the last day of the plan.
    """
    if progress.current_day >= progress.total_days:
        return progress.model_copy(deep=True)
    return progress.model_copy(
        update={
            "current_day": progress.current_day + 1,
            "completed_days": _with_day_completed(progress, progress.current_day),
            "bible_id": progress.bible_id or DEFAULT_BIBLE_ID,
        },
        deep=True,
    )


def retreat_day(progress: ReadingPlanProgress) -> ReadingPlanProgress:
    """
    Moves back one day. Completed days are left untouched.

    No-op at day 1.
    """
    if progress.current_day <= 1:
        return progress.model_copy(deep=True)
    return progress.model_copy(
        update={
            "current_day": progress.current_day - 1,
            "bible_id": progress.bible_id or DEFAULT_BIBLE_ID,
        },
        deep=True,
    )


def mark_current_day_complete(progress: ReadingPlanProgress) -> ReadingPlanProgress:
    return progress.model_copy(
        update={"completed_days": _with_day_completed(progress, progress.current_day)},
        deep=True,
    )


def restart(progress: ReadingPlanProgress, today: date) -> ReadingPlanProgress:
    return progress.model_copy(
        update={"current_day": 1, "completed_days": [], "start_date": today},
        deep=True,
    )


def plan_status(progress: Optional[ReadingPlanProgress], active_plan_id: Optional[str] = None) -> PlanStatus:
    """
    Lifecycle state of a progress record. Passing the id of the plan the user
    currently follows marks an unfinished record of another plan as abandoned.
    """
    if progress is None or (not progress.completed_days and progress.current_day == 1):
        return PlanStatus.NOT_STARTED
    if len(progress.completed_days) >= progress.total_days:
        return PlanStatus.COMPLETED
    if active_plan_id is not None and active_plan_id != progress.plan_id:
        return PlanStatus.ABANDONED
    return PlanStatus.IN_PROGRESS


def progress_percentage(progress: ReadingPlanProgress) -> int:
    return int(len(progress.completed_days) / progress.total_days * 100 + 0.5)
