import logging
from datetime import date
from typing import Iterable, List, Literal, Optional, Sequence, Set, Union

from daily_forge.core.dates import to_calendar_date
from daily_forge.entries.schemas import DayEntry
from daily_forge.goals.periods import PeriodWindows, windows_for
from daily_forge.goals.schemas import Goal, GoalKind, GoalsByType, normalize_goal_id

logger = logging.getLogger(__name__)

# "first_seen": the first entry in scan order wins a duplicated id.
# "latest_entry": entries are scanned newest date first, so the latest snapshot wins.
TieBreak = Literal["first_seen", "latest_entry"]


def collect_tombstones(entries: Iterable[DayEntry]) -> Set[str]:
    """
    Unions every deleted goal id recorded on any of a user's entries.

    Args:
        entries (Iterable[DayEntry]): All of the user's day entries.

    Returns:
        Set[str]: Canonical goal ids that must never resurface.
    """
    tombstones: Set[str] = set()
    for entry in entries:
        for raw_id in entry.deleted_goal_ids or []:
            goal_id = normalize_goal_id(raw_id)
            if goal_id is not None:
                tombstones.add(goal_id)
    return tombstones


def _accept(goal: Goal, kind: GoalKind, tombstones: Set[str], seen: Set[str], source: date) -> bool:
    if goal.id is None:
        logger.warning(f"Dropping {kind} goal without id from entry {source}: {goal.text!r}")
        return False
    if goal.id in tombstones:
        logger.debug(f"Filtered tombstoned {kind} goal {goal.id} from entry {source}")
        return False
    return goal.id not in seen


def _live_goals(goals: Sequence[Goal], kind: GoalKind, tombstones: Set[str], source: date) -> List[Goal]:
    result: List[Goal] = []
    seen: Set[str] = set()
    for goal in goals:
        if _accept(goal, kind, tombstones, seen, source):
            result.append(goal.model_copy(deep=True))
            seen.add(goal.id)
    return result


def _union_from_window(
    result: List[Goal],
    kind: GoalKind,
    others: Sequence[DayEntry],
    windows: PeriodWindows,
    tombstones: Set[str],
) -> None:
    seen = {goal.id for goal in result}
    in_window = windows.in_week if kind == "weekly" else windows.in_month
    for entry in others:
        if not in_window(entry.date):
            continue
        for goal in entry.goals.of_kind(kind):
            if _accept(goal, kind, tombstones, seen, entry.date):
                result.append(goal.model_copy(deep=True))
                seen.add(goal.id)


def aggregate_goals(
    entries: Sequence[DayEntry],
    reference_date: Union[date, str],
    current_goals: Optional[GoalsByType] = None,
    tie_break: TieBreak = "first_seen",
) -> GoalsByType:
    """
    Computes the current daily, weekly and monthly goals for a reference date.

    Daily goals come only from the reference date's own goals. Weekly and
    monthly goals start from the reference date's snapshot and are unioned,
    by id, with the snapshots of every other entry inside the same week or
    month window. Tombstoned ids and goals without an id never appear.

    Args:
        entries (Sequence[DayEntry]): All of the user's entries.
        reference_date (date | str): The day being viewed.
        current_goals (Optional[GoalsByType]): In-memory goals of the day being
            viewed. Defaults to the stored entry for the reference date.
        tie_break (TieBreak): Which snapshot wins when an id appears in
            several entries with different contents.

    Returns:
        GoalsByType: The aggregated goal lists.
    """
    day = to_calendar_date(reference_date)
    tombstones = collect_tombstones(entries)
    windows = windows_for(day)

    if current_goals is None:
        current = next((e for e in entries if e.date == day), None)
        current_goals = current.goals if current is not None else GoalsByType()

    others = [entry for entry in entries if entry.date != day]
    if tie_break == "latest_entry":
        others = sorted(others, key=lambda e: e.date, reverse=True)

    daily = _live_goals(current_goals.daily, "daily", tombstones, day)
    weekly = _live_goals(current_goals.weekly, "weekly", tombstones, day)
    monthly = _live_goals(current_goals.monthly, "monthly", tombstones, day)

    _union_from_window(weekly, "weekly", others, windows, tombstones)
    _union_from_window(monthly, "monthly", others, windows, tombstones)

    return GoalsByType(daily=daily, weekly=weekly, monthly=monthly)
