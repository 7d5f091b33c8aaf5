"""
Streak, completion-rate and goal statistics over a user's entries.

All functions are pure and total: empty input yields zeros. Dates are
calendar dates; an entry counts for the day it is keyed by.
"""

import math
from datetime import date, timedelta
from typing import Iterable, List, Sequence, Union

from daily_forge.core.dates import to_calendar_date
from daily_forge.entries.schemas import DayEntry
from daily_forge.goals.periods import windows_for
from daily_forge.goals.schemas import GOAL_KINDS
from daily_forge.stats.schemas import (
    GoalCompletion,
    GoalCompletionByType,
    LeadershipAverages,
    StatsResponse,
)

LEADERSHIP_TRAITS = ("wisdom", "courage", "patience", "integrity")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _days_descending(entries: Iterable[DayEntry]) -> List[date]:
    return sorted({entry.date for entry in entries}, reverse=True)


def current_streak(entries: Iterable[DayEntry], today: Union[date, str]) -> int:
    """
    Counts consecutive entry days ending today, or yesterday when today has
    no entry yet. Entries dated after today are ignored.
    """
    today = to_calendar_date(today)
    days = _days_descending(entries)
    anchor = today if today in days else today - timedelta(days=1)

    streak = 0
    for day in days:
        if day > anchor:
            continue
        if day != anchor:
            break
        streak += 1
        anchor -= timedelta(days=1)
    return streak


def longest_streak(entries: Iterable[DayEntry]) -> int:
    longest = 0
    running = 0
    previous = None
    for day in _days_descending(entries):
        if previous is not None and (previous - day).days == 1:
            running += 1
        else:
            running = 1
        longest = max(longest, running)
        previous = day
    return longest


def completion_rate(entries: Iterable[DayEntry], today: Union[date, str]) -> int:
    """
    Percentage of days with an entry between the first entry and today.
    """
    today = to_calendar_date(today)
    days = {day for day in _days_descending(entries) if day <= today}
    if not days:
        return 0
    span = (today - min(days)).days + 1
    return min(100, _round_half_up(len(days) / span * 100))


def entries_in_week(entries: Iterable[DayEntry], reference_date: Union[date, str]) -> int:
    windows = windows_for(reference_date)
    return len({entry.date for entry in entries if windows.in_week(entry.date)})


def goal_completion(entries: Iterable[DayEntry]) -> GoalCompletionByType:
    """Completed vs total goals per kind, summed over each entry's raw goal lists."""
    totals = {kind: [0, 0] for kind in GOAL_KINDS}
    for entry in entries:
        for kind in GOAL_KINDS:
            goals = entry.goals.of_kind(kind)
            totals[kind][0] += sum(1 for goal in goals if goal.completed)
            totals[kind][1] += len(goals)

    def _completion(completed: int, total: int) -> GoalCompletion:
        percentage = _round_half_up(completed / total * 100) if total else 0
        return GoalCompletion(completed=completed, total=total, percentage=percentage)

    return GoalCompletionByType(**{kind: _completion(*totals[kind]) for kind in GOAL_KINDS})


def leadership_averages(entries: Iterable[DayEntry]) -> LeadershipAverages:
    ratings = [entry.leadership_rating for entry in entries if entry.leadership_rating is not None]
    if not ratings:
        return LeadershipAverages()
    return LeadershipAverages(
        **{
            trait: round(sum(getattr(r, trait) for r in ratings) / len(ratings), 1)
            for trait in LEADERSHIP_TRAITS
        }
    )


def compute_stats(entries: Sequence[DayEntry], reference_date: Union[date, str]) -> StatsResponse:
    today = to_calendar_date(reference_date)
    return StatsResponse(
        current_streak=current_streak(entries, today),
        longest_streak=longest_streak(entries),
        completion_rate=completion_rate(entries, today),
        total_entries=len(entries),
        entries_this_week=entries_in_week(entries, today),
        goal_completion=goal_completion(entries),
        leadership_averages=leadership_averages(entries),
    )
