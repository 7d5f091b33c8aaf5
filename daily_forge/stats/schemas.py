from daily_forge.core.schemas import BaseSchema


class GoalCompletion(BaseSchema):
    completed: int = 0
    total: int = 0
    percentage: int = 0


class GoalCompletionByType(BaseSchema):
    daily: GoalCompletion = GoalCompletion()
    weekly: GoalCompletion = GoalCompletion()
    monthly: GoalCompletion = GoalCompletion()


class LeadershipAverages(BaseSchema):
    wisdom: float = 0.0
    courage: float = 0.0
    patience: float = 0.0
    integrity: float = 0.0


class StatsResponse(BaseSchema):
    current_streak: int = 0
    longest_streak: int = 0
    completion_rate: int = 0
    total_entries: int = 0
    entries_this_week: int = 0
    goal_completion: GoalCompletionByType = GoalCompletionByType()
    leadership_averages: LeadershipAverages = LeadershipAverages()
