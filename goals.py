from typing import Iterable

from models import Goal, GoalProgress


def goal_progress(goal: Goal) -> GoalProgress:
    if goal.target_amount > 0:
        progress = goal.current_amount / goal.target_amount * 100
    else:
        progress = 0
    return GoalProgress(
        goal=goal,
        progress=progress,
        remaining=max(0, goal.target_amount - goal.current_amount),
    )


def sort_goals(goals: Iterable[Goal]) -> list[Goal]:
    return sorted(goals, key=lambda goal: goal.deadline)
