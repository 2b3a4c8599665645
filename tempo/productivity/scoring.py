"""
Productivity score for a single day.

Score formula (0-100):
    score = completion (x4) + completion rate (up to 30)
            + streak bonus (up to 20) + same-day bonus (up to 10)

Raw completion volume carries the most weight; the streak and same-day
bonuses are capped so neither alone can produce a high score.
"""

import math

COMPLETION_POINTS = 4
COMPLETION_RATE_POINTS = 30
STREAK_POINTS_PER_DAY = 2
STREAK_POINTS_CAP = 20
TODAY_POINTS_PER_TASK = 3
TODAY_POINTS_CAP = 10
MAX_SCORE = 100


def _round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (round() is banker's)."""
    return int(math.floor(value + 0.5))


def calculate_productivity_score(
    tasks_completed: int,
    tasks_created: int,
    streak_days: int,
    today_completed: int
) -> int:
    """
    Calculate the productivity score (0-100).

    Negative inputs are treated as 0, so the function is total and
    never raises.

    Args:
        tasks_completed: Tasks completed on the day
        tasks_created: Tasks created on the day
        streak_days: Current streak length in days
        today_completed: Tasks completed today (normally == tasks_completed)

    Returns:
        Integer score between 0 and 100
    """
    tasks_completed = max(0, tasks_completed)
    tasks_created = max(0, tasks_created)
    streak_days = max(0, streak_days)
    today_completed = max(0, today_completed)

    completion_score = tasks_completed * COMPLETION_POINTS

    # How well you finish what you start
    completion_rate = min(tasks_completed / max(tasks_created, 1), 1)
    completion_rate_score = completion_rate * COMPLETION_RATE_POINTS

    consistency_score = min(streak_days * STREAK_POINTS_PER_DAY, STREAK_POINTS_CAP)

    today_score = min(today_completed * TODAY_POINTS_PER_TASK, TODAY_POINTS_CAP)

    total = completion_score + completion_rate_score + consistency_score + today_score

    return _round_half_up(min(MAX_SCORE, total))
