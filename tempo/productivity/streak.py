"""
Streak calculation over the daily aggregate history.

A qualifying day has at least one completed task. The streak counts
consecutive qualifying days ending today, or ending yesterday when today
has not qualified yet. A day with no aggregate row breaks the streak the
same way a day with zero completions does.
"""

from datetime import date, timedelta
from typing import Optional, Sequence

from tempo.core.models import DailyStats

# Fixed policy: at most this many rows are ever inspected
STREAK_LOOKBACK_DAYS = 30


def _find_day(history: Sequence[DailyStats], day: date) -> Optional[DailyStats]:
    for stats in history:
        if stats.day == day:
            return stats
    return None


def calculate_streak_days(history: Sequence[DailyStats], today: date) -> int:
    """
    Count consecutive qualifying days.

    Args:
        history: Aggregate rows for one user, newest first
        today: The caller's current calendar day

    Returns:
        Streak length in days (0 when history is empty)
    """
    window = list(history[:STREAK_LOOKBACK_DAYS])
    if not window:
        return 0

    today_stats = _find_day(window, today)
    if today_stats is not None and today_stats.is_qualifying():
        expected = today
    else:
        expected = today - timedelta(days=1)

    streak = 0
    for stats in window:
        if stats.day is None or stats.day > expected:
            # Rows after the anchor (an unqualified today) don't count
            continue
        if stats.day != expected or not stats.is_qualifying():
            break
        streak += 1
        expected -= timedelta(days=1)

    return streak
