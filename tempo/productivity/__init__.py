"""
Productivity module for Tempo Planner.

Provides the productivity score, streak calculation, daily aggregate
maintenance, and deterministic task prioritization.
"""

from .scoring import calculate_productivity_score
from .streak import STREAK_LOOKBACK_DAYS, calculate_streak_days
from .tracker import ProductivityTracker
from .prioritizer import (
    PrioritizationStrategy,
    HeuristicPrioritizer,
    compute_priority,
    days_until_due,
    get_prioritizer,
)

__all__ = [
    # Scoring
    'calculate_productivity_score',
    # Streaks
    'STREAK_LOOKBACK_DAYS',
    'calculate_streak_days',
    # Aggregates
    'ProductivityTracker',
    # Prioritization
    'PrioritizationStrategy',
    'HeuristicPrioritizer',
    'compute_priority',
    'days_until_due',
    'get_prioritizer',
]
