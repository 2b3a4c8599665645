"""
Dashboard module for Tempo Planner
Summarises a user's tasks and cached productivity fields
"""

from .aggregator import DashboardAggregator, DashboardData, DashboardStats

__all__ = [
    'DashboardAggregator',
    'DashboardData',
    'DashboardStats',
]
