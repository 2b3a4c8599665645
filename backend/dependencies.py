"""
Dependency injection for FastAPI endpoints.

Provides singleton instances of Database and Config, plus per-request
repositories, the productivity tracker and the prioritization strategy.

Tests replace get_config / get_database / get_now through
app.dependency_overrides; everything else is derived from those.
"""

from datetime import datetime
from functools import lru_cache

from fastapi import Depends, Header

from tempo.core.config import Config
from tempo.core.database import Database, get_database as open_database
from tempo.core.repositories import (
    CategoryRepository,
    DailyStatsRepository,
    TaskRepository,
)
from tempo.dashboard import DashboardAggregator
from tempo.productivity import PrioritizationStrategy, ProductivityTracker, get_prioritizer


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache ensures we only create one Config instance
    for the lifetime of the application (singleton pattern).
    """
    return Config()


@lru_cache()
def get_database() -> Database:
    """
    Get cached Database instance.

    Connections are opened per query, so one instance is shared.
    """
    return open_database(get_config().get_database_path())


def get_now(config: Config = Depends(get_config)) -> datetime:
    """Current time in the configured timezone."""
    return config.now()


def get_current_user_id(x_user_id: str = Header(..., min_length=1)) -> str:
    """
    Identify the calling user.

    Authentication happens in front of this service; it forwards the
    authenticated user's id in the X-User-Id header.
    """
    return x_user_id


def get_task_repository(db: Database = Depends(get_database)) -> TaskRepository:
    return TaskRepository(db)


def get_category_repository(db: Database = Depends(get_database)) -> CategoryRepository:
    return CategoryRepository(db)


def get_tracker(
    db: Database = Depends(get_database),
    config: Config = Depends(get_config),
) -> ProductivityTracker:
    """Get ProductivityTracker whose calendar day follows the configured timezone."""
    return ProductivityTracker(DailyStatsRepository(db), config.today)


def get_prioritization_strategy(
    tasks: TaskRepository = Depends(get_task_repository),
    config: Config = Depends(get_config),
) -> PrioritizationStrategy:
    """Get the prioritizer selected by the 'prioritizer' preference."""
    name = config.get("prioritizer", "preferences", "heuristic")
    return get_prioritizer(name, tasks, config)


def get_dashboard_aggregator(db: Database = Depends(get_database)) -> DashboardAggregator:
    """Get DashboardAggregator over the request's repositories."""
    return DashboardAggregator(
        TaskRepository(db),
        CategoryRepository(db),
        DailyStatsRepository(db),
    )
