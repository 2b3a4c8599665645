"""
Core module for Tempo Planner
Contains database, configuration, repositories and model definitions
"""

from .config import Config
from .database import Database, SQLiteDatabase, PostgreSQLDatabase, get_database
from .errors import TempoError, PersistenceError
from .models import Task, Category, DailyStats, PriorityUpdate
from .repositories import CategoryRepository, TaskRepository, DailyStatsRepository

__all__ = [
    'Config',
    'Database', 'SQLiteDatabase', 'PostgreSQLDatabase', 'get_database',
    'TempoError', 'PersistenceError',
    'Task', 'Category', 'DailyStats', 'PriorityUpdate',
    'CategoryRepository', 'TaskRepository', 'DailyStatsRepository',
]
