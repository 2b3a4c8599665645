"""
API routers for the Tempo backend.

Each router handles a specific domain:
- tasks: Task CRUD, feeding the productivity aggregates
- categories: Per-user task categories
- productivity: Daily score, streak and history
- prioritize: Heuristic task re-prioritization
- dashboard: One-call summary of tasks, categories and counts
"""

from .tasks import router as tasks_router
from .categories import router as categories_router
from .productivity import router as productivity_router
from .prioritize import router as prioritize_router
from .dashboard import router as dashboard_router

__all__ = [
    'tasks_router',
    'categories_router',
    'productivity_router',
    'prioritize_router',
    'dashboard_router',
]
