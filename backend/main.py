"""
Tempo Planner FastAPI Backend

Main entry point for the API server.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas ensure type safety
- tempo.productivity holds scoring, streak and prioritization logic
- Repositories provide persistence via SQLite or PostgreSQL

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.routers import (
    tasks_router,
    categories_router,
    productivity_router,
    prioritize_router,
    dashboard_router,
)
from backend.dependencies import get_database, get_config
from tempo.core.errors import PersistenceError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup verifies the database exists; the app still starts without
    it so /health can report the problem.
    """
    try:
        db = get_database()
        config = get_config()
        logger.info("Database connected: %s", db.db_path)
        logger.info("Config loaded from: %s", config.config_dir)
    except FileNotFoundError as e:
        logger.error("%s", e)
        logger.error("Run 'python scripts/init_db.py' to create the database.")

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers registered."""
    app = FastAPI(
        title="Tempo Planner API",
        description="""
        Task tracking with productivity scoring and prioritization.

        ## Features

        - **Tasks**: Create, update, complete and delete tasks, and log time
        - **Categories**: Organise tasks per user
        - **Productivity**: Daily score, streak and weekly history
        - **Prioritize**: Raise priorities from due dates and work context
        - **Dashboard**: Tasks, categories and headline counts in one call
        """,
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure CORS for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Next.js dev server
            "http://localhost:5173",  # Vite dev server
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tasks_router)
    app.include_router(categories_router)
    app.include_router(productivity_router)
    app.include_router(prioritize_router)
    app.include_router(dashboard_router)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc,
                     exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "database operation failed"})

    @app.get("/")
    async def root():
        """API root - returns basic info and available endpoints."""
        return {
            "name": "Tempo Planner API",
            "version": "1.0.0",
            "docs": "/docs",
            "endpoints": {
                "tasks": "/tasks",
                "categories": "/categories",
                "productivity": "/productivity/today",
                "prioritize": "/prioritize",
                "dashboard": "/dashboard",
            }
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        try:
            db = get_database()
            db.execute_one("SELECT 1")
            return {"status": "healthy", "database": "connected"}
        except (FileNotFoundError, PersistenceError) as e:
            return {"status": "unhealthy", "error": str(e)}

    return app


app = create_app()


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
