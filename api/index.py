"""
Serverless handler for the Tempo Planner API.

Wraps the same FastAPI app that `uvicorn backend.main:app` serves, so
tasks, categories, productivity, prioritize and dashboard routes all
run unchanged on Vercel or AWS Lambda.

The deployment is expected to set DATABASE_URL: a serverless filesystem
has no persistent SQLite file, so daily aggregates only survive between
invocations in PostgreSQL.
"""

import logging
import os
import sys
from pathlib import Path

# backend/ and tempo/ live one level up
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from mangum import Mangum

from backend.main import create_app

logger = logging.getLogger(__name__)

if not os.environ.get("DATABASE_URL"):
    logger.warning("DATABASE_URL is not set; falling back to the bundled SQLite file")

app = create_app()

# No startup checks here; /health reports database connectivity
handler = Mangum(app, lifespan="off")
