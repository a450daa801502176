"""
Course Dashboard FastAPI Backend

This is the main entry point for the API server that exposes the
dashboard aggregation engine to the browser extension.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas ensure type safety and camelCase output
- DashboardAggregator handles all business logic
- EduSphere course service provides the raw records
- SQLite user directory resolves email to user id and role

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
import re
import sys
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Iterable, List, Optional, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from backend.routers import extension_router
from backend.dependencies import get_config, get_user_directory

logger = logging.getLogger(__name__)


def split_origins(origins: Iterable[str]) -> Tuple[List[str], Optional[str]]:
    """
    Split configured CORS origins into exact origins and one regex.

    Starlette only matches exact origins (or "*"), so entries with a
    wildcard such as "chrome-extension://*" are folded into a regex.
    """
    exact = []
    patterns = []
    for origin in origins:
        if origin == "*" or "*" not in origin:
            exact.append(origin)
        else:
            patterns.append(re.escape(origin).replace(r"\*", "[^/]+"))

    regex = "^(" + "|".join(patterns) + ")$" if patterns else None
    return exact, regex


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs startup and shutdown tasks:
    - Startup: Configure logging, verify the user directory
    - Shutdown: Log
    """
    config = get_config()
    logging.basicConfig(
        level=str(config.get("log_level", default="INFO")).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Config loaded from: {config.config_dir}")
    logger.info(f"EduSphere service: {config.get_service_url()}")

    try:
        directory = get_user_directory()
        logger.info(f"User directory connected: {directory.db.db_path}")
    except FileNotFoundError as e:
        # Allow app to start; user lookups fail until the database exists
        logger.error(f"{e}")

    yield

    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Course Dashboard API",
    description="""
    Dashboard aggregation for the course browser extension.

    ## Features

    - **Dashboard**: Tasks, meetings and announcements merged and prioritized
    - **Tasks**: Filter by status, priority and type
    - **Announcements**: Announcements addressed to the user
    - **Stats**: Counters and completion rate for badges
    - **Urgent**: Only the urgent items, soonest due first
    - **Meetings**: Raw meeting details for joining
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for the browser extension
_exact_origins, _origin_regex = split_origins(get_config().get("allowed_origins", default=[]))
app.add_middleware(
    CORSMiddleware,
    allow_origins=_exact_origins,
    allow_origin_regex=_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(extension_router)


@app.get("/")
async def root():
    """API root - returns basic info and available endpoints."""
    return {
        "name": "Course Dashboard API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "dashboard": "/api/extension/dashboard",
            "tasks": "/api/extension/tasks",
            "announcements": "/api/extension/announcements",
            "stats": "/api/extension/stats",
            "urgent": "/api/extension/urgent",
            "meeting": "/api/extension/meeting/{meeting_id}",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "Course Dashboard API"}


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
