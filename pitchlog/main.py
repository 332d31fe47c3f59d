"""
Main FastAPI application for the PitchLog match analytics API.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

# Load environment variables from .env before the settings module reads them
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from pitchlog.core.config import settings  # noqa: E402
from pitchlog.core.database import get_db, init_db  # noqa: E402
from pitchlog.core.logging import configure_logging, get_logger  # noqa: E402
from pitchlog.core.middleware import CorrelationIdMiddleware  # noqa: E402
from pitchlog.api.routes import campaign, duels, stats  # noqa: E402

configure_logging(
    level=settings.LOG_LEVEL,
    json_output=settings.LOG_JSON  # False gives colored output for development
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    init_db()
    logger.info("Campaign tables ready")

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Streaks, morale, teammate/opponent impact and World Cup campaign tracking for a logged football player",
    lifespan=lifespan
)

# Add correlation ID middleware (must be added before CORS for proper header handling)
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# ROUTE REGISTRATION
# ============================================================================
#
# Routers carry their full prefix (/api/{feature}) and are mounted as-is:
#   - stats:    pure recomputation over a posted match list
#   - duels:    pure recomputation over a posted match list
#   - campaign: persisted ledger, the only routes that use the database
#
# ============================================================================

app.include_router(stats.router)
app.include_router(duels.router)
app.include_router(campaign.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "endpoints": {
            "stats": {
                "records": "/api/stats/records",
                "current_streaks": "/api/stats/streaks/current",
                "morale": "/api/stats/morale",
                "goal_progress": "/api/stats/goal-progress",
                "achievements": "/api/stats/achievements/evaluate",
                "slices": "/api/stats/slices"
            },
            "duels": {
                "tables": "/api/duels",
                "players": "/api/duels/players",
                "profile": "/api/duels/players/{name}"
            },
            "campaign": {
                "state": "/api/campaign",
                "matches": "/api/campaign/matches",
                "clear_champion": "/api/campaign/clear-champion",
                "rebuild": "/api/campaign/rebuild"
            },
            "docs": "/docs",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


@app.get("/api/health")
def api_health(db: Session = Depends(get_db)):
    """Detailed API health check with database status."""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "components": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {"status": "connected"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }
        health_status["status"] = "degraded"
    return health_status


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("pitchlog.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
