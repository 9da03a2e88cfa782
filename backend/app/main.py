from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.api.routes import router
from app.core.config import ScoringConfig, settings
from app.core.cors import setup_cors
from app.core.logging import setup_logging, get_logger
from app.db.database import database_reachable, init_database

setup_logging()
logger = get_logger(__name__)

API_TITLE = "Triage Scoring API"
API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the store schema and report whether snapshot reads will work."""
    init_database()
    if database_reachable():
        logger.info(f"Report store ready at {settings.db_path}")
    else:
        logger.warning(
            f"Report store at {settings.db_path} is not readable; "
            f"ranking endpoints will answer 503 until it is"
        )
    logger.info(f"Scoring config: {ScoringConfig.from_settings()}")
    if settings.frozen_now is not None:
        logger.warning(f"Request clock frozen at {settings.frozen_now.isoformat()}")

    yield

    logger.info(f"{API_TITLE} stopped")


app = FastAPI(
    title=API_TITLE,
    description="Priority ranking for unassigned incident reports and team workload metrics",
    version=API_VERSION,
    lifespan=lifespan
)

setup_cors(app)
app.include_router(router)


@app.get("/")
async def root():
    """Service index."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "endpoints": [route.path for route in router.routes],
        "health": "/api/health"
    }
