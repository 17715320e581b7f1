"""
Estate CRM Backend - FastAPI Application
Main entry point with all routes configured.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from estate_crm import __version__
from estate_crm.config import settings
from estate_crm.core.exceptions import register_exception_handlers
from estate_crm.core.logging_config import setup_logging
from estate_crm.database import init_db, async_session_maker
from estate_crm.schemas.common import HealthResponse
from estate_crm.services.score_sync_service import run_score_sync

# Import all API routers
from estate_crm.api import auth, users, prospects, scoring, interactions, deliveries, payments, rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    await init_db()
    if settings.SCORE_SYNC_ON_STARTUP:
        async with async_session_maker() as session:
            report = await run_score_sync(session)
        logger.info(f"Startup score sync updated {report.updated} of {report.scanned} prospects")
    yield
    # Shutdown


app = FastAPI(
    title="Estate CRM API",
    description="Prospect management and lead prioritization for real-estate agents",
    version=__version__,
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL] if not settings.DEV_MODE else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include all routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(prospects.router)
app.include_router(scoring.router)
app.include_router(interactions.router)
app.include_router(deliveries.router)
app.include_router(payments.router)
app.include_router(rules.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "Estate CRM API is running",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Detailed health check."""
    return HealthResponse(version=__version__)
