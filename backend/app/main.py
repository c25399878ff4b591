"""Items API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ItemsApiError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and worker pool initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One WorkerPool per process, stored on app.state and injected per request
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.infrastructure.database import init_db
from app.infrastructure.observability import setup_logging
from app.infrastructure.worker_pool import WorkerPool
from app.config import get_settings
from app.api.routes import health, items

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.worker_pool = WorkerPool(settings.processing_pool_size)
    logger.info(
        "Items API started",
        extra={"pool_capacity": settings.processing_pool_size},
    )
    yield
    logger.info("Items API shutting down")
    await manager.dispose()


app = FastAPI(
    title="Items API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(items.router)

register_error_handlers(app)
