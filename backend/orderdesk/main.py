"""orderdesk API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OrderDeskError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Procedure gateway initialized on startup, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk.api.error_handlers import register_error_handlers
from orderdesk.api.routes import catalog, health, orders
from orderdesk.config import get_settings
from orderdesk.infrastructure.database import init_db
from orderdesk.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    gateway = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if not settings.api_key:
        logger.warning("API_KEY is not set; all guarded routes will return 401")
    logger.info("orderdesk API started")
    yield
    await gateway.dispose()
    logger.info("orderdesk API shutting down")


app = FastAPI(
    title="orderdesk API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.public_router)
app.include_router(health.router)
app.include_router(catalog.customer_router)
app.include_router(catalog.product_router)
app.include_router(orders.router)

register_error_handlers(app)
