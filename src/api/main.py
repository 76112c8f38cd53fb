"""Short URL service - FastAPI Application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_error_handlers
from src.api.routes import accounts, health, links
from src.core.config import APP_VERSION, get_settings
from src.core.logging import configure_logging
from src.storage.database import create_engine_for, create_session_factory, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = create_engine_for(settings.database_url)
    await init_db(engine)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Database ready")
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Short URL",
    description="Account lifecycle and short-link service",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(accounts.router)
app.include_router(links.router)
# Catch-all /{code} goes last
app.include_router(links.resolver)
