"""Async database configuration with PostgreSQL/SQLite support.

Uses asyncpg for PostgreSQL or aiosqlite for SQLite.
SQLModel provides the ORM layer on top of SQLAlchemy. The engine owns the
connection pool; it is built at startup from Settings and kept on
app.state. Each request borrows one session and always returns it.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel


def create_engine_for(database_url: str) -> AsyncEngine:
    """Create an async engine with settings appropriate for the backend."""
    engine_kwargs = {
        "echo": False,
        "future": True,
    }

    # SQLite needs special handling for async
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        database = make_url(database_url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
    else:
        engine_kwargs["pool_pre_ping"] = True

    return create_async_engine(database_url, **engine_kwargs)


def create_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(bind: AsyncEngine) -> None:
    """Initialize database and create all tables.

    Called on application startup. Safe to call multiple times -
    SQLModel only creates tables that don't exist.
    """
    # Import models to ensure they're registered with SQLModel.metadata
    from src.storage import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions.

    Uses the session factory the lifespan stored on app.state.

    Usage in FastAPI:
        @app.get("/items")
        async def get_items(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
