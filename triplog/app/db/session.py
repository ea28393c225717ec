"""
Local database: engine, sessions and schema creation.

Users, the audit trail and notifications always live here; trips live here
unless the spreadsheet backend is configured. PostgreSQL runs through
asyncpg, SQLite (development and tests) through aiosqlite.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from triplog.app.core.config import settings


def engine_options(database_url: str) -> dict:
    """Pool sizing only applies to server databases; SQLite rejects it."""
    options = {"echo": settings.db_echo, "future": True}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create every table that does not exist yet."""
    # Registers the tables on Base.metadata.
    from triplog.app.models import audit_log, notification, trip, user  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    """FastAPI dependency yielding one session per request."""
    async with AsyncSessionLocal() as session:
        yield session
