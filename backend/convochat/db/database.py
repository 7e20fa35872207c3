"""
Database connection and session management using SQLAlchemy async.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs.
"""
from datetime import datetime, timezone
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from convochat.core.config import settings


# Seconds a waiting SQLite writer keeps trying beyond the longest model call
SQLITE_LOCK_MARGIN_S = 15


def engine_options(database_url: str) -> dict:
    """
    Driver options for ``database_url``.

    SQLite locks the whole database for writing, and a chat turn holds that
    lock from its first write until its commit, which comes after the model
    call. Other writers therefore wait up to one model timeout; the driver's
    default 5 s busy timeout would fail them with "database is locked".
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"timeout": settings.AI_TIMEOUT_MS / 1000 + SQLITE_LOCK_MARGIN_S}}
    return {}


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    future=True,
    pool_pre_ping=True,  # Verify connections before using them
    **engine_options(settings.DATABASE_URL),
)


if engine.dialect.name == "sqlite":
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE CASCADE unless asked per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def get_db() -> AsyncSession:
    """
    Dependency yielding one session per request.

    The session is not committed here: services end their own unit of work
    with commit/rollback, and anything left open is discarded on close.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind=None):
    """
    Create all tables on ``bind`` (the application engine by default).
    Called on application startup and by the setup check script.
    """
    async with (bind or engine).begin() as conn:
        # Models must be imported so their tables are on Base.metadata
        from convochat.models import user, conversation, message  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)
