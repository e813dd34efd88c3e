"""
Wildwood Zoo Backend — Database Handle & Session Management
=============================================================

What:  An explicit data-access handle (`Database`) owning the async engine and
       session factory, the declarative `Base`, and the FastAPI session dependency.
How:   One `Database` is created at process start (create_app), stored on
       `app.state.db`, and every request obtains its session from it through
       `get_db_session`. Nothing in the request path reaches for a module-level
       engine, which keeps tests free to inject an in-memory database.

Connection Pooling Strategy:
    pool_size / max_overflow:  From settings (PostgreSQL only)
    pool_pre_ping:             Validates connections before use
    pool_recycle=3600:         Recycles connections every hour
    SQLite URLs skip pool sizing and get PRAGMA foreign_keys=ON so that
    enclosure → animal cascades behave like they do on PostgreSQL.
"""

from typing import Any, AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from wildwood.config import Settings, settings as default_settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shared metadata is what Alembic and `Database.create_all` operate on.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Explicit data-access handle: one engine (connection pool) plus a session factory.

    Lifecycle:
        1. Created once in create_app() (engines connect lazily)
        2. Injected into handlers via get_db_session()
        3. Disposed in the application lifespan on shutdown
    """

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: response models read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Database":
        """Build the production handle from application settings."""
        config = config or default_settings
        kwargs: dict = {"echo": config.log_level == "DEBUG"}
        if not config.database_url.startswith("sqlite"):
            kwargs.update(
                pool_size=config.db_pool_size,
                max_overflow=config.db_max_overflow,
                pool_pre_ping=config.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(config.database_url, **kwargs)

    async def create_all(self) -> None:
        """Create every table known to Base.metadata (tests and local dev only)."""
        # Import registers all models with Base.metadata
        import wildwood.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Gracefully closes all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the application's Database handle
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.db
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
