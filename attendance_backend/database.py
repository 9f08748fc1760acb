"""
attendance_backend/database.py
Async database handle.

There is no module-level engine: create_app() builds one Database per
application and stores it on app.state, and request handlers receive
sessions through the get_db dependency.
"""
import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Importing the package registers every model on Base.metadata
from attendance_backend.orm import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine (connection pool) and the session factory."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.is_sqlite = "sqlite" in url.lower()

        if self.is_sqlite:
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_pre_ping=True,
                connect_args={
                    "timeout": 30.0,   # SQLite busy timeout in seconds
                }
            )
            # SQLite leaves foreign keys unenforced unless asked per connection
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            # PostgreSQL/MySQL: Use standard pool with larger size
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_pre_ping=True,
                pool_size=20,           # Base pool size
                max_overflow=30,        # Additional connections under load
                pool_timeout=30,        # Wait up to 30s for connection
                pool_recycle=3600,      # Recycle connections after 1 hour
            )

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create missing tables. Existing tables are left untouched."""
        logger.info(f"Database dialect: {self.engine.url.get_backend_name()}")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("✓ Database initialization complete")

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection closed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting an async session from the app's Database."""
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        finally:
            await session.close()
