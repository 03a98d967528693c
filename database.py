"""
Database connection and session management for the Shiritori Bot.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config import SETTINGS, LOGGER_NAME_DB
from models.db_models import Base

logger = logging.getLogger(LOGGER_NAME_DB)


class StorageError(Exception):
    """A transaction against the game database could not be completed."""


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself on SQLite.

    The sqlite3 driver manages transactions on its own, which breaks
    SAVEPOINT; nested transactions need the driver in autocommit mode.

    Transactions start with BEGIN IMMEDIATE so the write lock is taken up
    front. Concurrent writers then wait on the busy timeout instead of
    failing with "database is locked" when a reader upgrades to a writer.
    """
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class DatabaseManager:
    """
    Database manager for handling all database operations.
    Owns the engine and hands out scoped transactions.
    """

    def __init__(self, database_url: str, echo: bool = False, **engine_kwargs):
        self.engine = create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,  # Enable connection health checks
            **engine_kwargs,
        )
        if self.engine.dialect.name == "sqlite":
            _enable_sqlite_savepoints(self.engine)

        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def init(self) -> None:
        """Create all tables that do not exist yet."""
        logger.info("Initializing database...")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully.")

    async def close(self) -> None:
        """Close database connections."""
        logger.info("Closing database connections...")
        await self.engine.dispose()
        logger.info("Database connections closed.")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Run a block inside one transaction.

        Commits when the block exits normally (early returns included) and
        rolls back on any exception. Database errors are re-raised as
        StorageError; everything else propagates unchanged.
        """
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except SQLAlchemyError as e:
                logger.error(f"Database error: {e}")
                raise StorageError(str(e)) from e

    @asynccontextmanager
    async def read(self) -> AsyncIterator[AsyncSession]:
        """Session for read-only queries outside a write transaction."""
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                logger.error(f"Database read error: {e}")
                raise StorageError(str(e)) from e


# Global database manager instance
db_manager = DatabaseManager(SETTINGS.database_url, echo=SETTINGS.dev_mode)


async def init_database(manager: Optional[DatabaseManager] = None) -> None:
    """Initialize the database by creating all tables."""
    await (manager or db_manager).init()


async def close_database(manager: Optional[DatabaseManager] = None) -> None:
    """Close database connections."""
    await (manager or db_manager).close()
