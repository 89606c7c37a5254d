"""Database Session Manager - async connection pool with automatic rollback.

Invariants:
    - One DatabaseSessionManager owns one AsyncEngine (bounded pool)
    - The manager is passed explicitly: create_app() stores it on app.state,
      handlers receive it through the get_db_manager dependency
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions leave this module as DatabaseError (core/errors.py)

Design Decisions:
    - expire_on_commit=False: prevents lazy-load issues in async context
    - pool kwargs skipped for in-memory SQLite (StaticPool takes none)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from newsletter.core.errors import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling and rollback."""

    def __init__(
        self, database_url: str | URL, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        if not _is_memory_sqlite(database_url):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown") from e
        except OSError as e:
            # asyncpg surfaces refused connections as plain OSError
            logger.error(f"DB connection error: {e}")
            raise DatabaseError("Database unreachable", "connect") from e
        finally:
            await session.close()

    async def verify_connection(self) -> None:
        """Raise DatabaseError unless the database answers SELECT 1."""
        async with self.session() as db:
            await db.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


def _is_memory_sqlite(database_url: str | URL) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def get_db_manager(request: Request) -> DatabaseSessionManager:
    """FastAPI dependency returning the pool handle injected at app creation."""
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    return db_manager
