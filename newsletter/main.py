"""Process entry point - read settings, open the pool, serve until killed.

Invariants:
    - Settings are read once; invalid settings abort before binding
    - The database must answer at startup, otherwise the process exits 1
    - An address that cannot be bound exits 1 the same way, after the pool is closed
    - One pool per process, handed to the server explicitly
"""

import asyncio
import logging
import sys

from pydantic import ValidationError

from newsletter.config import get_settings
from newsletter.core.errors import ConfigurationError, DatabaseError
from newsletter.infrastructure.database import DatabaseSessionManager
from newsletter.infrastructure.observability import setup_logging
from newsletter.startup import bind_listener, run

logger = logging.getLogger(__name__)


async def serve() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        raise ConfigurationError(f"Failed to read configuration: {e}") from e
    setup_logging(settings.log_level, settings.log_format)

    db_settings = settings.database
    db_manager = DatabaseSessionManager(
        db_settings.connection_string(),
        pool_size=db_settings.pool_size,
        max_overflow=db_settings.max_overflow,
    )
    try:
        await db_manager.verify_connection()
    except DatabaseError as e:
        await db_manager.dispose()
        raise ConfigurationError(f"Failed to connect to the database: {e.message}") from e

    try:
        try:
            listener = bind_listener(
                settings.application.host, settings.application.port,
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to bind {settings.application.host}:"
                f"{settings.application.port}: {e}",
            ) from e
        await run(listener, db_manager, settings.log_level)
    finally:
        await db_manager.dispose()


def main() -> None:
    try:
        asyncio.run(serve())
    except ConfigurationError as e:
        if not logging.root.handlers:
            setup_logging()
        logger.critical(e.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
