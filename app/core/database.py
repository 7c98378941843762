# app/core/database.py
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from fastapi import Request
from datetime import datetime, timezone
from pathlib import Path
import logging
from typing import AsyncGenerator

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    # Enable foreign keys and WAL mode for better concurrency
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class Database:
    """
    Process-wide handle on the single SQLite store.

    Created once by the application factory and handed to the migrator and
    the per-request session dependency; nothing else opens the file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.engine = create_async_engine(
            f"sqlite+aiosqlite:///{self.path}",
            echo=False,
            future=True,
        )
        event.listen(self.engine.sync_engine, "connect", _set_sqlite_pragmas)

        # AsyncSession factory using async_sessionmaker
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def backup(self) -> Path:
        """Snapshot the store into a timestamped sibling file and return its path."""
        timestamp = datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")
        backup_path = self.path.with_name(f"{self.path.stem}_backup_{timestamp}{self.path.suffix}")

        # VACUUM cannot run inside a transaction
        async with self.engine.connect() as conn:
            conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
            await conn.execute(text("VACUUM INTO :target"), {"target": str(backup_path)})

        logger.info(f"Database backup created at {backup_path}")
        return backup_path

    async def dispose(self) -> None:
        await self.engine.dispose()


# Dependency to get DB session with proper exception handling
async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: Database = request.app.state.database
    # Create a session
    session = database.session_factory()
    try:
        # Yield the session to the caller
        yield session
    except SQLAlchemyError as e:
        # Log the error and rollback
        logger.error(f"Database session error: {str(e)}")
        await session.rollback()
        raise
    except Exception:
        # Client errors (404s, validation, business rules) are logged by their handlers
        await session.rollback()
        raise
    finally:
        # Always close the session
        await session.close()
        logger.debug("Database session closed")
