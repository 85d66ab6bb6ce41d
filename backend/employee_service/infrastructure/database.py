"""Database Session Manager: async connection pool with bounded startup, schema bootstrap and error mapping.

Invariants:
    - connect() either leaves a pinged pool with the employees table in place,
      or disposes the pool and raises StartupError
    - The liveness ping is bounded by ping_timeout_seconds; a timeout is fatal
    - Schema bootstrap is CREATE TABLE IF NOT EXISTS (create_all), a no-op when present
    - Every session auto-rolls-back on exception; SQLAlchemy errors leave as
      ConstraintViolationError / StorageError (core/errors.py)

Design Decisions:
    - Pool sizing expressed the way the service is configured:
      max idle -> pool_size, max open -> pool_size + max_overflow,
      max lifetime -> pool_recycle
    - Max idle 0 keeps no idle connections (NullPool): every session opens and
      closes its own connection, and the open limit is not enforced by the pool
    - In-memory SQLite runs on a single static connection, so pool options are skipped
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from employee_service.core.errors import (
    ConstraintViolationError, StartupError, StorageError,
)
from employee_service.db.base import Base
import employee_service.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def pool_options(
    database_url: str, max_open: int, max_idle: int, max_lifetime_seconds: int,
) -> dict:
    """Translate open/idle/lifetime limits into create_async_engine kwargs."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        return {}
    options = {
        "pool_recycle": max_lifetime_seconds if max_lifetime_seconds > 0 else -1,
        "pool_pre_ping": True,
    }
    if max_idle == 0:
        # QueuePool reads pool_size=0 as "no idle limit"
        return {**options, "poolclass": NullPool}
    pool_size = min(max_idle, max_open)
    return {
        **options,
        "pool_size": pool_size,
        "max_overflow": max_open - pool_size,
    }


class DatabaseSessionManager:
    """Owns the engine (connection pool) and hands out sessions."""

    def __init__(
        self,
        database_url: str,
        max_open: int = 25,
        max_idle: int = 25,
        max_lifetime_seconds: int = 300,
        ping_timeout_seconds: float = 5.0,
    ):
        self.database_url = database_url
        self.ping_timeout_seconds = ping_timeout_seconds
        self.engine = create_async_engine(
            database_url,
            **pool_options(
                database_url, max_open, max_idle, max_lifetime_seconds,
            ),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def connect(self) -> None:
        """Ping within the timeout, then ensure the schema. Fatal on any failure."""
        try:
            await asyncio.wait_for(
                self._ping(), timeout=self.ping_timeout_seconds,
            )
            await self._ensure_schema()
        except TimeoutError:
            await self.engine.dispose()
            logger.error(
                f"DB ping timed out after {self.ping_timeout_seconds:g}s",
            )
            raise StartupError(
                f"ping timeout after {self.ping_timeout_seconds:g}s",
            )
        except (SQLAlchemyError, OSError) as e:
            await self.engine.dispose()
            logger.error(f"DB initialization failed: {e}")
            raise StartupError(f"db init: {e}") from e
        logger.info(f"Database pool ready: {self.engine.pool.status()}")

    async def _ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def _ensure_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Employees schema ensured")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database pool closed")

    @asynccontextmanager
    async def session(
        self, operation: str = "query",
    ) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback and error mapping on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error during {operation}: {e.orig}")
            raise ConstraintViolationError(str(e.orig), operation) from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error during {operation}: {e.orig}")
            raise StorageError(str(e.orig), operation) from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error during {operation}: {e.orig}")
            raise StorageError(str(e.orig), operation) from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error during {operation}: {e}")
            raise StorageError(str(e), operation) from e
        except OSError as e:
            # raw socket failures from the driver's connect path
            await session.rollback()
            logger.error(f"DB connection error during {operation}: {e}")
            raise StorageError(str(e), operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session("health check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False
