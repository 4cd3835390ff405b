"""Database client for connection lifecycle and health checks."""

from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from intake_portal.database.base import engine
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)


class DatabaseClient:
    """PostgreSQL database client.

    The tables are owned by the wider portal; this client only verifies
    connectivity and releases the pool on shutdown.
    """

    def __init__(self, engine: AsyncEngine):
        """Initialize database client.

        Args:
            engine: SQLAlchemy async engine
        """
        self.engine = engine
        self._connected = False

    async def connect(self) -> bool:
        """Test database connection."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

            self._connected = True
            LOGGER.info("Database connection successful")
            return True

        except Exception:
            self._connected = False
            LOGGER.error("Database connection failed", exc_info=True)
            raise

    async def disconnect(self) -> None:
        """Close database connection."""
        try:
            await self.engine.dispose()
            self._connected = False
            LOGGER.info("Database connection closed")
        except Exception as e:
            LOGGER.error(
                "Error closing database connection",
                exc_info=True,
                extra={"error": str(e)}
            )

    async def health_check(self) -> Dict[str, Any]:
        """Check database health.

        Returns:
            Dictionary with a "status" key of "healthy" or "unhealthy"
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "healthy"}
        except Exception as e:
            LOGGER.warning(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}


db_client = DatabaseClient(engine)


async def init_database() -> None:
    """Verify database connectivity on startup."""
    await db_client.connect()


async def close_database() -> None:
    """Release database connections on shutdown."""
    await db_client.disconnect()
