"""Request-scoped database session for authorization lookups."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from intake_portal.database.base import async_session_maker


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session shared by every lookup of a request.

    The authorization core only reads, so the transaction is rolled back
    when the request ends and nothing is ever committed.

    Yields:
        AsyncSession: Database session
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()
