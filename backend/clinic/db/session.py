from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import AsyncGenerator
from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a session wrapped in a single transaction.

    The transaction commits when the block exits normally and rolls back
    when it raises, so a failed operation never leaves a partial write.
    """
    async with session_factory() as session:
        try:
            async with session.begin():
                yield session
        except Exception:
            logger.debug("Transaction rolled back", exc_info=True)
            raise
