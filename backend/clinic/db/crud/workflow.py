import logging
from typing import Any, Dict, List

from sqlalchemy import select, delete, insert, text
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db.models import WorkflowStepModel

logger = logging.getLogger(__name__)


async def list_steps(db: AsyncSession) -> List[WorkflowStepModel]:
    result = await db.execute(select(WorkflowStepModel).order_by(WorkflowStepModel.position))
    return list(result.scalars().all())


async def lock_steps(db: AsyncSession) -> None:
    """
    Serialize workflow writers for the rest of the transaction.

    SHARE ROW EXCLUSIVE conflicts with itself but not with plain SELECTs, so
    concurrent readers keep seeing the last committed list. SQLite already
    allows a single writer at a time and needs nothing here.
    """
    connection = await db.connection()
    if connection.dialect.name == "postgresql":
        await db.execute(text("LOCK TABLE workflow_steps IN SHARE ROW EXCLUSIVE MODE"))
        logger.debug("CRUD: workflow_steps locked")


async def clear_steps(db: AsyncSession) -> int:
    result = await db.execute(delete(WorkflowStepModel))
    return result.rowcount


async def insert_steps(db: AsyncSession, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        return
    await db.execute(insert(WorkflowStepModel), rows)
    logger.debug(f"CRUD: inserted {len(rows)} workflow steps")
