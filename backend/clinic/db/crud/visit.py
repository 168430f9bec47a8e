import logging
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db.models import VisitModel

logger = logging.getLogger(__name__)


async def list_visits_for_patient(db: AsyncSession, patient_id: str) -> List[VisitModel]:
    """
    Retrieves the visit history of a patient, most recent visit first

    Args:
        db (AsyncSession): the database session
        patient_id (str): id of the owning patient

    Returns:
        List[VisitModel]: list of VisitModel objects
    """
    stmt = (
        select(VisitModel)
        .where(VisitModel.patient_id == patient_id)
        .order_by(VisitModel.visited_at.desc(), VisitModel.id.desc())
    )

    result = await db.execute(stmt)
    visits = list(result.scalars().all())

    logger.debug(f"CRUD: found {len(visits)} visits for patient '{patient_id}'")
    return visits


async def insert_visit(db: AsyncSession, data: Dict[str, Any]) -> VisitModel:
    # visits are append-only history; only seeding and imports write them
    visit = VisitModel(**data)
    db.add(visit)
    await db.flush()
    return visit
