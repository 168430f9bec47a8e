import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db.models import AppointmentModel

logger = logging.getLogger(__name__)


async def list_appointments(
    db: AsyncSession,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[AppointmentModel]:
    """
    Get appointments scheduled inside an inclusive range.

    Either bound may be omitted; with neither, every appointment is returned.
    """
    query = select(AppointmentModel)

    if start is not None:
        query = query.where(AppointmentModel.scheduled_at >= start)
    if end is not None:
        query = query.where(AppointmentModel.scheduled_at <= end)

    query = query.order_by(AppointmentModel.scheduled_at, AppointmentModel.id)

    result = await db.execute(query)
    appointments = list(result.scalars().all())
    logger.debug(f"CRUD: {len(appointments)} appointments between {start} and {end}")
    return appointments


async def list_appointments_for_patient(db: AsyncSession, patient_id: str) -> List[AppointmentModel]:
    result = await db.execute(
        select(AppointmentModel)
        .where(AppointmentModel.patient_id == patient_id)
        .order_by(AppointmentModel.scheduled_at, AppointmentModel.id)
    )
    return list(result.scalars().all())


async def get_appointment(db: AsyncSession, appointment_id: str) -> Optional[AppointmentModel]:
    result = await db.execute(
        select(AppointmentModel).where(AppointmentModel.id == appointment_id)
    )
    return result.scalar_one_or_none()


async def insert_appointment(db: AsyncSession, data: Dict[str, Any]) -> AppointmentModel:
    appointment = AppointmentModel(**data)
    db.add(appointment)
    await db.flush()
    logger.debug(f"CRUD: inserted appointment {appointment.id} for patient {appointment.patient_id}")
    return appointment


async def apply_appointment_changes(
    db: AsyncSession, appointment: AppointmentModel, changes: Dict[str, Any]
) -> AppointmentModel:
    for key, value in changes.items():
        setattr(appointment, key, value)
    await db.flush()
    return appointment


async def delete_appointment(db: AsyncSession, appointment_id: str) -> bool:
    """
    Delete an appointment by id.

    Returns:
        True if a row was removed, False if there was nothing to delete
    """
    result = await db.execute(
        delete(AppointmentModel).where(AppointmentModel.id == appointment_id)
    )
    deleted = result.rowcount > 0
    logger.debug(f"CRUD: delete appointment {appointment_id} -> {deleted}")
    return deleted
