import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from clinic.db.crud import appointment as appointment_crud
from clinic.db.crud import patient as patient_crud
from clinic.db.crud import visit as visit_crud
from clinic.db.crud import workflow as workflow_crud
from clinic.db.session import session_scope
from clinic.schemas.appointment import AppointmentOut
from clinic.schemas.patient import PatientOut, PatientPage
from clinic.schemas.visit import VisitOut
from clinic.schemas.workflow import WorkflowStepOut

logger = logging.getLogger(__name__)


class QueryService:
    """Read side of the clinic: filtered and paginated lookups."""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def find_patients(
        self,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> PatientPage:
        """
        Search patients by name, phone or tag and return one page of them.

        ``total_count`` is the size of the filtered set before pagination.
        The count and the page are two statements, so a write landing in
        between can make them disagree by the size of that write; callers
        accept that rather than paying for a serializable read.
        """
        async with session_scope(self._session_factory) as db:
            total_count = await patient_crud.count_patients(db, search)
            patients = await patient_crud.list_patients(db, search, limit=limit, offset=offset)
            items = [PatientOut.model_validate(p) for p in patients]

        logger.info(
            f"Patient search {search!r} (limit={limit}, offset={offset}): "
            f"{len(items)} of {total_count}"
        )
        return PatientPage(items=items, total_count=total_count)

    async def get_patient(self, patient_id: str) -> Optional[PatientOut]:
        async with session_scope(self._session_factory) as db:
            patient = await patient_crud.get_patient(db, patient_id)
            return PatientOut.model_validate(patient) if patient else None

    async def find_appointments(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[AppointmentOut]:
        async with session_scope(self._session_factory) as db:
            appointments = await appointment_crud.list_appointments(db, start=start, end=end)
            return [AppointmentOut.model_validate(a) for a in appointments]

    async def get_appointment(self, appointment_id: str) -> Optional[AppointmentOut]:
        async with session_scope(self._session_factory) as db:
            appointment = await appointment_crud.get_appointment(db, appointment_id)
            return AppointmentOut.model_validate(appointment) if appointment else None

    async def get_workflow(self) -> List[WorkflowStepOut]:
        async with session_scope(self._session_factory) as db:
            steps = await workflow_crud.list_steps(db)
            return [WorkflowStepOut.model_validate(s) for s in steps]

    # --- relationship resolution -------------------------------------------------

    async def get_patient_appointments(self, patient_id: str) -> List[AppointmentOut]:
        async with session_scope(self._session_factory) as db:
            appointments = await appointment_crud.list_appointments_for_patient(db, patient_id)
            return [AppointmentOut.model_validate(a) for a in appointments]

    async def get_patient_visits(self, patient_id: str) -> List[VisitOut]:
        async with session_scope(self._session_factory) as db:
            visits = await visit_crud.list_visits_for_patient(db, patient_id)
            return [VisitOut.model_validate(v) for v in visits]

    async def get_appointment_patient(self, appointment: AppointmentOut) -> Optional[PatientOut]:
        """Owning patient of an appointment, or None when the reference dangles."""
        patient = await self.get_patient(appointment.patient_id)
        if patient is None:
            logger.warning(
                f"Appointment {appointment.id} references missing patient {appointment.patient_id}"
            )
        return patient
