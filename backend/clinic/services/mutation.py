import asyncio
import logging
import weakref
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clinic.config.constants import DEFAULT_APPOINTMENT_STATUS, WORKFLOW_STEP_ID_PREFIX
from clinic.core.exceptions import InvalidWorkflowError, NotFoundError, ReferentialViolationError
from clinic.db.crud import appointment as appointment_crud
from clinic.db.crud import patient as patient_crud
from clinic.db.crud import workflow as workflow_crud
from clinic.db.models import PatientModel
from clinic.db.session import session_scope
from clinic.schemas.appointment import AppointmentCreate, AppointmentOut, AppointmentUpdate
from clinic.schemas.patient import PatientCreate, PatientOut, PatientUpdate
from clinic.schemas.workflow import WorkflowStepIn, WorkflowStepOut

logger = logging.getLogger(__name__)

LABEL_FIELDS = ("allergies", "tags")


def normalize_labels(labels: Optional[Iterable[str]]) -> List[str]:
    """Strip labels, drop empty ones and duplicates, keep first-seen order."""
    result: List[str] = []
    for label in labels or []:
        if not label:
            continue
        label = label.strip()
        if label and label not in result:
            result.append(label)
    return result


def resolve_step_ids(steps: List[WorkflowStepIn]) -> List[Dict[str, Any]]:
    """
    Turn submitted steps into rows, in submitted order.

    A step without an id gets ``step-<n>`` where n is its 1-based position in
    the submitted list, independent of what is currently stored.
    """
    return [
        {
            "id": step.id or f"{WORKFLOW_STEP_ID_PREFIX}{position}",
            "name": step.name,
            "position": position,
        }
        for position, step in enumerate(steps, start=1)
    ]


class MutationService:
    """
    Write side of the clinic.

    One instance lives for the whole process. It owns the in-process locks
    that serialize writers per patient id and for the single workflow list;
    row and table locks taken inside each transaction cover writers in
    other processes.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self._workflow_lock = asyncio.Lock()
        self._patient_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _patient_lock(self, patient_id: str) -> asyncio.Lock:
        lock = self._patient_locks.get(patient_id)
        if lock is None:
            lock = asyncio.Lock()
            self._patient_locks[patient_id] = lock
        return lock

    # --- patients ----------------------------------------------------------------

    async def create_patient(self, data: PatientCreate) -> PatientOut:
        async with session_scope(self._session_factory) as db:
            patient = await self._insert_patient(db, data)
            return PatientOut.model_validate(patient)

    async def update_patient(self, patient_id: str, data: PatientUpdate) -> PatientOut:
        changes = data.model_dump(exclude_unset=True)
        async with self._patient_lock(patient_id):
            async with session_scope(self._session_factory) as db:
                patient = await patient_crud.get_patient(db, patient_id, for_update=True)
                if patient is None:
                    logger.warning(f"Update rejected: patient {patient_id} not found")
                    raise NotFoundError("Patient", patient_id)
                patient = await self._merge_patient(db, patient, changes)
                return PatientOut.model_validate(patient)

    async def upsert_patient(self, patient_id: Optional[str], data: PatientCreate) -> PatientOut:
        """
        Update the patient ``patient_id`` if it exists, otherwise create a new one.

        A supplied id that matches nothing is not reused; the created patient
        gets a freshly minted id. The existence check and the write run under
        the same per-id lock and row lock.
        """
        if not patient_id:
            return await self.create_patient(data)

        async with self._patient_lock(patient_id):
            async with session_scope(self._session_factory) as db:
                existing = await patient_crud.get_patient(db, patient_id, for_update=True)
                if existing is not None:
                    patient = await self._merge_patient(
                        db, existing, data.model_dump(exclude_unset=True)
                    )
                else:
                    logger.info(f"Upsert: patient {patient_id} not found, creating a new record")
                    patient = await self._insert_patient(db, data)
                return PatientOut.model_validate(patient)

    async def _insert_patient(self, db: AsyncSession, data: PatientCreate) -> PatientModel:
        values = data.model_dump()
        for field in LABEL_FIELDS:
            values[field] = normalize_labels(values.get(field))
        patient = await patient_crud.insert_patient(db, values)
        logger.info(f"Created patient {patient.id} ({patient.name})")
        return patient

    async def _merge_patient(
        self, db: AsyncSession, patient: PatientModel, changes: Dict[str, Any]
    ) -> PatientModel:
        for field in LABEL_FIELDS:
            if field in changes:
                changes[field] = normalize_labels(changes[field])
        patient = await patient_crud.apply_patient_changes(db, patient, changes)
        logger.info(f"Updated patient {patient.id}: {sorted(changes)}")
        return patient

    # --- appointments ------------------------------------------------------------

    async def create_appointment(self, data: AppointmentCreate) -> AppointmentOut:
        async with session_scope(self._session_factory) as db:
            await self._require_patient(db, data.patient_id)

            values = data.model_dump()
            if values.get("status") is None:
                values["status"] = DEFAULT_APPOINTMENT_STATUS
            appointment = await appointment_crud.insert_appointment(db, values)
            logger.info(f"Created appointment {appointment.id} for patient {appointment.patient_id}")
            return AppointmentOut.model_validate(appointment)

    async def update_appointment(self, appointment_id: str, data: AppointmentUpdate) -> AppointmentOut:
        changes = data.model_dump(exclude_unset=True)
        async with session_scope(self._session_factory) as db:
            appointment = await appointment_crud.get_appointment(db, appointment_id)
            if appointment is None:
                logger.warning(f"Update rejected: appointment {appointment_id} not found")
                raise NotFoundError("Appointment", appointment_id)

            new_patient_id = changes.get("patient_id")
            if new_patient_id is not None and new_patient_id != appointment.patient_id:
                await self._require_patient(db, new_patient_id)

            appointment = await appointment_crud.apply_appointment_changes(db, appointment, changes)
            logger.info(f"Updated appointment {appointment_id}: {sorted(changes)}")
            return AppointmentOut.model_validate(appointment)

    async def delete_appointment(self, appointment_id: str) -> bool:
        async with session_scope(self._session_factory) as db:
            deleted = await appointment_crud.delete_appointment(db, appointment_id)
        if deleted:
            logger.info(f"Deleted appointment {appointment_id}")
        else:
            logger.info(f"Appointment {appointment_id} already absent, nothing deleted")
        return deleted

    async def _require_patient(self, db: AsyncSession, patient_id: str) -> None:
        if not await patient_crud.patient_exists(db, patient_id, lock=True):
            logger.warning(f"Rejected appointment write: patient {patient_id} does not exist")
            raise ReferentialViolationError("Patient", "patient_id", patient_id)

    # --- workflow ----------------------------------------------------------------

    async def replace_workflow(self, steps: List[WorkflowStepIn]) -> List[WorkflowStepOut]:
        """
        Swap the whole workflow for ``steps`` in one transaction.

        Readers see either the previous list or the new one, never an empty
        or half-written list. Concurrent calls are applied one after the
        other and the last to commit wins outright.
        """
        rows = resolve_step_ids(steps)
        duplicates = sorted(step_id for step_id, n in Counter(r["id"] for r in rows).items() if n > 1)
        if duplicates:
            logger.warning(f"Rejected workflow replace: duplicate step ids {duplicates}")
            raise InvalidWorkflowError("Workflow step ids must be unique", duplicate_ids=duplicates)

        async with self._workflow_lock:
            async with session_scope(self._session_factory) as db:
                await workflow_crud.lock_steps(db)
                removed = await workflow_crud.clear_steps(db)
                await workflow_crud.insert_steps(db, rows)
                stored = await workflow_crud.list_steps(db)
                result = [WorkflowStepOut.model_validate(s) for s in stored]

        logger.info(f"Workflow replaced: {removed} steps -> {len(result)} steps")
        return result
