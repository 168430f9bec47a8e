from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
from datetime import datetime
import logging

from clinic.core.middleware import get_query_service, get_mutation_service
from clinic.schemas.appointment import (
    AppointmentCreate,
    AppointmentDeleted,
    AppointmentOut,
    AppointmentUpdate,
)
from clinic.schemas.patient import PatientOut
from clinic.services.mutation import MutationService
from clinic.services.query import QueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["appointments"])

@router.get("/", response_model=List[AppointmentOut])
async def list_appointments_route(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    queries: QueryService = Depends(get_query_service),
):
    """Get appointments scheduled between start and end (both inclusive, both optional)"""
    return await queries.find_appointments(start=start, end=end)

@router.post("/", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
async def create_appointment_route(
    appointment: AppointmentCreate,
    mutations: MutationService = Depends(get_mutation_service),
):
    return await mutations.create_appointment(appointment)

@router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment_route(
    appointment_id: str,
    queries: QueryService = Depends(get_query_service),
):
    appointment = await queries.get_appointment(appointment_id)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment

@router.get("/{appointment_id}/patient", response_model=Optional[PatientOut])
async def get_appointment_patient_route(
    appointment_id: str,
    queries: QueryService = Depends(get_query_service),
):
    """Owning patient; null when the appointment points at a patient that no longer exists"""
    appointment = await queries.get_appointment(appointment_id)
    if appointment is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return await queries.get_appointment_patient(appointment)

@router.patch("/{appointment_id}", response_model=AppointmentOut)
async def update_appointment_route(
    appointment_id: str,
    appointment_update: AppointmentUpdate,
    mutations: MutationService = Depends(get_mutation_service),
):
    return await mutations.update_appointment(appointment_id, appointment_update)

@router.delete("/{appointment_id}", response_model=AppointmentDeleted)
async def delete_appointment_route(
    appointment_id: str,
    mutations: MutationService = Depends(get_mutation_service),
):
    """Delete an appointment; deleting one that is already gone reports deleted=false"""
    deleted = await mutations.delete_appointment(appointment_id)
    return AppointmentDeleted(deleted=deleted)
