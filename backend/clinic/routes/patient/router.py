from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
import logging

from clinic.core.middleware import get_query_service, get_mutation_service
from clinic.schemas.appointment import AppointmentOut
from clinic.schemas.patient import PatientCreate, PatientOut, PatientPage, PatientUpdate, PatientUpsert
from clinic.schemas.visit import VisitOut
from clinic.services.mutation import MutationService
from clinic.services.query import QueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["patients"])

@router.get("/", response_model=PatientPage)
async def search_patients_route(
    search: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=0),
    offset: Optional[int] = Query(None, ge=0),
    queries: QueryService = Depends(get_query_service),
):
    """Search patients by name, phone or tag; without limit/offset the whole match set is returned"""
    return await queries.find_patients(search, limit=limit, offset=offset)

@router.post("/", response_model=PatientOut, status_code=status.HTTP_201_CREATED)
async def create_patient_route(
    patient: PatientCreate,
    mutations: MutationService = Depends(get_mutation_service),
):
    return await mutations.create_patient(patient)

@router.post("/upsert", response_model=PatientOut)
async def upsert_patient_route(
    payload: PatientUpsert,
    mutations: MutationService = Depends(get_mutation_service),
):
    """Update the patient with the given id, or create a new one if there is none"""
    return await mutations.upsert_patient(payload.id, payload.input)

@router.get("/{patient_id}", response_model=PatientOut)
async def get_patient_route(
    patient_id: str,
    queries: QueryService = Depends(get_query_service),
):
    patient = await queries.get_patient(patient_id)
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient

@router.patch("/{patient_id}", response_model=PatientOut)
async def update_patient_route(
    patient_id: str,
    patient_update: PatientUpdate,
    mutations: MutationService = Depends(get_mutation_service),
):
    """Apply only the fields present in the body"""
    return await mutations.update_patient(patient_id, patient_update)

@router.get("/{patient_id}/appointments", response_model=List[AppointmentOut])
async def get_patient_appointments_route(
    patient_id: str,
    queries: QueryService = Depends(get_query_service),
):
    return await queries.get_patient_appointments(patient_id)

@router.get("/{patient_id}/visits", response_model=List[VisitOut])
async def get_patient_visits_route(
    patient_id: str,
    queries: QueryService = Depends(get_query_service),
):
    """Visit history, most recent first"""
    return await queries.get_patient_visits(patient_id)
