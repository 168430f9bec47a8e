# backend/scripts/seed_database.py
import asyncio
import logging
from datetime import date, datetime, timedelta, timezone as TZ
from typing import Dict, List, Any

from sqlalchemy import text

# Add project root to sys.path to allow importing from clinic
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from clinic.config.settings import settings as app_settings
from clinic.db.base import Base, get_engine, get_session_factory
from clinic.db.crud.visit import insert_visit
from clinic.db.session import session_scope
from clinic.schemas.appointment import AppointmentCreate
from clinic.schemas.patient import PatientCreate
from clinic.schemas.workflow import WorkflowStepIn
from clinic.services.mutation import MutationService
import clinic.db.models  # noqa: F401


logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

WIB = TZ(timedelta(hours=7))

# --- Seed Data ---
# Visits and appointments point at patients by their position in PATIENTS
PATIENTS: List[Dict[str, Any]] = [
    {
        "name": "Dewi Rahmawati",
        "date_of_birth": date(1989, 7, 15),
        "gender": "Female",
        "phone": "+62 812-3456-7890",
        "address": "Jl. Sudirman No. 12, Jakarta",
        "allergies": ["Penicillin"],
        "tags": ["BPJS", "Hipertensi"],
        "notes": "Perlu cek tekanan darah setiap kunjungan.",
    },
    {
        "name": "Budi Santoso",
        "date_of_birth": date(1975, 11, 3),
        "gender": "Male",
        "phone": "+62 811-2389-555",
        "address": "Jl. Diponegoro No. 8, Bandung",
        "allergies": [],
        "tags": ["Asma"],
        "notes": "Membawa inhaler sendiri.",
    },
    {
        "name": "Siti Nur Aisyah",
        "date_of_birth": date(1994, 2, 21),
        "gender": "Female",
        "phone": "+62 822-9911-2200",
        "address": "Jl. Taman Siswa No. 5, Yogyakarta",
        "allergies": ["Seafood"],
        "tags": ["Kehamilan"],
        "notes": "Trimester kedua, jadwal kontrol 2 minggu sekali.",
    },
]

VISITS: List[Dict[str, Any]] = [
    {
        "patient": 0,
        "visited_at": datetime(2025, 1, 5, 9, 0, tzinfo=WIB),
        "doctor": "dr. Aditya",
        "reason": "Kontrol hipertensi",
        "notes": "Tekanan darah 130/85, lanjutkan obat.",
        "prescription": "Amlodipine 5mg",
    },
    {
        "patient": 0,
        "visited_at": datetime(2024, 12, 11, 9, 30, tzinfo=WIB),
        "doctor": "dr. Aditya",
        "reason": "Keluhan pusing",
        "notes": "Hasil lab normal, istirahat cukup.",
        "prescription": "Multivitamin",
    },
    {
        "patient": 1,
        "visited_at": datetime(2024, 11, 22, 13, 30, tzinfo=WIB),
        "doctor": "dr. Ratna",
        "reason": "Kontrol asma",
        "notes": "Tidak ada serangan baru.",
        "prescription": "Controller inhaler 2x sehari",
    },
    {
        "patient": 2,
        "visited_at": datetime(2024, 12, 30, 11, 0, tzinfo=WIB),
        "doctor": "dr. Yani",
        "reason": "Kontrol kehamilan",
        "notes": "Janin sehat, lanjutkan vitamin.",
        "prescription": "Vitamin prenatal",
    },
]

APPOINTMENTS: List[Dict[str, Any]] = [
    {"patient": 0, "scheduled_at": datetime(2025, 1, 20, 8, 0, tzinfo=WIB), "reason": "General check", "status": "scheduled"},
    {"patient": 1, "scheduled_at": datetime(2025, 1, 18, 10, 30, tzinfo=WIB), "reason": "Spirometri", "status": "scheduled"},
    {"patient": 2, "scheduled_at": datetime(2025, 1, 19, 9, 15, tzinfo=WIB), "reason": "Kontrol kandungan", "status": "scheduled"},
    {"patient": 1, "scheduled_at": datetime(2025, 1, 25, 14, 0, tzinfo=WIB), "reason": "Edukasi diet", "status": "pending"},
]

WORKFLOW_STEPS = ["Registrasi", "Pemeriksaan", "Obat", "Pembayaran"]


async def clear_data(session_factory):
    logger.warning("Clearing existing data from tables...")
    async with session_scope(session_factory) as db:
        await db.execute(text("DELETE FROM appointments;"))
        await db.execute(text("DELETE FROM visits;"))
        await db.execute(text("DELETE FROM patient_allergies;"))
        await db.execute(text("DELETE FROM patient_tags;"))
        await db.execute(text("DELETE FROM patients;"))
    logger.info("Clinic data cleared.")


async def seed_all_data(session_factory) -> Dict[str, int]:
    mutations = MutationService(session_factory)

    # 1. Patients
    logger.info(f"Seeding {len(PATIENTS)} patients...")
    patient_ids: List[str] = []
    for data in PATIENTS:
        patient = await mutations.create_patient(PatientCreate(**data))
        patient_ids.append(patient.id)

    # 2. Visits (history only, no mutation surface)
    logger.info(f"Seeding {len(VISITS)} visits...")
    async with session_scope(session_factory) as db:
        for visit in VISITS:
            values = {k: v for k, v in visit.items() if k != "patient"}
            await insert_visit(db, {"patient_id": patient_ids[visit["patient"]], **values})

    # 3. Appointments
    logger.info(f"Seeding {len(APPOINTMENTS)} appointments...")
    for appt in APPOINTMENTS:
        values = {k: v for k, v in appt.items() if k != "patient"}
        await mutations.create_appointment(
            AppointmentCreate(patient_id=patient_ids[appt["patient"]], **values)
        )

    # 4. Workflow
    steps = await mutations.replace_workflow([WorkflowStepIn(name=name) for name in WORKFLOW_STEPS])
    logger.info(f"Workflow seeded: {[s.name for s in steps]}")

    return {
        "patients": len(patient_ids),
        "visits": len(VISITS),
        "appointments": len(APPOINTMENTS),
        "workflow_steps": len(steps),
    }


async def main(should_clear: bool, create_tables: bool):
    logger.info(f"Connecting to database at: {app_settings.database_url}")
    engine = await get_engine(app_settings.database_url)
    session_factory = await get_session_factory(engine)

    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if should_clear:
        await clear_data(session_factory)
    counts = await seed_all_data(session_factory)
    logger.info(f"Seeding complete: {counts}")

    await engine.dispose()
    logger.info("Database connection closed.")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Seed the database with the demo clinic data."
    )
    parser.add_argument(
        "--clear", action="store_true", help="Clear existing data before seeding."
    )
    parser.add_argument(
        "--create-tables", action="store_true", help="Create missing tables first (no alembic)."
    )
    args = parser.parse_args()
    asyncio.run(main(should_clear=args.clear, create_tables=args.create_tables))
