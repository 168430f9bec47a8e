# tests/conftest.py
from datetime import date

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from clinic.config.settings import Settings
from clinic.db.base import Base, get_engine, get_session_factory
from clinic.main import create_app
from clinic.schemas.patient import PatientCreate
from clinic.services.mutation import MutationService
from clinic.services.query import QueryService


@pytest.fixture
def db_url(tmp_path) -> str:
    """A throwaway SQLite file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'clinic.db'}"


@pytest_asyncio.fixture
async def session_factory(db_url):
    engine = await get_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield await get_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def queries(session_factory) -> QueryService:
    return QueryService(session_factory)


@pytest.fixture
def mutations(session_factory) -> MutationService:
    return MutationService(session_factory)


@pytest_asyncio.fixture
async def clinic_patients(mutations):
    """Dewi, Budi and Siti, created in that order (so Siti is the newest)."""
    dewi = await mutations.create_patient(
        PatientCreate(
            name="Dewi Rahmawati",
            date_of_birth=date(1989, 7, 15),
            gender="Female",
            phone="+62 812-3456-7890",
            address="Jl. Sudirman No. 12, Jakarta",
            allergies=["Penicillin"],
            tags=["BPJS", "Hipertensi"],
        )
    )
    budi = await mutations.create_patient(
        PatientCreate(
            name="Budi Santoso",
            gender="Male",
            phone="+62 811-2389-555",
            tags=["Asma"],
        )
    )
    siti = await mutations.create_patient(
        PatientCreate(
            name="Siti Nur Aisyah",
            gender="Female",
            phone="+62 822-9911-2200",
            allergies=["Seafood"],
            tags=["Kehamilan"],
        )
    )
    return {"dewi": dewi, "budi": budi, "siti": siti}


@pytest.fixture
def client(db_url):
    app = create_app(Settings(database_url=db_url, auto_create_tables=True))
    with TestClient(app) as test_client:
        yield test_client
