# tests/test_seed_database.py
import importlib.util
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "seed_database.py"


def load_seed_module():
    spec = importlib.util.spec_from_file_location("seed_database", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.asyncio
async def test_seed_loads_demo_clinic(session_factory, queries):
    seed = load_seed_module()

    counts = await seed.seed_all_data(session_factory)

    assert counts == {"patients": 3, "visits": 4, "appointments": 4, "workflow_steps": 4}
    assert [s.id for s in await queries.get_workflow()] == ["step-1", "step-2", "step-3", "step-4"]

    page = await queries.find_patients("hiper", limit=10, offset=0)
    assert [p.name for p in page.items] == ["Dewi Rahmawati"]
    visits = await queries.get_patient_visits(page.items[0].id)
    assert [v.reason for v in visits] == ["Kontrol hipertensi", "Keluhan pusing"]

    await seed.clear_data(session_factory)
    assert (await queries.find_patients()).total_count == 0
    assert await queries.find_appointments() == []
