# tests/test_appointments.py
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from clinic.config.constants import DEFAULT_APPOINTMENT_STATUS
from clinic.core.exceptions import NotFoundError, ReferentialViolationError
from clinic.db.crud.appointment import insert_appointment
from clinic.db.crud.visit import insert_visit
from clinic.db.session import session_scope
from clinic.schemas.appointment import AppointmentCreate, AppointmentUpdate


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def appointments(mutations, clinic_patients):
    dewi, budi, siti = clinic_patients["dewi"], clinic_patients["budi"], clinic_patients["siti"]
    return [
        await mutations.create_appointment(
            AppointmentCreate(patient_id=budi.id, scheduled_at=utc(2025, 1, 18, 3, 30), reason="Spirometri")
        ),
        await mutations.create_appointment(
            AppointmentCreate(patient_id=siti.id, scheduled_at=utc(2025, 1, 19, 2, 15), reason="Kontrol kandungan")
        ),
        await mutations.create_appointment(
            AppointmentCreate(
                patient_id=dewi.id,
                scheduled_at=utc(2025, 1, 20, 1, 0),
                reason="General check",
                status="pending",
            )
        ),
    ]


@pytest.mark.asyncio
async def test_create_defaults_status(appointments):
    assert appointments[0].status == DEFAULT_APPOINTMENT_STATUS
    assert appointments[2].status == "pending"


@pytest.mark.asyncio
async def test_create_for_unknown_patient_is_a_referential_violation(mutations, queries, clinic_patients):
    with pytest.raises(ReferentialViolationError) as excinfo:
        await mutations.create_appointment(
            AppointmentCreate(patient_id="nobody", scheduled_at=utc(2025, 2, 1, 8, 0), reason="Cek")
        )

    assert excinfo.value.value == "nobody"
    assert await queries.find_appointments() == []


@pytest.mark.asyncio
async def test_range_bounds_are_inclusive_and_optional(queries, appointments):
    spiro, kandungan, general = (a.id for a in appointments)

    everything = await queries.find_appointments()
    from_19th = await queries.find_appointments(start=utc(2025, 1, 19, 2, 15))
    until_19th = await queries.find_appointments(end=utc(2025, 1, 19, 2, 15))
    only_19th = await queries.find_appointments(start=utc(2025, 1, 19), end=utc(2025, 1, 19, 23, 59))

    assert [a.id for a in everything] == [spiro, kandungan, general]
    assert [a.id for a in from_19th] == [kandungan, general]
    assert [a.id for a in until_19th] == [spiro, kandungan]
    assert [a.id for a in only_19th] == [kandungan]


@pytest.mark.asyncio
async def test_update_merges_given_fields(mutations, appointments):
    updated = await mutations.update_appointment(appointments[0].id, AppointmentUpdate(status="completed"))

    assert updated.status == "completed"
    assert updated.reason == "Spirometri"
    assert updated.patient_id == appointments[0].patient_id


@pytest.mark.asyncio
async def test_update_missing_appointment_raises_not_found(mutations, appointments):
    with pytest.raises(NotFoundError):
        await mutations.update_appointment("missing", AppointmentUpdate(reason="x"))


@pytest.mark.asyncio
async def test_update_to_unknown_patient_is_rejected_without_writing(mutations, queries, appointments):
    target = appointments[1]

    with pytest.raises(ReferentialViolationError):
        await mutations.update_appointment(
            target.id, AppointmentUpdate(patient_id="nobody", reason="moved")
        )

    stored = await queries.get_appointment(target.id)
    assert stored.patient_id == target.patient_id
    assert stored.reason == "Kontrol kandungan"


@pytest.mark.asyncio
async def test_delete_reports_whether_a_row_was_removed(mutations, queries, appointments):
    target = appointments[0].id

    assert await mutations.delete_appointment(target) is True
    assert await mutations.delete_appointment(target) is False
    assert await queries.get_appointment(target) is None


@pytest.mark.asyncio
async def test_patient_appointments_relation(queries, clinic_patients, appointments):
    result = await queries.get_patient_appointments(clinic_patients["budi"].id)

    assert [a.reason for a in result] == ["Spirometri"]


@pytest.mark.asyncio
async def test_appointment_patient_relation_and_dangling_reference(queries, session_factory, appointments):
    owner = await queries.get_appointment_patient(appointments[2])
    assert owner.name == "Dewi Rahmawati"

    async with session_scope(session_factory) as db:
        orphan = await insert_appointment(
            db, {"patient_id": "deleted-patient", "scheduled_at": utc(2025, 3, 1), "reason": "?"}
        )
        orphan_id = orphan.id

    orphan = await queries.get_appointment(orphan_id)
    assert await queries.get_appointment_patient(orphan) is None


@pytest.mark.asyncio
async def test_visits_are_listed_newest_first(queries, session_factory, clinic_patients):
    dewi = clinic_patients["dewi"]
    async with session_scope(session_factory) as db:
        await insert_visit(db, {"patient_id": dewi.id, "visited_at": utc(2024, 12, 11, 2, 30), "reason": "Keluhan pusing"})
        await insert_visit(db, {"patient_id": dewi.id, "visited_at": utc(2025, 1, 5, 2, 0), "reason": "Kontrol hipertensi"})

    visits = await queries.get_patient_visits(dewi.id)

    assert [v.reason for v in visits] == ["Kontrol hipertensi", "Keluhan pusing"]
    assert await queries.get_patient_visits(clinic_patients["budi"].id) == []


@pytest.mark.asyncio
async def test_range_compares_instants_across_offsets(mutations, queries, clinic_patients):
    wib = timezone(timedelta(hours=7))
    # 10:00 WIB is 03:00 UTC
    created = await mutations.create_appointment(
        AppointmentCreate(
            patient_id=clinic_patients["dewi"].id,
            scheduled_at=datetime(2025, 1, 19, 10, 0, tzinfo=wib),
            reason="Kontrol tensi",
        )
    )

    after = await queries.find_appointments(start=utc(2025, 1, 19, 5, 0))
    before = await queries.find_appointments(start=utc(2025, 1, 19, 2, 0), end=utc(2025, 1, 19, 4, 0))

    assert created.id not in [a.id for a in after]
    assert [a.id for a in before] == [created.id]
    stored = await queries.get_appointment(created.id)
    assert stored.scheduled_at == utc(2025, 1, 19, 3, 0)
    assert stored.scheduled_at.utcoffset() == timedelta(0)
