# tests/test_patient_search.py
import pytest

from clinic.schemas.patient import PatientCreate


@pytest.mark.asyncio
async def test_search_by_tag_substring_is_case_insensitive(queries, clinic_patients):
    page = await queries.find_patients("hiper", limit=10, offset=0)

    assert page.total_count == 1
    assert [p.id for p in page.items] == [clinic_patients["dewi"].id]


@pytest.mark.asyncio
async def test_search_matches_name_or_phone(queries, clinic_patients):
    by_name = await queries.find_patients("SANTOSO")
    by_phone = await queries.find_patients("9911")

    assert [p.name for p in by_name.items] == ["Budi Santoso"]
    assert [p.name for p in by_phone.items] == ["Siti Nur Aisyah"]


@pytest.mark.asyncio
async def test_search_is_an_or_across_fields(queries, clinic_patients):
    # "a" hits every name; "62 8" hits every phone
    assert (await queries.find_patients("a")).total_count == 3
    assert (await queries.find_patients("62 8")).total_count == 3
    assert (await queries.find_patients("no such patient")).total_count == 0


@pytest.mark.asyncio
async def test_no_filter_returns_everyone_newest_first(queries, clinic_patients):
    page = await queries.find_patients()

    assert page.total_count == 3
    assert [p.name for p in page.items] == ["Siti Nur Aisyah", "Budi Santoso", "Dewi Rahmawati"]


@pytest.mark.asyncio
async def test_empty_filter_is_treated_as_no_filter(queries, clinic_patients):
    assert (await queries.find_patients("")).total_count == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "limit, offset, expected",
    [
        (2, 0, ["Siti Nur Aisyah", "Budi Santoso"]),
        (2, 2, ["Dewi Rahmawati"]),
        (10, 3, []),
        (0, 0, []),
        (None, 1, ["Budi Santoso", "Dewi Rahmawati"]),
    ],
)
async def test_pagination_keeps_total_of_filtered_set(queries, clinic_patients, limit, offset, expected):
    page = await queries.find_patients("a", limit=limit, offset=offset)

    assert page.total_count == 3
    assert [p.name for p in page.items] == expected


@pytest.mark.asyncio
async def test_total_count_uses_the_filter(queries, mutations, clinic_patients):
    for i in range(4):
        await mutations.create_patient(PatientCreate(name=f"Pasien Asma {i}", tags=["asma"]))

    page = await queries.find_patients("asma", limit=2, offset=0)

    assert page.total_count == 5
    assert len(page.items) == 2


@pytest.mark.asyncio
async def test_patient_with_several_matching_tags_is_counted_once(queries, mutations):
    await mutations.create_patient(PatientCreate(name="Rina", tags=["Diabetes tipe 2", "Diabetes kontrol"]))

    page = await queries.find_patients("diabetes")

    assert page.total_count == 1
    assert len(page.items) == 1


@pytest.mark.asyncio
async def test_like_wildcards_in_filter_are_literal(queries, mutations, clinic_patients):
    await mutations.create_patient(PatientCreate(name="Diskon 50% Pasien"))

    assert (await queries.find_patients("%")).total_count == 1
    assert (await queries.find_patients("_")).total_count == 0


@pytest.mark.asyncio
async def test_get_patient_returns_none_when_absent(queries, clinic_patients):
    assert await queries.get_patient("missing") is None
    found = await queries.get_patient(clinic_patients["dewi"].id)
    assert found.tags == ["BPJS", "Hipertensi"]
    assert found.allergies == ["Penicillin"]


@pytest.mark.asyncio
async def test_case_folding_covers_non_ascii_names(queries, mutations, clinic_patients):
    omer = await mutations.create_patient(PatientCreate(name="Ömer Çelik", tags=["Ärztin-Überweisung"]))

    assert [p.id for p in (await queries.find_patients("ÖMER")).items] == [omer.id]
    assert [p.id for p in (await queries.find_patients("çelik")).items] == [omer.id]
    assert [p.id for p in (await queries.find_patients("überweisung")).items] == [omer.id]
