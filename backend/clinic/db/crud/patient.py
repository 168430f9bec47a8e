import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.db.models import PatientModel, PatientAllergyModel, PatientTagModel

logger = logging.getLogger(__name__)


def _like_pattern(search: str) -> str:
    # % and _ in the search term are matched literally
    escaped = search.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_predicate(search: str):
    """
    Case-insensitive substring match over name, phone, or any tag label.

    The tag branch is an EXISTS subquery so a patient with several matching
    tags is still counted once.
    """
    pattern = _like_pattern(search)
    return or_(
        PatientModel.name.ilike(pattern, escape="\\"),
        PatientModel.phone.ilike(pattern, escape="\\"),
        PatientModel.tag_rows.any(PatientTagModel.label.ilike(pattern, escape="\\")),
    )


async def count_patients(db: AsyncSession, search: Optional[str] = None) -> int:
    """
    Count patients matching the search term, before any pagination.

    Args:
        db (AsyncSession): the database session
        search (Optional[str]): substring filter; empty or None counts everyone

    Returns:
        int: number of matching patients
    """
    query = select(func.count(PatientModel.id))
    if search:
        query = query.where(search_predicate(search))

    result = await db.execute(query)
    total = result.scalar_one()
    logger.debug(f"CRUD: {total} patients match search={search!r}")
    return total


async def list_patients(
    db: AsyncSession,
    search: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[PatientModel]:
    """
    Fetch matching patients newest first, optionally as a page.

    Args:
        db (AsyncSession): the database session
        search (Optional[str]): substring filter, same predicate as count_patients
        limit (Optional[int]): page size; None means no upper bound
        offset (Optional[int]): number of matches to skip; None means 0

    Returns:
        List[PatientModel]: patients with allergy and tag rows loaded
    """
    logger.debug(f"CRUD: listing patients search={search!r} limit={limit} offset={offset}")

    query = select(PatientModel)
    if search:
        query = query.where(search_predicate(search))
    query = query.order_by(PatientModel.created_at.desc(), PatientModel.id.desc())
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_patient(
    db: AsyncSession, patient_id: str, for_update: bool = False
) -> Optional[PatientModel]:
    query = select(PatientModel).where(PatientModel.id == patient_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def patient_exists(db: AsyncSession, patient_id: str, lock: bool = False) -> bool:
    query = select(PatientModel.id).where(PatientModel.id == patient_id)
    if lock:
        # FOR SHARE: the patient cannot be deleted before our write commits
        query = query.with_for_update(read=True)
    result = await db.execute(query)
    return result.scalar_one_or_none() is not None


def _with_label_rows(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Swap the ``allergies``/``tags`` string lists for explicit child rows.

    Assigning the relationship itself marks it loaded, even when empty, so
    reading the labels back never triggers a lazy load.
    """
    values = dict(values)
    if "allergies" in values:
        values["allergy_rows"] = [PatientAllergyModel(label=label) for label in values.pop("allergies")]
    if "tags" in values:
        values["tag_rows"] = [PatientTagModel(label=label) for label in values.pop("tags")]
    return values


async def insert_patient(db: AsyncSession, data: Dict[str, Any]) -> PatientModel:
    values = _with_label_rows(data)
    values.setdefault("allergy_rows", [])
    values.setdefault("tag_rows", [])
    patient = PatientModel(**values)
    db.add(patient)
    await db.flush()
    logger.debug(f"CRUD: inserted patient {patient.id}")
    return patient


async def apply_patient_changes(
    db: AsyncSession, patient: PatientModel, changes: Dict[str, Any]
) -> PatientModel:
    """Shallow-merge ``changes`` over a loaded patient; label lists are replaced wholesale."""
    for key, value in _with_label_rows(changes).items():
        setattr(patient, key, value)
    await db.flush()
    logger.debug(f"CRUD: updated patient {patient.id} fields={sorted(changes)}")
    return patient
