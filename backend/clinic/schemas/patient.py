# clinic/schemas/patient.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PatientBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    allergies: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


class PatientCreate(PatientBase):
    pass


class PatientUpdate(BaseModel):
    """
    Partial patient update.

    Only fields present in the payload are applied (``exclude_unset``), so a
    field that is left out keeps its stored value while an explicit ``null``
    clears it. Columns that cannot be empty reject ``null`` outright.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    allergies: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    @field_validator("name", "allergies", "tags")
    @classmethod
    def _reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class PatientUpsert(BaseModel):
    id: Optional[str] = None
    input: PatientCreate


class PatientOut(BaseModel):
    id: str
    name: str
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    allergies: List[str]
    tags: List[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("allergies", "tags", mode="before")
    @classmethod
    def _labels_as_list(cls, value):
        # ORM side hands over an association proxy, not a list
        return list(value) if value is not None else []


class PatientPage(BaseModel):
    items: List[PatientOut]
    total_count: int
