# clinic/schemas/appointment.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class AppointmentCreate(BaseModel):
    patient_id: str
    scheduled_at: datetime
    reason: str = ""
    status: Optional[str] = None


class AppointmentUpdate(BaseModel):
    patient_id: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    reason: Optional[str] = None
    status: Optional[str] = None

    @field_validator("patient_id", "scheduled_at", "reason")
    @classmethod
    def _reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class AppointmentOut(BaseModel):
    id: str
    patient_id: str
    scheduled_at: datetime
    reason: str
    status: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AppointmentDeleted(BaseModel):
    deleted: bool
