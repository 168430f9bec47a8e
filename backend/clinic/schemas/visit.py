# clinic/schemas/visit.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class VisitOut(BaseModel):
    id: str
    patient_id: str
    visited_at: datetime
    doctor: str
    reason: str
    notes: str
    prescription: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
