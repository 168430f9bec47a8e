# clinic/db/models/visit.py
import uuid

from sqlalchemy import Column, String, Text, ForeignKey
from clinic.db.base import Base
from clinic.db.types import UTCDateTime


class VisitModel(Base):
    __tablename__ = "visits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(
        String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    visited_at = Column(UTCDateTime(), nullable=False)
    doctor = Column(String(255), nullable=False, default="")
    reason = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    prescription = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Visit {self.id} for Patient {self.patient_id}>"
