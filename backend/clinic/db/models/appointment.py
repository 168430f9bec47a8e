# clinic/db/models/appointment.py
import uuid

from sqlalchemy import Column, String, Text, ForeignKey
from clinic.db.base import Base
from clinic.db.types import UTCDateTime
from clinic.config.constants import DEFAULT_APPOINTMENT_STATUS


class AppointmentModel(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id = Column(
        String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scheduled_at = Column(UTCDateTime(), nullable=False, index=True)
    reason = Column(Text, nullable=False, default="")
    status = Column(
        String(50), nullable=True, default=DEFAULT_APPOINTMENT_STATUS
    )  # e.g., scheduled, pending, completed, cancelled

    def __repr__(self):
        return f"<Appointment {self.id} for Patient {self.patient_id}>"
