# clinic/db/models/patient.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import relationship
from clinic.db.base import Base
from clinic.db.types import UTCDateTime


def _utcnow():
    return datetime.now(timezone.utc)


class PatientModel(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    # newest-first listing order
    created_at = Column(UTCDateTime(), nullable=False, default=_utcnow, index=True)

    allergy_rows = relationship(
        "PatientAllergyModel",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="PatientAllergyModel.id",
        lazy="selectin",
    )
    tag_rows = relationship(
        "PatientTagModel",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="PatientTagModel.id",
        lazy="selectin",
    )

    # plain string views over the label rows
    allergies = association_proxy(
        "allergy_rows", "label", creator=lambda label: PatientAllergyModel(label=label)
    )
    tags = association_proxy(
        "tag_rows", "label", creator=lambda label: PatientTagModel(label=label)
    )

    def __repr__(self):
        return f"<Patient {self.id} - {self.name}>"


class PatientAllergyModel(Base):
    __tablename__ = "patient_allergies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String(100), nullable=False)

    patient = relationship("PatientModel", back_populates="allergy_rows")


class PatientTagModel(Base):
    __tablename__ = "patient_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String(100), nullable=False)

    patient = relationship("PatientModel", back_populates="tag_rows")
