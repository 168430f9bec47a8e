from .patient import PatientModel, PatientAllergyModel, PatientTagModel
from .appointment import AppointmentModel
from .visit import VisitModel
from .workflow import WorkflowStepModel

__all__ = [
    "PatientModel",
    "PatientAllergyModel",
    "PatientTagModel",
    "AppointmentModel",
    "VisitModel",
    "WorkflowStepModel",
]
