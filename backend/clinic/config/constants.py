from enum import Enum

# Synthetic workflow step ids are "step-<1-based position>"
WORKFLOW_STEP_ID_PREFIX = "step-"

class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

DEFAULT_APPOINTMENT_STATUS = AppointmentStatus.SCHEDULED.value
