# clinic/db/models/workflow.py
from sqlalchemy import Column, Integer, String
from clinic.db.base import Base


class WorkflowStepModel(Base):
    """One step of the single clinic-wide workflow checklist."""

    __tablename__ = "workflow_steps"

    id = Column(String(100), primary_key=True)
    name = Column(String(255), nullable=False)
    # 1-based, contiguous
    position = Column(Integer, nullable=False, unique=True)

    def __repr__(self):
        return f"<WorkflowStep {self.position}: {self.id} - {self.name}>"
