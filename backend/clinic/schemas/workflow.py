# clinic/schemas/workflow.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WorkflowStepIn(BaseModel):
    # omitted ids are synthesized from the step's position
    id: Optional[str] = Field(default=None, max_length=100)
    name: str = Field(min_length=1, max_length=255)


class WorkflowStepOut(BaseModel):
    id: str
    name: str
    position: int

    model_config = ConfigDict(from_attributes=True)
