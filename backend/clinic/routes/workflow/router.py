from fastapi import APIRouter, Depends
from typing import List

from clinic.core.middleware import get_query_service, get_mutation_service
from clinic.schemas.workflow import WorkflowStepIn, WorkflowStepOut
from clinic.services.mutation import MutationService
from clinic.services.query import QueryService

router = APIRouter(prefix="/workflow", tags=["workflow"])

@router.get("/", response_model=List[WorkflowStepOut])
async def get_workflow_route(queries: QueryService = Depends(get_query_service)):
    return await queries.get_workflow()

@router.put("/", response_model=List[WorkflowStepOut])
async def replace_workflow_route(
    steps: List[WorkflowStepIn],
    mutations: MutationService = Depends(get_mutation_service),
):
    """Replace the whole workflow with the submitted steps, in order"""
    return await mutations.replace_workflow(steps)
