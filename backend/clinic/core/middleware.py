import logging
import time

from fastapi import Request

from clinic.services.mutation import MutationService
from clinic.services.query import QueryService

logger = logging.getLogger(__name__)

# Paths that are too noisy to log on every hit
QUIET_PATHS = [
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
]

async def request_logging_middleware(request: Request, call_next):
    """
    Middleware to log method, path, status and latency of each request.
    """
    if any(request.url.path.startswith(quiet_path) for quiet_path in QUIET_PATHS):
        return await call_next(request)

    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
    )
    return response

# FastAPI dependencies for the services created in the lifespan
def get_query_service(request: Request) -> QueryService:
    return request.app.state.query_service

def get_mutation_service(request: Request) -> MutationService:
    return request.app.state.mutation_service
