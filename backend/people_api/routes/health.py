"""
People API — Health Check Route
=================================

What:  Health check endpoint for container and load balancer probes.
How:   Asks the repository for a lightweight probe (SELECT 1 for SQL).

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from people_api import __version__
from people_api.dependencies import get_repository
from people_api.repositories import PeopleRepository
from people_api.schemas.person import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    repo: PeopleRepository = Depends(get_repository),
):
    reachable = await repo.health_check()

    body = HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        storage=repo.backend_name,
        database="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not reachable:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
