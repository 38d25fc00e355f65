"""
DocStore CRUD — Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings MongoDB through the shared client and reports the result.
Who:   Called by container health checks, load balancers, and monitoring systems.

Status levels:
    - healthy:   MongoDB answered the ping (HTTP 200)
    - unhealthy: MongoDB unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends, Request, Response, status
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from docstore_crud import __version__
from docstore_crud.database import get_mongo_client, ping
from docstore_crud.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    request: Request,
    response: Response,
    client: AsyncMongoClient = Depends(get_mongo_client),
) -> HealthResponse:
    """
    Ping the database and report aggregate status.

    `ping` is the cheapest server round-trip the driver offers; it touches
    no collection.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        await ping(client)
    except PyMongoError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: MongoDB unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        resources=[resource.path for resource in request.app.state.resources],
        uptime_seconds=round(time.time() - _start_time, 2),
    )
