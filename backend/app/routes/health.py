"""
Contacts API — Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer probes.
Why:   Reports whether the process is up and whether the database answers.
How:   Pings the database through the injected accessor (SELECT 1).
Who:   Called by container health checks, load balancers, and humans.

Status levels:
    - healthy:   database reachable
    - degraded:  process up, database unreachable
    The endpoint always answers 200 so probes can read the body; the
    `database` field is what alerting keys on.
"""

import logging
import time

from fastapi import APIRouter, Depends, Request

from app import __version__
from app.routes.contacts import get_contact_accessor
from app.schemas.contact import HealthResponse
from app.services.contact_base import ContactAccessor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns the health status of the service and its database connection. "
        "Always HTTP 200; inspect `status` and `database`."
    ),
)
async def health_check(
    request: Request,
    contacts: ContactAccessor = Depends(get_contact_accessor),
) -> HealthResponse:
    settings = request.app.state.settings

    if await contacts.ping():
        db_status = "connected"
        overall = "healthy"
    else:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        docs=settings.docs_enabled,
        environment=settings.environment,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
