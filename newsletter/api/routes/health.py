"""Health Check - liveness probe for operators.

Invariants:
    - GET /health_check always returns 200 with a zero-length body
    - Never touches the database pool
"""

import logging

from fastapi import APIRouter, Response, status

from newsletter.infrastructure.observability import span

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health_check", status_code=status.HTTP_200_OK)
async def health_check() -> Response:
    """Basic liveness probe. Returns 200 if the process is up."""
    with span("Health check endpoint"):
        return Response(status_code=status.HTTP_200_OK)
