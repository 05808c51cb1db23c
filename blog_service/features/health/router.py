"""Health check API endpoint.

``GET /health`` reports liveness plus database reachability. It answers
503 when the database does not respond so load balancers can act on the
status code alone.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request, Response, status

from blog_service.core.settings import get_app_settings
from blog_service.features.health.schemas import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """Report service health including a database ping."""
    settings = get_app_settings()
    database = getattr(request.app.state, "database", None)
    database_ok = database is not None and await database.ping()

    if not database_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if database_ok else "unhealthy",
        timestamp=datetime.now(UTC),
        service=settings.service_name,
        version=settings.version,
        checks={"database": database_ok},
    )
