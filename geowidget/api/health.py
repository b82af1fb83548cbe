"""
Health and liveness endpoints - no authentication required
"""

from fastapi import APIRouter, Depends, Response, status

from ..schemas.geo import DatasetDetail, HealthResponse, PongResponse
from ..services.health import HealthReporter
from .deps import get_health_reporter

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(response: Response, reporter: HealthReporter = Depends(get_health_reporter)):
    report = reporter.report()
    # status code tracks dataset health only when every dataset is required
    if report.require_all and not report.healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="ok" if report.healthy else "degraded",
        healthy=report.healthy,
        all_loaded=report.all_loaded,
        require_all=report.require_all,
        datasets=report.datasets,
        details={kind: DatasetDetail(**detail) for kind, detail in report.details.items()},
    )


@router.get("/ping", response_model=PongResponse)
async def ping():
    """Respond with a pong response as a sanity check"""
    return PongResponse(ping="pong")
