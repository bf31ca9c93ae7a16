from fastapi import APIRouter, Depends

from geocache.api.deps import get_health_service
from geocache.schemas.common import ErrorResponse, OkResponse
from geocache.services.health import HealthService

router = APIRouter(prefix="/readyz", tags=["health"])


@router.get(
    "",
    response_model=OkResponse,
    summary="Readiness probe",
    description="Pings the cache backend and runs SELECT 1 on the postal zone database.",
    responses={503: {"model": ErrorResponse, "description": "dependency unavailable"}},
)
async def readyz(svc: HealthService = Depends(get_health_service)):
    return await svc.ok()
