# geocache/api/routers/healthz.py
from fastapi import APIRouter

from geocache.schemas.common import OkResponse

router = APIRouter(prefix="/healthz", tags=["health"])


@router.get(
    "",
    response_model=OkResponse,
    summary="Liveness probe",
    description="Always 200; touches neither the cache backend nor the database.",
)
async def healthz():
    return {"ok": True}
