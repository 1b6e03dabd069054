from fastapi import APIRouter, Depends

from neoride.schemas.responses import StatsResponseSchema
from neoride.services.stats_service import StatsService, get_stats_service

router = APIRouter()


@router.get(
    "",
    response_model=StatsResponseSchema,
    summary="Aggregate counts",
    description="Total customers and drivers, plus approved and pending drivers."
)
async def get_stats(service: StatsService = Depends(get_stats_service)):
    return await service.get_stats()
