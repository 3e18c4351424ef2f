"""
Statistics endpoint.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_statistics_service
from api.schemas import StatisticsResponse
from services import StatisticsService


router = APIRouter(prefix="/api/estatisticas", tags=["Statistics"])


@router.get("", response_model=StatisticsResponse)
async def get_statistics(
    service: StatisticsService = Depends(get_statistics_service),
) -> StatisticsResponse:
    """
    Order, product and customer counts plus total sales.

    Recomputed from the store on every call.
    """
    stats = await service.compute()
    return StatisticsResponse(**stats.to_dict())
