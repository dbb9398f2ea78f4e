"""
Operational dashboard endpoints.

Read-only per-resort figures for the operations dashboard.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from backend.app.core.dependencies import get_current_user
from backend.app.core.principal import Principal
from backend.app.schemas.common import ApiResponse
from backend.app.schemas.operational import (
    BreakdownPayload, OccupancyPayload, PerformancePayload, RevenueMixPayload, RevenuePayload,
    RevPARPayload, StatsPayload,
)
from backend.app.services.operational import OperationalService

router = APIRouter(prefix="/operational", tags=["Operational Analytics"])

LocationQuery = Query(None, description="Resort name; omitted or unknown returns group figures")


@router.get("/stats", response_model=ApiResponse[StatsPayload])
async def operational_stats(
    location: Optional[str] = LocationQuery,
    current_user: Principal = Depends(get_current_user)
):
    return ApiResponse(data=StatsPayload(stats=OperationalService.get_stats(location)))


@router.get("/revenue", response_model=ApiResponse[RevenuePayload])
async def weekly_revenue(
    location: Optional[str] = LocationQuery,
    current_user: Principal = Depends(get_current_user)
):
    """Revenue for each day of the current week."""
    return ApiResponse(data=RevenuePayload(revenue=OperationalService.get_weekly_revenue(location)))


@router.get("/occupancy", response_model=ApiResponse[OccupancyPayload])
async def occupancy(
    location: Optional[str] = LocationQuery,
    current_user: Principal = Depends(get_current_user)
):
    return ApiResponse(data=OccupancyPayload(occupancy=OperationalService.get_occupancy(location)))


@router.get("/revpar", response_model=ApiResponse[RevPARPayload])
async def revpar(
    location: Optional[str] = LocationQuery,
    current_user: Principal = Depends(get_current_user)
):
    return ApiResponse(data=RevPARPayload(revpar=OperationalService.get_revpar(location)))


@router.get("/revenue-breakdown", response_model=ApiResponse[BreakdownPayload])
async def revenue_breakdown(
    location: Optional[str] = LocationQuery,
    current_user: Principal = Depends(get_current_user)
):
    return ApiResponse(data=BreakdownPayload(breakdown=OperationalService.get_revenue_breakdown(location)))


@router.get("/performance", response_model=ApiResponse[PerformancePayload])
async def performance(
    location: Optional[str] = LocationQuery,
    current_user: Principal = Depends(get_current_user)
):
    return ApiResponse(data=PerformancePayload(performance=OperationalService.get_performance(location)))


@router.get("/revenue-mix", response_model=ApiResponse[RevenueMixPayload])
async def revenue_mix(
    location: Optional[str] = LocationQuery,
    current_user: Principal = Depends(get_current_user)
):
    return ApiResponse(data=RevenueMixPayload(mix=OperationalService.get_revenue_mix(location)))
