"""
Reference data endpoints.

Active locations and departments used to populate dashboard filters.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.dependencies import get_current_user
from backend.app.core.principal import Principal
from backend.app.db.session import get_db
from backend.app.models.reference import Department, Location
from backend.app.schemas.common import ApiResponse
from backend.app.schemas.reference import DepartmentResponse, LocationResponse

locations_router = APIRouter(prefix="/locations", tags=["Reference Data"])
departments_router = APIRouter(prefix="/departments", tags=["Reference Data"])


@locations_router.get("", response_model=ApiResponse[List[LocationResponse]])
async def list_locations(
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(Location).where(Location.is_active == True).order_by(Location.name)
    )
    return ApiResponse(data=[LocationResponse.model_validate(row) for row in result.scalars().all()])


@departments_router.get("", response_model=ApiResponse[List[DepartmentResponse]])
async def list_departments(
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(Department).where(Department.is_active == True).order_by(Department.name)
    )
    return ApiResponse(data=[DepartmentResponse.model_validate(row) for row in result.scalars().all()])
