"""
Daily Report API endpoints.

One operational report per resort per day, filed by resort staff and
reviewed by operations.
"""

import math
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import OwnershipGuard
from backend.app.core.principal import Principal
from backend.app.db.session import get_db
from backend.app.models.candidate_enums import DateRangePreset
from backend.app.models.daily_report import DailyReport
from backend.app.models.enums import Capability
from backend.app.models.report_enums import ReportStatus
from backend.app.schemas.common import ApiResponse, MessageResponse
from backend.app.schemas.daily_report import (
    DailyReportCreate, DailyReportListResponse, DailyReportPagination, DailyReportResponse,
    DailyReportStatsResponse, DailyReportUpdate, RevenueBreakdownResponse,
)
from backend.app.services.analytics import AnalyticsService, filter_daily_reports

router = APIRouter(prefix="/daily-reports", tags=["Daily Reports"])

report_guard = OwnershipGuard(Capability.MANAGE_DAILY_REPORTS)


async def _get_report_or_404(db: AsyncSession, report_id: int) -> DailyReport:
    report = await db.get(DailyReport, report_id)
    if not report:
        raise ResourceNotFoundError("Daily report", report_id)
    return report


async def _file_report(
    db: AsyncSession,
    report_data: DailyReportCreate,
    current_user: Principal,
    report_status: ReportStatus
) -> DailyReport:
    report = DailyReport(
        **report_data.model_dump(),
        status=report_status,
        submitted_by_id=current_user.id,
        submitted_at=datetime.now(timezone.utc),
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report


@router.post("", response_model=ApiResponse[DailyReportResponse], status_code=status.HTTP_201_CREATED)
async def submit_daily_report(
    report_data: DailyReportCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """File a daily report as submitted."""
    report = await _file_report(db, report_data, current_user, ReportStatus.SUBMITTED)
    return ApiResponse(data=DailyReportResponse.model_validate(report), message="Daily report submitted successfully")


@router.post("/draft", response_model=ApiResponse[DailyReportResponse], status_code=status.HTTP_201_CREATED)
async def save_draft(
    report_data: DailyReportCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save a daily report without submitting it."""
    report = await _file_report(db, report_data, current_user, ReportStatus.DRAFT)
    return ApiResponse(data=DailyReportResponse.model_validate(report), message="Draft saved successfully")


@router.get("", response_model=ApiResponse[DailyReportListResponse])
async def list_daily_reports(
    location: Optional[str] = Query(None, description="Resort name"),
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List daily reports, most recently submitted first."""

    def scoped(stmt):
        return filter_daily_reports(
            stmt, location=location, status=report_status, date_from=date_from, date_to=date_to
        )

    total = (await db.execute(scoped(select(func.count(DailyReport.id))))).scalar() or 0

    result = await db.execute(
        scoped(select(DailyReport))
        .order_by(DailyReport.submitted_at.desc(), DailyReport.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    reports = result.scalars().all()

    total_pages = math.ceil(total / limit) if total else 0
    return ApiResponse(data=DailyReportListResponse(
        daily_reports=[DailyReportResponse.model_validate(r) for r in reports],
        pagination=DailyReportPagination(
            current_page=page,
            total_pages=total_pages,
            total_reports=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )
    ))


@router.get("/stats", response_model=ApiResponse[DailyReportStatsResponse])
async def daily_report_stats(
    location: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    stats = await AnalyticsService.get_daily_report_stats(
        db, location=location, date_from=date_from, date_to=date_to
    )
    return ApiResponse(data=stats)


@router.get("/revenue-breakdown", response_model=ApiResponse[RevenueBreakdownResponse])
async def revenue_breakdown(
    location: Optional[str] = Query(None),
    date_range: DateRangePreset = Query(DateRangePreset.LAST_30_DAYS, alias="dateRange"),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Room revenue split by booking source over submitted reports."""
    breakdown = await AnalyticsService.get_revenue_breakdown(db, location=location, date_range=date_range)
    return ApiResponse(data=breakdown)


@router.get("/{report_id}", response_model=ApiResponse[DailyReportResponse])
async def get_daily_report(
    report_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await _get_report_or_404(db, report_id)
    return ApiResponse(data=DailyReportResponse.model_validate(report))


@router.put("/{report_id}", response_model=ApiResponse[DailyReportResponse])
async def update_daily_report(
    report_id: int,
    report_data: DailyReportUpdate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Partial update by the filing user or an operations manager."""
    report = await _get_report_or_404(db, report_id)
    report_guard.enforce(report.submitted_by_id, current_user, "daily report")

    for field, value in report_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(report, field, value)

    await db.commit()
    await db.refresh(report)

    return ApiResponse(data=DailyReportResponse.model_validate(report), message="Daily report updated successfully")


@router.delete("/{report_id}", response_model=MessageResponse)
async def delete_daily_report(
    report_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await _get_report_or_404(db, report_id)
    report_guard.enforce(report.submitted_by_id, current_user, "daily report")

    await db.delete(report)
    await db.commit()

    return MessageResponse(message="Daily report deleted successfully")
