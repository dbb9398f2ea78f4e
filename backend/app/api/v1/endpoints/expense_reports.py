"""
Expense Report API endpoints.

Thin HTTP layer over ExpenseReportService: parse the request, call the
service, wrap the result. Access, lifecycle and concurrency rules all
live in the domain package.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.dependencies import get_current_user
from backend.app.core.principal import Principal
from backend.app.db.session import get_db
from backend.app.domain.expense_reports.query import ReportFilters
from backend.app.domain.expense_reports.service import ExpenseReportService
from backend.app.models.report_enums import ReportStatus
from backend.app.schemas.common import ApiResponse, MessageResponse
from backend.app.schemas.expense_report import (
    ExpenseReportCreate, ExpenseReportDecision, ExpenseReportPage, ExpenseReportResponse,
    ExpenseReportStats, ExpenseReportUpdate,
)

router = APIRouter(prefix="/expense-reports", tags=["Expense Reports"])


@router.post("", response_model=ApiResponse[ExpenseReportResponse], status_code=status.HTTP_201_CREATED)
async def create_expense_report(
    report_data: ExpenseReportCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a draft expense report owned by the caller.

    Line totals, section totals and the summary figures are computed
    server side; any values sent for them are ignored.
    """
    report = await ExpenseReportService.create(db, current_user, report_data)
    return ApiResponse(data=ExpenseReportResponse.from_report(report), message="Expense report created successfully")


@router.get("", response_model=ApiResponse[ExpenseReportPage])
async def list_expense_reports(
    hotel_name: Optional[str] = Query(None, alias="hotelName"),
    report_status: Optional[ReportStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    owner_id: Optional[int] = Query(None, alias="ownerId", description="Reviewers only"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List expense reports visible to the caller, newest first.

    Owners see their own reports; reviewers see everyone's and may narrow
    to one owner with ``ownerId``. An empty match is an empty page.
    """
    filters = ReportFilters(
        hotel_name=hotel_name,
        status=report_status,
        start_date=start_date,
        end_date=end_date,
        owner_id=owner_id,
    )
    result = await ExpenseReportService.list_reports(db, current_user, filters, page, limit)

    return ApiResponse(data=ExpenseReportPage(
        items=[ExpenseReportResponse.from_report(r) for r in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    ))


@router.get("/stats", response_model=ApiResponse[ExpenseReportStats])
async def expense_report_stats(
    hotel_name: Optional[str] = Query(None, alias="hotelName"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    owner_id: Optional[int] = Query(None, alias="ownerId"),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Totals and status counts over the same scope as the listing."""
    filters = ReportFilters(
        hotel_name=hotel_name,
        start_date=start_date,
        end_date=end_date,
        owner_id=owner_id,
    )
    stats = await ExpenseReportService.stats(db, current_user, filters)
    return ApiResponse(data=stats)


@router.get("/{report_id}", response_model=ApiResponse[ExpenseReportResponse])
async def get_expense_report(
    report_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await ExpenseReportService.get(db, current_user, report_id)
    return ApiResponse(data=ExpenseReportResponse.from_report(report))


@router.put("/{report_id}", response_model=ApiResponse[ExpenseReportResponse])
async def update_expense_report(
    report_id: int,
    report_data: ExpenseReportUpdate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Replace the sections sent and recompute every total."""
    report = await ExpenseReportService.update(db, current_user, report_id, report_data)
    return ApiResponse(data=ExpenseReportResponse.from_report(report), message="Expense report updated successfully")


@router.delete("/{report_id}", response_model=MessageResponse)
async def delete_expense_report(
    report_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ExpenseReportService.delete(db, current_user, report_id)
    return MessageResponse(message="Expense report deleted successfully")


@router.put("/{report_id}/submit", response_model=ApiResponse[ExpenseReportResponse])
async def submit_expense_report(
    report_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await ExpenseReportService.submit(db, current_user, report_id)
    return ApiResponse(data=ExpenseReportResponse.from_report(report), message="Expense report submitted successfully")


@router.put("/{report_id}/approve", response_model=ApiResponse[ExpenseReportResponse])
async def decide_expense_report(
    report_id: int,
    decision: ExpenseReportDecision,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a submitted report.

    Either decision locks the report against further edits.
    """
    report = await ExpenseReportService.decide(db, current_user, report_id, decision)
    return ApiResponse(
        data=ExpenseReportResponse.from_report(report),
        message=f"Expense report {report.status.value} successfully"
    )
