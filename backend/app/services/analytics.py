"""
Analytics Service.

Handles data aggregation for the recruitment and daily-operations dashboards.
Focused on READ-ONLY operations.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.candidate import Candidate
from backend.app.models.candidate_enums import CandidateStatus, DateRangePreset
from backend.app.models.daily_report import DailyReport
from backend.app.models.report_enums import ReportStatus
from backend.app.schemas.candidate import CandidateStats, GroupCount
from backend.app.schemas.daily_report import (
    DailyReportStatsResponse, DailyReportTotals, RevenueBreakdownResponse, RevenueSource,
    SourceHighlight, StatusCount,
)

# Booking channels tracked on the daily form, in display order.
REVENUE_SOURCES = (
    ("Call Centre", DailyReport.call_centre_revenue),
    ("Travel Agent", DailyReport.travel_agent_revenue),
    ("OTA", DailyReport.ota_revenue),
    ("Walk-In", DailyReport.walk_in_revenue),
    ("Sales Manager", DailyReport.sales_manager_revenue),
    ("Club Mahindra", DailyReport.club_mahindra_revenue),
)

BREAKDOWN_WINDOWS = frozenset({
    DateRangePreset.LAST_7_DAYS,
    DateRangePreset.LAST_30_DAYS,
    DateRangePreset.LAST_90_DAYS,
})


def window_start(preset: Optional[DateRangePreset], now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of a rolling window, or ``None`` for "all time"."""
    if preset is None or preset.days is None:
        return None
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=preset.days)


def filter_candidates(
    stmt: Select,
    department: Optional[str] = None,
    location: Optional[str] = None,
    status: Optional[CandidateStatus] = None,
    search: Optional[str] = None,
    date_range: Optional[DateRangePreset] = None,
) -> Select:
    """Shared criteria for the candidate list and its dashboard stats."""
    if department:
        stmt = stmt.where(Candidate.department == department)
    if location:
        stmt = stmt.where(Candidate.location == location)
    if status:
        stmt = stmt.where(Candidate.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(
            Candidate.name.ilike(pattern),
            Candidate.email.ilike(pattern),
            Candidate.role.ilike(pattern),
        ))
    since = window_start(date_range)
    if since is not None:
        stmt = stmt.where(Candidate.created_at >= since)
    return stmt


def filter_daily_reports(
    stmt: Select,
    location: Optional[str] = None,
    status: Optional[ReportStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Select:
    """Shared criteria for the daily report list and stats. Dates are inclusive."""
    if location:
        stmt = stmt.where(DailyReport.resort_name == location)
    if status:
        stmt = stmt.where(DailyReport.status == status)
    if date_from:
        stmt = stmt.where(DailyReport.report_date >= date_from)
    if date_to:
        stmt = stmt.where(DailyReport.report_date <= date_to)
    return stmt


class AnalyticsService:

    @staticmethod
    async def get_candidate_stats(
        db: AsyncSession,
        department: Optional[str] = None,
        location: Optional[str] = None,
        date_range: Optional[DateRangePreset] = None,
    ) -> CandidateStats:
        """Pipeline counts plus candidates grouped by department and location."""

        def scoped(stmt: Select) -> Select:
            return filter_candidates(stmt, department=department, location=location, date_range=date_range)

        by_status_query = scoped(
            select(Candidate.status, func.count(Candidate.id)).group_by(Candidate.status)
        )
        by_status = {row[0]: row[1] for row in (await db.execute(by_status_query)).all()}

        async def grouped(column) -> List[GroupCount]:
            count = func.count(Candidate.id)
            query = scoped(select(column, count).group_by(column).order_by(count.desc(), column))
            return [GroupCount(name=name, count=n) for name, n in (await db.execute(query)).all()]

        return CandidateStats(
            total_c_vs=sum(by_status.values()),
            hired=by_status.get(CandidateStatus.HIRED, 0),
            interviewed=(
                by_status.get(CandidateStatus.INTERVIEW_SCHEDULED, 0)
                + by_status.get(CandidateStatus.INTERVIEW_DONE, 0)
            ),
            rejected=by_status.get(CandidateStatus.REJECTED, 0),
            on_hold=by_status.get(CandidateStatus.ON_HOLD, 0),
            candidates_by_department=await grouped(Candidate.department),
            candidates_by_location=await grouped(Candidate.location),
        )

    @staticmethod
    async def get_daily_report_stats(
        db: AsyncSession,
        location: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> DailyReportStatsResponse:
        """Totals across matching daily reports plus a count per status."""
        totals_query = filter_daily_reports(
            select(
                func.count(DailyReport.id),
                func.coalesce(func.sum(DailyReport.total_revenue_for_day), 0),
                func.coalesce(func.avg(DailyReport.occupancy_ratio), 0),
                func.coalesce(func.sum(DailyReport.rooms_occupied), 0),
                func.coalesce(func.sum(DailyReport.total_guests), 0),
            ).select_from(DailyReport),
            location=location, date_from=date_from, date_to=date_to,
        )
        row = (await db.execute(totals_query)).one()

        status_query = filter_daily_reports(
            select(DailyReport.status, func.count(DailyReport.id)).group_by(DailyReport.status),
            location=location, date_from=date_from, date_to=date_to,
        )
        status_rows = (await db.execute(status_query)).all()

        return DailyReportStatsResponse(
            stats=DailyReportTotals(
                total_reports=row[0],
                total_revenue=float(row[1]),
                average_occupancy=round(float(row[2]), 2),
                total_rooms_occupied=int(row[3]),
                total_guests=int(row[4]),
            ),
            status_counts=[StatusCount(status=status, count=count) for status, count in status_rows],
        )

    @staticmethod
    async def get_revenue_breakdown(
        db: AsyncSession,
        location: Optional[str] = None,
        date_range: Optional[DateRangePreset] = None,
        now: Optional[datetime] = None,
    ) -> RevenueBreakdownResponse:
        """
        Room revenue per booking source over submitted reports.

        Percentages are shares of the summed source amounts, rounded to two
        decimals. Sources with no revenue are left out. The top performer is
        the largest source and the growth opportunity the smallest.
        """
        now = now or datetime.now(timezone.utc)
        if date_range not in BREAKDOWN_WINDOWS:
            date_range = DateRangePreset.LAST_30_DAYS
        since = window_start(date_range, now)

        query = select(
            func.coalesce(func.sum(DailyReport.total_room_revenue), 0),
            *[func.coalesce(func.sum(column), 0) for _, column in REVENUE_SOURCES],
        ).where(
            DailyReport.status == ReportStatus.SUBMITTED,
            DailyReport.submitted_at >= since,
        )
        if location:
            query = query.where(DailyReport.resort_name == location)

        row = (await db.execute(query)).one()
        total_room_revenue = float(row[0])
        amounts = [(name, float(amount)) for (name, _), amount in zip(REVENUE_SOURCES, row[1:])]

        positive = [(name, amount) for name, amount in amounts if amount > 0]
        source_total = sum(amount for _, amount in positive)
        sources = sorted(
            (
                RevenueSource(name=name, amount=amount, percentage=round(amount / source_total * 100, 2))
                for name, amount in positive
            ),
            key=lambda s: s.amount,
            reverse=True,
        )

        top = SourceHighlight(name=sources[0].name, percentage=sources[0].percentage) if sources else None
        low = SourceHighlight(name=sources[-1].name, percentage=sources[-1].percentage) if sources else None

        return RevenueBreakdownResponse(
            total_revenue=total_room_revenue,
            sources=sources,
            top_performer=top,
            growth_opportunity=low,
        )
