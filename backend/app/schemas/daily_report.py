"""
Daily Report Pydantic schemas.

The form is flat on the wire: every figure is a top-level camelCase key.
"""

from datetime import date, datetime
from typing import Annotated, List, Optional

from pydantic import Field

from backend.app.models.report_enums import ReportStatus
from backend.app.schemas.common import CamelModel

Count = Annotated[int, Field(ge=0)]
Amount = Annotated[float, Field(ge=0)]


class DailyReportFields(CamelModel):
    """Every figure on the daily form. All default to 0 (or empty)."""

    # Occupancy
    rooms_occupied: Count = 0
    total_guests: Count = 0
    occupancy_ratio: Amount = 0
    mtd_occupancy: Amount = 0
    ytd_occupancy: Amount = 0

    # Revenue
    room_revenue: Amount = 0
    f_b_revenue: Amount = 0
    food_revenue: Amount = 0
    beverage_revenue: Amount = 0
    total_f_b_revenue: Amount = 0
    spa_revenue: Amount = 0
    additional_revenue: Amount = 0
    other_revenue: Amount = 0
    total_revenue: Amount = 0
    total_room_revenue: Amount = 0
    total_revenue_for_day: Amount = 0

    # Revenue sources
    call_centre_rooms: Count = 0
    call_centre_revenue: Amount = 0
    call_centre_adr: Amount = Field(0, alias="callCentreADR")
    travel_agent_rooms: Count = 0
    travel_agent_revenue: Amount = 0
    travel_agent_adr: Amount = Field(0, alias="travelAgentADR")
    ota_rooms: Count = 0
    ota_revenue: Amount = 0
    ota_adr: Amount = Field(0, alias="otaADR")
    walk_in_rooms: Count = 0
    walk_in_revenue: Amount = 0
    walk_in_adr: Amount = Field(0, alias="walkInADR")
    sales_manager_rooms: Count = 0
    sales_manager_revenue: Amount = 0
    sales_manager_adr: Amount = Field(0, alias="salesManagerADR")
    sales_manager_name: Optional[str] = Field(None, max_length=100)
    club_mahindra_rooms: Count = 0
    club_mahindra_revenue: Amount = 0
    club_mahindra_adr: Amount = Field(0, alias="clubMahindraADR")

    # Complimentary stays
    nc_rooms: Count = 0
    nc_guest_name: Optional[str] = Field(None, max_length=150)
    nc_reference: Optional[str] = Field(None, max_length=150)

    # F&B outlets
    breakfast_revenue: Amount = 0
    breakfast_guests: Count = 0
    breakfast_average: Amount = 0
    lunch_revenue: Amount = 0
    lunch_guests: Count = 0
    lunch_average: Amount = 0
    dinner_revenue: Amount = 0
    dinner_guests: Count = 0
    dinner_average: Amount = 0
    bar_revenue: Amount = 0
    bar_guests: Count = 0
    bar_average: Amount = 0


class DailyReportCreate(DailyReportFields):
    """Schema for filing a daily report (submitted or draft)."""
    resort_name: str = Field(..., min_length=1, max_length=150)
    report_date: date
    submitted_by: str = Field(..., min_length=1, max_length=100, description="Name shown on the report")


class DailyReportUpdate(DailyReportFields):
    """Partial update: only the keys sent are applied."""
    resort_name: Optional[str] = Field(None, min_length=1, max_length=150)
    report_date: Optional[date] = None
    submitted_by: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[ReportStatus] = None


class DailyReportResponse(DailyReportFields):
    id: int
    resort_name: str
    report_date: date
    status: ReportStatus
    submitted_by: str
    submitted_by_id: int
    submitted_at: datetime
    created_at: datetime
    updated_at: datetime


class DailyReportPagination(CamelModel):
    current_page: int
    total_pages: int
    total_reports: int
    has_next: bool
    has_prev: bool


class DailyReportListResponse(CamelModel):
    daily_reports: List[DailyReportResponse]
    pagination: DailyReportPagination


class DailyReportTotals(CamelModel):
    total_reports: int = 0
    total_revenue: float = 0
    average_occupancy: float = 0
    total_rooms_occupied: int = 0
    total_guests: int = 0


class StatusCount(CamelModel):
    status: ReportStatus
    count: int


class DailyReportStatsResponse(CamelModel):
    stats: DailyReportTotals
    status_counts: List[StatusCount]


class RevenueSource(CamelModel):
    name: str
    amount: float
    percentage: float


class SourceHighlight(CamelModel):
    name: str
    percentage: float


class RevenueBreakdownResponse(CamelModel):
    total_revenue: float
    sources: List[RevenueSource]
    top_performer: Optional[SourceHighlight] = None
    growth_opportunity: Optional[SourceHighlight] = None
