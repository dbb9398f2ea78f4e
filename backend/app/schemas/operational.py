"""
Operational dashboard Pydantic schemas.

Read-only figures shown on the resort operations dashboard.
"""

from typing import List

from backend.app.schemas.common import CamelModel


class OperationalStats(CamelModel):
    total_revenue: float
    total_expenses: float
    gross_operating_profit: float
    average_occupancy: float
    total_employees: int
    active_projects: int
    attendance_rate: float
    gop_score: float
    daily_tasks: int


class DailyRevenue(CamelModel):
    day: str
    revenue: float


class Occupancy(CamelModel):
    current: float
    target: float
    trend: str


class DailyRevPAR(CamelModel):
    day: str
    revpar: float


class SourceShare(CamelModel):
    source: str
    percentage: float
    amount: float
    color: str


class ResortPerformance(CamelModel):
    resort: str
    manager: str
    revenue: float
    occupancy: float
    revpar: float
    status: str


class CategoryShare(CamelModel):
    category: str
    percentage: float
    amount: float
    color: str


class RevenueMix(CamelModel):
    total: float
    breakdown: List[CategoryShare]


# Response payloads, one top-level key per endpoint

class StatsPayload(CamelModel):
    stats: OperationalStats


class RevenuePayload(CamelModel):
    revenue: List[DailyRevenue]


class OccupancyPayload(CamelModel):
    occupancy: Occupancy


class RevPARPayload(CamelModel):
    revpar: List[DailyRevPAR]


class BreakdownPayload(CamelModel):
    breakdown: List[SourceShare]


class PerformancePayload(CamelModel):
    performance: List[ResortPerformance]


class RevenueMixPayload(CamelModel):
    mix: RevenueMix
