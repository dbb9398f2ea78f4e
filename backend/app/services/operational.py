"""
Operational dashboard datasets.

Static per-resort figures keyed by location name. Unknown or missing
locations fall back to the group-wide default set.
"""

from typing import Dict, List, Optional

from backend.app.schemas.operational import (
    CategoryShare, DailyRevenue, DailyRevPAR, Occupancy, OperationalStats,
    ResortPerformance, RevenueMix, SourceShare,
)

GOA = "Goa Beach Resort"
KERALA = "Kerala Backwaters Resort"
DIU = "Diu - Ghogla"

WEEK = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_STATS: Dict[str, dict] = {
    GOA: dict(total_revenue=680000, total_expenses=408000, gross_operating_profit=272000,
              average_occupancy=92, total_employees=200, active_projects=12,
              attendance_rate=96.2, gop_score=82.5, daily_tasks=31),
    KERALA: dict(total_revenue=420000, total_expenses=294000, gross_operating_profit=126000,
                 average_occupancy=78, total_employees=120, active_projects=6,
                 attendance_rate=91.8, gop_score=75.4, daily_tasks=18),
    DIU: dict(total_revenue=380000, total_expenses=266000, gross_operating_profit=114000,
              average_occupancy=85, total_employees=156, active_projects=8,
              attendance_rate=94.5, gop_score=78.2, daily_tasks=23),
}
_DEFAULT_STATS = dict(total_revenue=510000, total_expenses=357000, gross_operating_profit=153000,
                      average_occupancy=85, total_employees=156, active_projects=8,
                      attendance_rate=94.5, gop_score=78.2, daily_tasks=23)

_WEEKLY_REVENUE: Dict[str, tuple] = {
    GOA: (25000, 22000, 28000, 35000, 32000, 40000, 35000),
    KERALA: (15000, 12000, 18000, 22000, 20000, 25000, 22000),
    DIU: (18000, 15000, 20000, 25000, 22000, 28000, 24000),
}
_DEFAULT_WEEKLY_REVENUE = (18750, 14062, 21875, 28125, 23437, 29687, 25000)

_WEEKLY_REVPAR = (3800, 4200, 3900, 4500, 4800, 5200, 4600)

_SOURCE_SHARES = (
    ("OTA", 35, 180000, "blue"),
    ("Call Centre", 27, 140000, "green"),
    ("Travel Agent", 18, 90000, "yellow"),
    ("Walk-In", 13, 65000, "purple"),
    ("Club Mahindra", 7, 35000, "red"),
)

_REVENUE_MIX: Dict[str, tuple] = {
    GOA: (680000, (
        ("Room Revenue", 70, 476000, "blue"),
        ("F&B Revenue", 20, 136000, "green"),
        ("Spa & Wellness", 6, 40800, "purple"),
        ("Activities & Tours", 4, 27200, "yellow"),
    )),
    KERALA: (420000, (
        ("Room Revenue", 60, 252000, "blue"),
        ("F&B Revenue", 30, 126000, "green"),
        ("Ayurveda & Spa", 8, 33600, "purple"),
        ("Boat Tours", 2, 8400, "cyan"),
    )),
    DIU: (380000, (
        ("Room Revenue", 55, 209000, "blue"),
        ("F&B Revenue", 35, 133000, "green"),
        ("Beach Activities", 7, 26600, "yellow"),
        ("Water Sports", 3, 11400, "cyan"),
    )),
}
_DEFAULT_REVENUE_MIX = (510000, (
    ("Room Revenue", 65, 331500, "blue"),
    ("F&B Revenue", 25, 127500, "green"),
    ("Spa & Others", 10, 51000, "yellow"),
))


class OperationalService:

    @staticmethod
    def get_stats(location: Optional[str] = None) -> OperationalStats:
        return OperationalStats(**_STATS.get(location, _DEFAULT_STATS))

    @staticmethod
    def get_weekly_revenue(location: Optional[str] = None) -> List[DailyRevenue]:
        series = _WEEKLY_REVENUE.get(location, _DEFAULT_WEEKLY_REVENUE)
        return [DailyRevenue(day=day, revenue=value) for day, value in zip(WEEK, series)]

    @staticmethod
    def get_occupancy(location: Optional[str] = None) -> Occupancy:
        return Occupancy(current=85, target=90, trend="+5.2%")

    @staticmethod
    def get_revpar(location: Optional[str] = None) -> List[DailyRevPAR]:
        return [DailyRevPAR(day=day, revpar=value) for day, value in zip(WEEK, _WEEKLY_REVPAR)]

    @staticmethod
    def get_revenue_breakdown(location: Optional[str] = None) -> List[SourceShare]:
        return [
            SourceShare(source=source, percentage=pct, amount=amount, color=color)
            for source, pct, amount, color in _SOURCE_SHARES
        ]

    @staticmethod
    def get_performance(location: Optional[str] = None) -> List[ResortPerformance]:
        return [ResortPerformance(
            resort=location or "Resort",
            manager="Manager",
            revenue=125000,
            occupancy=85,
            revpar=4250,
            status="Active",
        )]

    @staticmethod
    def get_revenue_mix(location: Optional[str] = None) -> RevenueMix:
        total, rows = _REVENUE_MIX.get(location, _DEFAULT_REVENUE_MIX)
        return RevenueMix(
            total=total,
            breakdown=[
                CategoryShare(category=category, percentage=pct, amount=amount, color=color)
                for category, pct, amount, color in rows
            ],
        )
