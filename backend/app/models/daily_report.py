"""
Daily Report database model.

One operational snapshot per resort per day: occupancy, revenue by
outlet and by booking source, and complimentary stays.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Date, DateTime, Float, ForeignKey, Enum
from backend.app.db.session import Base
from backend.app.models.report_enums import ReportStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DailyReport(Base):
    """
    Daily operational report model.

    ``submitted_by`` is the display name typed on the form;
    ``submitted_by_id`` is the account that filed it and owns it.
    """
    __tablename__ = "daily_reports"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Metadata
    resort_name = Column(String(150), nullable=False, index=True)
    report_date = Column(Date, nullable=False, index=True)
    status = Column(Enum(ReportStatus), default=ReportStatus.DRAFT, nullable=False, index=True)
    submitted_by = Column(String(100), nullable=False)
    submitted_by_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Occupancy
    rooms_occupied = Column(Integer, nullable=False, default=0)
    total_guests = Column(Integer, nullable=False, default=0)
    occupancy_ratio = Column(Float, nullable=False, default=0)
    mtd_occupancy = Column(Float, nullable=False, default=0)
    ytd_occupancy = Column(Float, nullable=False, default=0)

    # Revenue
    room_revenue = Column(Float, nullable=False, default=0)
    f_b_revenue = Column(Float, nullable=False, default=0)
    food_revenue = Column(Float, nullable=False, default=0)
    beverage_revenue = Column(Float, nullable=False, default=0)
    total_f_b_revenue = Column(Float, nullable=False, default=0)
    spa_revenue = Column(Float, nullable=False, default=0)
    additional_revenue = Column(Float, nullable=False, default=0)
    other_revenue = Column(Float, nullable=False, default=0)
    total_revenue = Column(Float, nullable=False, default=0)
    total_room_revenue = Column(Float, nullable=False, default=0)
    total_revenue_for_day = Column(Float, nullable=False, default=0)

    # Revenue sources
    call_centre_rooms = Column(Integer, nullable=False, default=0)
    call_centre_revenue = Column(Float, nullable=False, default=0)
    call_centre_adr = Column(Float, nullable=False, default=0)
    travel_agent_rooms = Column(Integer, nullable=False, default=0)
    travel_agent_revenue = Column(Float, nullable=False, default=0)
    travel_agent_adr = Column(Float, nullable=False, default=0)
    ota_rooms = Column(Integer, nullable=False, default=0)
    ota_revenue = Column(Float, nullable=False, default=0)
    ota_adr = Column(Float, nullable=False, default=0)
    walk_in_rooms = Column(Integer, nullable=False, default=0)
    walk_in_revenue = Column(Float, nullable=False, default=0)
    walk_in_adr = Column(Float, nullable=False, default=0)
    sales_manager_rooms = Column(Integer, nullable=False, default=0)
    sales_manager_revenue = Column(Float, nullable=False, default=0)
    sales_manager_adr = Column(Float, nullable=False, default=0)
    sales_manager_name = Column(String(100), nullable=True)
    club_mahindra_rooms = Column(Integer, nullable=False, default=0)
    club_mahindra_revenue = Column(Float, nullable=False, default=0)
    club_mahindra_adr = Column(Float, nullable=False, default=0)

    # Complimentary (NC) stays
    nc_rooms = Column(Integer, nullable=False, default=0)
    nc_guest_name = Column(String(150), nullable=True)
    nc_reference = Column(String(150), nullable=True)

    # F&B outlets
    breakfast_revenue = Column(Float, nullable=False, default=0)
    breakfast_guests = Column(Integer, nullable=False, default=0)
    breakfast_average = Column(Float, nullable=False, default=0)
    lunch_revenue = Column(Float, nullable=False, default=0)
    lunch_guests = Column(Integer, nullable=False, default=0)
    lunch_average = Column(Float, nullable=False, default=0)
    dinner_revenue = Column(Float, nullable=False, default=0)
    dinner_guests = Column(Integer, nullable=False, default=0)
    dinner_average = Column(Float, nullable=False, default=0)
    bar_revenue = Column(Float, nullable=False, default=0)
    bar_guests = Column(Integer, nullable=False, default=0)
    bar_average = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<DailyReport(id={self.id}, resort='{self.resort_name}', date={self.report_date}, status='{self.status.value}')>"
