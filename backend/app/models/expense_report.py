"""
Expense Report database model.

A hotel's periodic expense statement. Line-item collections are stored as
JSON documents on the row; every total next to them is derived and is
rewritten by the service layer before each write.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, Numeric, JSON, ForeignKey, Enum
from backend.app.db.session import Base
from backend.app.models.report_enums import ReportStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


MONEY = Numeric(14, 2)


class ExpenseReport(Base):
    """
    Expense report model.

    ``version`` is bumped on every write and guards the conditional UPDATE
    used for optimistic concurrency.
    """
    __tablename__ = "expense_reports"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identity
    owner_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    hotel_name = Column(String(200), nullable=False, index=True)
    report_date = Column(Date, nullable=False, index=True)

    # Lifecycle
    status = Column(Enum(ReportStatus), default=ReportStatus.DRAFT, nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=1)

    # Store and purchase
    purchase_details = Column(JSON, nullable=False, default=list)
    total_purchase_amount = Column(MONEY, nullable=False, default=0)

    # Department bills
    bills = Column(JSON, nullable=False, default=list)
    total_bills_amount = Column(MONEY, nullable=False, default=0)

    # Store inventory
    inventory_items = Column(JSON, nullable=False, default=list)
    total_inventory_value = Column(MONEY, nullable=False, default=0)

    # Power consumption
    consumption_details = Column(JSON, nullable=False, default=list)
    total_power_cost = Column(MONEY, nullable=False, default=0)

    # Summary
    total_expenses = Column(MONEY, nullable=False, default=0)
    total_revenue = Column(MONEY, nullable=False, default=0)
    net_profit = Column(MONEY, nullable=False, default=0)
    profit_margin = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    # Control
    is_locked = Column(Boolean, nullable=False, default=False)
    approved_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approval_notes = Column(Text, nullable=True)
    last_modified_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    last_modified_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Timestamps (sub-second precision keeps list ordering stable)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<ExpenseReport(id={self.id}, hotel='{self.hotel_name}', status='{self.status.value}', locked={self.is_locked})>"
