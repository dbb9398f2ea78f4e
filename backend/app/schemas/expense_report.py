"""
Expense Report Pydantic schemas.

Request bodies and responses keep the nested document shape clients
expect (``storeAndPurchase.purchaseDetails`` and so on). Totals sent by a
client are accepted but always recomputed server-side.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from backend.app.models.expense_report import ExpenseReport
from backend.app.models.report_enums import BillPaymentStatus, ReportStatus
from backend.app.schemas.common import MAX_AMOUNT, CamelModel, Money, Quantity


# Line items

class PurchaseLine(CamelModel):
    """One store/purchase entry. ``total_price`` is derived."""
    item: str = ""
    quantity: Quantity = Field(default=0, ge=0, le=MAX_AMOUNT)
    unit_price: Money = Field(default=0, ge=0, le=MAX_AMOUNT)
    total_price: Money = 0
    supplier: str = ""
    purchase_date: Optional[date] = None


class BillLine(CamelModel):
    """One department bill. Its total is ``amount``."""
    department: str = ""
    bill_type: str = ""
    amount: Money = Field(default=0, ge=0, le=MAX_AMOUNT)
    due_date: Optional[date] = None
    status: BillPaymentStatus = BillPaymentStatus.PENDING
    description: str = ""


class InventoryLine(CamelModel):
    """One stock item. ``total_value`` is derived."""
    item_name: str = ""
    category: str = ""
    quantity: Quantity = Field(default=0, ge=0, le=MAX_AMOUNT)
    unit_cost: Money = Field(default=0, ge=0, le=MAX_AMOUNT)
    total_value: Money = 0
    reorder_level: Quantity = Field(default=0, ge=0, le=MAX_AMOUNT)
    last_updated: Optional[datetime] = None


class PowerLine(CamelModel):
    """One meter reading. ``units_consumed`` and ``total_cost`` are derived."""
    meter_reading: Quantity = Field(default=0, ge=0, le=MAX_AMOUNT)
    previous_reading: Quantity = Field(default=0, ge=0, le=MAX_AMOUNT)
    units_consumed: Quantity = 0
    rate_per_unit: Money = Field(default=0, ge=0, le=MAX_AMOUNT)
    total_cost: Money = 0
    meter_type: str = ""
    reading_date: Optional[date] = None


# Sections

class PurchaseSection(CamelModel):
    purchase_details: List[PurchaseLine] = Field(default_factory=list)
    total_purchase_amount: Money = 0


class BillsSection(CamelModel):
    bills: List[BillLine] = Field(default_factory=list)
    total_bills_amount: Money = 0


class InventorySection(CamelModel):
    inventory_items: List[InventoryLine] = Field(default_factory=list)
    total_inventory_value: Money = 0


class PowerSection(CamelModel):
    consumption_details: List[PowerLine] = Field(default_factory=list)
    total_power_cost: Money = 0


class SummaryInput(CamelModel):
    """Only revenue and notes are taken from the client."""
    total_revenue: Money = Field(default=0, ge=0, le=MAX_AMOUNT)
    notes: Optional[str] = None


class SummaryBlock(CamelModel):
    total_expenses: Money
    total_revenue: Money
    net_profit: Money
    profit_margin: Money
    notes: Optional[str] = None


class ControlBlock(CamelModel):
    is_locked: bool
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None
    last_modified_by: Optional[int] = None
    last_modified_at: Optional[datetime] = None


# Requests

class ExpenseReportCreate(CamelModel):
    """Schema for creating an expense report. Every section is optional."""
    hotel_name: str = Field(..., max_length=200, description="Hotel the report belongs to")
    report_date: date = Field(..., description="Calendar date covered by the report")
    store_and_purchase: Optional[PurchaseSection] = None
    department_bills: Optional[BillsSection] = None
    store_inventory: Optional[InventorySection] = None
    power_consumption: Optional[PowerSection] = None
    summary: Optional[SummaryInput] = None


class ExpenseReportUpdate(CamelModel):
    """
    Schema for updating a draft expense report.

    A section that is present replaces the stored section whole.
    """
    hotel_name: Optional[str] = Field(None, max_length=200)
    report_date: Optional[date] = None
    store_and_purchase: Optional[PurchaseSection] = None
    department_bills: Optional[BillsSection] = None
    store_inventory: Optional[InventorySection] = None
    power_consumption: Optional[PowerSection] = None
    summary: Optional[SummaryInput] = None


class ExpenseReportDecision(CamelModel):
    """Approve or reject a submitted report."""
    status: ReportStatus = Field(..., description="approved or rejected")
    approval_notes: Optional[str] = Field(default="", max_length=2000)


# Responses

class ExpenseReportResponse(CamelModel):
    """Full expense report as returned by the API."""
    id: int
    owner_id: int
    hotel_name: str
    report_date: date
    status: ReportStatus
    submitted_at: Optional[datetime] = None
    store_and_purchase: PurchaseSection
    department_bills: BillsSection
    store_inventory: InventorySection
    power_consumption: PowerSection
    summary: SummaryBlock
    control: ControlBlock
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_report(cls, report: ExpenseReport) -> "ExpenseReportResponse":
        """Fold the flat row back into the nested document shape."""
        return cls(
            id=report.id,
            owner_id=report.owner_id,
            hotel_name=report.hotel_name,
            report_date=report.report_date,
            status=report.status,
            submitted_at=report.submitted_at,
            store_and_purchase=PurchaseSection(
                purchase_details=report.purchase_details or [],
                total_purchase_amount=report.total_purchase_amount,
            ),
            department_bills=BillsSection(
                bills=report.bills or [],
                total_bills_amount=report.total_bills_amount,
            ),
            store_inventory=InventorySection(
                inventory_items=report.inventory_items or [],
                total_inventory_value=report.total_inventory_value,
            ),
            power_consumption=PowerSection(
                consumption_details=report.consumption_details or [],
                total_power_cost=report.total_power_cost,
            ),
            summary=SummaryBlock(
                total_expenses=report.total_expenses,
                total_revenue=report.total_revenue,
                net_profit=report.net_profit,
                profit_margin=report.profit_margin,
                notes=report.notes,
            ),
            control=ControlBlock(
                is_locked=report.is_locked,
                approved_by=report.approved_by,
                approved_at=report.approved_at,
                approval_notes=report.approval_notes,
                last_modified_by=report.last_modified_by,
                last_modified_at=report.last_modified_at,
            ),
            version=report.version,
            created_at=report.created_at,
            updated_at=report.updated_at,
        )


class ExpenseReportPage(CamelModel):
    """One page of expense reports."""
    items: List[ExpenseReportResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class ExpenseReportStats(CamelModel):
    """Aggregate figures over the reports visible to the caller."""
    total_reports: int = 0
    total_expenses: Money = 0
    total_revenue: Money = 0
    total_net_profit: Money = 0
    average_profit_margin: Money = 0
    draft_count: int = 0
    submitted_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0
