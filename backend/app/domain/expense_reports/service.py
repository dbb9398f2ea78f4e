"""
Expense Report Service (Domain Logic).

Orchestrates the gate, the lifecycle, the aggregator and persistence.

Flow for every mutation:
1. Load the report (404 if absent)
2. Access gate (403 not_owner / not_elevated / locked)
3. Lifecycle transition (400 if the event is not allowed)
4. Validate and recompute derived totals (content changes only)
5. Conditional write keyed on (id, expected status, version) plus the
   audit row, committed together. No matching row means another request
   won the race: roll back and raise 409.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from backend.app.core.principal import Principal
from backend.app.domain.expense_reports import validation
from backend.app.domain.expense_reports.access import ReportOperation, authorize
from backend.app.domain.expense_reports.aggregator import PricedContent, compute_totals, to_money
from backend.app.domain.expense_reports.lifecycle import DECISION_EVENTS, ReportEvent, locks_report, transition
from backend.app.domain.expense_reports.query import (
    Page, ReportFilters, apply_filters, build_report_query, count_query, paginate, resolve_owner_scope,
)
from backend.app.models.expense_report import ExpenseReport
from backend.app.models.report_enums import ReportStatus
from backend.app.schemas.expense_report import (
    BillsSection, ExpenseReportCreate, ExpenseReportDecision, ExpenseReportStats, ExpenseReportUpdate,
    InventorySection, PowerSection, PurchaseSection,
)
from backend.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)

TARGET_TYPE = "expense_report"

DECISION_AUDIT = {
    ReportEvent.APPROVE: AuditAction.EXPENSE_REPORT_APPROVED,
    ReportEvent.REJECT: AuditAction.EXPENSE_REPORT_REJECTED,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _dump_lines(lines) -> list:
    return [line.model_dump(mode="json", by_alias=True) for line in lines]


def _content_columns(priced: PricedContent) -> Dict[str, Any]:
    """Column values for the line items and every derived total."""
    totals = priced.totals
    return {
        "purchase_details": _dump_lines(priced.purchases),
        "bills": _dump_lines(priced.bills),
        "inventory_items": _dump_lines(priced.inventory),
        "consumption_details": _dump_lines(priced.power),
        "total_purchase_amount": totals.total_purchase_amount,
        "total_bills_amount": totals.total_bills_amount,
        "total_inventory_value": totals.total_inventory_value,
        "total_power_cost": totals.total_power_cost,
        "total_expenses": totals.total_expenses,
        "total_revenue": totals.total_revenue,
        "net_profit": totals.net_profit,
        "profit_margin": totals.profit_margin,
    }


def _stored_sections(report: ExpenseReport):
    """Rehydrate the persisted line items into schema objects."""
    purchases = validation.unwrap(validation.parse(PurchaseSection, {"purchaseDetails": report.purchase_details or []}))
    bills = validation.unwrap(validation.parse(BillsSection, {"bills": report.bills or []}))
    inventory = validation.unwrap(validation.parse(InventorySection, {"inventoryItems": report.inventory_items or []}))
    power = validation.unwrap(validation.parse(PowerSection, {"consumptionDetails": report.consumption_details or []}))
    return purchases, bills, inventory, power


class ExpenseReportService:

    @staticmethod
    async def _load(db: AsyncSession, report_id: int) -> ExpenseReport:
        report = await db.get(ExpenseReport, report_id)
        if not report:
            raise ResourceNotFoundError("Expense report", report_id)
        return report

    @staticmethod
    async def _guarded_write(
        db: AsyncSession,
        report: ExpenseReport,
        values: Dict[str, Any],
        actor: Principal,
        action: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ExpenseReport:
        """
        Conditional UPDATE on the snapshot the caller validated against.

        Raises:
            ConflictError: status or version changed since the snapshot
        """
        stmt = (
            update(ExpenseReport)
            .where(
                ExpenseReport.id == report.id,
                ExpenseReport.status == report.status,
                ExpenseReport.version == report.version,
            )
            .values(**values, version=ExpenseReport.version + 1)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await db.execute(stmt)
            if result.rowcount != 1:
                logger.warning(
                    "Stale write on expense report %s (status=%s, version=%s)",
                    report.id, report.status.value, report.version
                )
                raise ConflictError()

            await log_event(
                db=db,
                action=action,
                actor_id=actor.id,
                actor_username=actor.username,
                target_type=TARGET_TYPE,
                target_id=report.id,
                target_label=report.hotel_name,
                metadata=metadata,
                commit=False
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(report)
        return report

    @staticmethod
    async def create(db: AsyncSession, actor: Principal, payload: ExpenseReportCreate) -> ExpenseReport:
        """Create a draft report owned by ``actor``."""
        payload = validation.unwrap(validation.check_content(payload))

        priced = compute_totals(
            purchases=payload.store_and_purchase.purchase_details if payload.store_and_purchase else [],
            bills=payload.department_bills.bills if payload.department_bills else [],
            inventory=payload.store_inventory.inventory_items if payload.store_inventory else [],
            power=payload.power_consumption.consumption_details if payload.power_consumption else [],
            total_revenue=payload.summary.total_revenue if payload.summary else Decimal("0"),
        )
        validation.unwrap(validation.check_totals(priced.totals))

        now = _now()
        report = ExpenseReport(
            owner_id=actor.id,
            hotel_name=payload.hotel_name,
            report_date=payload.report_date,
            status=ReportStatus.DRAFT,
            notes=payload.summary.notes if payload.summary else None,
            is_locked=False,
            last_modified_by=actor.id,
            last_modified_at=now,
            version=1,
            created_at=now,
            updated_at=now,
            **_content_columns(priced),
        )

        try:
            db.add(report)
            await db.flush()
            await log_event(
                db=db,
                action=AuditAction.EXPENSE_REPORT_CREATED,
                actor_id=actor.id,
                actor_username=actor.username,
                target_type=TARGET_TYPE,
                target_id=report.id,
                target_label=report.hotel_name,
                metadata={"report_date": str(report.report_date)},
                commit=False
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(report)
        logger.info("Expense report %s created by %s", report.id, actor.username)
        return report

    @staticmethod
    async def get(db: AsyncSession, actor: Principal, report_id: int) -> ExpenseReport:
        report = await ExpenseReportService._load(db, report_id)
        authorize(actor, report, ReportOperation.READ).enforce(ReportOperation.READ)
        return report

    @staticmethod
    async def list_reports(db: AsyncSession, actor: Principal, filters: ReportFilters, page: int, limit: int) -> Page:
        stmt = build_report_query(actor, filters)

        total = (await db.execute(count_query(stmt))).scalar() or 0
        result = await db.execute(paginate(stmt, page, limit))

        return Page(items=list(result.scalars().all()), total=total, page=page, limit=limit)

    @staticmethod
    async def update(
        db: AsyncSession,
        actor: Principal,
        report_id: int,
        payload: ExpenseReportUpdate
    ) -> ExpenseReport:
        """
        Replace the sections present in ``payload`` and recompute totals.

        Only drafts can be edited; locked reports are read-only.
        """
        report = await ExpenseReportService._load(db, report_id)
        authorize(actor, report, ReportOperation.UPDATE).enforce(ReportOperation.UPDATE)
        transition(report.status, ReportEvent.UPDATE)
        payload = validation.unwrap(validation.check_content(payload))

        purchases, bills, inventory, power = _stored_sections(report)
        if payload.store_and_purchase is not None:
            purchases = payload.store_and_purchase
        if payload.department_bills is not None:
            bills = payload.department_bills
        if payload.store_inventory is not None:
            inventory = payload.store_inventory
        if payload.power_consumption is not None:
            power = payload.power_consumption

        if payload.summary is not None:
            revenue, notes = payload.summary.total_revenue, payload.summary.notes
        else:
            revenue, notes = report.total_revenue, report.notes

        priced = compute_totals(
            purchases=purchases.purchase_details,
            bills=bills.bills,
            inventory=inventory.inventory_items,
            power=power.consumption_details,
            total_revenue=revenue,
        )
        validation.unwrap(validation.check_totals(priced.totals))

        values = _content_columns(priced)
        values.update(notes=notes, last_modified_by=actor.id, last_modified_at=_now())
        if payload.hotel_name is not None:
            values["hotel_name"] = payload.hotel_name
        if payload.report_date is not None:
            values["report_date"] = payload.report_date

        return await ExpenseReportService._guarded_write(
            db, report, values, actor,
            action=AuditAction.EXPENSE_REPORT_UPDATED,
            metadata={"updated_fields": sorted(payload.model_fields_set)}
        )

    @staticmethod
    async def delete(db: AsyncSession, actor: Principal, report_id: int) -> None:
        """Remove a draft report. Locked reports can never be deleted."""
        report = await ExpenseReportService._load(db, report_id)
        authorize(actor, report, ReportOperation.DELETE).enforce(ReportOperation.DELETE)
        transition(report.status, ReportEvent.DELETE)

        stmt = (
            delete(ExpenseReport)
            .where(
                ExpenseReport.id == report.id,
                ExpenseReport.status == report.status,
                ExpenseReport.version == report.version,
            )
            .execution_options(synchronize_session=False)
        )

        try:
            result = await db.execute(stmt)
            if result.rowcount != 1:
                raise ConflictError()
            await log_event(
                db=db,
                action=AuditAction.EXPENSE_REPORT_DELETED,
                actor_id=actor.id,
                actor_username=actor.username,
                target_type=TARGET_TYPE,
                target_id=report.id,
                target_label=report.hotel_name,
                commit=False
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        db.expunge(report)
        logger.info("Expense report %s deleted by %s", report_id, actor.username)

    @staticmethod
    async def submit(db: AsyncSession, actor: Principal, report_id: int) -> ExpenseReport:
        """draft → submitted, by the owner or an elevated user."""
        report = await ExpenseReportService._load(db, report_id)
        authorize(actor, report, ReportOperation.SUBMIT).enforce(ReportOperation.SUBMIT)
        new_status = transition(report.status, ReportEvent.SUBMIT)

        now = _now()
        return await ExpenseReportService._guarded_write(
            db, report,
            {
                "status": new_status,
                "submitted_at": now,
                "last_modified_by": actor.id,
                "last_modified_at": now,
            },
            actor,
            action=AuditAction.EXPENSE_REPORT_SUBMITTED
        )

    @staticmethod
    async def decide(
        db: AsyncSession,
        actor: Principal,
        report_id: int,
        decision: ExpenseReportDecision
    ) -> ExpenseReport:
        """submitted → approved | rejected. Locks the report and stamps the approver."""
        status = validation.unwrap(validation.check_decision(decision.status))
        event = DECISION_EVENTS[status]
        operation = ReportOperation(event.value)

        report = await ExpenseReportService._load(db, report_id)
        authorize(actor, report, operation).enforce(operation)
        new_status = transition(report.status, event)

        now = _now()
        return await ExpenseReportService._guarded_write(
            db, report,
            {
                "status": new_status,
                "is_locked": locks_report(event),
                "approved_by": actor.id,
                "approved_at": now,
                "approval_notes": decision.approval_notes or "",
                "last_modified_by": actor.id,
                "last_modified_at": now,
            },
            actor,
            action=DECISION_AUDIT[event],
            metadata={"approval_notes": decision.approval_notes or ""}
        )

    @staticmethod
    async def stats(db: AsyncSession, actor: Principal, filters: ReportFilters) -> ExpenseReportStats:
        """Totals and status counts over the caller's scope."""
        owner_id = resolve_owner_scope(actor, filters.owner_id)

        def status_count(status: ReportStatus):
            return func.coalesce(func.sum(case((ExpenseReport.status == status, 1), else_=0)), 0)

        stmt = select(
            func.count(ExpenseReport.id),
            func.coalesce(func.sum(ExpenseReport.total_expenses), 0),
            func.coalesce(func.sum(ExpenseReport.total_revenue), 0),
            func.coalesce(func.sum(ExpenseReport.net_profit), 0),
            func.coalesce(func.avg(ExpenseReport.profit_margin), 0),
            status_count(ReportStatus.DRAFT),
            status_count(ReportStatus.SUBMITTED),
            status_count(ReportStatus.APPROVED),
            status_count(ReportStatus.REJECTED),
        ).select_from(ExpenseReport)
        stmt = apply_filters(stmt, owner_id, ReportFilters(
            hotel_name=filters.hotel_name,
            start_date=filters.start_date,
            end_date=filters.end_date,
        ))

        row = (await db.execute(stmt)).one()

        return ExpenseReportStats(
            total_reports=row[0] or 0,
            total_expenses=to_money(row[1]),
            total_revenue=to_money(row[2]),
            total_net_profit=to_money(row[3]),
            average_profit_margin=to_money(row[4]),
            draft_count=int(row[5] or 0),
            submitted_count=int(row[6] or 0),
            approved_count=int(row[7] or 0),
            rejected_count=int(row[8] or 0),
        )
