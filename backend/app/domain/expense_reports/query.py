"""
Query/filter composer for expense report listings.

Builds SQLAlchemy statements from an owner scope and optional filters.
Results are always scoped to the caller unless the caller is elevated.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Generic, List, Optional, TypeVar

from sqlalchemy import Select, func, select

from backend.app.core.exceptions import InsufficientPermissionsError
from backend.app.core.principal import Principal
from backend.app.models.expense_report import ExpenseReport
from backend.app.models.report_enums import ReportStatus

T = TypeVar("T")


@dataclass(frozen=True)
class ReportFilters:
    hotel_name: Optional[str] = None
    status: Optional[ReportStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    owner_id: Optional[int] = None


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def resolve_owner_scope(actor: Principal, requested_owner_id: Optional[int]) -> Optional[int]:
    """
    Owner id to restrict results to, or ``None`` for every owner.

    Non-elevated callers only ever see their own reports; asking for
    someone else's is a 403.
    """
    if actor.is_elevated:
        return requested_owner_id
    if requested_owner_id is not None and requested_owner_id != actor.id:
        raise InsufficientPermissionsError(
            "Not authorized to list another user's expense reports",
            reason="not_elevated",
        )
    return actor.id


def apply_filters(stmt: Select, owner_id: Optional[int], filters: ReportFilters) -> Select:
    """Attach scope and filter criteria. Date bounds are inclusive."""
    if owner_id is not None:
        stmt = stmt.where(ExpenseReport.owner_id == owner_id)

    if filters.hotel_name:
        stmt = stmt.where(ExpenseReport.hotel_name.ilike(f"%{filters.hotel_name.strip()}%"))

    if filters.status is not None:
        stmt = stmt.where(ExpenseReport.status == filters.status)

    if filters.start_date is not None:
        stmt = stmt.where(ExpenseReport.report_date >= filters.start_date)

    if filters.end_date is not None:
        stmt = stmt.where(ExpenseReport.report_date <= filters.end_date)

    return stmt


def build_report_query(actor: Principal, filters: ReportFilters) -> Select:
    """Scoped, filtered listing ordered newest first, ties broken by id."""
    owner_id = resolve_owner_scope(actor, filters.owner_id)
    stmt = apply_filters(select(ExpenseReport), owner_id, filters)
    return stmt.order_by(ExpenseReport.created_at.desc(), ExpenseReport.id.asc())


def count_query(stmt: Select) -> Select:
    """COUNT(*) over a listing statement, ordering dropped."""
    return select(func.count()).select_from(stmt.order_by(None).subquery())


def paginate(stmt: Select, page: int, limit: int) -> Select:
    """1-indexed page window. A page past the end simply yields no rows."""
    return stmt.offset((page - 1) * limit).limit(limit)
