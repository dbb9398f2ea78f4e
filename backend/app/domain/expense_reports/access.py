"""
Access-control gate for expense reports.

A single pure decision function consulted by every operation. It never
touches the database and never mutates the report or the actor.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from backend.app.core.exceptions import InsufficientPermissionsError, ResourceLockedError
from backend.app.core.principal import Principal
from backend.app.models.expense_report import ExpenseReport


class ReportOperation(str, enum.Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"


class DenialReason(str, enum.Enum):
    NOT_OWNER = "not_owner"
    NOT_ELEVATED = "not_elevated"
    LOCKED = "locked"


MUTATIONS = frozenset({ReportOperation.UPDATE, ReportOperation.DELETE, ReportOperation.SUBMIT})
DECISIONS = frozenset({ReportOperation.APPROVE, ReportOperation.REJECT})


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: Optional[DenialReason] = None

    def enforce(self, operation: ReportOperation) -> None:
        """Raise the matching 403 when the decision is a denial."""
        if self.allowed:
            return
        if self.reason is DenialReason.LOCKED:
            raise ResourceLockedError("Expense report")
        if self.reason is DenialReason.NOT_ELEVATED:
            raise InsufficientPermissionsError(
                f"Not authorized to {operation.value} expense reports",
                reason=self.reason.value,
            )
        raise InsufficientPermissionsError(
            f"Not authorized to {operation.value} this expense report",
            reason=self.reason.value,
        )


ALLOW = AccessDecision(allowed=True)


def deny(reason: DenialReason) -> AccessDecision:
    return AccessDecision(allowed=False, reason=reason)


def authorize(actor: Principal, report: ExpenseReport, operation: ReportOperation) -> AccessDecision:
    """
    Decide whether ``actor`` may perform ``operation`` on ``report``.

    Rules, in order:
      1. read: owner or elevated.
      2. update/delete/submit: owner or elevated, then the report must not
         be locked. A locked report is reported as ``locked`` rather than
         as a permission problem.
      3. approve/reject: elevated only, whoever owns the report.

    Whether the report is in a state that allows the event is the
    lifecycle's concern, not the gate's.
    """
    is_owner = report.owner_id == actor.id

    if operation in DECISIONS:
        return ALLOW if actor.is_elevated else deny(DenialReason.NOT_ELEVATED)

    if not (is_owner or actor.is_elevated):
        return deny(DenialReason.NOT_OWNER)

    if operation in MUTATIONS and report.is_locked:
        return deny(DenialReason.LOCKED)

    return ALLOW
