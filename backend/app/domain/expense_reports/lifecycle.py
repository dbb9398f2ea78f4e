"""
Expense report lifecycle.

    draft ──submit──▶ submitted ──approve──▶ approved  (locked)
      │                    └─────reject───▶ rejected  (locked)
      ├──update──▶ draft
      └──delete──▶ (removed)

Anything not in ``TRANSITIONS`` raises ``InvalidTransitionError`` and
leaves the report untouched.
"""

import enum
from typing import Dict, Optional, Tuple

from backend.app.core.exceptions import InvalidTransitionError
from backend.app.models.report_enums import ReportStatus


class ReportEvent(str, enum.Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    UPDATE = "update"
    DELETE = "delete"


# (from, event) -> to. ``None`` means the report is removed.
TRANSITIONS: Dict[Tuple[ReportStatus, ReportEvent], Optional[ReportStatus]] = {
    (ReportStatus.DRAFT, ReportEvent.SUBMIT): ReportStatus.SUBMITTED,
    (ReportStatus.SUBMITTED, ReportEvent.APPROVE): ReportStatus.APPROVED,
    (ReportStatus.SUBMITTED, ReportEvent.REJECT): ReportStatus.REJECTED,
    (ReportStatus.DRAFT, ReportEvent.UPDATE): ReportStatus.DRAFT,
    (ReportStatus.DRAFT, ReportEvent.DELETE): None,
}

LOCKING_EVENTS = frozenset({ReportEvent.APPROVE, ReportEvent.REJECT})

DECISION_EVENTS = {
    ReportStatus.APPROVED: ReportEvent.APPROVE,
    ReportStatus.REJECTED: ReportEvent.REJECT,
}


def can_transition(current: ReportStatus, event: ReportEvent) -> bool:
    return (current, event) in TRANSITIONS


def transition(current: ReportStatus, event: ReportEvent) -> Optional[ReportStatus]:
    """
    Return the status that follows ``event`` from ``current``.

    Raises:
        InvalidTransitionError: the event is not allowed from ``current``
    """
    if not can_transition(current, event):
        raise InvalidTransitionError(current_status=current.value, event=event.value)
    return TRANSITIONS[(current, event)]


def locks_report(event: ReportEvent) -> bool:
    """Approve and reject both freeze the report for good."""
    return event in LOCKING_EVENTS
