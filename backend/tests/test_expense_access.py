"""
Unit tests for the expense report access-control gate.
"""

import pytest

from backend.app.core.exceptions import InsufficientPermissionsError, ResourceLockedError
from backend.app.core.principal import Principal
from backend.app.domain.expense_reports.access import DenialReason, ReportOperation, authorize
from backend.app.models.enums import UserRole
from backend.app.models.expense_report import ExpenseReport
from backend.app.models.report_enums import ReportStatus

OWNER = Principal(id=1, username="owner", role=UserRole.STAFF)
STRANGER = Principal(id=2, username="stranger", role=UserRole.HOD)
MANAGER = Principal(id=3, username="manager", role=UserRole.OPERATIONS_MANAGER)
HR = Principal(id=4, username="hr", role=UserRole.HR_ADMIN)


def make_report(status=ReportStatus.DRAFT, locked=False):
    return ExpenseReport(id=10, owner_id=OWNER.id, hotel_name="Goa Beach Resort", status=status, is_locked=locked)


@pytest.mark.parametrize("operation", [
    ReportOperation.READ, ReportOperation.UPDATE, ReportOperation.DELETE, ReportOperation.SUBMIT,
])
def test_owner_may_act_on_unlocked_report(operation):
    assert authorize(OWNER, make_report(), operation).allowed


@pytest.mark.parametrize("operation", [
    ReportOperation.READ, ReportOperation.UPDATE, ReportOperation.DELETE, ReportOperation.SUBMIT,
])
def test_stranger_is_not_owner(operation):
    decision = authorize(STRANGER, make_report(), operation)

    assert not decision.allowed
    assert decision.reason is DenialReason.NOT_OWNER


def test_elevated_user_acts_across_owners():
    assert authorize(MANAGER, make_report(), ReportOperation.UPDATE).allowed
    assert authorize(MANAGER, make_report(), ReportOperation.SUBMIT).allowed


@pytest.mark.parametrize("actor", [OWNER, STRANGER, HR])
def test_decisions_require_elevation(actor):
    for operation in (ReportOperation.APPROVE, ReportOperation.REJECT):
        decision = authorize(actor, make_report(ReportStatus.SUBMITTED), operation)
        assert decision.reason is DenialReason.NOT_ELEVATED


def test_manager_may_decide():
    assert authorize(MANAGER, make_report(ReportStatus.SUBMITTED), ReportOperation.APPROVE).allowed


@pytest.mark.parametrize("actor", [OWNER, MANAGER])
def test_locked_report_rejects_mutations(actor):
    report = make_report(ReportStatus.APPROVED, locked=True)

    for operation in (ReportOperation.UPDATE, ReportOperation.DELETE, ReportOperation.SUBMIT):
        decision = authorize(actor, report, operation)
        assert decision.reason is DenialReason.LOCKED

    assert authorize(actor, report, ReportOperation.READ).allowed


def test_locked_report_still_hidden_from_strangers():
    decision = authorize(STRANGER, make_report(ReportStatus.APPROVED, locked=True), ReportOperation.UPDATE)

    assert decision.reason is DenialReason.NOT_OWNER


def test_enforce_raises_matching_errors():
    with pytest.raises(ResourceLockedError) as locked:
        authorize(OWNER, make_report(locked=True), ReportOperation.UPDATE).enforce(ReportOperation.UPDATE)
    assert locked.value.error_code == "ERR_PERM_LOCKED"
    assert locked.value.details["reason"] == "locked"

    with pytest.raises(InsufficientPermissionsError) as not_owner:
        authorize(STRANGER, make_report(), ReportOperation.READ).enforce(ReportOperation.READ)
    assert not_owner.value.status_code == 403
    assert not_owner.value.details["reason"] == "not_owner"


def test_gate_does_not_touch_report():
    report = make_report()
    authorize(STRANGER, report, ReportOperation.DELETE)

    assert report.status == ReportStatus.DRAFT
    assert report.is_locked is False
