"""
Report Status Enumerations.

Shared by expense reports and daily operational reports.
"""

import enum


class ReportStatus(str, enum.Enum):
    """
    Report lifecycle status.

    Status flow (expense reports):
        draft → submitted → approved | rejected
        approved and rejected are terminal and locked.
    """
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class BillPaymentStatus(str, enum.Enum):
    """Payment state of a department bill line."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
