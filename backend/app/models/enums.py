"""
User roles and capabilities.

Roles are what an account *is*; capabilities are what it may *do*.
Every authorization check in the application asks for a capability,
never for a role string.
"""

import enum
from typing import Dict, FrozenSet


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        MASTER: Supreme user with system-level access
        HR_ADMIN: Runs recruitment and moderates candidate discussion
        CLUSTER_MANAGER: Oversees several resorts, reviews their reports
        OPERATIONS_MANAGER: Runs a resort, reviews its reports
        HOD: Head of a department within a resort
        STAFF: Ordinary employee (default role)
    """
    MASTER = "MASTER"
    HR_ADMIN = "HR_ADMIN"
    CLUSTER_MANAGER = "CLUSTER_MANAGER"
    OPERATIONS_MANAGER = "OPERATIONS_MANAGER"
    HOD = "HOD"
    STAFF = "STAFF"


class Capability(str, enum.Enum):
    """Closed set of permissions a role can grant."""
    MANAGE_USERS = "MANAGE_USERS"
    VIEW_USERS = "VIEW_USERS"
    REVIEW_EXPENSE_REPORTS = "REVIEW_EXPENSE_REPORTS"
    MANAGE_DAILY_REPORTS = "MANAGE_DAILY_REPORTS"
    DELETE_CANDIDATES = "DELETE_CANDIDATES"
    MODERATE_COMMENTS = "MODERATE_COMMENTS"


ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.MASTER: frozenset(Capability),
    UserRole.HR_ADMIN: frozenset({
        Capability.VIEW_USERS,
        Capability.MODERATE_COMMENTS,
    }),
    UserRole.CLUSTER_MANAGER: frozenset({
        Capability.REVIEW_EXPENSE_REPORTS,
        Capability.MANAGE_DAILY_REPORTS,
    }),
    UserRole.OPERATIONS_MANAGER: frozenset({
        Capability.REVIEW_EXPENSE_REPORTS,
        Capability.MANAGE_DAILY_REPORTS,
    }),
    UserRole.HOD: frozenset(),
    UserRole.STAFF: frozenset(),
}


def capabilities_for(role: UserRole) -> FrozenSet[Capability]:
    """Return the capabilities granted to a role (empty for unknown roles)."""
    return ROLE_CAPABILITIES.get(role, frozenset())
