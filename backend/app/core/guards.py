"""
Security guards for capability-based and ownership-based access control.

Provides dependencies for protecting endpoints. Handlers ask for a
capability, never for a role string.
"""

from fastapi import Depends
from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import InsufficientPermissionsError
from backend.app.core.principal import Principal
from backend.app.models.enums import Capability


def require_capability(capability: Capability):
    """
    Dependency factory for capability-based access control.

    Usage:
        @router.get("/users")
        async def list_users(current_user: Principal = Depends(require_capability(Capability.VIEW_USERS))):
            ...

    Raises:
        InsufficientPermissionsError 403 if the user's role lacks the capability
    """
    async def capability_checker(current_user: Principal = Depends(get_current_user)) -> Principal:
        if not current_user.can(capability):
            raise InsufficientPermissionsError(
                "Access denied for your role",
                reason="missing_capability",
                details={"required": capability.value, "role": current_user.role.value}
            )
        return current_user

    return capability_checker


class OwnershipGuard:
    """
    Ownership check with a capability override.

    Usage:
        guard = OwnershipGuard(Capability.MANAGE_DAILY_REPORTS)

        @router.delete("/daily-reports/{report_id}")
        async def delete_report(report_id: int, current_user: Principal = Depends(get_current_user), ...):
            report = await load(report_id)
            guard.enforce(report.submitted_by_id, current_user, "daily report")
    """

    def __init__(self, override: Capability):
        self.override = override

    def allows(self, resource_owner_id: int, current_user: Principal) -> bool:
        return current_user.id == resource_owner_id or current_user.can(self.override)

    def enforce(self, resource_owner_id: int, current_user: Principal, resource_name: str = "resource"):
        """
        Raises:
            InsufficientPermissionsError 403 if the user is neither owner nor overriding
        """
        if not self.allows(resource_owner_id, current_user):
            raise InsufficientPermissionsError(
                f"Access denied. You do not have permission to modify this {resource_name}.",
                reason="not_owner"
            )
