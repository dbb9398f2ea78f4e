"""
Authenticated principal.

The identity attached to every request after token validation.
"""

from dataclasses import dataclass

from backend.app.models.enums import Capability, UserRole, capabilities_for


@dataclass(frozen=True)
class Principal:
    """Who is acting: resolved from the JWT and the live user row."""
    id: int
    username: str
    role: UserRole

    def can(self, capability: Capability) -> bool:
        return capability in capabilities_for(self.role)

    @property
    def is_elevated(self) -> bool:
        """Elevated principals review expense reports and act across owners."""
        return self.can(Capability.REVIEW_EXPENSE_REPORTS)
