"""
Audit logging service for tracking security events and business actions.

Provides centralized logging for compliance and security monitoring.
"""

import logging
from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from backend.app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


class AuditAction:
    """Standardized audit action constants."""
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"

    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DEACTIVATED = "USER_DEACTIVATED"
    USER_DELETED = "USER_DELETED"

    EXPENSE_REPORT_CREATED = "EXPENSE_REPORT_CREATED"
    EXPENSE_REPORT_UPDATED = "EXPENSE_REPORT_UPDATED"
    EXPENSE_REPORT_SUBMITTED = "EXPENSE_REPORT_SUBMITTED"
    EXPENSE_REPORT_APPROVED = "EXPENSE_REPORT_APPROVED"
    EXPENSE_REPORT_REJECTED = "EXPENSE_REPORT_REJECTED"
    EXPENSE_REPORT_DELETED = "EXPENSE_REPORT_DELETED"

    CANDIDATE_DELETED = "CANDIDATE_DELETED"
    COMMENT_DELETED = "COMMENT_DELETED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[int] = None,
    actor_username: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[int] = None,
    target_label: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    commit: bool = True
) -> AuditLog:
    """
    Log a security or business event to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_id: ID of user performing the action
        actor_username: Username of actor
        target_type: Kind of object acted upon ("user", "expense_report", ...)
        target_id: ID of the object acted upon
        target_label: Human readable name of the target
        metadata: Additional context as JSON
        ip_address: IP address of the request
        commit: When False the row is only added to the session so that it
            commits (or rolls back) together with the caller's own changes

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        actor_username=actor_username,
        action=action,
        target_type=target_type,
        target_id=target_id,
        target_label=target_label,
        meta_data=metadata,
        ip_address=ip_address
    )

    db.add(audit_log)
    if commit:
        await db.commit()
        await db.refresh(audit_log)

    logger.info("audit %s actor=%s target=%s:%s", action, actor_username, target_type, target_id)
    return audit_log


async def log_auth_event(
    db: AsyncSession,
    action: str,
    user_id: Optional[int],
    username: Optional[str],
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Log an authentication event (login success/failure).

    Args:
        db: Database session
        action: AuditAction.LOGIN_SUCCESS or AuditAction.LOGIN_FAILED
        user_id: ID of user attempting login
        username: Username attempting login
        ip_address: IP address of login attempt
        metadata: Additional context (e.g., failure reason)

    Returns:
        Created AuditLog instance
    """
    return await log_event(
        db=db,
        action=action,
        actor_id=user_id,
        actor_username=username,
        ip_address=ip_address,
        metadata=metadata
    )
