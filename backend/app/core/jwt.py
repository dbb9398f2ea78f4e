"""
Access tokens for hotel staff sessions.

Tokens are HS256 JWTs signed with ``settings.secret_key``. The payload names
the user (``sub``, ``user_id``) and their hotel role (``MASTER``,
``HR_ADMIN``, ``CLUSTER_MANAGER``, ``OPERATIONS_MANAGER``, ``HOD`` or
``STAFF``). The role in a token is informational only: every request
reloads the user, so a role change or deactivation applies immediately.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from backend.app.core.config import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a session token for a staff member.

    Args:
        data: Claims to sign, e.g. ``{"sub": "frontdesk", "user_id": 7, "role": "STAFF"}``
        expires_delta: Lifetime of the token, ``settings.access_token_expire_minutes`` by default

    Returns:
        Encoded JWT string
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid, unexpired token, or None."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
