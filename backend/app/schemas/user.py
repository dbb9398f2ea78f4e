"""
User management Pydantic schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from backend.app.models.enums import UserRole
from backend.app.schemas.common import CamelModel


class UserCreate(CamelModel):
    """Schema for creating a staff account (MASTER only)."""
    username: str = Field(..., min_length=3, max_length=100, description="Unique username")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    role: UserRole = Field(..., description="User role")
    department: Optional[str] = Field(None, max_length=100, description="Only kept for HOD")
    location: str = Field(..., min_length=1, max_length=150)


class UserUpdate(CamelModel):
    """Schema for a partial user update."""
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    department: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, min_length=1, max_length=150)
    is_active: Optional[bool] = None


class UserResponse(CamelModel):
    """
    Schema for user information response.

    Used by GET /auth/me and the user management endpoints.
    """
    id: int
    username: str
    email: str
    role: UserRole
    department: Optional[str] = None
    location: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(CamelModel):
    count: int
    users: List[UserResponse]
