"""
User management API endpoints.

Listing is open to VIEW_USERS; every write requires MANAGE_USERS.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import require_capability
from backend.app.core.principal import Principal
from backend.app.core.security import get_password_hash
from backend.app.db.session import get_db
from backend.app.models.enums import Capability, UserRole
from backend.app.models.user import User
from backend.app.schemas.common import ApiResponse, MessageResponse
from backend.app.schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate
from backend.app.services.audit import AuditAction, log_event

router = APIRouter(prefix="/users", tags=["Users"])


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise ResourceNotFoundError("User", user_id)
    return user


async def _ensure_unique(db: AsyncSession, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None):
    conditions = []
    if username:
        conditions.append(User.username == username)
    if email:
        conditions.append(User.email == email)
    if not conditions:
        return

    query = select(User).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)

    if (await db.execute(query)).scalars().first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this username or email already exists"
        )


@router.get("", response_model=ApiResponse[UserListResponse])
async def list_users(
    role: Optional[UserRole] = Query(None),
    location: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches username or email"),
    current_user: Principal = Depends(require_capability(Capability.VIEW_USERS)),
    db: AsyncSession = Depends(get_db)
):
    """List users, newest first."""
    query = select(User)
    if role:
        query = query.where(User.role == role)
    if location:
        query = query.where(User.location == location)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(User.username.ilike(pattern), User.email.ilike(pattern)))

    result = await db.execute(query.order_by(User.created_at.desc(), User.id.desc()))
    users = result.scalars().all()

    return ApiResponse(data=UserListResponse(
        count=len(users),
        users=[UserResponse.model_validate(u) for u in users]
    ))


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: Principal = Depends(require_capability(Capability.MANAGE_USERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a staff account.

    ``department`` is only stored for heads of department.
    """
    email = user_data.email.lower()
    await _ensure_unique(db, user_data.username, email)

    new_user = User(
        username=user_data.username,
        email=email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        department=user_data.department if user_data.role == UserRole.HOD else None,
        location=user_data.location,
        is_active=True
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    await log_event(
        db=db,
        action=AuditAction.USER_CREATED,
        actor_id=current_user.id,
        actor_username=current_user.username,
        target_type="user",
        target_id=new_user.id,
        target_label=new_user.username,
        metadata={"role": new_user.role.value}
    )

    return ApiResponse(data=UserResponse.model_validate(new_user), message="User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: Principal = Depends(require_capability(Capability.MANAGE_USERS)),
    db: AsyncSession = Depends(get_db)
):
    """Partially update a user. Only the fields sent are changed."""
    user = await _get_user_or_404(db, user_id)

    update_data = user_data.model_dump(exclude_unset=True)
    if "email" in update_data and update_data["email"]:
        update_data["email"] = update_data["email"].lower()
    await _ensure_unique(db, update_data.get("username"), update_data.get("email"), exclude_id=user.id)

    for field, value in update_data.items():
        if value is not None:
            setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    await log_event(
        db=db,
        action=AuditAction.USER_UPDATED,
        actor_id=current_user.id,
        actor_username=current_user.username,
        target_type="user",
        target_id=user.id,
        target_label=user.username,
        metadata={"updated_fields": sorted(update_data.keys())}
    )

    return ApiResponse(data=UserResponse.model_validate(user), message="User updated successfully")


@router.delete("/{user_id}", response_model=MessageResponse)
async def deactivate_user(
    user_id: int,
    current_user: Principal = Depends(require_capability(Capability.MANAGE_USERS)),
    db: AsyncSession = Depends(get_db)
):
    """Deactivate a user. Their existing tokens stop working immediately."""
    user = await _get_user_or_404(db, user_id)

    user.is_active = False
    await db.commit()

    await log_event(
        db=db,
        action=AuditAction.USER_DEACTIVATED,
        actor_id=current_user.id,
        actor_username=current_user.username,
        target_type="user",
        target_id=user.id,
        target_label=user.username
    )

    return MessageResponse(message="User deactivated successfully")


@router.delete("/{user_id}/delete", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    current_user: Principal = Depends(require_capability(Capability.MANAGE_USERS)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a user permanently. An account cannot delete itself."""
    user = await _get_user_or_404(db, user_id)

    if user.id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own account"
        )

    username = user.username
    await db.delete(user)
    await db.commit()

    await log_event(
        db=db,
        action=AuditAction.USER_DELETED,
        actor_id=current_user.id,
        actor_username=current_user.username,
        target_type="user",
        target_id=user_id,
        target_label=username
    )

    return MessageResponse(message="User deleted successfully")
