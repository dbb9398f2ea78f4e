"""
Candidate API endpoints.

Recruitment pipeline entries and their comment threads.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.dependencies import get_current_user
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import OwnershipGuard, require_capability
from backend.app.core.principal import Principal
from backend.app.db.session import get_db
from backend.app.models.candidate import Candidate, Comment
from backend.app.models.candidate_enums import CandidateStatus, DateRangePreset
from backend.app.models.enums import Capability
from backend.app.schemas.candidate import (
    CandidateCreate, CandidateListResponse, CandidateResponse, CandidateStats, CandidateUpdate,
    CommentCreate, CommentResponse,
)
from backend.app.schemas.common import ApiResponse, MessageResponse
from backend.app.services.analytics import AnalyticsService, filter_candidates
from backend.app.services.audit import AuditAction, log_event

router = APIRouter(prefix="/candidates", tags=["Candidates"])

comment_guard = OwnershipGuard(Capability.MODERATE_COMMENTS)


async def _get_candidate_or_404(db: AsyncSession, candidate_id: int) -> Candidate:
    candidate = await db.get(Candidate, candidate_id)
    if not candidate:
        raise ResourceNotFoundError("Candidate", candidate_id)
    return candidate


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: Optional[int] = None):
    query = select(Candidate.id).where(Candidate.email == email)
    if exclude_id is not None:
        query = query.where(Candidate.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A candidate with this email already exists"
        )


@router.get("", response_model=ApiResponse[CandidateListResponse])
async def list_candidates(
    department: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    candidate_status: Optional[CandidateStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Name, email or role substring"),
    date_range: Optional[DateRangePreset] = Query(None, alias="dateRange"),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List candidates, newest first."""
    query = filter_candidates(
        select(Candidate),
        department=department,
        location=location,
        status=candidate_status,
        search=search,
        date_range=date_range,
    ).order_by(Candidate.created_at.desc(), Candidate.id.desc())

    candidates = (await db.execute(query)).scalars().all()
    return ApiResponse(data=CandidateListResponse(
        count=len(candidates),
        candidates=[CandidateResponse.model_validate(c) for c in candidates]
    ))


@router.get("/stats", response_model=ApiResponse[CandidateStats])
async def candidate_stats(
    department: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    date_range: Optional[DateRangePreset] = Query(None, alias="dateRange"),
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Dashboard counters for the recruitment pipeline."""
    stats = await AnalyticsService.get_candidate_stats(
        db, department=department, location=location, date_range=date_range
    )
    return ApiResponse(data=stats)


@router.get("/{candidate_id}", response_model=ApiResponse[CandidateResponse])
async def get_candidate(
    candidate_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    candidate = await _get_candidate_or_404(db, candidate_id)
    return ApiResponse(data=CandidateResponse.model_validate(candidate))


@router.post("", response_model=ApiResponse[CandidateResponse], status_code=status.HTTP_201_CREATED)
async def create_candidate(
    candidate_data: CandidateCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Add a candidate. Email must be unique across the pipeline."""
    await _ensure_email_free(db, candidate_data.email)

    candidate = Candidate(**candidate_data.model_dump(), uploaded_by=current_user.id)
    db.add(candidate)
    await db.commit()
    await db.refresh(candidate)

    return ApiResponse(data=CandidateResponse.model_validate(candidate), message="Candidate created successfully")


@router.put("/{candidate_id}", response_model=ApiResponse[CandidateResponse])
async def update_candidate(
    candidate_id: int,
    candidate_data: CandidateUpdate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    candidate = await _get_candidate_or_404(db, candidate_id)

    update_data = candidate_data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in update_data:
        await _ensure_email_free(db, update_data["email"], exclude_id=candidate.id)

    for field, value in update_data.items():
        setattr(candidate, field, value)

    await db.commit()
    await db.refresh(candidate)

    return ApiResponse(data=CandidateResponse.model_validate(candidate), message="Candidate updated successfully")


@router.delete("/{candidate_id}", response_model=MessageResponse)
async def delete_candidate(
    candidate_id: int,
    current_user: Principal = Depends(require_capability(Capability.DELETE_CANDIDATES)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a candidate together with its comment thread."""
    candidate = await _get_candidate_or_404(db, candidate_id)
    label = candidate.email

    await db.execute(delete(Comment).where(Comment.candidate_id == candidate.id))
    await db.delete(candidate)

    await log_event(
        db=db,
        action=AuditAction.CANDIDATE_DELETED,
        actor_id=current_user.id,
        actor_username=current_user.username,
        target_type="candidate",
        target_id=candidate_id,
        target_label=label,
        commit=False
    )
    await db.commit()

    return MessageResponse(message="Candidate deleted successfully")


# ------------------------------------------------------------------
# Comments
# ------------------------------------------------------------------

@router.get("/{candidate_id}/comments", response_model=ApiResponse[List[CommentResponse]])
async def list_comments(
    candidate_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Comments on a candidate, newest first."""
    await _get_candidate_or_404(db, candidate_id)

    result = await db.execute(
        select(Comment)
        .where(Comment.candidate_id == candidate_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return ApiResponse(data=[CommentResponse.model_validate(c) for c in result.scalars().all()])


@router.post(
    "/{candidate_id}/comments",
    response_model=ApiResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED
)
async def add_comment(
    candidate_id: int,
    comment_data: CommentCreate,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await _get_candidate_or_404(db, candidate_id)

    comment = Comment(
        candidate_id=candidate_id,
        author_id=current_user.id,
        author=current_user.username,
        content=comment_data.content,
    )
    db.add(comment)
    await db.commit()
    await db.refresh(comment)

    return ApiResponse(data=CommentResponse.model_validate(comment), message="Comment added successfully")


@router.delete("/{candidate_id}/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    candidate_id: int,
    comment_id: int,
    current_user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a comment.

    Authors may delete their own comments; moderators may delete any.
    """
    await _get_candidate_or_404(db, candidate_id)

    comment = await db.get(Comment, comment_id)
    if not comment:
        raise ResourceNotFoundError("Comment", comment_id)

    if comment.candidate_id != candidate_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Comment does not belong to this candidate"
        )

    comment_guard.enforce(comment.author_id, current_user, "comment")

    await db.delete(comment)
    await log_event(
        db=db,
        action=AuditAction.COMMENT_DELETED,
        actor_id=current_user.id,
        actor_username=current_user.username,
        target_type="comment",
        target_id=comment_id,
        target_label=f"candidate:{candidate_id}",
        commit=False
    )
    await db.commit()

    return MessageResponse(message="Comment deleted successfully")
