"""
Candidate and Comment Pydantic schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from backend.app.models.candidate_enums import CandidateStatus
from backend.app.schemas.common import CamelModel


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class CandidateCreate(CamelModel):
    """Schema for adding a candidate to the pipeline."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    role: str = Field(..., min_length=1, max_length=150, description="Position applied for")
    department: str = Field(..., min_length=1, max_length=150)
    location: str = Field(..., min_length=1, max_length=150)
    source: str = Field(default="", max_length=150)
    notes: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _lower(value)


class CandidateUpdate(CamelModel):
    """Schema for a partial candidate update."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    role: Optional[str] = Field(None, min_length=1, max_length=150)
    department: Optional[str] = Field(None, min_length=1, max_length=150)
    location: Optional[str] = Field(None, min_length=1, max_length=150)
    source: Optional[str] = Field(None, max_length=150)
    status: Optional[CandidateStatus] = None
    notes: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _lower(value)


class CandidateResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    role: str
    department: str
    location: str
    source: str
    status: CandidateStatus
    notes: str
    uploaded_by: int
    created_at: datetime
    updated_at: datetime


class CandidateListResponse(CamelModel):
    count: int
    candidates: List[CandidateResponse]


class GroupCount(CamelModel):
    """Number of candidates sharing one department or location."""
    name: str
    count: int


class CandidateStats(CamelModel):
    total_c_vs: int = Field(0, alias="totalCVs")
    hired: int = 0
    interviewed: int = 0
    rejected: int = 0
    on_hold: int = 0
    candidates_by_department: List[GroupCount] = Field(default_factory=list)
    candidates_by_location: List[GroupCount] = Field(default_factory=list)


class CommentCreate(CamelModel):
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment content is required")
        return value


class CommentResponse(CamelModel):
    id: int
    candidate_id: int
    author: str
    author_id: int
    content: str
    timestamp: datetime = Field(..., validation_alias="created_at", serialization_alias="timestamp")
