"""
Candidate and Comment database models.

Recruitment pipeline entries and the discussion thread attached to each.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.candidate_enums import CandidateStatus


class Candidate(Base):
    """
    Candidate model.

    Email is unique and stored lowercase.
    """
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(200), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(50), nullable=False)
    role = Column(String(150), nullable=False)
    department = Column(String(150), nullable=False, index=True)
    location = Column(String(150), nullable=False, index=True)
    source = Column(String(150), nullable=False, default="")
    notes = Column(Text, nullable=False, default="")

    status = Column(Enum(CandidateStatus), default=CandidateStatus.UPLOADED, nullable=False, index=True)

    uploaded_by = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Candidate(id={self.id}, email='{self.email}', status='{self.status.value}')>"


class Comment(Base):
    """A note left on a candidate by a staff member."""
    __tablename__ = "candidate_comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    candidate_id = Column(Integer, ForeignKey('candidates.id', ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    author = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Comment(id={self.id}, candidate_id={self.candidate_id}, author='{self.author}')>"
