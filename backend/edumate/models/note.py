"""
EduMate Backend — Note SQLAlchemy Model
=========================================

What:  ORM model for the `notes` table: the study material that quizzes,
       flashcards and summaries are generated from.
Who:   NoteService for CRUD; GenerationService reads `content` when a
       generation request names a note instead of sending text inline.

Table Design:
    - UUID primary key, generated server-side or in Python
    - user_id: owner (plain integer, no users table in this service)
    - project_id: optional grouping; SET NULL when the project goes away
    - content: full note text, TEXT with no length limit
    - created_at / updated_at: UTC with timezone

    Query Patterns:
        - A user's notes, newest first → idx_notes_user_created
        - Notes in a project          → idx_notes_project_id
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from edumate.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """A user's note, optionally filed under a project."""

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    project_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Full note text fed to the generation prompts",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_user_created", "user_id", "created_at"),
        Index("idx_notes_project_id", "project_id"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
