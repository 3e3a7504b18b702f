"""
EduMate Backend — Project SQLAlchemy Model
============================================

What:  A named collection of notes owned by one user.
Query Patterns:
    - Projects of a user, newest first → idx_projects_user_created
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from edumate.database import Base


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # No users table here; authentication lives outside this service
    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Owner of the project",
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_projects_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, user_id={self.user_id}, name='{self.name}')>"
