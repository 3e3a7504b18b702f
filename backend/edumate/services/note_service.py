"""
EduMate Backend — Note Service
================================

What:  Create, fetch and list notes; hand note text to the generation flow.
How:   Plain async SQLAlchemy queries on a session supplied per call.
Who:   Note routes, and GenerationService when a request carries a note id.

NoteService is stateless: every method receives the session it works on,
so one module-level instance serves all requests.

Error Handling:
    Missing rows become NotFoundError (404). Anything unexpected from the
    database is logged and wrapped in DatabaseError so query details never
    reach the client.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from edumate.exceptions import DatabaseError, EduMateError, NotFoundError
from edumate.models.note import Note
from edumate.models.project import Project
from edumate.schemas.note import (
    NoteCreate,
    NoteListItem,
    NoteListResponse,
    NoteResponse,
)

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200


class NoteService:
    """Business logic layer for note operations."""

    async def create_note(self, db: AsyncSession, payload: NoteCreate) -> NoteResponse:
        """
        Persist a new note.

        Raises:
            NotFoundError: `project_id` names a project that doesn't exist
            DatabaseError: insert failed
        """
        try:
            if payload.project_id is not None:
                project = await db.get(Project, payload.project_id)
                if project is None:
                    raise NotFoundError(resource="project", resource_id=str(payload.project_id))

            now = datetime.now(timezone.utc)
            note = Note(
                id=uuid4(),
                user_id=payload.user_id,
                project_id=payload.project_id,
                title=payload.title,
                content=payload.content,
                created_at=now,
                updated_at=now,
            )
            db.add(note)
            await db.flush()  # INSERT now, commit at end of request
            logger.info("Note %s created for user %d (%d chars)", note.id, note.user_id, len(note.content))
            return NoteResponse.model_validate(note)

        except EduMateError:
            raise
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def _load_note(self, db: AsyncSession, note_id: UUID) -> Note:
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def get_note(self, db: AsyncSession, note_id: UUID) -> NoteResponse:
        """Retrieve a single note by ID, or raise NotFoundError."""
        note = await self._load_note(db, note_id)
        return NoteResponse.model_validate(note)

    async def get_note_content(self, db: AsyncSession, note_id: UUID) -> str:
        """Text of a stored note, as fed to the generation prompts."""
        note = await self._load_note(db, note_id)
        return note.content

    async def list_notes(
        self,
        db: AsyncSession,
        user_id: Optional[int] = None,
        project_id: Optional[int] = None,
        limit: int = 50,
    ) -> NoteListResponse:
        """
        List notes newest first, optionally restricted to a user, a project,
        or both.

        Query plan (user filter):
            SELECT ... WHERE user_id = :uid ORDER BY created_at DESC LIMIT :n
            → idx_notes_user_created
        """
        try:
            query = select(Note)
            count_query = select(func.count(Note.id))

            if user_id is not None:
                query = query.where(Note.user_id == user_id)
                count_query = count_query.where(Note.user_id == user_id)
            if project_id is not None:
                query = query.where(Note.project_id == project_id)
                count_query = count_query.where(Note.project_id == project_id)

            query = query.order_by(desc(Note.created_at)).limit(limit)

            result = await db.execute(query)
            notes = list(result.scalars().all())

            count_result = await db.execute(count_query)
            total_count = count_result.scalar() or 0

            return NoteListResponse(
                notes=[
                    NoteListItem(
                        id=note.id,
                        project_id=note.project_id,
                        title=note.title,
                        text_preview=(note.content or "")[:PREVIEW_LENGTH],
                        created_at=note.created_at,
                    )
                    for note in notes
                ],
                total_count=total_count,
            )

        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )


# Stateless; shared by all requests
note_service = NoteService()
