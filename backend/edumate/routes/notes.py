"""
EduMate Backend — Notes Route Handlers
========================================

What:  POST /api/notes, GET /api/notes (filtered list), GET /api/notes/{id}.
How:   Extracts path/query/body data, delegates to NoteService, returns JSON.
       Errors are raised and rendered by the global handlers in main.py.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from edumate.database import get_db_session
from edumate.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteListResponse,
    NoteResponse,
)
from edumate.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        404: {"description": "Project not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, payload)


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List notes, newest first",
    description="Filter by owner, by project, or both.",
)
async def list_notes(
    response: Response,
    user_id: Optional[int] = Query(default=None, ge=1, description="Only notes owned by this user"),
    project_id: Optional[int] = Query(default=None, ge=1, description="Only notes in this project"),
    limit: int = Query(default=50, ge=1, le=200, description="Maximum notes returned"),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    result = await note_service.list_notes(
        db=db,
        user_id=user_id,
        project_id=project_id,
        limit=limit,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    # Invalid UUIDs are rejected by FastAPI with 422 before we get here
    return await note_service.get_note(db=db, note_id=note_id)
