"""
EduMate Backend — Pydantic Request/Response Schemas (notes, errors, health)
=============================================================================

What:  The API contract for notes plus the shared error and health shapes.
How:   FastAPI validates request bodies against these models and serializes
       responses through them (OpenAPI docs are generated from them too).

Schemas stay separate from the SQLAlchemy models so the API can change
independently of the table layout.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes."""
    user_id: int = Field(ge=1, description="Owner of the note")
    project_id: Optional[int] = Field(default=None, ge=1, description="Project to file it under")
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(description="Note text used for AI generation")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("title cannot be blank")
        return stripped


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note (GET /api/notes/{id})."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    user_id: int
    project_id: Optional[int] = None
    title: str
    content: str
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime

    model_config = {"from_attributes": True}


class NoteListItem(BaseModel):
    """
    Compact note for list views: a 200-character preview instead of the
    full text keeps list payloads small.
    """
    id: uuid.UUID
    project_id: Optional[int] = None
    title: str
    text_preview: str = Field(description="First 200 characters of the note")
    created_at: datetime

    model_config = {"from_attributes": True}


class NoteListResponse(BaseModel):
    notes: List[NoteListItem] = Field(description="Notes, newest first")
    total_count: int = Field(description="Total number of notes matching the filters")


# ══════════════════════════════════════════════════════════════════════════
# Shared Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-generation endpoint.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '...' was not found",
            "details": {"resource": "note"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    gemini: str = Field(description="Gemini credential state: configured, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
