"""
EduMate Backend — AI Generation Schemas
=========================================

What:  Request and result envelopes of the /api/ai endpoints.
How:   The request stays permissive (content length and item count are
       checked by the generation client, so every entry point shares one set
       of rules); the results are fixed records for both outcomes.

Result shapes:
    GenerationResult            one artifact, success or failure
    AggregateGenerationResult   generate-all: either all three sub-results
                                with success=true, or success=false and a
                                single error message (fail-fast, no partials)
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from edumate.exceptions import EduMateError
from edumate.services.generation_client import ArtifactKind


class GenerationRequest(BaseModel):
    """
    Body of every /api/ai/generate-* endpoint.

    Either `note_content` or `note_id` must be supplied; inline content wins
    when both are present. `number_of_items` is ignored for summaries.
    """
    note_content: Optional[str] = Field(
        default=None,
        description="Note text to generate from (at least 10 characters after trimming)",
    )
    number_of_items: Optional[int] = Field(
        default=None,
        description="How many questions / flashcards to generate (must be at least 1)",
    )
    note_id: Optional[uuid.UUID] = Field(
        default=None,
        description="Stored note to read the content from when note_content is omitted",
    )
    user_id: Optional[int] = Field(default=None, description="Requesting user (for logging)")


class GenerationResult(BaseModel):
    success: bool
    content: Optional[str] = Field(default=None, description="Raw model output on success")
    error_message: Optional[str] = Field(default=None, description="Failure reason")
    kind: ArtifactKind

    @classmethod
    def succeeded(cls, kind: ArtifactKind, content: str) -> "GenerationResult":
        return cls(success=True, content=content, kind=kind)

    @classmethod
    def failed(cls, kind: ArtifactKind, error: EduMateError) -> "GenerationResult":
        return cls(
            success=False,
            error_message=f"Failed to generate {ArtifactKind(kind).value}: {error.client_message}",
            kind=kind,
        )


class AggregateGenerationResult(BaseModel):
    success: bool
    quiz: Optional[GenerationResult] = None
    flashcards: Optional[GenerationResult] = None
    summary: Optional[GenerationResult] = None
    error_message: Optional[str] = None

    @classmethod
    def succeeded(
        cls,
        quiz: GenerationResult,
        flashcards: GenerationResult,
        summary: GenerationResult,
    ) -> "AggregateGenerationResult":
        return cls(success=True, quiz=quiz, flashcards=flashcards, summary=summary)

    @classmethod
    def failed(cls, error: EduMateError) -> "AggregateGenerationResult":
        return cls(
            success=False,
            error_message=f"Failed to generate content: {error.client_message}",
        )
