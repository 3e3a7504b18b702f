"""
EduMate Backend — Generation Service (async orchestrator)
===========================================================

What:  Bridges the async REST layer and the blocking GenerationClient.
How:   Resolves the note text (inline, or loaded by note id), runs the client
       in Starlette's worker thread pool, and wraps the text in result models.
Who:   The /api/ai routes, through the get_generation_service dependency.

Generate-all Flow:
    quiz → flashcards → summary, one after another on the same worker thread.
    The first failure propagates and the remaining calls are never issued;
    there are no partial results.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from edumate.schemas.generation import AggregateGenerationResult, GenerationResult
from edumate.services.generation_client import ArtifactKind, GenerationClient
from edumate.services.note_service import NoteService, note_service

logger = logging.getLogger(__name__)


class GenerationService:
    """
    Holds the shared client and the note service; no per-request state.
    """

    def __init__(self, client: GenerationClient, notes: NoteService = note_service):
        self.client = client
        self.notes = notes

    async def resolve_content(
        self,
        db: Optional[AsyncSession],
        content: Optional[str],
        note_id: Optional[UUID],
    ) -> Optional[str]:
        """
        Inline content wins; otherwise the stored note's content.

        Returns whatever was supplied (possibly None or blank) so that the
        client's validation decides what is acceptable.
        """
        if content and content.strip():
            return content
        if note_id is not None and db is not None:
            logger.info("Loading content of note %s for generation", note_id)
            return await self.notes.get_note_content(db, note_id)
        return content

    async def generate(
        self,
        kind: ArtifactKind,
        content: Optional[str],
        item_count: Optional[int] = None,
        note_id: Optional[UUID] = None,
        db: Optional[AsyncSession] = None,
    ) -> GenerationResult:
        text = await self.resolve_content(db, content, note_id)
        generated = await run_in_threadpool(self.client.generate, kind, text, item_count)
        return GenerationResult.succeeded(kind, generated)

    async def generate_all(
        self,
        content: Optional[str],
        item_count: Optional[int] = None,
        note_id: Optional[UUID] = None,
        db: Optional[AsyncSession] = None,
    ) -> AggregateGenerationResult:
        text = await self.resolve_content(db, content, note_id)
        logger.info("Generating all content types for note")
        quiz, flashcards, summary = await run_in_threadpool(self._generate_all_sync, text, item_count)
        return AggregateGenerationResult.succeeded(
            quiz=GenerationResult.succeeded(ArtifactKind.QUIZ, quiz),
            flashcards=GenerationResult.succeeded(ArtifactKind.FLASHCARDS, flashcards),
            summary=GenerationResult.succeeded(ArtifactKind.SUMMARY, summary),
        )

    def _generate_all_sync(self, content: Optional[str], item_count: Optional[int]):
        quiz = self.client.generate_quiz(content, item_count)
        flashcards = self.client.generate_flashcards(content, item_count)
        summary = self.client.generate_summary(content)
        return quiz, flashcards, summary
