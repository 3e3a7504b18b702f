"""
EduMate Backend — AI Generation Route Handlers
================================================

What:  POST /api/ai/generate-quiz, -flashcards, -summary and -all.
How:   Delegates to GenerationService and renders the outcome as a result
       envelope. Typed failures become `success: false` envelopes carrying
       the error's HTTP status; diagnostics go to the log, not the client.

Status codes on failure:
    400  invalid input        404  unknown note_id
    502  transport / upstream / malformed model response
    503  Gemini credential not configured
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from edumate.database import get_db_session
from edumate.exceptions import EduMateError
from edumate.schemas.generation import (
    AggregateGenerationResult,
    GenerationRequest,
    GenerationResult,
)
from edumate.services.generation_client import ArtifactKind
from edumate.services.generation_service import GenerationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["AI Generation"])

_FAILURE_RESPONSES = {
    400: {"description": "Invalid note content or item count", "model": GenerationResult},
    404: {"description": "note_id not found", "model": GenerationResult},
    502: {"description": "Gemini request failed", "model": GenerationResult},
    503: {"description": "Gemini API key not configured", "model": GenerationResult},
}


def get_generation_service(request: Request) -> GenerationService:
    """Service around the client created in the app lifespan."""
    return GenerationService(request.app.state.generation_client)


def _log_failure(what: str, exc: EduMateError) -> None:
    if exc.status_code >= 500:
        logger.error("Error generating %s: %s | Context: %s", what, exc.message, exc.context)
    else:
        logger.warning("Rejected %s generation: %s", what, exc.message)


async def _generate_one(
    kind: ArtifactKind,
    body: GenerationRequest,
    service: GenerationService,
    db: AsyncSession,
) -> Union[GenerationResult, JSONResponse]:
    try:
        return await service.generate(
            kind,
            body.note_content,
            item_count=body.number_of_items,
            note_id=body.note_id,
            db=db,
        )
    except EduMateError as exc:
        _log_failure(kind.value, exc)
        result = GenerationResult.failed(kind, exc)
        return JSONResponse(status_code=exc.status_code, content=result.model_dump(mode="json"))


@router.post(
    "/generate-quiz",
    response_model=GenerationResult,
    responses=_FAILURE_RESPONSES,
    summary="Generate multiple-choice questions from a note",
)
async def generate_quiz(
    body: GenerationRequest,
    service: GenerationService = Depends(get_generation_service),
    db: AsyncSession = Depends(get_db_session),
):
    logger.info("Generating quiz with %s questions (user=%s)", body.number_of_items, body.user_id)
    return await _generate_one(ArtifactKind.QUIZ, body, service, db)


@router.post(
    "/generate-flashcards",
    response_model=GenerationResult,
    responses=_FAILURE_RESPONSES,
    summary="Generate flashcards from a note",
)
async def generate_flashcards(
    body: GenerationRequest,
    service: GenerationService = Depends(get_generation_service),
    db: AsyncSession = Depends(get_db_session),
):
    logger.info("Generating %s flashcards (user=%s)", body.number_of_items, body.user_id)
    return await _generate_one(ArtifactKind.FLASHCARDS, body, service, db)


@router.post(
    "/generate-summary",
    response_model=GenerationResult,
    responses=_FAILURE_RESPONSES,
    summary="Generate a bullet-point summary of a note",
    description="`number_of_items` is ignored for summaries.",
)
async def generate_summary(
    body: GenerationRequest,
    service: GenerationService = Depends(get_generation_service),
    db: AsyncSession = Depends(get_db_session),
):
    logger.info("Generating summary (user=%s)", body.user_id)
    return await _generate_one(ArtifactKind.SUMMARY, body, service, db)


@router.post(
    "/generate-all",
    response_model=AggregateGenerationResult,
    responses={
        code: {"description": info["description"], "model": AggregateGenerationResult}
        for code, info in _FAILURE_RESPONSES.items()
    },
    summary="Generate quiz, flashcards and summary in one request",
    description=(
        "Runs the three generations sequentially. The first failure aborts the "
        "rest and the whole request fails; partial results are never returned."
    ),
)
async def generate_all(
    body: GenerationRequest,
    service: GenerationService = Depends(get_generation_service),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        return await service.generate_all(
            body.note_content,
            item_count=body.number_of_items,
            note_id=body.note_id,
            db=db,
        )
    except EduMateError as exc:
        _log_failure("all content", exc)
        result = AggregateGenerationResult.failed(exc)
        return JSONResponse(status_code=exc.status_code, content=result.model_dump(mode="json"))
