"""
EduMate Backend — Gemini Generation Client
============================================

What:  Turns note text into quiz, flashcard and summary text by calling the
       Gemini `generateContent` REST endpoint.
How:   validate input → build a kind-specific prompt → guard the credential
       → one blocking POST → pull the first candidate's text out of the JSON.
Who:   Created once in the app lifespan and shared by all requests through
       GenerationService. Safe to share across threads: the only state is
       the immutable config and a thread-safe httpx.Client.
When:  Every /api/ai/* request; generate-all calls it three times in a row.

Failure Modes (see exceptions.py):
    InvalidInputError       content too short, item count not positive
    ConfigurationError      API key missing or still the placeholder
    TransportError          non-200 status, connect failure, timeout
    UpstreamError           response carries an `error` object
    MalformedResponseError  not JSON, or neither candidates nor error

There is no retry: a single attempt either succeeds or fails the operation.
"""

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from edumate.config import Settings, is_usable_api_key
from edumate.exceptions import (
    ConfigurationError,
    InvalidInputError,
    MalformedResponseError,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 10

# Single sampling policy for every artifact kind
GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 2048,
}


class ArtifactKind(str, Enum):
    """The study artifacts the model can produce."""

    QUIZ = "quiz"
    FLASHCARDS = "flashcards"
    SUMMARY = "summary"

    @property
    def requires_item_count(self) -> bool:
        return self is not ArtifactKind.SUMMARY


# ══════════════════════════════════════════════════════════════════════════
# Prompt Construction
# ══════════════════════════════════════════════════════════════════════════

QUIZ_INSTRUCTIONS = (
    "Based on the following educational content, generate exactly {count} "
    "multiple-choice questions with 4 options each. "
    "Format the response as a JSON array where each question has the structure: "
    '{{"question": "question text", "options": ["A", "B", "C", "D"], '
    '"correctAnswer": "A", "explanation": "explanation text"}}. '
    "Make sure the questions are comprehensive and test understanding of key concepts."
)

FLASHCARD_INSTRUCTIONS = (
    "Based on the following educational content, generate exactly {count} "
    "flashcards for effective studying. "
    "Format the response as a JSON array where each flashcard has the structure: "
    '{{"front": "question or term", "back": "answer or definition", '
    '"category": "topic category"}}. '
    "Focus on key terms, concepts, and important facts that students should memorize."
)

SUMMARY_INSTRUCTIONS = (
    "Create a comprehensive summary of the following educational content. "
    "The summary should capture all key points, main concepts, and important details "
    "in a well-organized format. "
    "Use bullet points and clear structure to make it easy to study from."
)

CONTENT_SEPARATOR = "\n\nContent:\n"


def build_prompt(kind: ArtifactKind, content: str, item_count: Optional[int] = None) -> str:
    """
    Build the full prompt for `kind`. Pure and deterministic.

    The note content is appended verbatim after the instructions; it is never
    passed through str.format, so braces in notes are safe.

    Raises:
        InvalidInputError: quiz or flashcards without a positive item count
    """
    kind = ArtifactKind(kind)
    if kind.requires_item_count:
        _validate_item_count(kind, item_count)
    if kind is ArtifactKind.QUIZ:
        instructions = QUIZ_INSTRUCTIONS.format(count=item_count)
    elif kind is ArtifactKind.FLASHCARDS:
        instructions = FLASHCARD_INSTRUCTIONS.format(count=item_count)
    else:
        instructions = SUMMARY_INSTRUCTIONS
    return instructions + CONTENT_SEPARATOR + content


def build_request_body(prompt: str) -> Dict[str, Any]:
    """Wire body for generateContent: one content entry with one text part."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
    }


# ══════════════════════════════════════════════════════════════════════════
# Response Parsing
# ══════════════════════════════════════════════════════════════════════════

def _first_candidate_text(payload: Dict[str, Any]) -> Optional[str]:
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    if len(candidates) > 1:
        logger.debug("Ignoring %d additional candidate(s)", len(candidates) - 1)

    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts:
        return None

    part = parts[0]
    text = part.get("text") if isinstance(part, dict) else None
    return text if isinstance(text, str) else None


def extract_generated_text(raw_body: str) -> str:
    """
    Normalize a 200 response body into generated text or a typed failure.

    Precedence: first candidate's first part text → `error.message`
    → malformed. The text is returned as-is; the model's JSON is not checked.
    """
    try:
        payload = json.loads(raw_body)
    except ValueError as e:
        logger.error("Failed to parse JSON response from Gemini API: %s", str(e))
        raise MalformedResponseError(
            message=f"Invalid JSON response from Gemini API: {e}",
            raw_body=raw_body,
        ) from e

    if isinstance(payload, dict):
        text = _first_candidate_text(payload)
        if text is not None:
            return text

        if "error" in payload:
            error = payload["error"]
            message = error.get("message") if isinstance(error, dict) else None
            message = str(message) if message is not None else "Unknown API error"
            logger.error("Gemini API returned error: %s", message)
            raise UpstreamError(message=message, context={"error": error})

    raise MalformedResponseError(
        message=f"Unexpected response format from Gemini API: {raw_body}",
        raw_body=raw_body,
    )


# ══════════════════════════════════════════════════════════════════════════
# Client
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GeminiClientConfig:
    """Everything the client needs from the outside world, fixed at construction."""

    api_key: Optional[str]
    api_url: str
    connect_timeout: float = 30.0
    request_timeout: float = 120.0

    def __post_init__(self):
        # The stripped key is both the one checked and the one sent
        if self.api_key is not None:
            object.__setattr__(self, "api_key", self.api_key.strip())

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClientConfig":
        return cls(
            api_key=settings.gemini_api_key,
            api_url=settings.gemini_api_url,
            connect_timeout=settings.gemini_connect_timeout,
            request_timeout=settings.gemini_request_timeout,
        )

    @property
    def has_usable_key(self) -> bool:
        return is_usable_api_key(self.api_key)


class GenerationClient:
    """
    Synchronous Gemini client for study-artifact generation.

    Args:
        config:       Credential, endpoint and timeouts.
        http_client:  Optional pre-built httpx.Client (tests inject one backed
                      by httpx.MockTransport). When omitted, the client builds
                      and owns its own, and close() releases it.
    """

    def __init__(
        self,
        config: GeminiClientConfig,
        http_client: Optional[httpx.Client] = None,
    ):
        self.config = config
        self._timeout = httpx.Timeout(config.request_timeout, connect=config.connect_timeout)
        self._owns_http_client = http_client is None
        self._http = http_client if http_client is not None else httpx.Client(timeout=self._timeout)

    @property
    def is_configured(self) -> bool:
        return self.config.has_usable_key

    # ── Public operations ─────────────────────────────────────────────────

    def generate_quiz(self, content: str, item_count: int) -> str:
        return self.generate(ArtifactKind.QUIZ, content, item_count)

    def generate_flashcards(self, content: str, item_count: int) -> str:
        return self.generate(ArtifactKind.FLASHCARDS, content, item_count)

    def generate_summary(self, content: str) -> str:
        return self.generate(ArtifactKind.SUMMARY, content)

    def generate(
        self,
        kind: ArtifactKind,
        content: Optional[str],
        item_count: Optional[int] = None,
    ) -> str:
        """
        Validate, prompt and call the model for one artifact.

        item_count is ignored (never validated) for summaries.
        """
        kind = ArtifactKind(kind)
        _validate_content(content)
        if kind.requires_item_count:
            _validate_item_count(kind, item_count)
            logger.info("Generating %d %s item(s) from note content", item_count, kind.value)
        else:
            item_count = None
            logger.info("Generating %s from note content", kind.value)

        prompt = build_prompt(kind, content, item_count)
        return self._call_gemini(kind, prompt)

    # ── Transport ─────────────────────────────────────────────────────────

    def _call_gemini(self, kind: ArtifactKind, prompt: str) -> str:
        body = build_request_body(prompt)

        if not self.is_configured:
            logger.error("Refusing to call Gemini: API key is not configured")
            raise ConfigurationError()

        # The key travels as a query parameter; never log the full URL
        logger.debug("Sending %s request to Gemini API: %s", kind.value, self.config.api_url)
        start_time = time.perf_counter()

        try:
            response = self._http.post(
                self.config.api_url,
                params={"key": self.config.api_key},
                json=body,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            logger.error("Gemini API request timed out: %s", str(e))
            raise TransportError(
                message=f"Gemini API request timed out: {e}",
                context={"error_type": type(e).__name__},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Gemini API request failed: %s", str(e))
            raise TransportError(
                message=f"Gemini API request failed: {e}",
                context={"error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug("Received response with status %d in %.0fms", response.status_code, duration_ms)

        raw_body = response.text
        if response.status_code != 200:
            message = f"Gemini API request failed with status: {response.status_code}"
            if raw_body:
                message += f", body: {raw_body}"
            logger.error("API call failed: %s", message)
            raise TransportError(message=message, status_code=response.status_code, body=raw_body)

        text = extract_generated_text(raw_body)
        logger.info(
            "Successfully generated %s with %d characters in %.0fms",
            kind.value,
            len(text),
            duration_ms,
        )
        return text

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> "GenerationClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _validate_content(content: Optional[str]) -> None:
    if content is None or not content.strip():
        raise InvalidInputError("Note content cannot be null or empty", field="note_content")
    if len(content.strip()) < MIN_CONTENT_LENGTH:
        raise InvalidInputError(
            f"Note content must be at least {MIN_CONTENT_LENGTH} characters long",
            field="note_content",
        )


def _validate_item_count(kind: ArtifactKind, item_count: Optional[int]) -> None:
    noun = "questions" if kind is ArtifactKind.QUIZ else "flashcards"
    if item_count is None:
        raise InvalidInputError(f"Number of {noun} is required", field="number_of_items")
    if isinstance(item_count, bool) or not isinstance(item_count, int) or item_count <= 0:
        raise InvalidInputError(
            f"Number of {noun} must be greater than 0",
            field="number_of_items",
        )
