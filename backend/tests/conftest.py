"""
EduMate Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   The Gemini endpoint is replaced by an httpx.MockTransport stub that
       records every request, so no test touches the network and each test
       can assert exactly how many model calls were made.

Fixtures:
    gemini_stub             programmable fake Gemini endpoint (call counter)
    make_generation_client  factory: GenerationClient wired to a stub
    generation_client       client wired to `gemini_stub` with a test key
    mock_db_session         AsyncMock standing in for AsyncSession
    api_client              httpx AsyncClient against a fresh app whose
                            generation service and DB session are overridden
"""

import json
import os
import tempfile
from typing import Any, Callable, List, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup — must run BEFORE any edumate import
# ══════════════════════════════════════════════════════════════════════════

_tmp_dir = tempfile.mkdtemp(prefix="edumate_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/edumate_test.db"
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from edumate.services.generation_client import (  # noqa: E402
    GeminiClientConfig,
    GenerationClient,
)

GEMINI_TEST_URL = "https://gemini.test/v1beta/models/gemini-test:generateContent"
TEST_API_KEY = "test-key-not-real"
VALID_CONTENT = "This is a valid note content with more than 10 characters."


def candidates_body(*texts: str) -> str:
    """A well-formed generateContent response with one candidate per text."""
    return json.dumps(
        {"candidates": [{"content": {"parts": [{"text": t}], "role": "model"}} for t in texts]}
    )


class StubGemini:
    """
    Deterministic stand-in for the Gemini endpoint.

    `responses` is consumed in order, one per request; the last entry is
    reused once the list runs out. Each entry is (status_code, body) or an
    exception instance to raise from the transport.
    """

    def __init__(self, responses: Optional[List[Union[tuple, Exception]]] = None):
        self.responses = responses or [(200, candidates_body("GENERATED_TEXT"))]
        self.requests: List[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def reply(self, status_code: int, body: Any) -> "StubGemini":
        if not isinstance(body, str):
            body = json.dumps(body)
        self.responses = [(status_code, body)]
        return self

    def json_bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]

    def prompts(self) -> List[str]:
        return [b["contents"][0]["parts"][0]["text"] for b in self.json_bodies()]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        index = min(len(self.requests), len(self.responses) - 1)
        self.requests.append(request)
        outcome = self.responses[index]
        if isinstance(outcome, Exception):
            raise outcome
        status_code, body = outcome
        return httpx.Response(status_code, text=body)


# ══════════════════════════════════════════════════════════════════════════
# Generation Client Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def valid_content() -> str:
    return VALID_CONTENT


@pytest.fixture
def gemini_stub() -> StubGemini:
    return StubGemini()


@pytest.fixture
def make_generation_client() -> Callable[..., GenerationClient]:
    """
    Build a GenerationClient over a stub transport.

    Usage:
        client = make_generation_client(stub, api_key=None)
    """
    clients: List[GenerationClient] = []

    def _make(stub: StubGemini, api_key: Optional[str] = TEST_API_KEY) -> GenerationClient:
        config = GeminiClientConfig(api_key=api_key, api_url=GEMINI_TEST_URL)
        http_client = httpx.Client(transport=httpx.MockTransport(stub))
        client = GenerationClient(config, http_client=http_client)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client._http.close()


@pytest.fixture
def generation_client(gemini_stub, make_generation_client) -> GenerationClient:
    return make_generation_client(gemini_stub)


# ══════════════════════════════════════════════════════════════════════════
# Database & API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession: no real database needed.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def api_client(generation_client, mock_db_session):
    """
    HTTPX AsyncClient talking to a fresh app instance (fresh rate limiter).

    The lifespan does not run under ASGITransport, so the generation service
    and the DB session are supplied through dependency overrides.
    """
    from httpx import ASGITransport, AsyncClient

    from edumate.database import get_db_session
    from edumate.main import create_app
    from edumate.routes.ai_generation import get_generation_service
    from edumate.services.generation_service import GenerationService

    app = create_app()

    async def _db_override():
        yield mock_db_session

    app.dependency_overrides[get_generation_service] = lambda: GenerationService(generation_client)
    app.dependency_overrides[get_db_session] = _db_override

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
