"""
EduMate Backend
================

Turns study notes into quizzes, flashcards and summaries with Google Gemini.

    ┌─────────────────────────────────────┐
    │        Routes (FastAPI routers)     │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (generation, notes, ...)  │  ← validation, orchestration
    ├─────────────────────────────────────┤
    │   GenerationClient → Gemini REST    │  ← prompts, wire contract
    ├─────────────────────────────────────┤
    │  Models & Schemas / async database  │  ← SQLAlchemy + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
