"""
EduMate Backend — API Routes Package
======================================

Route Inventory:
    - ai_generation.py: POST /api/ai/generate-quiz | -flashcards | -summary | -all
    - notes.py:         POST/GET /api/notes, GET /api/notes/{id}
    - projects.py:      POST/GET /api/projects, GET /api/projects/{id}
    - health.py:        GET /health

Routes stay thin: extract request data, call a service, shape the response.
"""
