"""
EduMate Backend — Services Layer
==================================

Service Inventory:
    - GenerationClient:  blocking Gemini REST client (prompts, wire contract,
                         response normalization)
    - GenerationService: async orchestration for the AI routes
    - NoteService:       note CRUD and content lookup
    - ProjectService:    project CRUD
"""
