"""
EduMate Backend — Note & Project Service Unit Tests
=====================================================

What:  Tests for NoteService and ProjectService business logic.
How:   Uses mock DB sessions (no real database).

What we test:
    ✅ Creating notes, with and without a project
    ✅ Missing note / project raises NotFoundError
    ✅ Listing notes with previews and total count
    ✅ Unexpected database failures become DatabaseError
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from edumate.exceptions import DatabaseError, NotFoundError
from edumate.schemas.note import NoteCreate
from edumate.schemas.project import ProjectCreate
from edumate.services.note_service import PREVIEW_LENGTH, NoteService
from edumate.services.project_service import ProjectService


def _mock_note(**overrides):
    note = MagicMock()
    note.id = overrides.get("id", uuid4())
    note.user_id = overrides.get("user_id", 1)
    note.project_id = overrides.get("project_id", None)
    note.title = overrides.get("title", "Photosynthesis")
    note.content = overrides.get("content", "Plants convert light into chemical energy.")
    note.created_at = overrides.get("created_at", datetime.now(timezone.utc))
    note.updated_at = note.created_at
    return note


class TestNoteServiceCreate:
    """Tests for create_note."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_note_without_project(self, mock_db_session):
        payload = NoteCreate(user_id=7, title="  Cell biology  ", content="Mitochondria make ATP.")

        result = await self.service.create_note(mock_db_session, payload)

        assert result.user_id == 7
        assert result.title == "Cell biology"
        assert result.content == "Mitochondria make ATP."
        assert result.project_id is None
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_note_in_existing_project(self, mock_db_session):
        mock_db_session.get = AsyncMock(return_value=MagicMock())
        payload = NoteCreate(user_id=7, project_id=3, title="Genetics", content="DNA is a double helix.")

        result = await self.service.create_note(mock_db_session, payload)

        assert result.project_id == 3

    @pytest.mark.asyncio
    async def test_create_note_in_missing_project(self, mock_db_session):
        """Unknown project should raise NotFoundError and insert nothing."""
        mock_db_session.get = AsyncMock(return_value=None)
        payload = NoteCreate(user_id=7, project_id=99, title="Orphan", content="No project here.")

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.create_note(mock_db_session, payload)

        assert exc_info.value.context["resource"] == "project"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_note_database_failure(self, mock_db_session):
        mock_db_session.flush = AsyncMock(side_effect=RuntimeError("connection reset"))
        payload = NoteCreate(user_id=1, title="T", content="Some content here.")

        with pytest.raises(DatabaseError):
            await self.service.create_note(mock_db_session, payload)


class TestNoteServiceGet:
    """Tests for get_note and get_note_content."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_get_note_found(self, mock_db_session):
        """Existing note should return NoteResponse."""
        mock_note = _mock_note()
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = mock_note
        mock_db_session.execute.return_value = mock_result

        result = await self.service.get_note(mock_db_session, mock_note.id)

        assert result.id == mock_note.id
        assert result.content == mock_note.content

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, mock_db_session):
        """Non-existent note should raise NotFoundError."""
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await self.service.get_note(mock_db_session, uuid4())

    @pytest.mark.asyncio
    async def test_get_note_content(self, mock_db_session):
        mock_note = _mock_note(content="Full text of the stored note.")
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = mock_note
        mock_db_session.execute.return_value = mock_result

        content = await self.service.get_note_content(mock_db_session, mock_note.id)

        assert content == "Full text of the stored note."

    @pytest.mark.asyncio
    async def test_get_note_database_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("db down"))

        with pytest.raises(DatabaseError):
            await self.service.get_note(mock_db_session, uuid4())


class TestNoteServiceList:
    """Tests for list_notes."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        count_result = MagicMock()
        count_result.scalar.return_value = 0
        mock_db_session.execute = AsyncMock(side_effect=[mock_result, count_result])

        result = await self.service.list_notes(mock_db_session, user_id=1, limit=20)

        assert result.notes == []
        assert result.total_count == 0

    @pytest.mark.asyncio
    async def test_list_notes_with_previews(self, mock_db_session):
        mock_notes = [_mock_note(title=f"Note {i}", content="x" * 500) for i in range(3)]
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = mock_notes
        count_result = MagicMock()
        count_result.scalar.return_value = 3
        mock_db_session.execute = AsyncMock(side_effect=[mock_result, count_result])

        result = await self.service.list_notes(mock_db_session, project_id=2)

        assert len(result.notes) == 3
        assert result.total_count == 3
        assert all(len(item.text_preview) == PREVIEW_LENGTH for item in result.notes)

    @pytest.mark.asyncio
    async def test_list_notes_database_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("db down"))

        with pytest.raises(DatabaseError):
            await self.service.list_notes(mock_db_session)


class TestProjectService:
    """Tests for ProjectService."""

    def setup_method(self):
        self.service = ProjectService()

    @pytest.mark.asyncio
    async def test_create_project(self, mock_db_session):
        # flush() is where the database would assign the id
        def assign_id():
            project = mock_db_session.add.call_args[0][0]
            project.id = 11

        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        result = await self.service.create_project(
            mock_db_session, ProjectCreate(user_id=4, name="  Biology 101 ")
        )

        assert result.id == 11
        assert result.name == "Biology 101"
        assert result.user_id == 4

    @pytest.mark.asyncio
    async def test_get_project_not_found(self, mock_db_session):
        mock_db_session.get = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await self.service.get_project(mock_db_session, 42)

    @pytest.mark.asyncio
    async def test_list_projects(self, mock_db_session):
        project = MagicMock()
        project.id = 1
        project.user_id = 4
        project.name = "Chemistry"
        project.description = None
        project.created_at = datetime.now(timezone.utc)
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = [project]
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_projects(mock_db_session, user_id=4)

        assert [p.name for p in result] == ["Chemistry"]
