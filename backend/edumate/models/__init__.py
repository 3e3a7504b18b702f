"""ORM models. Importing this package registers every table on Base.metadata."""

from edumate.models.note import Note
from edumate.models.project import Project

__all__ = ["Note", "Project"]
