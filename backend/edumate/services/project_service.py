"""
EduMate Backend — Project Service
===================================

What:  Create, fetch and list a user's projects (newest first).
Who:   Project routes.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from edumate.exceptions import DatabaseError, NotFoundError
from edumate.models.project import Project
from edumate.schemas.project import ProjectCreate, ProjectResponse

logger = logging.getLogger(__name__)


class ProjectService:

    async def create_project(self, db: AsyncSession, payload: ProjectCreate) -> ProjectResponse:
        try:
            project = Project(
                user_id=payload.user_id,
                name=payload.name.strip(),
                description=payload.description,
                created_at=datetime.now(timezone.utc),
            )
            db.add(project)
            await db.flush()
        except Exception as e:
            logger.error("Database error creating project: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the project. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Project %s created for user %d", project.id, project.user_id)
        return ProjectResponse.model_validate(project)

    async def get_project(self, db: AsyncSession, project_id: int) -> ProjectResponse:
        try:
            project = await db.get(Project, project_id)
        except Exception as e:
            logger.error("Database error fetching project %s: %s", project_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the project. Please try again.",
                context={"project_id": project_id},
            )

        if project is None:
            raise NotFoundError(resource="project", resource_id=str(project_id))
        return ProjectResponse.model_validate(project)

    async def list_projects(self, db: AsyncSession, user_id: int) -> List[ProjectResponse]:
        try:
            result = await db.execute(
                select(Project)
                .where(Project.user_id == user_id)
                .order_by(desc(Project.created_at))
            )
            projects = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing projects: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve projects. Please try again.",
                context={"user_id": user_id},
            )

        return [ProjectResponse.model_validate(p) for p in projects]


project_service = ProjectService()
