"""EduMate Backend — Project Route Handlers."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edumate.database import get_db_session
from edumate.schemas.note import ErrorResponse
from edumate.schemas.project import ProjectCreate, ProjectResponse
from edumate.services.project_service import project_service

router = APIRouter(prefix="/api", tags=["Projects"])


@router.post("/projects", status_code=201, response_model=ProjectResponse, summary="Create a project")
async def create_project(
    payload: ProjectCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.create_project(db, payload)


@router.get(
    "/projects",
    response_model=List[ProjectResponse],
    summary="List a user's projects, newest first",
)
async def list_projects(
    user_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db_session),
) -> List[ProjectResponse]:
    return await project_service.list_projects(db, user_id)


@router.get(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={404: {"description": "Project not found", "model": ErrorResponse}},
    summary="Get a single project",
)
async def get_project(
    project_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.get_project(db, project_id)
