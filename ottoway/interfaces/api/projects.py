"""Projects API routes: owner-scoped CRUD plus the public listing."""

from fastapi import APIRouter, Depends, status

from ottoway.application.services.project_service import (
    create_project,
    delete_project,
    get_project,
    list_projects,
    list_public_projects,
    update_project,
)
from ottoway.domain.models.user import User
from ottoway.domain.repositories.project_repository import ProjectRepository
from ottoway.domain.schemas.common import DeleteAck
from ottoway.domain.schemas.project import ProjectCreate, ProjectPublicRead, ProjectRead, ProjectUpdate
from ottoway.interfaces.api.deps import get_current_user
from ottoway.interfaces.deps import get_project_repository

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("/public", response_model=list[ProjectPublicRead])
async def public_projects(repo: ProjectRepository = Depends(get_project_repository)):
    """Public projects, no authentication required."""
    projects = await list_public_projects(repo)
    return [ProjectPublicRead.model_validate(p) for p in projects]


@router.get("", response_model=list[ProjectRead])
async def my_projects(
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(get_current_user),
):
    projects = await list_projects(repo, user)
    return [ProjectRead.model_validate(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectRead)
async def project_detail(
    project_id: int,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(get_current_user),
):
    return ProjectRead.model_validate(await get_project(repo, user, project_id))


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def new_project(
    body: ProjectCreate,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(get_current_user),
):
    return ProjectRead.model_validate(await create_project(repo, user, body))


@router.patch("/{project_id}", response_model=ProjectRead)
async def edit_project(
    project_id: int,
    body: ProjectUpdate,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(get_current_user),
):
    return ProjectRead.model_validate(await update_project(repo, user, project_id, body))


@router.delete("/{project_id}", response_model=DeleteAck)
async def remove_project(
    project_id: int,
    repo: ProjectRepository = Depends(get_project_repository),
    user: User = Depends(get_current_user),
):
    return await delete_project(repo, user, project_id)
