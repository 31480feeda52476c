"""Project service: owner-scoped project operations."""

from typing import List

import structlog

from ottoway.domain.models.project import Project, ProjectStatus
from ottoway.domain.models.user import User
from ottoway.domain.repositories.project_repository import ProjectRepository
from ottoway.domain.schemas.common import DeleteAck
from ottoway.domain.schemas.project import ProjectCreate, ProjectUpdate

logger = structlog.get_logger(__name__)


async def list_projects(repo: ProjectRepository, user: User) -> List[Project]:
    """Get the caller's projects, newest first."""
    return await repo.list_owned(user.id)


async def list_public_projects(repo: ProjectRepository) -> List[Project]:
    """Get every public project, newest first."""
    return await repo.list_public()


async def get_project(repo: ProjectRepository, user: User, project_id: int) -> Project:
    return await repo.get_owned(project_id, user.id)


async def create_project(repo: ProjectRepository, user: User, body: ProjectCreate) -> Project:
    """Create a project owned by the caller; new projects always start in PLANNING."""
    owner_id = user.id
    values = body.model_dump()
    values.update(user_id=owner_id, status=ProjectStatus.PLANNING.value)
    project = await repo.create(values)
    logger.info("Project created", project_id=project.id, user_id=owner_id)
    return project


async def update_project(repo: ProjectRepository, user: User, project_id: int, body: ProjectUpdate) -> Project:
    values = body.model_dump(exclude_unset=True)
    if "status" in values:
        values["status"] = ProjectStatus(values["status"]).value
    return await repo.update_owned(project_id, user.id, values)


async def delete_project(repo: ProjectRepository, user: User, project_id: int) -> DeleteAck:
    owner_id = user.id
    deleted_id = await repo.delete_owned(project_id, owner_id)
    logger.info("Project deleted", project_id=deleted_id, user_id=owner_id)
    return DeleteAck(message="Project deleted", id=deleted_id)
