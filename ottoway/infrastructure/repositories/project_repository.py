"""
SQLAlchemy Implementation of Project Repository.
"""

from typing import List

from ottoway.domain.models.project import Project
from ottoway.domain.repositories.project_repository import ProjectRepository
from ottoway.infrastructure.repositories.base_repository import SQLAlchemyOwnedRepository


class SQLAlchemyProjectRepository(SQLAlchemyOwnedRepository[Project], ProjectRepository):
    """Project repository implementation using SQLAlchemy."""

    entity_name = "Project"
    conflict_message = "Project already exists"

    def ordering(self) -> tuple:
        return (Project.created_at.desc(), Project.id.desc())

    async def list_public(self) -> List[Project]:
        result = await self.db.execute(
            self._select().where(Project.is_public.is_(True)).order_by(*self.ordering())
        )
        return list(result.scalars().all())
