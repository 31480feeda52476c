"""
Project Repository Interface.
"""

from typing import List

from ottoway.domain.repositories.base import OwnedRepository
from ottoway.domain.models.project import Project


class ProjectRepository(OwnedRepository[Project]):
    """Interface for Project-specific operations."""

    async def list_public(self) -> List[Project]:
        """Get every project flagged as public, newest first."""
        ...
