"""
API Dependencies: repositories and the identity provider.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ottoway.config import get_settings
from ottoway.domain.identity import IdentityProvider
from ottoway.domain.models.contractor import Contractor
from ottoway.domain.models.project import Project
from ottoway.domain.repositories.contractor_repository import ContractorRepository
from ottoway.domain.repositories.project_repository import ProjectRepository
from ottoway.domain.repositories.user_repository import UserRepository
from ottoway.infrastructure.clerk import ClerkIdentityProvider
from ottoway.infrastructure.database import get_db
from ottoway.infrastructure.repositories.contractor_repository import SQLAlchemyContractorRepository
from ottoway.infrastructure.repositories.project_repository import SQLAlchemyProjectRepository
from ottoway.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


@lru_cache
def get_identity_provider() -> IdentityProvider:
    """Process-wide Clerk client (it caches the signing keys)."""
    settings = get_settings()
    return ClerkIdentityProvider(
        secret_key=settings.CLERK_SECRET_KEY,
        api_url=settings.CLERK_API_URL,
        jwt_key=settings.CLERK_JWT_KEY,
        authorized_parties=settings.authorized_parties_list,
        jwks_cache_seconds=settings.CLERK_JWKS_CACHE_SECONDS,
        timeout=settings.CLERK_TIMEOUT_SECONDS,
    )


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return SQLAlchemyUserRepository(db)


def get_project_repository(db: AsyncSession = Depends(get_db)) -> ProjectRepository:
    """Get project repository instance."""
    return SQLAlchemyProjectRepository(db, Project)


def get_contractor_repository(db: AsyncSession = Depends(get_db)) -> ContractorRepository:
    """Get contractor repository instance."""
    return SQLAlchemyContractorRepository(db, Contractor)
