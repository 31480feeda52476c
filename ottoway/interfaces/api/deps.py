"""FastAPI dependencies: Clerk bearer auth and the caller's shadow record."""

from typing import Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ottoway.application.services.auth_service import ensure_user, verify_session_token
from ottoway.core.exceptions import UnauthorizedException
from ottoway.domain.identity import IdentityProvider
from ottoway.domain.models.user import User
from ottoway.domain.repositories.user_repository import UserRepository
from ottoway.domain.schemas.auth import SessionClaims
from ottoway.interfaces.deps import get_identity_provider, get_user_repository

logger = structlog.get_logger(__name__)

# auto_error=False so a missing header is reported as 401 in our error shape
security = HTTPBearer(auto_error=False)


async def get_session_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> SessionClaims:
    """Verify the bearer token; runs before any handler logic."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("No authorization token provided")
    return await verify_session_token(identity, credentials.credentials)


async def get_current_user(
    claims: SessionClaims = Depends(get_session_claims),
    repo: UserRepository = Depends(get_user_repository),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> User:
    """Ensure the caller's shadow record exists and return it."""
    ensured = await ensure_user(repo, identity, claims.subject_id)
    structlog.contextvars.bind_contextvars(user_id=ensured.user.id)
    logger.debug("User provisioned", clerk_id=claims.subject_id, outcome=ensured.outcome.value)
    return ensured.user
