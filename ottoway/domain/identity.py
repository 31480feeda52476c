"""
Identity provider port.
The application only needs two things from the provider: verify a session
token and read a user's profile.
"""

from typing import Protocol

from ottoway.domain.schemas.auth import IdentityProfile, SessionClaims


class IdentityProviderError(Exception):
    """The provider could not be reached or returned an error."""


class InvalidTokenError(Exception):
    """The session token is missing claims, expired or not signed by the provider."""


class IdentityProvider(Protocol):

    async def verify_token(self, token: str) -> SessionClaims:
        ...

    async def get_user(self, subject_id: str) -> IdentityProfile:
        ...
