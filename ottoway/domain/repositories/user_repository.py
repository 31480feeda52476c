"""
User Repository Interface.
Shadow records are keyed by the identity provider's subject id.
"""

from typing import Optional, Protocol

from ottoway.domain.models.user import User


class UserRepository(Protocol):
    """Interface for User shadow-record operations."""

    async def get_by_clerk_id(self, clerk_id: str) -> Optional[User]:
        """Get the shadow record for an external subject id."""
        ...

    async def upsert_profile(self, clerk_id: str, email: str, name: str) -> User:
        """Insert the record or overwrite its cached profile fields."""
        ...

    async def insert_if_absent(self, clerk_id: str, email: str, name: str) -> User:
        """Insert the record only when missing; existing fields are kept."""
        ...
