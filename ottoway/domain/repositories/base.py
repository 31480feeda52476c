"""
Base Repository Interface.
Defines the data access contract for resources owned by a single user.
"""

from typing import Any, Dict, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class OwnedRepository(Protocol[T]):
    """Interface for CRUD operations scoped to an owning user."""

    async def get_by_id(self, id: int) -> Optional[T]:
        """Get a single entity by ID, regardless of owner."""
        ...

    async def list_owned(self, owner_id: int) -> List[T]:
        """List every entity owned by the user."""
        ...

    async def get_owned(self, id: int, owner_id: int) -> T:
        """Get an entity, raising not-found or access-denied."""
        ...

    async def create(self, values: Dict[str, Any]) -> T:
        """Create a new entity."""
        ...

    async def update_owned(self, id: int, owner_id: int, values: Dict[str, Any]) -> T:
        """Apply a partial update if the user owns the entity."""
        ...

    async def delete_owned(self, id: int, owner_id: int) -> int:
        """Delete the entity if the user owns it; returns the deleted ID."""
        ...
