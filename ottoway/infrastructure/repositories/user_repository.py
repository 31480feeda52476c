"""
SQLAlchemy Implementation of User Repository.

Both writes are single ``INSERT ... ON CONFLICT (clerk_id)`` statements, so
concurrent requests for the same subject converge on one row.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from ottoway.domain.models.user import User
from ottoway.domain.repositories.user_repository import UserRepository

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SQLAlchemyUserRepository(UserRepository):
    """User repository implementation using SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _INSERTS[dialect](User)
        except KeyError:
            raise RuntimeError(f"Upsert is not supported on '{dialect}'") from None

    async def get_by_clerk_id(self, clerk_id: str) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.clerk_id == clerk_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert_profile(self, clerk_id: str, email: str, name: str) -> User:
        stmt = self._insert().values(clerk_id=clerk_id, email=email, name=name)
        stmt = stmt.on_conflict_do_update(
            index_elements=["clerk_id"],
            set_={
                "email": stmt.excluded.email,
                "name": stmt.excluded.name,
                "updated_at": func.now(),
            },
        )
        await self.db.execute(stmt)
        await self.db.commit()
        return await self._fetch(clerk_id)

    async def insert_if_absent(self, clerk_id: str, email: str, name: str) -> User:
        stmt = self._insert().values(clerk_id=clerk_id, email=email, name=name)
        stmt = stmt.on_conflict_do_nothing(index_elements=["clerk_id"])
        await self.db.execute(stmt)
        await self.db.commit()
        return await self._fetch(clerk_id)

    async def _fetch(self, clerk_id: str) -> User:
        user = await self.get_by_clerk_id(clerk_id)
        if user is None:
            # Only possible if the row was deleted right after the upsert
            raise LookupError(f"User {clerk_id} vanished after upsert")
        return user
