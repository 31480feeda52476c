"""
SQLAlchemy implementation of the ownership-scoped repository.

Updates and deletes are issued as conditional statements
(``WHERE id = :id AND user_id = :owner``) so the ownership check and the write
happen in one round trip. Only when nothing matched is the row looked up again
to tell "not found" from "access denied".
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ottoway.core.exceptions import ConflictException, EntityNotFoundException, ForbiddenException
from ottoway.domain.repositories.base import OwnedRepository
from ottoway.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)

# Primary keys are 32-bit INTEGER columns
MAX_ID = 2**31 - 1


class SQLAlchemyOwnedRepository(OwnedRepository[ModelType], Generic[ModelType]):
    """Generic owner-scoped repository for models with a ``user_id`` column."""

    entity_name = "Entity"
    conflict_message = "Entity already exists"

    def __init__(self, db: AsyncSession, model: Type[ModelType]):
        self.db = db
        self.model = model

    def ordering(self) -> tuple:
        return (self.model.id.asc(),)

    def _select(self):
        # Core UPDATEs bypass the identity map, so always refresh loaded rows
        return select(self.model).execution_options(populate_existing=True)

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        if not 0 < id <= MAX_ID:
            return None
        result = await self.db.execute(self._select().where(self.model.id == id))
        return result.scalar_one_or_none()

    async def list_owned(self, owner_id: int) -> List[ModelType]:
        result = await self.db.execute(
            self._select().where(self.model.user_id == owner_id).order_by(*self.ordering())
        )
        return list(result.scalars().all())

    async def get_owned(self, id: int, owner_id: int) -> ModelType:
        obj = await self.get_by_id(id)
        if obj is None:
            raise EntityNotFoundException(f"{self.entity_name} not found", {"id": id})
        if obj.user_id != owner_id:
            raise ForbiddenException("Access denied", {"id": id})
        return obj

    async def create(self, values: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**values)
        self.db.add(db_obj)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise self._conflict(exc) from exc
        await self.db.refresh(db_obj)
        return db_obj

    async def update_owned(self, id: int, owner_id: int, values: Dict[str, Any]) -> ModelType:
        if not values or not 0 < id <= MAX_ID:
            return await self.get_owned(id, owner_id)

        stmt = (
            update(self.model)
            .where(self.model.id == id, self.model.user_id == owner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
        except IntegrityError as exc:
            await self.db.rollback()
            raise self._conflict(exc) from exc

        if result.rowcount == 0:
            await self.db.rollback()
            await self._raise_missing_or_denied(id, owner_id)

        await self.db.commit()
        return await self.get_owned(id, owner_id)

    async def delete_owned(self, id: int, owner_id: int) -> int:
        if not 0 < id <= MAX_ID:
            raise EntityNotFoundException(f"{self.entity_name} not found", {"id": id})

        stmt = (
            delete(self.model)
            .where(self.model.id == id, self.model.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)

        if result.rowcount == 0:
            await self.db.rollback()
            await self._raise_missing_or_denied(id, owner_id)

        await self.db.commit()
        return id

    async def _raise_missing_or_denied(self, id: int, owner_id: int) -> None:
        obj = await self.get_by_id(id)
        if obj is not None and obj.user_id != owner_id:
            raise ForbiddenException("Access denied", {"id": id})
        # Absent, or removed between the write and this lookup
        raise EntityNotFoundException(f"{self.entity_name} not found", {"id": id})

    def _conflict(self, exc: IntegrityError) -> ConflictException:
        return ConflictException(self.conflict_message)
