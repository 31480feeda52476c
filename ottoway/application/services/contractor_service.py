"""Contractor service: owner-scoped contractor operations."""

from typing import List

import structlog

from ottoway.core.exceptions import ConflictException
from ottoway.domain.models.contractor import Contractor
from ottoway.domain.models.user import User
from ottoway.domain.repositories.contractor_repository import ContractorRepository
from ottoway.domain.schemas.auth import OwnerSummary
from ottoway.domain.schemas.common import DeleteAck
from ottoway.domain.schemas.contractor import ContractorCreate, ContractorRead, ContractorUpdate

logger = structlog.get_logger(__name__)


def to_read(contractor: Contractor, owner: User) -> ContractorRead:
    """Serialize a contractor together with its owner's name and email."""
    read = ContractorRead.model_validate(contractor)
    read.user = OwnerSummary.model_validate(owner)
    return read


async def list_contractors(repo: ContractorRepository, user: User) -> List[Contractor]:
    """Get the caller's contractors ordered by name."""
    return await repo.list_owned(user.id)


async def get_contractor(repo: ContractorRepository, user: User, contractor_id: int) -> Contractor:
    return await repo.get_owned(contractor_id, user.id)


async def create_contractor(repo: ContractorRepository, user: User, body: ContractorCreate) -> Contractor:
    # A failed insert rolls the session back and expires `user`, so read the id first
    owner_id = user.id
    values = body.model_dump()
    values["user_id"] = owner_id
    try:
        contractor = await repo.create(values)
    except ConflictException:
        logger.info("Duplicate contractor email", email=values["email"], user_id=owner_id)
        raise
    logger.info("Contractor created", contractor_id=contractor.id, user_id=owner_id)
    return contractor


async def update_contractor(
    repo: ContractorRepository, user: User, contractor_id: int, body: ContractorUpdate
) -> Contractor:
    values = body.model_dump(exclude_unset=True)
    return await repo.update_owned(contractor_id, user.id, values)


async def delete_contractor(repo: ContractorRepository, user: User, contractor_id: int) -> DeleteAck:
    owner_id = user.id
    deleted_id = await repo.delete_owned(contractor_id, owner_id)
    logger.info("Contractor deleted", contractor_id=deleted_id, user_id=owner_id)
    return DeleteAck(message="Contractor deleted", id=deleted_id)
