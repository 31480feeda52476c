"""
SQLAlchemy Implementation of Contractor Repository.
"""

from ottoway.domain.models.contractor import Contractor
from ottoway.domain.repositories.contractor_repository import ContractorRepository
from ottoway.infrastructure.repositories.base_repository import SQLAlchemyOwnedRepository


class SQLAlchemyContractorRepository(SQLAlchemyOwnedRepository[Contractor], ContractorRepository):
    """Contractor repository implementation using SQLAlchemy."""

    entity_name = "Contractor"
    # The unique index on email is global, so this also fires across owners
    conflict_message = "A contractor with this email already exists"

    def ordering(self) -> tuple:
        return (Contractor.name.asc(), Contractor.id.asc())
