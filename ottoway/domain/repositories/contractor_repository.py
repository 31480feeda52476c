"""
Contractor Repository Interface.
"""

from ottoway.domain.repositories.base import OwnedRepository
from ottoway.domain.models.contractor import Contractor


class ContractorRepository(OwnedRepository[Contractor]):
    """Interface for Contractor-specific operations."""
