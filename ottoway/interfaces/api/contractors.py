"""Contractors API routes: CRUD scoped to the authenticated user."""

from fastapi import APIRouter, Depends, status

from ottoway.application.services.contractor_service import (
    create_contractor,
    delete_contractor,
    get_contractor,
    list_contractors,
    to_read,
    update_contractor,
)
from ottoway.domain.models.user import User
from ottoway.domain.repositories.contractor_repository import ContractorRepository
from ottoway.domain.schemas.common import DeleteAck
from ottoway.domain.schemas.contractor import ContractorCreate, ContractorRead, ContractorUpdate
from ottoway.interfaces.api.deps import get_current_user
from ottoway.interfaces.deps import get_contractor_repository

router = APIRouter(prefix="/api/contractors", tags=["Contractors"])


@router.get("", response_model=list[ContractorRead])
async def my_contractors(
    repo: ContractorRepository = Depends(get_contractor_repository),
    user: User = Depends(get_current_user),
):
    contractors = await list_contractors(repo, user)
    return [to_read(c, user) for c in contractors]


@router.get("/{contractor_id}", response_model=ContractorRead)
async def contractor_detail(
    contractor_id: int,
    repo: ContractorRepository = Depends(get_contractor_repository),
    user: User = Depends(get_current_user),
):
    return to_read(await get_contractor(repo, user, contractor_id), user)


@router.post("", response_model=ContractorRead, status_code=status.HTTP_201_CREATED)
async def new_contractor(
    body: ContractorCreate,
    repo: ContractorRepository = Depends(get_contractor_repository),
    user: User = Depends(get_current_user),
):
    return to_read(await create_contractor(repo, user, body), user)


@router.patch("/{contractor_id}", response_model=ContractorRead)
async def edit_contractor(
    contractor_id: int,
    body: ContractorUpdate,
    repo: ContractorRepository = Depends(get_contractor_repository),
    user: User = Depends(get_current_user),
):
    return to_read(await update_contractor(repo, user, contractor_id, body), user)


@router.delete("/{contractor_id}", response_model=DeleteAck)
async def remove_contractor(
    contractor_id: int,
    repo: ContractorRepository = Depends(get_contractor_repository),
    user: User = Depends(get_current_user),
):
    return await delete_contractor(repo, user, contractor_id)
