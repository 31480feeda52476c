"""Auth API routes: the caller's local profile."""

from fastapi import APIRouter, Depends

from ottoway.domain.models.user import User
from ottoway.domain.schemas.auth import UserRead
from ottoway.interfaces.api.deps import get_current_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
