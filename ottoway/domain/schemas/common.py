"""Shared field normalisers and response shapes."""

from typing import Optional

from pydantic import BaseModel


def strip_required(value: Optional[str]) -> str:
    """Trim a required string, rejecting null and blank values."""
    if value is None:
        raise ValueError("must not be null")
    if not isinstance(value, str):
        raise ValueError("must be a string")
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def strip_or_none(value: Optional[str]) -> Optional[str]:
    """Trim an optional string; empty input is stored as None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("must be a string")
    return value.strip() or None


def blank_to_none(value):
    """Treat empty strings from form-style clients as an explicit null."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DeleteAck(BaseModel):
    success: bool = True
    message: str
    id: int
