"""Pydantic schemas for Contractor domain."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ottoway.domain.schemas.auth import OwnerSummary
from ottoway.domain.schemas.common import strip_or_none, strip_required

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(value: Optional[str]) -> str:
    value = strip_required(value).lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("invalid email format")
    return value


def normalize_trades(value: Optional[list[str]]) -> list[str]:
    """Trim tags, drop blanks and repeats, keep first-seen order."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("trades must be a list of strings")
    seen: dict[str, None] = {}
    for trade in value:
        if not isinstance(trade, str):
            raise ValueError("trades must be strings")
        trade = trade.strip()
        if trade:
            seen.setdefault(trade, None)
    return list(seen)


class ContractorCreate(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    trades: list[str] = Field(default_factory=list)
    rating: float = 0

    _name = field_validator("name", mode="before")(strip_required)
    _email = field_validator("email", mode="before")(normalize_email)
    _optional = field_validator("phone", "company", mode="before")(strip_or_none)
    _trades = field_validator("trades", mode="before")(normalize_trades)

    @field_validator("rating", mode="before")
    @classmethod
    def default_rating(cls, value):
        return 0 if value in (None, "") else value


class ContractorUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    trades: Optional[list[str]] = None
    rating: Optional[float] = None

    _name = field_validator("name", mode="before")(strip_required)
    _email = field_validator("email", mode="before")(normalize_email)
    _optional = field_validator("phone", "company", mode="before")(strip_or_none)
    _trades = field_validator("trades", mode="before")(normalize_trades)

    @field_validator("rating", mode="before")
    @classmethod
    def default_rating(cls, value):
        return 0 if value in (None, "") else value


class ContractorRead(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    trades: list[str] = Field(default_factory=list)
    rating: float
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[OwnerSummary] = None

    model_config = {"from_attributes": True}
