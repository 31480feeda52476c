"""Pydantic schemas for Project domain."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ottoway.domain.models.project import ProjectStatus
from ottoway.domain.schemas.common import blank_to_none, strip_or_none, strip_required


class ProjectCreate(BaseModel):
    name: str
    address: str
    description: Optional[str] = None
    budget: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_public: bool = False

    _required = field_validator("name", "address", mode="before")(strip_required)
    _optional = field_validator("description", mode="before")(strip_or_none)
    _blank = field_validator("budget", "start_date", "end_date", mode="before")(blank_to_none)


class ProjectUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""
    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    budget: Optional[float] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_public: Optional[bool] = None

    _required = field_validator("name", "address", mode="before")(strip_required)
    _optional = field_validator("description", mode="before")(strip_or_none)
    _blank = field_validator("budget", "start_date", "end_date", mode="before")(blank_to_none)

    @field_validator("status", "is_public")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class ProjectRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    address: str
    budget: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus
    is_public: bool
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProjectPublicRead(BaseModel):
    """Reduced projection served without authentication."""
    id: int
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    address: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
