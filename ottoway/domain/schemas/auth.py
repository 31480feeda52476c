"""Pydantic schemas for identity-provider data and the local user record."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SessionClaims(BaseModel):
    """Verified claims of a Clerk session token."""
    subject_id: str
    session_id: Optional[str] = None
    org_id: Optional[str] = None
    org_role: Optional[str] = None


class EmailVerification(BaseModel):
    status: Optional[str] = None


class EmailAddress(BaseModel):
    id: Optional[str] = None
    email_address: str
    verification: Optional[EmailVerification] = None

    @property
    def is_verified(self) -> bool:
        return self.verification is not None and self.verification.status == "verified"


class IdentityProfile(BaseModel):
    """The subset of a Clerk user we mirror locally."""
    id: str
    email_addresses: list[EmailAddress] = Field(default_factory=list)
    primary_email_address_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None

    model_config = {"extra": "ignore"}


class UserRead(BaseModel):
    id: int
    clerk_id: str
    email: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class OwnerSummary(BaseModel):
    name: str
    email: str

    model_config = {"from_attributes": True}
