"""Auth service: session token verification and user shadow records.

Every authenticated request goes through ``ensure_user`` before touching a
resource, so the local ``users`` row for the caller always exists and its
cached profile is refreshed whenever Clerk is reachable.
"""

import enum
from dataclasses import dataclass
from typing import Optional

import structlog

from ottoway.core.exceptions import UnauthorizedException
from ottoway.domain.identity import IdentityProvider, IdentityProviderError, InvalidTokenError
from ottoway.domain.models.user import User
from ottoway.domain.repositories.user_repository import UserRepository
from ottoway.domain.schemas.auth import IdentityProfile, SessionClaims

logger = structlog.get_logger(__name__)

PLACEHOLDER_NAME = "User"


class ProvisioningOutcome(str, enum.Enum):
    REFRESHED = "refreshed"  # profile fetched and written
    FALLBACK = "fallback"  # provider unavailable; row only created if missing


@dataclass
class EnsuredUser:
    user: User
    outcome: ProvisioningOutcome


def placeholder_email(external_id: str) -> str:
    return f"{external_id}@temp.com"


def pick_email(profile: IdentityProfile) -> Optional[str]:
    """Primary verified address, else the first verified one."""
    verified = [address for address in profile.email_addresses if address.is_verified]
    for address in verified:
        if address.id and address.id == profile.primary_email_address_id:
            return address.email_address
    return verified[0].email_address if verified else None


def display_name(profile: IdentityProfile) -> str:
    if profile.first_name:
        return f"{profile.first_name} {profile.last_name or ''}".strip()
    return profile.username or PLACEHOLDER_NAME


async def verify_session_token(identity: IdentityProvider, token: str) -> SessionClaims:
    try:
        return await identity.verify_token(token)
    except (InvalidTokenError, IdentityProviderError) as e:
        logger.info("Token verification failed", error=str(e))
        raise UnauthorizedException("Authentication failed") from e


async def ensure_user(repo: UserRepository, identity: IdentityProvider, external_id: str) -> EnsuredUser:
    """Make sure a shadow record exists for ``external_id``.

    Never raises because of the identity provider: on any lookup failure a
    minimal row is inserted if absent and existing profile fields are left
    untouched.
    """
    try:
        profile = await identity.get_user(external_id)
    except Exception as e:
        logger.warning("Identity provider lookup failed, using minimal record", clerk_id=external_id, error=str(e))
        user = await repo.insert_if_absent(external_id, placeholder_email(external_id), PLACEHOLDER_NAME)
        return EnsuredUser(user=user, outcome=ProvisioningOutcome.FALLBACK)

    user = await repo.upsert_profile(
        external_id,
        pick_email(profile) or placeholder_email(external_id),
        display_name(profile),
    )
    return EnsuredUser(user=user, outcome=ProvisioningOutcome.REFRESHED)
