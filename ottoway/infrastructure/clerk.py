"""Clerk Backend API client.

Two calls are needed by the application:
- session token verification (RS256, PEM key or the instance JWKS)
- user profile lookup, used to refresh the local shadow record

No retries are made here; callers decide how to degrade.
"""

import logging
import time
from typing import Any, Iterable, Optional

import httpx
from jose import JWTError, jwt
from pydantic import ValidationError

from ottoway.domain.identity import IdentityProviderError, InvalidTokenError
from ottoway.domain.schemas.auth import IdentityProfile, SessionClaims

logger = logging.getLogger(__name__)

TOKEN_ALGORITHMS = ["RS256"]
CLOCK_SKEW_SECONDS = 5


class ClerkIdentityProvider:
    """Client for the Clerk Backend API."""

    def __init__(
        self,
        secret_key: str,
        api_url: str = "https://api.clerk.com",
        jwt_key: str = "",
        authorized_parties: Iterable[str] = (),
        jwks_cache_seconds: int = 3600,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = api_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {secret_key}",
            "Accept": "application/json",
        }
        self.jwt_key = jwt_key
        self.authorized_parties = set(authorized_parties)
        self.jwks_cache_seconds = jwks_cache_seconds
        self.timeout = timeout
        self.transport = transport
        self._jwks: dict[str, Any] = {}
        self._jwks_fetched_at = 0.0

    async def _get(self, path: str) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.get(path)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise IdentityProviderError(
                f"Clerk API returned {e.response.status_code} for {path}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise IdentityProviderError(f"Clerk API request failed for {path}: {e}") from e

    async def get_user(self, subject_id: str) -> IdentityProfile:
        """Fetch a user's profile from Clerk."""
        data = await self._get(f"/v1/users/{subject_id}")
        try:
            return IdentityProfile.model_validate(data)
        except ValidationError as e:
            raise IdentityProviderError(f"Unexpected user payload for {subject_id}") from e

    async def _get_jwks(self, force_refresh: bool = False) -> dict[str, Any]:
        now = time.monotonic()
        fresh = self._jwks and (now - self._jwks_fetched_at) < self.jwks_cache_seconds
        if fresh and not force_refresh:
            return self._jwks

        self._jwks = await self._get("/v1/jwks")
        self._jwks_fetched_at = now
        logger.debug(f"Fetched {len(self._jwks.get('keys', []))} signing keys from Clerk")
        return self._jwks

    async def _signing_key(self, token: str) -> Any:
        if self.jwt_key:
            return self.jwt_key

        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JWTError as e:
            raise InvalidTokenError("Malformed token header") from e

        # A cache miss on kid usually means the keys were rotated; refetch once
        for force_refresh in (False, True):
            try:
                jwks = await self._get_jwks(force_refresh=force_refresh)
            except IdentityProviderError as e:
                raise InvalidTokenError("Signing keys are unavailable") from e
            for key in jwks.get("keys", []):
                if key.get("kid") == kid:
                    return key

        raise InvalidTokenError(f"No signing key matches kid={kid}")

    async def verify_token(self, token: str) -> SessionClaims:
        """Verify a Clerk session token and return its claims."""
        key = await self._signing_key(token)

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=TOKEN_ALGORITHMS,
                options={"verify_aud": False, "leeway": CLOCK_SKEW_SECONDS},
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        subject = claims.get("sub")
        if not subject:
            raise InvalidTokenError("Token has no subject")

        if self.authorized_parties and claims.get("azp") not in self.authorized_parties:
            raise InvalidTokenError(f"Token was issued for an unknown party: {claims.get('azp')}")

        return SessionClaims(
            subject_id=subject,
            session_id=claims.get("sid"),
            org_id=claims.get("org_id"),
            org_role=claims.get("org_role"),
        )
