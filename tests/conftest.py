"""Pytest configuration and shared fixtures"""

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from ottoway.main import app
from ottoway.domain.identity import IdentityProviderError, InvalidTokenError
from ottoway.domain.schemas.auth import EmailAddress, EmailVerification, IdentityProfile, SessionClaims
from ottoway.infrastructure.database import Base, build_engine, build_session_factory, get_db
from ottoway.interfaces.deps import get_identity_provider


class FakeIdentityProvider:
    """In-memory stand-in for Clerk."""

    def __init__(self):
        self.tokens: dict[str, SessionClaims] = {}
        self.profiles: dict[str, IdentityProfile] = {}
        self.unreachable = False
        self.lookups = 0

    def add_user(
        self,
        subject_id: str,
        token: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        username: Optional[str] = None,
    ) -> None:
        addresses = []
        if email:
            addresses.append(
                EmailAddress(
                    id=f"idn_{subject_id}",
                    email_address=email,
                    verification=EmailVerification(status="verified"),
                )
            )
        self.tokens[token] = SessionClaims(subject_id=subject_id, session_id=f"sess_{subject_id}")
        self.profiles[subject_id] = IdentityProfile(
            id=subject_id,
            email_addresses=addresses,
            primary_email_address_id=f"idn_{subject_id}" if email else None,
            first_name=first_name,
            last_name=last_name,
            username=username,
        )

    async def verify_token(self, token: str) -> SessionClaims:
        try:
            return self.tokens[token]
        except KeyError:
            raise InvalidTokenError("Unknown token") from None

    async def get_user(self, subject_id: str) -> IdentityProfile:
        self.lookups += 1
        if self.unreachable:
            raise IdentityProviderError("Clerk is unreachable")
        try:
            return self.profiles[subject_id]
        except KeyError:
            raise IdentityProviderError(f"User {subject_id} not found") from None


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a test database engine backed by a throwaway SQLite file"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ottoway_test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def identity() -> FakeIdentityProvider:
    provider = FakeIdentityProvider()
    provider.add_user("user_1", "token-u1", email="Jane@Example.com", first_name="Jane", last_name="Doe")
    provider.add_user("user_2", "token-u2", username="bob")
    return provider


@pytest_asyncio.fixture
async def async_client(session_factory, identity):
    """Async test client with database and identity provider overrides"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def u1_headers() -> dict:
    return {"Authorization": "Bearer token-u1"}


@pytest.fixture
def u2_headers() -> dict:
    return {"Authorization": "Bearer token-u2"}
