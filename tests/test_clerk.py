"""Tests for the Clerk Backend API client"""

import base64
import time

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt

from ottoway.domain.identity import IdentityProviderError, InvalidTokenError
from ottoway.infrastructure.clerk import ClerkIdentityProvider

KID = "ins_test_key"


def _b64(number: int) -> str:
    raw = number.to_bytes((number.bit_length() + 7) // 8, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


@pytest.fixture(scope="module")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def private_pem(rsa_key) -> str:
    return rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="module")
def public_pem(rsa_key) -> str:
    return rsa_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


@pytest.fixture(scope="module")
def jwks(rsa_key) -> dict:
    numbers = rsa_key.public_key().public_numbers()
    return {
        "keys": [
            {"kty": "RSA", "kid": KID, "use": "sig", "alg": "RS256", "n": _b64(numbers.n), "e": _b64(numbers.e)}
        ]
    }


def _token(private_pem: str, kid: str = KID, **overrides) -> str:
    now = int(time.time())
    claims = {
        "sub": "user_2abc",
        "sid": "sess_123",
        "azp": "http://localhost:3000",
        "iat": now,
        "nbf": now,
        "exp": now + 60,
    }
    claims.update(overrides)
    claims = {k: v for k, v in claims.items() if v is not None}
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": kid})


class ClerkStub:
    """Records requests and serves canned Clerk responses."""

    def __init__(self, jwks: dict):
        self.jwks = jwks
        self.requests: list[httpx.Request] = []
        self.users: dict[str, dict] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v1/jwks":
            return httpx.Response(200, json=self.jwks)
        if request.url.path.startswith("/v1/users/"):
            user_id = request.url.path.rsplit("/", 1)[-1]
            if user_id in self.users:
                return httpx.Response(200, json=self.users[user_id])
            return httpx.Response(404, json={"errors": [{"code": "resource_not_found"}]})
        return httpx.Response(500)

    def jwks_fetches(self) -> int:
        return sum(1 for r in self.requests if r.url.path == "/v1/jwks")


@pytest.fixture
def stub(jwks) -> ClerkStub:
    return ClerkStub(jwks)


def _provider(stub, **kwargs) -> ClerkIdentityProvider:
    return ClerkIdentityProvider(
        secret_key="sk_test_123",
        api_url="https://clerk.test",
        transport=httpx.MockTransport(stub),
        **kwargs,
    )


@pytest.mark.asyncio
class TestVerifyToken:

    async def test_valid_token_via_jwks(self, stub, private_pem):
        provider = _provider(stub)

        claims = await provider.verify_token(_token(private_pem, org_id="org_1", org_role="admin"))

        assert claims.subject_id == "user_2abc"
        assert claims.session_id == "sess_123"
        assert claims.org_id == "org_1"
        assert claims.org_role == "admin"
        assert stub.requests[0].headers["Authorization"] == "Bearer sk_test_123"

    async def test_jwks_is_cached(self, stub, private_pem):
        provider = _provider(stub)

        await provider.verify_token(_token(private_pem))
        await provider.verify_token(_token(private_pem))

        assert stub.jwks_fetches() == 1

    async def test_unknown_kid_refetches_once(self, stub, private_pem):
        provider = _provider(stub)

        with pytest.raises(InvalidTokenError):
            await provider.verify_token(_token(private_pem, kid="rotated"))

        assert stub.jwks_fetches() == 2

    async def test_pem_key_skips_jwks(self, stub, private_pem, public_pem):
        provider = _provider(stub, jwt_key=public_pem)

        claims = await provider.verify_token(_token(private_pem))

        assert claims.subject_id == "user_2abc"
        assert stub.requests == []

    async def test_expired_token(self, stub, private_pem):
        provider = _provider(stub)
        past = int(time.time()) - 3600

        with pytest.raises(InvalidTokenError):
            await provider.verify_token(_token(private_pem, iat=past, nbf=past, exp=past + 60))

    async def test_token_without_subject(self, stub, private_pem):
        provider = _provider(stub)

        with pytest.raises(InvalidTokenError):
            await provider.verify_token(_token(private_pem, sub=None))

    async def test_unauthorized_party(self, stub, private_pem):
        provider = _provider(stub, authorized_parties=["https://app.ottoway.com"])

        with pytest.raises(InvalidTokenError):
            await provider.verify_token(_token(private_pem, azp="https://evil.example"))

    async def test_garbage_token(self, stub):
        with pytest.raises(InvalidTokenError):
            await _provider(stub).verify_token("not.a.jwt")

    async def test_token_signed_by_other_key(self, stub, public_pem):
        other = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        other_pem = other.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ).decode()

        with pytest.raises(InvalidTokenError):
            await _provider(stub, jwt_key=public_pem).verify_token(_token(other_pem))


@pytest.mark.asyncio
class TestGetUser:

    async def test_profile_is_parsed(self, stub):
        stub.users["user_2abc"] = {
            "id": "user_2abc",
            "object": "user",
            "first_name": "Jane",
            "last_name": "Doe",
            "username": None,
            "primary_email_address_id": "idn_1",
            "email_addresses": [
                {
                    "id": "idn_1",
                    "object": "email_address",
                    "email_address": "jane@example.com",
                    "verification": {"status": "verified", "strategy": "email_code"},
                }
            ],
        }

        profile = await _provider(stub).get_user("user_2abc")

        assert profile.first_name == "Jane"
        assert profile.primary_email_address_id == "idn_1"
        assert profile.email_addresses[0].is_verified

    async def test_unknown_user(self, stub):
        with pytest.raises(IdentityProviderError):
            await _provider(stub).get_user("user_missing")

    async def test_network_failure(self):
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = ClerkIdentityProvider(
            secret_key="sk_test_123",
            api_url="https://clerk.test",
            transport=httpx.MockTransport(unreachable),
        )

        with pytest.raises(IdentityProviderError):
            await provider.get_user("user_2abc")

    async def test_malformed_payload(self, stub):
        stub.users["user_bad"] = {"email_addresses": "nope"}

        with pytest.raises(IdentityProviderError):
            await _provider(stub).get_user("user_bad")
