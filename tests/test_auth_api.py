# =============================================================================
# tests/test_auth_api.py - Auth Proxy Endpoint Tests
# =============================================================================
# POST /api/auth/login and /api/auth/register in both auth modes.
# The upstream backend is faked with httpx.MockTransport (see conftest.py).
# =============================================================================

import re

import httpx
import pytest

from app.auth.service import (
    AuthService,
    MockAuthService,
    UpstreamAuthService,
    get_auth_service,
)
from app.config import settings
from app.main import app

TOKEN_PATTERN = re.compile(r"^mock_jwt_token_[0-9a-z]{13}$")
USER_ID_PATTERN = re.compile(r"^user_[0-9a-z]{7}$")


# =============================================================================
# Mode Selection
# =============================================================================

class TestServiceSelection:

    def test_mock_mode(self):
        assert isinstance(get_auth_service(), MockAuthService)

    def test_upstream_mode(self, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_MODE", "upstream")
        assert isinstance(get_auth_service(), UpstreamAuthService)

    def test_base_service_is_abstract(self):
        with pytest.raises(TypeError):
            AuthService()


# =============================================================================
# Mock Login
# =============================================================================

class TestMockLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, client, login_payload):
        response = await client.post("/api/auth/login", json=login_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"] == {"id": "user_123456789", "name": "John Doe", "email": "a@b.com"}
        assert TOKEN_PATTERN.match(data["token"])

    @pytest.mark.asyncio
    async def test_tokens_differ_between_logins(self, client, login_payload):
        first = await client.post("/api/auth/login", json=login_payload)
        second = await client.post("/api/auth/login", json=login_payload)

        assert first.json()["token"] != second.json()["token"]

    @pytest.mark.asyncio
    async def test_email_echoed_as_submitted(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "Ada@Example.COM", "password": "x"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "Ada@Example.COM"

    @pytest.mark.asyncio
    async def test_display_name_form_rejected(self, client):
        response = await client.post(
            "/api/auth/login",
            json={"email": "Ada Lovelace <ada@example.com>", "password": "x"},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "email"

    @pytest.mark.asyncio
    async def test_invalid_email(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "not-an-email", "password": "x"}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert any(err["field"] == "email" for err in data["errors"])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["email", "password"])
    async def test_missing_field(self, client, login_payload, missing):
        del login_payload[missing]

        response = await client.post("/api/auth/login", json=login_payload)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors
        assert errors[0]["field"] == missing

    @pytest.mark.asyncio
    async def test_non_object_body(self, client):
        response = await client.post("/api/auth/login", json=["a@b.com", "x"])

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body"

    @pytest.mark.asyncio
    async def test_malformed_json_is_auth_failure(self, client):
        response = await client.post(
            "/api/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication failed"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_auth_failure(self, client, login_payload):
        class BrokenService(MockAuthService):
            async def login(self, body):
                raise RuntimeError("boom")

        app.dependency_overrides[get_auth_service] = BrokenService

        response = await client.post("/api/auth/login", json=login_payload)

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Authentication failed",
            "code": "AUTHENTICATION_FAILED",
        }


# =============================================================================
# Mock Register
# =============================================================================

class TestMockRegister:

    @pytest.mark.asyncio
    async def test_register_success(self, client, register_payload):
        response = await client.post("/api/auth/register", json=register_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["user"]["name"] == "Ada Lovelace"
        assert data["user"]["email"] == "ada@example.com"
        assert USER_ID_PATTERN.match(data["user"]["id"])
        assert "password" not in data["user"]
        assert "token" not in data

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "email", "password"])
    async def test_missing_field(self, client, register_payload, missing):
        del register_payload[missing]

        response = await client.post("/api/auth/register", json=register_payload)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors
        assert errors[0]["field"] == missing

    @pytest.mark.asyncio
    async def test_email_echoed_as_submitted(self, client, register_payload):
        register_payload["email"] = "Ada@Example.COM"

        response = await client.post("/api/auth/register", json=register_payload)

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "Ada@Example.COM"

    @pytest.mark.asyncio
    async def test_short_password(self, client, register_payload):
        register_payload["password"] = "short"

        response = await client.post("/api/auth/register", json=register_payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Password must be at least 8 characters"

    @pytest.mark.asyncio
    async def test_malformed_json_is_server_failure(self, client):
        response = await client.post(
            "/api/auth/register",
            content=b"nope",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Registration failed"


# =============================================================================
# Upstream Login
# =============================================================================

class TestUpstreamLogin:

    @pytest.mark.asyncio
    async def test_forwards_and_relays(self, client, upstream):
        response = await client.post(
            "/api/auth/login", json={"email": "a@b.com", "firebaseIdToken": "tok"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "user": {"id": "u1", "name": "Ada", "email": "a@b.com"},
            "token": "upstream-token",
        }
        sent = upstream.requests[-1]
        assert sent.method == "POST"
        assert str(sent.url) == "http://upstream.test/api/auth/login"
        assert upstream.last_json == {"email": "a@b.com", "firebaseIdToken": "tok"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["email", "firebaseIdToken"])
    async def test_missing_field(self, client, upstream, missing):
        payload = {"email": "a@b.com", "firebaseIdToken": "tok"}
        del payload[missing]

        response = await client.post("/api/auth/login", json=payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == missing
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_password_payload_rejected(self, client, upstream):
        response = await client.post(
            "/api/auth/login", json={"email": "a@b.com", "password": "x"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "firebaseIdToken"
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_upstream_rejection_relayed(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(
            403, json={"message": "Account disabled"}
        )

        response = await client.post(
            "/api/auth/login", json={"email": "a@b.com", "firebaseIdToken": "tok"}
        )

        assert response.status_code == 403
        assert response.json()["success"] is False
        assert response.json()["message"] == "Account disabled"

    @pytest.mark.asyncio
    async def test_upstream_rejection_without_message(self, client, upstream):
        upstream.respond = lambda request: httpx.Response(401, json={})

        response = await client.post(
            "/api/auth/login", json={"email": "a@b.com", "firebaseIdToken": "tok"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication failed"

    @pytest.mark.asyncio
    async def test_timeout_is_connection_failure(self, client, upstream):
        def timeout(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        upstream.respond = timeout

        response = await client.post(
            "/api/auth/login", json={"email": "a@b.com", "firebaseIdToken": "tok"}
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to connect to authentication server"


# =============================================================================
# Upstream Register
# =============================================================================

class TestUpstreamRegister:

    @pytest.fixture
    def token_register_payload(self):
        return {
            "name": "Ada Lovelace",
            "username": "ada",
            "email": "ada@example.com",
            "firebaseIdToken": "tok",
        }

    @pytest.mark.asyncio
    async def test_forwards_to_signup(self, client, upstream, token_register_payload):
        upstream.respond = lambda request: httpx.Response(
            201, json={"user": {"id": "u2", "name": "Ada Lovelace", "email": "ada@example.com"}}
        )

        response = await client.post("/api/auth/register", json=token_register_payload)

        assert response.status_code == 201
        assert response.json()["user"]["id"] == "u2"
        assert str(upstream.requests[-1].url) == "http://upstream.test/api/auth/signup"
        assert upstream.last_json == token_register_payload

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "email", "firebaseIdToken"])
    async def test_missing_field(self, client, upstream, token_register_payload, missing):
        del token_register_payload[missing]

        response = await client.post("/api/auth/register", json=token_register_payload)

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert errors
        assert errors[0]["field"] == missing
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_requires_username(self, client, upstream, token_register_payload):
        del token_register_payload["username"]

        response = await client.post("/api/auth/register", json=token_register_payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "username"

    @pytest.mark.asyncio
    async def test_conflict_relayed(self, client, upstream, token_register_payload):
        upstream.respond = lambda request: httpx.Response(
            409, json={"message": "Email already registered"}
        )

        response = await client.post("/api/auth/register", json=token_register_payload)

        assert response.status_code == 409
        assert response.json()["message"] == "Email already registered"

    @pytest.mark.asyncio
    async def test_connection_refused(self, client, upstream, token_register_payload):
        def refused(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream.respond = refused

        response = await client.post("/api/auth/register", json=token_register_payload)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to connect to authentication server"
