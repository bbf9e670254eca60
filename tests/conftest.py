# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Pins the auth mode per test and clears dependency overrides afterwards
# - Fakes the upstream backend with httpx.MockTransport
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import json
from unittest.mock import MagicMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.auth.service import UpstreamAuthService, get_auth_service
from app.config import settings
from app.main import app
from lib.supabase_client import IdentityProvider, get_identity_provider
from lib.upstream_client import UpstreamClient

UPSTREAM_BASE_URL = "http://upstream.test/api"


class UpstreamRecorder:
    """
    Fake upstream backend.

    `respond` decides the answer (or raises a transport error);
    every request seen is kept in `requests`.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.respond = lambda request: httpx.Response(
            200, json={"user": {"id": "u1", "name": "Ada", "email": "a@b.com"}, "token": "upstream-token"}
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self) -> UpstreamClient:
        return UpstreamClient(
            UPSTREAM_BASE_URL,
            timeout=1.0,
            transport=httpx.MockTransport(self.handler),
        )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def mock_mode(monkeypatch):
    """Every test starts in mock mode with no dependency overrides."""
    monkeypatch.setattr(settings, "AUTH_MODE", "mock")
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def upstream(monkeypatch):
    """Switch to upstream mode and route forwarding to a fake backend."""
    monkeypatch.setattr(settings, "AUTH_MODE", "upstream")
    recorder = UpstreamRecorder()
    app.dependency_overrides[get_auth_service] = lambda: UpstreamAuthService(recorder.client())
    return recorder


@pytest.fixture
def identity():
    """Stand-in for the Supabase identity provider, wired into the app."""
    fake = MagicMock(spec=IdentityProvider)
    fake.sign_in.return_value = "id-token-123"
    fake.sign_up.return_value = "id-token-456"
    fake.send_password_reset_email.return_value = None
    fake.confirm_password_reset.return_value = None
    app.dependency_overrides[get_identity_provider] = lambda: fake
    return fake


@pytest_asyncio.fixture
async def client():
    """HTTP client talking to the app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as http_client:
        yield http_client


@pytest.fixture
def login_payload():
    return {"email": "a@b.com", "password": "x"}


@pytest.fixture
def register_payload():
    return {"name": "Ada Lovelace", "email": "ada@example.com", "password": "analytical"}
