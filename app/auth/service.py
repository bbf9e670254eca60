# =============================================================================
# app/auth/service.py - Login / Register Handlers
# =============================================================================
# Two interchangeable implementations of the auth proxy, chosen by AUTH_MODE:
#
# - MockAuthService: validates {email, password} style payloads and fabricates
#   a user (and token for logins). Nothing is stored.
# - UpstreamAuthService: validates {email, firebaseIdToken} style payloads and
#   forwards them to the backend API, relaying its status and body.
#
# Both return (status_code, body) for a success and raise a
# StorefrontAuthException subclass for anything else.
# =============================================================================

import logging
import secrets
import string
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from app.auth.models import (
    AuthResult,
    AuthUser,
    CredentialPayload,
    LoginRequest,
    RegisterRequest,
    TokenLoginRequest,
    TokenRegisterRequest,
)
from app.config import settings
from app.exceptions import (
    PayloadValidationError,
    UpstreamRejectedError,
    format_validation_errors,
)
from lib.upstream_client import (
    LOGIN_PATH,
    SIGNUP_PATH,
    UpstreamClient,
    get_upstream_client,
)

logger = logging.getLogger(__name__)

MOCK_USER_ID = "user_123456789"
MOCK_USER_NAME = "John Doe"
MOCK_TOKEN_PREFIX = "mock_jwt_token_"

_BASE36 = string.digits + string.ascii_lowercase

ServiceResult = tuple[int, dict[str, Any]]


def random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def validate_payload(model: type[CredentialPayload], body: Any) -> CredentialPayload:
    """Validate a decoded JSON body, raising PayloadValidationError on mismatch."""
    if not isinstance(body, dict):
        raise PayloadValidationError([{
            "field": "body",
            "message": "Request body must be a JSON object",
            "code": "dict_type",
        }])
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise PayloadValidationError(
            format_validation_errors(e, model.error_messages)
        ) from e


class AuthService(ABC):
    """Common interface of the two variants."""

    login_model: type[CredentialPayload]
    register_model: type[CredentialPayload]

    @abstractmethod
    async def login(self, body: Any) -> ServiceResult:
        pass

    @abstractmethod
    async def register(self, body: Any) -> ServiceResult:
        pass


class MockAuthService(AuthService):
    """Fabricates auth results without talking to anything."""

    login_model = LoginRequest
    register_model = RegisterRequest

    async def login(self, body: Any) -> ServiceResult:
        request = validate_payload(self.login_model, body)

        result = AuthResult(
            success=True,
            user=AuthUser(id=MOCK_USER_ID, name=MOCK_USER_NAME, email=request.email),
            token=MOCK_TOKEN_PREFIX + random_base36(13),
        )
        logger.info("Mock login succeeded")
        return 200, result.to_response()

    async def register(self, body: Any) -> ServiceResult:
        request = validate_payload(self.register_model, body)

        result = AuthResult(
            success=True,
            user=AuthUser(
                id="user_" + random_base36(7),
                name=request.name,
                email=request.email,
            ),
        )
        logger.info("Mock registration succeeded")
        return 201, result.to_response()


class UpstreamAuthService(AuthService):
    """
    Forwards validated payloads to the backend API.

    2xx answers are relayed verbatim. Anything else becomes a failure
    envelope with the upstream status and message.
    """

    login_model = TokenLoginRequest
    register_model = TokenRegisterRequest

    def __init__(self, client: UpstreamClient):
        self.client = client

    async def _forward(
        self,
        model: type[CredentialPayload],
        body: Any,
        path: str,
        fallback_message: str,
    ) -> ServiceResult:
        request = validate_payload(model, body)
        response = await self.client.post(path, request.upstream_payload())

        if not response.ok:
            logger.warning(f"Upstream rejected {path} with {response.status_code}")
            raise UpstreamRejectedError(
                status_code=response.status_code,
                message=response.message or fallback_message,
            )
        return response.status_code, response.body

    async def login(self, body: Any) -> ServiceResult:
        return await self._forward(
            self.login_model, body, LOGIN_PATH, "Authentication failed"
        )

    async def register(self, body: Any) -> ServiceResult:
        return await self._forward(
            self.register_model, body, SIGNUP_PATH, "Registration failed"
        )


def get_auth_service() -> AuthService:
    """FastAPI dependency: the variant selected by AUTH_MODE."""
    if settings.is_upstream_mode:
        return UpstreamAuthService(get_upstream_client())
    return MockAuthService()
