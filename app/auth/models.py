# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the auth proxy:
# - Credential payloads accepted by POST /api/auth/login and /register
# - The auth result envelope returned to the caller
#
# Two variants exist for each endpoint. The mock variant takes a password,
# the upstream variant takes an ID token issued by the identity provider.
# =============================================================================

from typing import Annotated, Any, ClassVar, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field


def _check_email(value: str) -> str:
    """Reject anything that is not a bare address; the input is kept as typed."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from e
    return value


# Unlike EmailStr, echoes the submitted string instead of the normalized one
# and refuses the "Name <addr>" form.
EmailAddress = Annotated[str, AfterValidator(_check_email)]


# =============================================================================
# Credential Payloads
# =============================================================================

class CredentialPayload(BaseModel):
    """
    Base for all inbound credential bodies.

    `error_messages` maps a field to the text shown when that field fails
    validation. Unknown fields are ignored.
    """
    error_messages: ClassVar[dict[str, str]] = {}

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def upstream_payload(self) -> dict[str, Any]:
        """Fields as the upstream backend expects them (wire names)."""
        return self.model_dump(by_alias=True)


class LoginRequest(CredentialPayload):
    """POST /api/auth/login body (mock variant)."""
    email: EmailAddress
    password: str = Field(..., min_length=1)

    error_messages: ClassVar[dict[str, str]] = {
        "email": "Invalid email address",
        "password": "Password is required",
    }


class TokenLoginRequest(CredentialPayload):
    """POST /api/auth/login body (upstream variant)."""
    email: EmailAddress
    id_token: str = Field(
        ...,
        min_length=1,
        serialization_alias="firebaseIdToken",
        validation_alias=AliasChoices("firebaseIdToken", "idToken", "id_token"),
    )

    error_messages: ClassVar[dict[str, str]] = {
        "email": "Invalid email address",
        "firebaseIdToken": "ID token is required",
    }


class RegisterRequest(CredentialPayload):
    """POST /api/auth/register body (mock variant)."""
    name: str = Field(..., min_length=2)
    email: EmailAddress
    password: str = Field(..., min_length=8)

    error_messages: ClassVar[dict[str, str]] = {
        "name": "Name must be at least 2 characters",
        "email": "Invalid email address",
        "password": "Password must be at least 8 characters",
    }


class TokenRegisterRequest(CredentialPayload):
    """POST /api/auth/register body (upstream variant)."""
    name: str = Field(..., min_length=2)
    username: str = Field(..., min_length=2)
    email: EmailAddress
    id_token: str = Field(
        ...,
        min_length=1,
        serialization_alias="firebaseIdToken",
        validation_alias=AliasChoices("firebaseIdToken", "idToken", "id_token"),
    )

    error_messages: ClassVar[dict[str, str]] = {
        "name": "Name must be at least 2 characters",
        "username": "Username must be at least 2 characters",
        "email": "Invalid email address",
        "firebaseIdToken": "ID token is required",
    }


# =============================================================================
# Auth Result
# =============================================================================

class AuthUser(BaseModel):
    """User object returned to the browser. Never carries a password."""
    id: str
    name: str
    email: str

    model_config = ConfigDict(frozen=True)


class FieldError(BaseModel):
    field: str
    message: str
    code: str


class AuthResult(BaseModel):
    """
    Envelope returned by every auth endpoint.

    Success carries `user` (and `token` for logins); failure carries
    `message` and, for validation failures, `errors`.
    """
    success: bool
    user: Optional[AuthUser] = None
    token: Optional[str] = None
    message: Optional[str] = None
    errors: Optional[list[FieldError]] = None

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
