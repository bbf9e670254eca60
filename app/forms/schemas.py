# =============================================================================
# app/forms/schemas.py - Form Value Schemas
# =============================================================================
# What each auth page collects before anything is sent anywhere.
# Field names match the HTML input names.
# =============================================================================

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from app.auth.models import EmailAddress

MIN_RESET_PASSWORD_LENGTH = 6


class FormValues(BaseModel):
    """Base for form schemas. `error_messages` maps field -> inline text."""
    error_messages: ClassVar[dict[str, str]] = {}

    model_config = ConfigDict(extra="ignore")


class LoginFormValues(FormValues):
    email: EmailAddress
    password: str = Field(..., min_length=1)
    remember_me: bool = False

    error_messages: ClassVar[dict[str, str]] = {
        "email": "Invalid email address",
        "password": "Password is required",
    }


class SignupFormValues(FormValues):
    name: str = Field(..., min_length=2)
    username: str = Field(..., min_length=2)
    email: EmailAddress
    password: str = Field(..., min_length=8)
    agree_to_terms: bool = Field(default=False, validate_default=True)

    error_messages: ClassVar[dict[str, str]] = {
        "name": "Name must be at least 2 characters",
        "username": "Username must be at least 2 characters",
        "email": "Invalid email address",
        "password": "Password must be at least 8 characters",
        "agree_to_terms": "You must agree to the Privacy Policy and Terms of Use",
    }

    @field_validator("agree_to_terms")
    @classmethod
    def must_agree(cls, value: bool) -> bool:
        if value is not True:
            raise PydanticCustomError("terms_not_accepted", "Terms not accepted")
        return value


class ForgotPasswordFormValues(FormValues):
    email: EmailAddress

    error_messages: ClassVar[dict[str, str]] = {
        "email": "Invalid email address",
    }


class ResetPasswordFormValues(FormValues):
    """
    New password plus its confirmation.

    Both checks are form-level: a mismatch is reported before length.
    """
    password: str = ""
    confirm_password: str = ""

    @model_validator(mode="after")
    def check_passwords(self) -> "ResetPasswordFormValues":
        if self.password != self.confirm_password:
            raise PydanticCustomError("password_mismatch", "Passwords do not match")
        if len(self.password) < MIN_RESET_PASSWORD_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min_length} characters",
                {"min_length": MIN_RESET_PASSWORD_LENGTH},
            )
        return self
