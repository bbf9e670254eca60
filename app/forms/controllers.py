# =============================================================================
# app/forms/controllers.py - Auth Form Controllers
# =============================================================================
# One controller per auth page. A controller:
# 1. Validates the submitted fields against its form schema
# 2. Makes exactly one outbound call (local API or identity provider)
# 3. Updates its FormState and returns a FormOutcome for the page to act on
#
# Controllers never retry. A failed submission leaves the form in `error`
# with the message to show, ready to be submitted again.
# =============================================================================

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from app.config import settings
from app.exceptions import format_validation_errors
from app.forms.schemas import (
    ForgotPasswordFormValues,
    FormValues,
    LoginFormValues,
    ResetPasswordFormValues,
    SignupFormValues,
)
from app.forms.state import FormState
from lib.supabase_client import IdentityProvider, IdentityProviderError

logger = logging.getLogger(__name__)

LOGIN_ENDPOINT = "/api/auth/login"
REGISTER_ENDPOINT = "/api/auth/register"

# token_hash comes from the recovery email template (see README); oobCode is
# the older link format.
RESET_CODE_PARAMS = ("token_hash", "oobCode")


@dataclass
class FormOutcome:
    """What the page should do after a submission."""
    redirect_to: Optional[str] = None
    token: Optional[str] = None
    remember: bool = False


class FormSubmissionError(Exception):
    """A submission failed with a message fit for the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _response_data(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class AuthForm(ABC):
    """
    Shared submit plumbing.

    Subclasses set `values_model`, `failure_message` and implement
    `_perform(values)`, which raises FormSubmissionError or
    IdentityProviderError on failure.
    """

    values_model: type[FormValues]
    failure_message: str = "Something went wrong. Please try again."

    def __init__(
        self,
        api: Optional[httpx.AsyncClient] = None,
        identity: Optional[IdentityProvider] = None,
        state: Optional[FormState] = None,
        upstream: Optional[bool] = None,
    ):
        self.api = api
        self.identity = identity
        self.state = state or FormState()
        self.upstream = settings.is_upstream_mode if upstream is None else upstream

    def validate(self, data: Mapping[str, Any]) -> Optional[FormValues]:
        """Schema check. On failure records the errors and returns None."""
        try:
            return self.values_model.model_validate(dict(data))
        except ValidationError as e:
            errors = format_validation_errors(e, self.values_model.error_messages)
            field_errors = {
                err["field"]: err["message"] for err in errors if err["field"] != "body"
            }
            form_errors = [err["message"] for err in errors if err["field"] == "body"]
            self.state.fail(form_errors[0] if form_errors else None, field_errors)
            return None

    async def submit(self, data: Mapping[str, Any]) -> FormOutcome:
        if self.state.is_loading:
            return FormOutcome()

        values = self.validate(data)
        if values is None:
            return FormOutcome()

        self.state.start_submit()
        try:
            return await self._perform(values)
        except (FormSubmissionError, IdentityProviderError) as e:
            logger.warning(f"{type(self).__name__} submission failed: {e.message}")
            self.state.fail(e.message or self.failure_message)
        except httpx.HTTPError as e:
            logger.error(f"{type(self).__name__} request failed: {e!r}")
            self.state.fail(self.failure_message)
        return FormOutcome()

    @abstractmethod
    async def _perform(self, values: FormValues) -> FormOutcome:
        pass

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST to the local API; non-2xx raises with the API's message."""
        response = await self.api.post(path, json=payload)
        data = _response_data(response)
        if not response.is_success:
            raise FormSubmissionError(data.get("message") or self.failure_message)
        return data

    async def _identity(self, method: str, *args: Any) -> Any:
        # The identity SDK is blocking
        return await run_in_threadpool(getattr(self.identity, method), *args)


class LoginForm(AuthForm):
    values_model = LoginFormValues
    failure_message = "Authentication failed"

    async def _perform(self, values: LoginFormValues) -> FormOutcome:
        if self.upstream:
            id_token = await self._identity("sign_in", values.email, values.password)
            payload = {"email": values.email, "firebaseIdToken": id_token}
        else:
            payload = {
                "email": values.email,
                "password": values.password,
                "rememberMe": values.remember_me,
            }

        data = await self._post(LOGIN_ENDPOINT, payload)
        token = data.get("token")
        if not isinstance(token, str):
            token = None

        self.state.succeed()
        return FormOutcome(redirect_to="/", token=token, remember=values.remember_me)


class SignupForm(AuthForm):
    values_model = SignupFormValues
    failure_message = "Registration failed"

    async def _perform(self, values: SignupFormValues) -> FormOutcome:
        payload: dict[str, Any] = {
            "name": values.name,
            "username": values.username,
            "email": values.email,
        }
        if self.upstream:
            id_token = await self._identity(
                "sign_up",
                values.email,
                values.password,
                {"name": values.name, "username": values.username},
            )
            if not id_token:
                raise FormSubmissionError(
                    "Check your inbox to confirm your email address, then sign in."
                )
            payload["firebaseIdToken"] = id_token
        else:
            payload["password"] = values.password

        await self._post(REGISTER_ENDPOINT, payload)

        self.state.succeed()
        return FormOutcome(redirect_to="/auth/login?registered=true")


class ForgotPasswordForm(AuthForm):
    values_model = ForgotPasswordFormValues
    failure_message = "Failed to send password reset email. Please try again."

    async def _perform(self, values: ForgotPasswordFormValues) -> FormOutcome:
        await self._identity(
            "send_password_reset_email",
            values.email,
            settings.PASSWORD_RESET_REDIRECT_URL,
        )
        self.state.succeed("Password reset email sent! Please check your inbox.")
        return FormOutcome()


class ResetPasswordForm(AuthForm):
    """
    Sets a new password using the one-time code from the reset link.

    Without a code the page must redirect away instead of rendering.
    """
    values_model = ResetPasswordFormValues
    failure_message = "Failed to reset password. Please try again."

    def __init__(self, code: Optional[str] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.code = code or None

    @staticmethod
    def code_from_query(params: Mapping[str, str]) -> Optional[str]:
        for name in RESET_CODE_PARAMS:
            value = params.get(name)
            if value:
                return value
        return None

    @property
    def has_code(self) -> bool:
        return self.code is not None

    async def _perform(self, values: ResetPasswordFormValues) -> FormOutcome:
        if not self.has_code:
            raise FormSubmissionError("Invalid password reset code")

        await self._identity("confirm_password_reset", self.code, values.password)
        self.state.succeed(
            "Password reset successful! Please log in with your new password."
        )
        return FormOutcome(redirect_to="/auth/login?reset=success")
