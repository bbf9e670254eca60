# =============================================================================
# lib/supabase_client.py - Identity Provider Client
# =============================================================================
# Wraps Supabase Auth, the identity provider behind the storefront:
# - sign_in / sign_up: verify credentials and obtain an ID token
# - send_password_reset_email: dispatch the reset link
# - confirm_password_reset: redeem the one-time code and set a new password
#
# Token formats and provider error codes are opaque here. Any SDK failure
# surfaces as IdentityProviderError carrying the provider's message.
#
# Usage:
#   from lib.supabase_client import IdentityProvider
#   token = IdentityProvider().sign_in("a@b.com", "secret")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """
    Error raised by the identity provider.

    `message` is safe to show to the user.
    """

    def __init__(
        self,
        message: str,
        code: str = "IDENTITY_PROVIDER_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


def _provider_message(error: Exception) -> str:
    message = getattr(error, "message", None) or str(error)
    return message.strip() or error.__class__.__name__


class IdentityProvider:
    """
    Supabase Auth operations used by the auth forms.

    Each call builds its own client. Sign-in and reset confirmation store a
    session on the client, so a shared instance would leak one user's
    session into another request.
    """

    def __init__(self, url: str | None = None, key: str | None = None):
        self.url = url or settings.SUPABASE_URL
        self.key = key or settings.SUPABASE_ANON_KEY

    def _client(self) -> Client:
        try:
            return create_client(self.url, self.key)
        except Exception as e:
            raise IdentityProviderError(
                message=f"Failed to create identity provider client: {e}",
                code="CLIENT_INIT_FAILED",
            ) from e

    def check(self) -> None:
        """
        Build a client without calling the provider.

        Raises:
            IdentityProviderError: If the URL or key is rejected by the SDK
        """
        self._client()

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> str:
        """
        Verify email/password and return the ID (access) token.

        Raises:
            IdentityProviderError: If the credentials are rejected
        """
        client = self._client()
        try:
            response = client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            logger.warning(f"Identity provider sign-in failed: {_provider_message(e)}")
            raise IdentityProviderError(
                message=_provider_message(e),
                code="SIGN_IN_FAILED",
            ) from e

        session = getattr(response, "session", None)
        if session is None or not session.access_token:
            raise IdentityProviderError(
                message="Invalid email or password",
                code="SIGN_IN_FAILED",
            )
        return session.access_token

    def sign_up(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> str | None:
        """
        Create the identity account.

        Returns:
            The ID token, or None when the provider withholds the session
            until the email address is confirmed.

        Raises:
            IdentityProviderError: If the account cannot be created
        """
        client = self._client()
        try:
            response = client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata or {}},
            })
        except Exception as e:
            logger.warning(f"Identity provider sign-up failed: {_provider_message(e)}")
            raise IdentityProviderError(
                message=_provider_message(e),
                code="SIGN_UP_FAILED",
            ) from e

        session = getattr(response, "session", None)
        return session.access_token if session is not None else None

    # -------------------------------------------------------------------------
    # Password Reset
    # -------------------------------------------------------------------------

    def send_password_reset_email(self, email: str, redirect_to: str) -> None:
        """
        Ask the provider to email a reset link that lands on `redirect_to`.

        Raises:
            IdentityProviderError: If the provider refuses
        """
        client = self._client()
        try:
            client.auth.reset_password_for_email(email, {"redirect_to": redirect_to})
        except Exception as e:
            logger.warning(f"Password reset email failed: {_provider_message(e)}")
            raise IdentityProviderError(
                message=_provider_message(e),
                code="RESET_EMAIL_FAILED",
            ) from e

        logger.info("Password reset email dispatched")

    def confirm_password_reset(self, code: str, new_password: str) -> None:
        """
        Redeem the token_hash from the reset link and set the new password.

        Raises:
            IdentityProviderError: If the code is invalid/expired or the
                password is rejected
        """
        client = self._client()
        try:
            client.auth.verify_otp({"token_hash": code, "type": "recovery"})
            client.auth.update_user({"password": new_password})
        except Exception as e:
            logger.warning(f"Password reset confirmation failed: {_provider_message(e)}")
            raise IdentityProviderError(
                message=_provider_message(e),
                code="RESET_CONFIRM_FAILED",
            ) from e

        logger.info("Password reset confirmed")


def get_identity_provider() -> IdentityProvider:
    return IdentityProvider()
