# =============================================================================
# app/routers/pages.py - Auth Page Endpoints
# =============================================================================
# Server-rendered auth screens. GET renders the form, POST hands the fields
# to the page's form controller and either redirects (303) or re-renders the
# form with the error inline.
#
#   /auth/login                    -> LoginForm
#   /auth/signup                   -> SignupForm
#   /auth/forgot-password          -> ForgotPasswordForm
#   /auth/reset-password-callback  -> ResetPasswordForm (needs ?token_hash=...)
# =============================================================================

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from app.config import settings
from app.dependencies import ApiClientDep, IdentityDep
from app.forms import (
    AuthForm,
    ForgotPasswordForm,
    FormState,
    LoginForm,
    ResetPasswordForm,
    SignupForm,
)

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

TOGGLE_PASSWORD_ACTION = "toggle_password"
INVALID_RESET_LINK_REDIRECT = "/auth/login?reset=invalid"

# Form fields that are echoed back into a re-rendered page. The password is
# only echoed when the show/hide toggle was pressed.
_SAFE_FIELDS = ("email", "name", "username", "remember_me", "agree_to_terms")


# =============================================================================
# Helpers
# =============================================================================

def _truthy(value: Optional[str]) -> bool:
    return (value or "").lower() in ("1", "true", "on", "yes")


def _safe_values(data: dict[str, Any]) -> dict[str, Any]:
    return {key: data[key] for key in _SAFE_FIELDS if key in data}


def _toggle_values(data: dict[str, Any]) -> dict[str, Any]:
    """Values for a show/hide round-trip, the only re-render that keeps the password."""
    values = _safe_values(data)
    if "password" in data:
        values["password"] = data["password"]
    return values


def _initial_state(request: Request) -> FormState:
    return FormState(show_password=_truthy(request.query_params.get("show_password")))


def _render(
    request: Request,
    template: str,
    state: FormState,
    values: Optional[dict[str, Any]] = None,
    **context: Any,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        template,
        {
            "site_name": settings.SITE_NAME,
            "state": state,
            "values": values or {},
            **context,
        },
    )


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def persist_auth_token(response: Response, token: str, remember: bool) -> None:
    """
    Keep the auth token in the browser under AUTH_TOKEN_KEY.

    Without "Remember me" the cookie ends with the browser session.
    """
    response.set_cookie(
        key=settings.AUTH_TOKEN_KEY,
        value=token,
        max_age=settings.remember_me_seconds if remember else None,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


async def _read_form(request: Request) -> dict[str, Any]:
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def _toggle_requested(data: dict[str, Any], form: AuthForm) -> bool:
    """Apply the password-visibility toggle; True if that was the whole request."""
    form.state.show_password = _truthy(data.get("show_password"))
    if data.get("action") == TOGGLE_PASSWORD_ACTION:
        form.state.toggle_password_visibility()
        return True
    return False


# =============================================================================
# Landing
# =============================================================================

@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home(request: Request):
    signed_in = bool(request.cookies.get(settings.AUTH_TOKEN_KEY))
    return _render(request, "home.html", FormState(), signed_in=signed_in)


# =============================================================================
# Login
# =============================================================================

@router.get("/auth/login", response_class=HTMLResponse)
async def login_page(request: Request):
    state = _initial_state(request)
    params = request.query_params

    if params.get("registered") == "true":
        state.success_message = "Registration successful! Please log in with your new account."
    if params.get("reset") == "success":
        state.success_message = "Password reset successful! Please log in with your new password."
    elif params.get("reset") == "invalid":
        state.error = "Invalid password reset link"

    return _render(request, "auth/login.html", state)


@router.post("/auth/login", response_class=HTMLResponse)
async def login_submit(request: Request, api: ApiClientDep, identity: IdentityDep):
    data = await _read_form(request)
    form = LoginForm(api=api, identity=identity)

    if _toggle_requested(data, form):
        return _render(request, "auth/login.html", form.state, _toggle_values(data))

    outcome = await form.submit(data)
    if outcome.redirect_to:
        response = _redirect(outcome.redirect_to)
        if outcome.token:
            persist_auth_token(response, outcome.token, outcome.remember)
        return response

    return _render(request, "auth/login.html", form.state, _safe_values(data))


# =============================================================================
# Signup
# =============================================================================

@router.get("/auth/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    return _render(request, "auth/signup.html", _initial_state(request))


@router.post("/auth/signup", response_class=HTMLResponse)
async def signup_submit(request: Request, api: ApiClientDep, identity: IdentityDep):
    data = await _read_form(request)
    form = SignupForm(api=api, identity=identity)

    if _toggle_requested(data, form):
        return _render(request, "auth/signup.html", form.state, _toggle_values(data))

    outcome = await form.submit(data)
    if outcome.redirect_to:
        return _redirect(outcome.redirect_to)

    return _render(request, "auth/signup.html", form.state, _safe_values(data))


# =============================================================================
# Forgot Password
# =============================================================================

@router.get("/auth/forgot-password", response_class=HTMLResponse)
async def forgot_password_page(request: Request):
    return _render(request, "auth/forgot_password.html", FormState())


@router.post("/auth/forgot-password", response_class=HTMLResponse)
async def forgot_password_submit(request: Request, identity: IdentityDep):
    data = await _read_form(request)
    form = ForgotPasswordForm(identity=identity)
    await form.submit(data)
    return _render(request, "auth/forgot_password.html", form.state, _safe_values(data))


# =============================================================================
# Reset Password Callback
# =============================================================================

@router.get("/auth/reset-password-callback", response_class=HTMLResponse)
async def reset_password_page(request: Request):
    code = ResetPasswordForm.code_from_query(request.query_params)
    if code is None:
        logger.info("Reset link opened without a one-time code")
        return _redirect(INVALID_RESET_LINK_REDIRECT)

    return _render(request, "auth/reset_password.html", FormState(), code=code)


@router.post("/auth/reset-password-callback", response_class=HTMLResponse)
async def reset_password_submit(request: Request, identity: IdentityDep):
    data = await _read_form(request)
    code = ResetPasswordForm.code_from_query(data) or ResetPasswordForm.code_from_query(
        request.query_params
    )
    if code is None:
        return _redirect(INVALID_RESET_LINK_REDIRECT)

    form = ResetPasswordForm(code=code, identity=identity)
    outcome = await form.submit(data)
    if outcome.redirect_to:
        return _redirect(outcome.redirect_to)

    return _render(request, "auth/reset_password.html", form.state, code=code)
