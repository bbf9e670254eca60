# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# JSON endpoints the auth forms submit to:
#   POST /api/auth/login     -> 200 on success
#   POST /api/auth/register  -> 201 on success
#
# Validation failures answer 400. Anything unexpected answers 401 for login
# and 500 for register, always as the JSON failure envelope.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.auth.models import AuthResult
from app.auth.service import AuthService, get_auth_service
from app.exceptions import (
    AuthenticationFailedError,
    RegistrationFailedError,
    StorefrontAuthException,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

_FAILURE_RESPONSES = {
    400: {"model": AuthResult, "description": "Payload failed validation"},
    401: {"model": AuthResult, "description": "Authentication failed"},
    500: {"model": AuthResult, "description": "Upstream unreachable or unexpected failure"},
}


@router.post("/login", response_model=AuthResult, responses=_FAILURE_RESPONSES)
async def login(
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """
    Validate login credentials and return the auth result.

    Mock mode expects {email, password}; upstream mode expects
    {email, firebaseIdToken} and relays the backend's answer.
    """
    try:
        body = await request.json()
        status_code, content = await service.login(body)
    except StorefrontAuthException:
        raise
    except Exception as e:
        logger.exception(f"Login error: {e}")
        raise AuthenticationFailedError() from e

    return JSONResponse(status_code=status_code, content=content)


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResult,
    responses=_FAILURE_RESPONSES,
)
async def register(
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """
    Validate registration details and return the created user.

    Mock mode expects {name, email, password}; upstream mode expects
    {name, username, email, firebaseIdToken}.
    """
    try:
        body = await request.json()
        status_code, content = await service.register(body)
    except StorefrontAuthException:
        raise
    except Exception as e:
        logger.exception(f"Registration error: {e}")
        raise RegistrationFailedError() from e

    return JSONResponse(status_code=status_code, content=content)
