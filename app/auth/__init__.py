# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# The auth proxy: credential payload models, the mock and upstream
# implementations, and the /api/auth routes.
#
# Usage:
#   from app.auth import get_auth_service, AuthService
# =============================================================================

from app.auth.models import AuthResult, AuthUser
from app.auth.service import (
    AuthService,
    MockAuthService,
    UpstreamAuthService,
    get_auth_service,
)

__all__ = [
    "AuthResult",
    "AuthUser",
    "AuthService",
    "MockAuthService",
    "UpstreamAuthService",
    "get_auth_service",
]
