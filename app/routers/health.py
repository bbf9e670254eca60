# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

import httpx
from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import IdentityDep
from lib.supabase_client import IdentityProviderError

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    auth_mode: str
    version: str


class ChecksResponse(BaseModel):
    """Individual dependency checks."""
    identity_provider: str
    upstream: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        auth_mode=settings.AUTH_MODE,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(identity: IdentityDep):
    """
    Readiness check endpoint.

    Identity provider: the SDK accepts the configured URL and key.
    Upstream: only checked in upstream mode; any HTTP answer counts as
    reachable.
    """
    checks = ChecksResponse(identity_provider="unknown", upstream="unknown")

    try:
        identity.check()
        checks.identity_provider = "healthy"
    except IdentityProviderError as e:
        checks.identity_provider = f"unhealthy: {e.message[:50]}"

    if not settings.is_upstream_mode:
        checks.upstream = "not used"
    else:
        try:
            async with httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT_SECONDS) as client:
                await client.get(settings.upstream_base_url)
            checks.upstream = "healthy"
        except httpx.HTTPError as e:
            checks.upstream = f"unhealthy: {str(e)[:50]}"

    all_healthy = (
        checks.identity_provider == "healthy"
        and checks.upstream in ("healthy", "not used")
    )

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
