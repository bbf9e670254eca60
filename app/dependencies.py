# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for the page routes.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated, AsyncIterator

import httpx
from fastapi import Depends, Request

from lib.supabase_client import IdentityProvider, get_identity_provider

# Host name used for in-process calls; never resolved
LOCAL_API_BASE_URL = "http://storefront.internal"


async def get_api_client(request: Request) -> AsyncIterator[httpx.AsyncClient]:
    """
    HTTP client bound to this same application.

    Form controllers submit to /api/auth/* through it, so a page submission
    takes the same path as a browser calling the API. No network involved.
    """
    transport = httpx.ASGITransport(app=request.app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url=LOCAL_API_BASE_URL,
    ) as client:
        yield client


# Type aliases for dependency injection
ApiClientDep = Annotated[httpx.AsyncClient, Depends(get_api_client)]
IdentityDep = Annotated[IdentityProvider, Depends(get_identity_provider)]
