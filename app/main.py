# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the storefront auth service.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    StorefrontAuthException,
    storefront_exception_handler,
    unexpected_exception_handler,
    validation_exception_handler,
)
from app.routers import health, pages

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Nothing is pooled or cached across requests; startup only reports the
    active configuration.
    """
    logger.info(f"Starting {settings.SITE_NAME} auth service in {settings.ENVIRONMENT} mode")
    logger.info(f"Auth mode: {settings.AUTH_MODE}")
    if settings.is_upstream_mode:
        logger.info(f"Forwarding credentials to {settings.upstream_base_url}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down auth service")


# Create FastAPI application
app = FastAPI(
    title="Storefront Auth",
    description="""
## Storefront Authentication

Login, signup and password reset screens for the storefront, plus the JSON
endpoints they submit to.

### Auth modes

| Mode | `/api/auth/login` body | `/api/auth/register` body |
|------|------------------------|---------------------------|
| **mock** | `{email, password}` | `{name, email, password}` |
| **upstream** | `{email, firebaseIdToken}` | `{name, username, email, firebaseIdToken}` |

In upstream mode the validated fields are forwarded to
`UPSTREAM_API_URL/auth/login` and `/auth/signup` and the answer is relayed.

### Quick Start

```bash
curl -X POST http://localhost:8000/api/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "a@b.com", "password": "x"}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Credential validation and forwarding",
        },
        {
            "name": "Pages",
            "description": "Server-rendered login, signup and password reset screens",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(StorefrontAuthException)
async def handle_storefront_exception(request: Request, exc: StorefrontAuthException):
    """Handle auth API exceptions."""
    return await storefront_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unexpected_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

# Auth proxy endpoints
app.include_router(
    auth_routes.router,
    prefix="/api",
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Auth screens
app.include_router(
    pages.router,
    tags=["Pages"]
)
