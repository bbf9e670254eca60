# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - auth/: JSON auth proxy (login, register)
# - forms/: Auth form controllers behind the HTML pages
# - routers/: Page and health endpoints
#
# Calls to the identity provider and the upstream backend go through lib/.
# =============================================================================
