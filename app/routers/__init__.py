# =============================================================================
# app/routers/ - Page and Health Routers
# =============================================================================
# - pages.py: server-rendered auth screens
# - health.py: liveness / readiness checks
#
# The JSON auth endpoints live in app/auth/routes.py.
# =============================================================================
