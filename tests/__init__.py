# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the storefront auth service:
# - test_models.py: Credential payload and form schema validation
# - test_auth_api.py: /api/auth/* in mock and upstream mode
# - test_upstream_client.py: Upstream relay and transport failures
# - test_identity_provider.py: Supabase wrapper error mapping
# - test_forms.py: Form controller state machine
# - test_pages.py: Server-rendered auth screens end to end
#
# Run tests with: poetry run pytest
# =============================================================================
