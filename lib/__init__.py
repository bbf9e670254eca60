# =============================================================================
# lib/ - External Service Clients
# =============================================================================
# This package wraps the two services the storefront talks to:
# - supabase_client.py: Identity provider (sign in/up, password reset)
# - upstream_client.py: Backend API that owns user accounts
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import IdentityProvider, IdentityProviderError
from lib.upstream_client import UpstreamClient, UpstreamResponse

__all__ = [
    # Identity provider
    "IdentityProvider",
    "IdentityProviderError",
    # Upstream backend
    "UpstreamClient",
    "UpstreamResponse",
]
