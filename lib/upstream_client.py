# =============================================================================
# lib/upstream_client.py - Upstream Backend Client
# =============================================================================
# Thin async wrapper around the backend API that owns user accounts.
# The proxy handlers only ever need one call shape: POST a JSON body to a
# fixed path and get back the status code and JSON body.
#
# Usage:
#   from lib.upstream_client import UpstreamClient
#   client = UpstreamClient(settings.upstream_base_url)
#   response = await client.post("/auth/login", {"email": ..., "firebaseIdToken": ...})
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.config import settings
from app.exceptions import UpstreamConnectionError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"
SIGNUP_PATH = "/auth/signup"


@dataclass(frozen=True)
class UpstreamResponse:
    """Status code and decoded JSON body of an upstream answer."""
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def message(self) -> str | None:
        value = self.body.get("message")
        return value if isinstance(value, str) and value else None


class UpstreamClient:
    """
    POSTs JSON to `<base_url><path>` and relays what comes back.

    No retries. Transport failures and timeouts are raised as
    UpstreamConnectionError; any HTTP status is returned as-is.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def post(self, path: str, payload: dict[str, Any]) -> UpstreamResponse:
        """
        Send one POST request upstream.

        Args:
            path: Fixed path under the base URL, e.g. "/auth/login"
            payload: JSON body

        Returns:
            UpstreamResponse with the status code and decoded body.
            A non-JSON body is wrapped as {"message": <text>}.

        Raises:
            UpstreamConnectionError: If the request never got an answer
        """
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(url, json=payload)
        except httpx.RequestError as e:
            logger.warning(f"Upstream request to {url} failed: {e!r}")
            raise UpstreamConnectionError(url=url, error=str(e)) from e

        logger.debug(f"Upstream {url} answered {response.status_code}")
        return UpstreamResponse(
            status_code=response.status_code,
            body=_decode_body(response),
        )


def _decode_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return {"message": text} if text else {}

    if isinstance(body, dict):
        return body
    return {"data": body}


def get_upstream_client() -> UpstreamClient:
    """Build a client from the current settings."""
    return UpstreamClient(
        settings.upstream_base_url,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
    )
