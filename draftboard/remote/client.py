"""
HTTP client for the draft service.

The service is a single endpoint that multiplexes on a ``route`` query
parameter:

  GET  <base>?route=state                    -- full snapshot
  POST <base>?route=pick        {player_id, pin, sport, country}
  POST <base>?route=undo        {pin}
  POST <base>?route=reset       {pin}
  POST <base>?route=set_status  {pin, draft_status}

Every reply carries ``ok``.  Transport problems become ``TransportFailure``,
``ok: false`` becomes ``DomainRejection``.  No domain judgement happens here.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..errors import ConfigurationError, DomainRejection, TransportFailure
from .models import ActionResponse, Snapshot
from .utils import API_TIMEOUT

logger = logging.getLogger(__name__)

ROUTE_STATE = "state"
ACTION_ROUTES = ("pick", "undo", "reset", "set_status")

# Shown when the server says ``ok: false`` without a reason.
REJECTION_DEFAULTS = {
    ROUTE_STATE: "Error loading state",
    "pick": "Pick rejected.",
}
ADMIN_REJECTION_DEFAULT = "Admin action failed."

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
}

_PLACEHOLDER_PREFIX = "PASTE_"


def default_rejection(route: str) -> str:
    return REJECTION_DEFAULTS.get(route, ADMIN_REJECTION_DEFAULT)


class DraftClient:
    """Async client bound to one draft endpoint."""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").strip()
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def configured(self) -> bool:
        """False while the endpoint is missing or still a placeholder."""
        return bool(self.base_url) and not self.base_url.startswith(_PLACEHOLDER_PREFIX)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "DraftClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    # ── Raw requests ─────────────────────────────────────────────────

    async def _request(
        self, method: str, route: str, payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Issue one request and return the parsed JSON object."""
        if not self.configured:
            raise ConfigurationError("Draft API URL is not configured")

        client = self._get_client()
        params = {"route": route}
        logger.debug("%s %s params=%s", method, self.base_url, params)
        try:
            if method == "GET":
                resp = await client.get(self.base_url, params=params, headers=NO_CACHE_HEADERS)
            else:
                resp = await client.post(self.base_url, params=params, json=payload or {})
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportFailure(f"HTTP {e.response.status_code} from {route}") from e
        except httpx.RequestError as e:
            raise TransportFailure(f"{route} request failed: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise TransportFailure(f"Malformed JSON from {route}") from e
        if not isinstance(body, dict):
            raise TransportFailure(f"Unexpected {type(body).__name__} body from {route}")
        return body

    async def _get(self, route: str) -> dict[str, Any]:
        return await self._request("GET", route)

    async def _post(self, route: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", route, payload)

    # ── Routes ───────────────────────────────────────────────────────

    async def get_state(self) -> Snapshot:
        """Fetch the full authoritative snapshot."""
        body = await self._get(ROUTE_STATE)
        if not body.get("ok"):
            raise DomainRejection(body.get("error") or default_rejection(ROUTE_STATE))
        try:
            return Snapshot.model_validate(body)
        except ValidationError as e:
            raise TransportFailure(f"Invalid state payload: {e.error_count()} errors") from e

    async def post_action(self, route: str, payload: dict[str, Any]) -> Snapshot:
        """Send a mutation; return the snapshot the server answered with."""
        if route not in ACTION_ROUTES:
            raise ValueError(f"Unknown action route: {route}")
        body = await self._post(route, payload)
        try:
            reply = ActionResponse.model_validate(body)
        except ValidationError as e:
            raise TransportFailure(f"Invalid {route} reply: {e.error_count()} errors") from e
        if not reply.ok:
            raise DomainRejection(reply.error or default_rejection(route))
        if reply.state is None:
            raise TransportFailure(f"{route} reply has no state")
        return reply.state
