"""
Action dispatcher: one request, one authoritative answer.

Nothing is predicted locally.  A success swaps in the snapshot the server
returned; a failure leaves the cell alone and hands back the reason.
Legality, turn order and PIN checks all belong to the server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import DraftError
from ..remote.client import ACTION_ROUTES, DraftClient
from ..remote.models import Snapshot
from .state import StateCell

logger = logging.getLogger(__name__)

ACTION_KINDS = ACTION_ROUTES


@dataclass
class ActionResult:
    """Outcome of a submitted action."""
    ok: bool
    snapshot: Optional[Snapshot] = None
    error_message: Optional[str] = None


class ActionDispatcher:
    """Marshals user actions to the server and commits the replies."""

    def __init__(self, client: DraftClient, cell: StateCell):
        self.client = client
        self.cell = cell

    async def submit(self, action_kind: str, payload: dict[str, Any]) -> ActionResult:
        """
        Send ``action_kind`` with ``payload``.

        Returns:
            ActionResult(ok=True, snapshot=...) after committing the reply,
            or ActionResult(ok=False, error_message=...) with the cell untouched.
        """
        if action_kind not in ACTION_KINDS:
            raise ValueError(f"Unknown action: {action_kind}")

        try:
            snapshot = await self.client.post_action(action_kind, payload)
        except DraftError as e:
            logger.info("%s rejected (%s): %s", action_kind, type(e).__name__, e.message)
            return ActionResult(ok=False, error_message=e.message)

        # The reply is authoritative: it takes its ticket on arrival and
        # outranks any poll still in flight.
        self.cell.commit(snapshot, force=True)
        logger.info("%s accepted", action_kind)
        return ActionResult(ok=True, snapshot=snapshot)

    # ── Convenience wrappers ─────────────────────────────────────────

    async def pick(self, player_id: str, pin: str, sport: str, country: str) -> ActionResult:
        return await self.submit("pick", {
            "player_id": player_id,
            "pin": pin,
            "sport": sport,
            "country": country,
        })

    async def undo(self, pin: str) -> ActionResult:
        return await self.submit("undo", {"pin": pin})

    async def reset(self, pin: str) -> ActionResult:
        return await self.submit("reset", {"pin": pin})

    async def set_status(self, pin: str, draft_status: str) -> ActionResult:
        return await self.submit("set_status", {"pin": pin, "draft_status": draft_status})
