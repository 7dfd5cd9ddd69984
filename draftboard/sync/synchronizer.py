"""
Poll loop that keeps the state cell in step with the server.

  fetch -> validate -> commit -> (listeners re-render) -> sleep

A failed fetch never touches the held snapshot and never stops the loop:
stale data is preferred over no data.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from ..errors import ConfigurationError, DraftError
from ..remote.client import DraftClient
from ..remote.models import Snapshot
from .state import StateCell

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 4.0

ErrorHandler = Callable[[DraftError], None]


class Synchronizer:
    """Fetches full snapshots on a fixed interval and on demand."""

    def __init__(
        self,
        client: DraftClient,
        cell: StateCell,
        on_error: Optional[ErrorHandler] = None,
    ):
        self.client = client
        self.cell = cell
        self.on_error = on_error
        self.last_error: Optional[DraftError] = None
        self.cycles = 0

    # ── Single fetch ─────────────────────────────────────────────────

    async def fetch_snapshot(self) -> Snapshot:
        """
        Fetch and commit the server's state.

        Returns the snapshot now held, which is an earlier-committed newer
        one when this response arrived stale.

        Raises ``TransportFailure``, ``DomainRejection`` or
        ``ConfigurationError``; the cell is untouched in every case.
        """
        if not self.client.configured:
            raise ConfigurationError("Draft API URL is not configured")

        ticket = self.cell.issue()
        snapshot = await self.client.get_state()

        for issue in snapshot.consistency_issues():
            logger.warning("Inconsistent snapshot: %s", issue)

        self.last_error = None
        if not self.cell.commit(snapshot, ticket):
            # A newer snapshot landed while this poll was in flight.
            logger.debug("Poll response superseded; keeping held snapshot")
            return self.cell.snapshot
        return snapshot

    async def refresh(self) -> Optional[Snapshot]:
        """Fetch once, reporting instead of raising. Returns None on failure."""
        try:
            return await self.fetch_snapshot()
        except DraftError as e:
            self.last_error = e
            if isinstance(e, ConfigurationError):
                logger.error("Fetch suppressed: %s", e.message)
            else:
                logger.warning("Fetch failed (%s): %s", type(e).__name__, e.message)
            if self.on_error is not None:
                self.on_error(e)
            return None

    # ── Main loop ────────────────────────────────────────────────────

    async def run(
        self,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        max_cycles: Optional[int] = None,
    ) -> None:
        """Poll every ``interval_seconds``; forever unless ``max_cycles`` is set."""
        while max_cycles is None or self.cycles < max_cycles:
            self.cycles += 1
            cycle_start = datetime.now()

            try:
                await self.refresh()
            except Exception as e:
                # A listener blew up while rendering; keep polling.
                logger.error("Error in poll cycle #%d: %s", self.cycles, e)

            if max_cycles is not None and self.cycles >= max_cycles:
                break

            elapsed = (datetime.now() - cycle_start).total_seconds()
            sleep_secs = max(0.0, interval_seconds - elapsed)
            if sleep_secs > 0:
                await asyncio.sleep(sleep_secs)
            else:
                logger.debug("Poll cycle #%d took longer than interval", self.cycles)
                await asyncio.sleep(0)
