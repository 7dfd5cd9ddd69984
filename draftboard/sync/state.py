"""
The single owned cell holding the current snapshot.

Only the Synchronizer and the ActionDispatcher call ``commit``; everything
else reads ``snapshot``.  Replacement is one reference swap, so a reader
always sees one whole snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..remote.models import Snapshot

logger = logging.getLogger(__name__)

Listener = Callable[[Snapshot], None]


@dataclass
class StateCell:
    """
    Holds the live snapshot and hands out request tickets.

    Each request takes a ticket when it is issued.  With ``sequenced`` on,
    a poll response whose ticket is older than the held snapshot's is
    dropped, so a slow poll cannot overwrite a newer action result.  Action
    replies are committed with ``force`` and never dropped.  With
    ``sequenced`` off, the last response to arrive wins.
    """
    sequenced: bool = True
    _snapshot: Optional[Snapshot] = None
    _held_ticket: int = 0
    _last_issued: int = 0
    _listeners: list[Listener] = field(default_factory=list)

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def issue(self) -> int:
        """Take a ticket for a request about to go out."""
        self._last_issued += 1
        return self._last_issued

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with every snapshot that gets committed."""
        self._listeners.append(listener)

    def commit(
        self, snapshot: Snapshot, ticket: Optional[int] = None, force: bool = False,
    ) -> bool:
        """
        Replace the held snapshot; return False if it was dropped as stale.

        ``force`` is for action replies: they always apply, and every
        request already in flight counts as older than them, since a poll
        sent before the reply arrived may predate the action on the server.
        """
        if ticket is None:
            ticket = self.issue()
        if force:
            ticket = max(ticket, self._last_issued)
        elif self.sequenced and ticket <= self._held_ticket:
            logger.debug(
                "Dropping stale response (ticket %d <= held %d)", ticket, self._held_ticket,
            )
            return False

        self._snapshot = snapshot
        self._held_ticket = ticket
        for listener in list(self._listeners):
            listener(snapshot)
        return True
