"""
UI session: view parameters, pick form, messages, and the intent table.

User intents arrive as ``dispatch(event, **args)``.  Each event either
updates local view parameters or goes through the ActionDispatcher; none
of them touch the snapshot directly.  The session keeps the status line
current from the cell and the synchronizer; rendering hooks in through
``on_change`` or its own cell subscription.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from ..errors import ConfigurationError, DraftError
from ..remote.models import DRAFT_CLOSED, DRAFT_OPEN, Snapshot
from ..sync.dispatcher import ActionDispatcher, ActionResult
from ..sync.state import StateCell
from ..sync.synchronizer import Synchronizer
from ..view.pipeline import DEFAULT_SORT, Filters, ItemRow, SortSpec, derive_rows
from ..view.presenter import Board, build_board

logger = logging.getLogger(__name__)

CONFIG_MISSING_STATUS = "Set the draft API URL"
LOAD_ERROR_STATUS = "Error loading state"

PICK_ACCEPTED = "Pick accepted ✅"
ADMIN_DONE = "Done ✅"
SUBMITTING = "Submitting…"


@dataclass(frozen=True)
class Message:
    text: str = ""
    level: str = ""  # "", "ok" or "err"


@dataclass(frozen=True)
class PickForm:
    player_id: str = ""
    pin: str = ""
    sport: str = ""
    country: str = ""


class Session:
    """Local UI state for one user, wired to a shared state cell."""

    def __init__(
        self,
        cell: StateCell,
        synchronizer: Synchronizer,
        dispatcher: ActionDispatcher,
    ):
        self.cell = cell
        self.synchronizer = synchronizer
        self.dispatcher = dispatcher

        self.filters = Filters()
        self.sort: SortSpec = DEFAULT_SORT
        self.form = PickForm()
        self.admin_pin = ""
        self.pick_message = Message()
        self.admin_message = Message()
        self.status_message = ""
        self.on_change: Optional[Callable[["Session"], None]] = None

        self._handlers: dict[str, Callable[..., Any]] = {
            # view parameters
            "set_show_taken": self._set_show_taken,
            "set_sport_filter": self._set_sport_filter,
            "set_search": self._set_search,
            "clear_filters": self._clear_filters,
            "sort_by": self._sort_by,
            "select_row": self._select_row,
            "set_pick_field": self._set_pick_field,
            "set_admin_pin": self._set_admin_pin,
            # server round-trips
            "refresh": self._refresh,
            "submit_pick": self._submit_pick,
            "undo": self._undo,
            "reset": self._reset,
            "open_draft": self._open_draft,
            "close_draft": self._close_draft,
        }

        cell.subscribe(self._on_snapshot)
        synchronizer.on_error = self._on_fetch_error
        if not synchronizer.client.configured:
            self.status_message = CONFIG_MISSING_STATUS

    @property
    def events(self) -> list[str]:
        return sorted(self._handlers)

    async def dispatch(self, event: str, **args: Any) -> Any:
        """Route one user intent to its handler."""
        handler = self._handlers.get(event)
        if handler is None:
            raise KeyError(f"Unknown event: {event}")
        result = handler(**args)
        if inspect.isawaitable(result):
            result = await result
        self._changed()
        return result

    # ── Read side ────────────────────────────────────────────────────

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self.cell.snapshot

    def rows(self) -> list[ItemRow]:
        if self.snapshot is None:
            return []
        return derive_rows(self.snapshot, self.filters, self.sort)

    def board(self) -> Optional[Board]:
        snapshot = self.snapshot
        if snapshot is None:
            return None
        return build_board(snapshot, self.filters, self.sort)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    # ── View parameter handlers ──────────────────────────────────────

    def _set_show_taken(self, value: bool) -> None:
        self.filters = replace(self.filters, show_taken=bool(value))

    def _set_sport_filter(self, sport: str = "") -> None:
        self.filters = replace(self.filters, sport=sport or "")

    def _set_search(self, text: str = "") -> None:
        self.filters = replace(self.filters, search=text or "")

    def _clear_filters(self) -> None:
        self.filters = self.filters.cleared()

    def _sort_by(self, key: str) -> SortSpec:
        self.sort = self.sort.toggled(key)
        return self.sort

    def _select_row(self, pair_id: str) -> bool:
        """Copy a row's sport and country into the pick form."""
        snapshot = self.snapshot
        projection = snapshot.find_projection(pair_id) if snapshot else None
        if projection is None:
            return False
        self.form = replace(self.form, sport=projection.sport, country=projection.country)
        self.pick_message = Message(f"Selected: {projection.sport} — {projection.country}")
        return True

    def _set_pick_field(self, **fields: str) -> None:
        self.form = replace(self.form, **fields)

    def _set_admin_pin(self, pin: str) -> None:
        self.admin_pin = pin

    # ── Server round-trip handlers ───────────────────────────────────

    async def _refresh(self) -> Optional[Snapshot]:
        return await self.synchronizer.refresh()

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self.status_message = ""

    def _on_fetch_error(self, error: DraftError) -> None:
        if isinstance(error, ConfigurationError):
            self.status_message = CONFIG_MISSING_STATUS
        else:
            self.status_message = LOAD_ERROR_STATUS

    async def _submit_pick(self) -> ActionResult:
        form = self.form
        self.pick_message = Message(SUBMITTING)
        self._changed()

        result = await self.dispatcher.pick(
            player_id=form.player_id.strip(),
            pin=form.pin.strip(),
            sport=form.sport.strip(),
            country=form.country.strip(),
        )
        if result.ok:
            self.pick_message = Message(PICK_ACCEPTED, "ok")
            self.form = replace(self.form, pin="")
        else:
            self.pick_message = Message(result.error_message or "", "err")
        return result

    async def _admin(self, kind: str, **payload: str) -> ActionResult:
        result = await self.dispatcher.submit(kind, {"pin": self.admin_pin.strip(), **payload})
        if result.ok:
            self.admin_message = Message(ADMIN_DONE, "ok")
        else:
            self.admin_message = Message(result.error_message or "", "err")
        return result

    async def _undo(self) -> ActionResult:
        return await self._admin("undo")

    async def _reset(self) -> ActionResult:
        return await self._admin("reset")

    async def _open_draft(self) -> ActionResult:
        return await self._admin("set_status", draft_status=DRAFT_OPEN)

    async def _close_draft(self) -> ActionResult:
        return await self._admin("set_status", draft_status=DRAFT_CLOSED)
