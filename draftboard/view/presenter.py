"""
Presentation adapter: read-only projections of a snapshot.

Each builder depends only on the snapshot (and, for the item table, the
pipeline output).  None of them change state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..remote.models import Snapshot, TeamItem
from .pipeline import DEFAULT_SORT, Filters, ItemRow, SortSpec, derive_rows

MISSING = "—"
NO_PICKS = "No picks yet"


@dataclass(frozen=True)
class StatusStrip:
    pill: str
    draft_status: str
    pick_number: str
    direction: str
    on_the_clock: str


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    player_id: str
    display_name: str
    total_projected_points: Optional[float]
    picks_made: Optional[int]

    @property
    def rank_label(self) -> str:
        return f"#{self.rank}"


@dataclass(frozen=True)
class ItemTable:
    sort: SortSpec
    rows: list[ItemRow] = field(default_factory=list)

    def arrow(self, key: str) -> str:
        """Header marker for the active sort column."""
        if self.sort.key != key:
            return ""
        return " ▲" if self.sort.direction == "asc" else " ▼"


@dataclass(frozen=True)
class RosterCard:
    player_id: str
    display_name: str
    total_points: float
    items: tuple[TeamItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def empty_label(self) -> Optional[str]:
        return NO_PICKS if self.is_empty else None


def status_strip(snapshot: Snapshot) -> StatusStrip:
    status = snapshot.config.draft_status or MISSING
    current = snapshot.current
    return StatusStrip(
        pill="Draft: OPEN" if status == "OPEN" else "Draft: CLOSED",
        draft_status=status,
        pick_number=MISSING if current.pick_number is None else str(current.pick_number),
        direction="→" if current.direction == 1 else "←",
        on_the_clock=current.on_the_clock_name or MISSING,
    )


def leaderboard_rows(snapshot: Snapshot) -> list[LeaderboardRow]:
    """Leaderboard in server order with 1-based ranks."""
    return [
        LeaderboardRow(
            rank=i,
            player_id=entry.player_id,
            display_name=entry.display_name,
            total_projected_points=entry.total_projected_points,
            picks_made=entry.picks_made,
        )
        for i, entry in enumerate(snapshot.leaderboard, start=1)
    ]


def item_table(
    snapshot: Snapshot,
    filters: Filters = Filters(),
    sort: SortSpec = DEFAULT_SORT,
) -> ItemTable:
    return ItemTable(sort=sort, rows=derive_rows(snapshot, filters, sort))


def roster_cards(snapshot: Snapshot) -> list[RosterCard]:
    """One card per participant, in ``players`` order."""
    totals = {e.player_id: e.total_projected_points for e in snapshot.leaderboard}
    cards = []
    for player in snapshot.players:
        total = totals.get(player.player_id)
        cards.append(RosterCard(
            player_id=player.player_id,
            display_name=player.display_name,
            total_points=0.0 if total is None else total,
            items=tuple(snapshot.teams.get(player.player_id, ())),
        ))
    return cards


def player_options(snapshot: Snapshot) -> list[tuple[str, str]]:
    """(player_id, display_name) pairs for the pick form."""
    return [(p.player_id, p.display_name) for p in snapshot.players]


@dataclass(frozen=True)
class Board:
    """Everything one render needs, built from a single snapshot."""
    status: StatusStrip
    leaderboard: list[LeaderboardRow]
    table: ItemTable
    rosters: list[RosterCard]


def build_board(
    snapshot: Snapshot,
    filters: Filters = Filters(),
    sort: SortSpec = DEFAULT_SORT,
) -> Board:
    return Board(
        status=status_strip(snapshot),
        leaderboard=leaderboard_rows(snapshot),
        table=item_table(snapshot, filters, sort),
        rosters=roster_cards(snapshot),
    )
