"""
Pydantic models for draft service data.

A ``Snapshot`` is everything the server knows at one instant.  It is frozen:
consumers read it, and a newer fetch replaces it wholesale.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .utils import safe_float, safe_int

DRAFT_OPEN = "OPEN"
DRAFT_CLOSED = "CLOSED"

POINTS_TOLERANCE = 1e-6


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)


class DraftConfig(BaseModel):
    """Process-wide settings; only ``draft_status`` is interpreted here."""
    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    draft_status: str = ""

    @property
    def is_open(self) -> bool:
        return self.draft_status == DRAFT_OPEN


class CurrentTurn(_Frozen):
    """Active turn descriptor."""
    pick_number: Optional[int] = None
    direction: Optional[int] = None  # 1 or -1, display only
    on_the_clock_name: Optional[str] = None

    @field_validator("pick_number", "direction", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any) -> Optional[int]:
        return safe_int(v)


class Player(_Frozen):
    player_id: str
    display_name: str = ""


class Projection(_Frozen):
    """A selectable (sport, country) pair with its scouting numbers."""
    pair_id: str
    sport: str = ""
    country: str = ""
    power_rank: Optional[float] = None
    projected_points: Optional[float] = None
    num_medals: Optional[float] = None
    last_year_score: Optional[float] = None

    @field_validator(
        "power_rank", "projected_points", "num_medals", "last_year_score",
        mode="before",
    )
    @classmethod
    def _lenient_number(cls, v: Any) -> Optional[float]:
        return safe_float(v)


class LeaderboardEntry(_Frozen):
    player_id: str
    display_name: str = ""
    total_projected_points: Optional[float] = None
    picks_made: Optional[int] = 0

    @field_validator("total_projected_points", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> Optional[float]:
        return safe_float(v)

    @field_validator("picks_made", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any) -> Optional[int]:
        return safe_int(v)


class TeamItem(_Frozen):
    """Summary of one claimed pair on a participant's roster."""
    sport: str = ""
    country: str = ""
    projected_points: Optional[float] = None
    pair_id: Optional[str] = None

    @field_validator("projected_points", mode="before")
    @classmethod
    def _lenient_number(cls, v: Any) -> Optional[float]:
        return safe_float(v)


Roster = tuple[TeamItem, ...]


class Snapshot(_Frozen):
    """
    Authoritative draft state as of the last successful fetch or mutation.

    Never mutated in place; the state cell swaps whole snapshots.
    """
    config: DraftConfig = Field(default_factory=DraftConfig)
    current: CurrentTurn = Field(default_factory=CurrentTurn)
    players: tuple[Player, ...] = ()
    projections: tuple[Projection, ...] = ()
    taken_pair_ids: frozenset[str] = frozenset()
    leaderboard: tuple[LeaderboardEntry, ...] = ()
    # Read-only view; a fresh snapshot replaces it, nothing edits it.
    teams: Mapping[str, Roster] = Field(
        default_factory=lambda: MappingProxyType({})
    )

    @field_validator("config", "current", "teams", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("teams")
    @classmethod
    def _read_only_teams(cls, v: Mapping[str, Roster]) -> Mapping[str, Roster]:
        return MappingProxyType(dict(v))

    @field_serializer("teams")
    def _dump_teams(self, v: Mapping[str, Roster]) -> dict[str, Any]:
        return dict(v)

    @field_validator("players", "projections", "taken_pair_ids", "leaderboard", mode="before")
    @classmethod
    def _null_as_empty_seq(cls, v: Any) -> Any:
        return () if v is None else v

    def find_projection(self, pair_id: str) -> Optional[Projection]:
        for p in self.projections:
            if p.pair_id == pair_id:
                return p
        return None

    def consistency_issues(self) -> list[str]:
        """
        List violations of the server's own invariants.

        The client never repairs these; they are reported so a broken
        backend is visible in the logs.
        """
        issues: list[str] = []
        known = {p.pair_id for p in self.projections}
        for pair_id in sorted(self.taken_pair_ids - known):
            issues.append(f"taken pair {pair_id!r} not in projections")

        for entry in self.leaderboard:
            roster = self.teams.get(entry.player_id, ())
            if entry.picks_made is not None and len(roster) != entry.picks_made:
                issues.append(
                    f"{entry.player_id}: {len(roster)} roster items "
                    f"but picks_made={entry.picks_made}"
                )
            if entry.total_projected_points is not None:
                roster_total = sum(
                    it.projected_points for it in roster
                    if it.projected_points is not None and math.isfinite(it.projected_points)
                )
                if not math.isclose(
                    roster_total, entry.total_projected_points,
                    rel_tol=1e-9, abs_tol=POINTS_TOLERANCE,
                ):
                    issues.append(
                        f"{entry.player_id}: roster totals {roster_total:g} "
                        f"but leaderboard says {entry.total_projected_points:g}"
                    )

        # Only checkable when the server includes pair ids on roster items.
        roster_ids = {
            it.pair_id for roster in self.teams.values() for it in roster if it.pair_id
        }
        if roster_ids and roster_ids != set(self.taken_pair_ids):
            issues.append("taken_pair_ids does not match the pairs on rosters")
        return issues


class ActionResponse(_Frozen):
    """Reply to a mutating POST."""
    ok: bool = False
    error: Optional[str] = None
    state: Optional[Snapshot] = None
