"""Filter, search and sort the projection table for display."""

from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass, replace
from typing import Literal, Optional

from ..remote.models import Projection, Snapshot
from ..remote.utils import finite_or

SortDirection = Literal["asc", "desc"]

TEXT_KEYS = ("sport", "country")
NUMERIC_KEYS = ("power_rank", "projected_points", "num_medals", "last_year_score")
SORT_KEYS = TEXT_KEYS + NUMERIC_KEYS

# Direction a column starts in when first clicked.
ASCENDING_FIRST = {"power_rank", "sport", "country"}


@dataclass(frozen=True)
class SortSpec:
    key: str = "projected_points"
    direction: SortDirection = "desc"

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {self.key}")
        if self.direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction: {self.direction}")

    @staticmethod
    def default_direction(key: str) -> SortDirection:
        return "asc" if key in ASCENDING_FIRST else "desc"

    def toggled(self, key: str) -> "SortSpec":
        """Same key flips direction; a new key starts in its default direction."""
        if key == self.key:
            return SortSpec(key, "asc" if self.direction == "desc" else "desc")
        return SortSpec(key, self.default_direction(key))


DEFAULT_SORT = SortSpec()


@dataclass(frozen=True)
class Filters:
    sport: str = ""
    search: str = ""
    show_taken: bool = False

    def cleared(self) -> "Filters":
        """Drop sport and search, keep the show-taken toggle."""
        return replace(self, sport="", search="")


@dataclass(frozen=True)
class ItemRow:
    """One projection as shown in the item table."""
    pair_id: str
    sport: str
    country: str
    power_rank: Optional[float]
    projected_points: Optional[float]
    num_medals: Optional[float]
    last_year_score: Optional[float]
    is_taken: bool

    @property
    def availability(self) -> str:
        return "Taken" if self.is_taken else "Available"

    @classmethod
    def from_projection(cls, p: Projection, is_taken: bool) -> "ItemRow":
        return cls(
            pair_id=p.pair_id,
            sport=p.sport,
            country=p.country,
            power_rank=p.power_rank,
            projected_points=p.projected_points,
            num_medals=p.num_medals,
            last_year_score=p.last_year_score,
            is_taken=is_taken,
        )


def collation_key(text: Optional[str]) -> tuple[str, str]:
    """
    Locale-style ordering key: accents and case only break ties.

    "Öland" sorts with "Oland", "alpine" with "Alpine"; the raw string is
    the final tie-break so the order stays total.
    """
    raw = text or ""
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", raw) if not unicodedata.combining(ch)
    )
    return base.casefold(), raw


def _numeric(value: Optional[float]) -> float:
    # Missing and non-finite values rank below everything.
    return finite_or(value, -math.inf)


def _matches_search(row: ItemRow, query: str) -> bool:
    return query in row.country.lower() or query in row.sport.lower()


def apply_filters(rows: list[ItemRow], filters: Filters) -> list[ItemRow]:
    """Taken, then sport, then search; each step only removes rows."""
    if not filters.show_taken:
        rows = [r for r in rows if not r.is_taken]
    if filters.sport:
        rows = [r for r in rows if r.sport == filters.sport]
    if filters.search:
        q = filters.search.lower()
        rows = [r for r in rows if _matches_search(r, q)]
    return rows


def sort_rows(rows: list[ItemRow], sort: SortSpec) -> list[ItemRow]:
    """
    Order rows by ``sort``.

    Text keys: collation order in ``sort.direction``, ties by descending
    projected points.  Numeric keys: value in ``sort.direction``, ties by
    ascending sport then ascending country.  The tie-break always runs in
    its own fixed direction, so it is sorted first and the stable primary
    sort keeps it.
    """
    ordered = list(rows)
    descending = sort.direction == "desc"

    if sort.key in TEXT_KEYS:
        ordered.sort(key=lambda r: -_numeric(r.projected_points))
        ordered.sort(key=lambda r: collation_key(getattr(r, sort.key)), reverse=descending)
    else:
        ordered.sort(key=lambda r: (collation_key(r.sport), collation_key(r.country)))
        ordered.sort(key=lambda r: _numeric(getattr(r, sort.key)), reverse=descending)
    return ordered


def derive_rows(
    snapshot: Snapshot,
    filters: Filters = Filters(),
    sort: SortSpec = DEFAULT_SORT,
) -> list[ItemRow]:
    """
    Build the visible item table from a snapshot.

    Pure: same inputs give equal output, and ``snapshot`` is only read.
    """
    taken = snapshot.taken_pair_ids
    rows = [ItemRow.from_projection(p, p.pair_id in taken) for p in snapshot.projections]
    return sort_rows(apply_filters(rows, filters), sort)


def sport_options(snapshot: Snapshot) -> list[str]:
    """Distinct sports for the sport filter, in collation order."""
    return sorted({p.sport for p in snapshot.projections}, key=collation_key)
