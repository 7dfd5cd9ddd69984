"""Plain-text rendering of a ``Board`` for the terminal."""

from __future__ import annotations

import math
from typing import Any

from ..remote.utils import safe_float
from .presenter import MISSING, Board, ItemTable, LeaderboardRow, RosterCard, StatusStrip

RULE = "=" * 60

TABLE_COLUMNS = (
    ("sport", "Sport"),
    ("country", "Country"),
    ("power_rank", "Power rank"),
    ("projected_points", "Projected pts"),
    ("num_medals", "Medals"),
    ("last_year_score", "Last year"),
)


def fmt(value: Any, digits: int = 1) -> str:
    """Fixed-point number, ``—`` when missing, raw text when not a finite number."""
    if value is None or value == "":
        return MISSING
    n = safe_float(value)
    if n is None or not math.isfinite(n):
        return str(value)
    return f"{n:.{digits}f}"


def render_status(status: StatusStrip) -> str:
    return (
        f"{status.pill} | Pick #{status.pick_number} {status.direction} | "
        f"On the clock: {status.on_the_clock}"
    )


def render_leaderboard(rows: list[LeaderboardRow]) -> list[str]:
    lines = [f"{'Rank':<6}{'Player':<24}{'Projected':>10}{'Picks':>7}"]
    for r in rows:
        lines.append(
            f"{r.rank_label:<6}{r.display_name:<24}"
            f"{fmt(r.total_projected_points, 1):>10}{fmt(r.picks_made, 0):>7}"
        )
    return lines


def render_table(table: ItemTable) -> list[str]:
    header = "".join(
        f"{label + table.arrow(key):<16}" for key, label in TABLE_COLUMNS
    ) + "Status"
    lines = [header]
    for r in table.rows:
        lines.append(
            f"{r.sport:<16}{r.country:<16}"
            f"{fmt(r.power_rank, 0):<16}{fmt(r.projected_points, 1):<16}"
            f"{fmt(r.num_medals, 0):<16}{fmt(r.last_year_score, 1):<16}"
            f"{r.availability}"
        )
    if not table.rows:
        lines.append("(no matching pairs)")
    return lines


def render_roster(card: RosterCard) -> list[str]:
    lines = [f"{card.display_name} — {fmt(card.total_points, 1)} pts"]
    if card.is_empty:
        lines.append(f"  {card.empty_label}")
    for item in card.items:
        lines.append(f"  {item.sport:<16}{item.country:<16}{fmt(item.projected_points, 1):>8}")
    return lines


def render_board(board: Board) -> str:
    lines = [RULE, render_status(board.status), RULE, "", "Leaderboard"]
    lines += render_leaderboard(board.leaderboard)
    lines += ["", "Pairs"]
    lines += render_table(board.table)
    lines += ["", "Teams"]
    for card in board.rosters:
        lines += render_roster(card)
    return "\n".join(lines)
