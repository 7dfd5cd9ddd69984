"""
Draftboard CLI — wires the client, state cell, synchronizer and
dispatcher into a session and renders it to the terminal.

Entry point:
    draftboard [--config config.yaml] watch [--interval 4] [--cycles N]
    draftboard show [--sport Skiing] [--search nor] [--show-taken] [--sort KEY]
    draftboard pick PLAYER_ID SPORT COUNTRY --pin PIN
    draftboard undo|reset|open|close --pin PIN
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from ..errors import DraftError
from ..remote.client import DraftClient
from ..remote.models import Snapshot
from ..sync.config import load_config
from ..sync.dispatcher import ActionDispatcher, ActionResult
from ..sync.state import StateCell
from ..sync.synchronizer import Synchronizer
from ..view.pipeline import SORT_KEYS, Filters, SortSpec
from ..view.text import RULE, render_board
from .session import Session

logger = logging.getLogger(__name__)

ADMIN_EVENTS = {
    "undo": "undo",
    "reset": "reset",
    "open": "open_draft",
    "close": "close_draft",
}


def build_session(config: dict, client: Optional[DraftClient] = None) -> Session:
    """Construct a Session and its collaborators from config."""
    api_cfg = config.get("api", {})
    sync_cfg = config.get("sync", {})
    if client is None:
        client = DraftClient(api_cfg.get("base_url"), timeout=float(api_cfg.get("timeout", 30)))
    cell = StateCell(sequenced=bool(sync_cfg.get("sequenced", True)))
    synchronizer = Synchronizer(client, cell)
    dispatcher = ActionDispatcher(client, cell)
    return Session(cell, synchronizer, dispatcher)


def render_session(session: Session) -> str:
    """Board plus any status and form messages."""
    lines = []
    if session.status_message:
        lines.append(f"[STATUS] {session.status_message}")
    board = session.board()
    if board is not None:
        lines.append(render_board(board))
    for message in (session.pick_message, session.admin_message):
        if message.text:
            tag = "ERROR" if message.level == "err" else "INFO"
            lines.append(f"[{tag}] {message.text}")
    return "\n".join(lines)


def _apply_view_args(session: Session, args: argparse.Namespace) -> None:
    session.filters = Filters(
        sport=args.sport or "",
        search=args.search or "",
        show_taken=args.show_taken,
    )
    if args.sort:
        direction = args.direction or SortSpec.default_direction(args.sort)
        session.sort = SortSpec(args.sort, direction)


# ── Commands ─────────────────────────────────────────────────────────

async def watch(session: Session, interval_seconds: float, max_cycles: Optional[int]) -> None:
    """Poll forever (or ``max_cycles`` times), printing each new snapshot."""
    last: Optional[Snapshot] = None

    def _on_snapshot(snapshot: Snapshot) -> None:
        nonlocal last
        if snapshot != last:
            last = snapshot
            print(f"\n{render_session(session)}")

    session_handler = session.synchronizer.on_error

    def _on_error(error: DraftError) -> None:
        if session_handler is not None:
            session_handler(error)
        print(f"[STATUS] {session.status_message} ({error.message})")

    session.cell.subscribe(_on_snapshot)
    session.synchronizer.on_error = _on_error

    print(f"  Endpoint: {session.synchronizer.client.base_url or '(unset)'}")
    print(f"  Interval: {interval_seconds} seconds")
    print(RULE)
    await session.synchronizer.run(interval_seconds=interval_seconds, max_cycles=max_cycles)


async def show(session: Session) -> bool:
    snapshot = await session.dispatch("refresh")
    print(render_session(session))
    return snapshot is not None


async def act(session: Session, command: str, args: argparse.Namespace) -> bool:
    """Run one mutating command; print the outcome and the new board."""
    if command == "pick":
        await session.dispatch(
            "set_pick_field",
            player_id=args.player_id,
            pin=args.pin,
            sport=args.sport_name,
            country=args.country,
        )
        result: ActionResult = await session.dispatch("submit_pick")
    else:
        await session.dispatch("set_admin_pin", pin=args.pin)
        result = await session.dispatch(ADMIN_EVENTS[command])
    print(render_session(session))
    return result.ok


async def run(args: argparse.Namespace) -> int:
    """High-level entry: load config, build session, run the command."""
    config = load_config(args.config)
    session = build_session(config)
    client = session.synchronizer.client

    async with client:
        if args.command == "watch":
            _apply_view_args(session, args)
            interval = args.interval or float(config.get("sync", {}).get("interval_seconds", 4))
            await watch(session, interval, args.cycles)
            return 0
        if args.command == "show":
            _apply_view_args(session, args)
            return 0 if await show(session) else 1
        return 0 if await act(session, args.command, args) else 1


def _add_view_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--sport", default="", help="Only show this sport (exact match)")
    parser.add_argument("--search", default="", help="Substring of sport or country")
    parser.add_argument("--show-taken", action="store_true", help="Include taken pairs")
    parser.add_argument("--sort", choices=SORT_KEYS, help="Sort column")
    order = parser.add_mutually_exclusive_group()
    order.add_argument("--asc", dest="direction", action="store_const", const="asc")
    order.add_argument("--desc", dest="direction", action="store_const", const="desc")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Live draft board client")
    parser.add_argument("--config", default="config.yaml", help="Config file path")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_watch = sub.add_parser("watch", help="Poll and print the board")
    p_watch.add_argument("--interval", type=float, help="Seconds between polls (default: 4)")
    p_watch.add_argument("--cycles", type=int, help="Stop after N polls")
    _add_view_options(p_watch)

    p_show = sub.add_parser("show", help="Fetch once and print the board")
    _add_view_options(p_show)

    p_pick = sub.add_parser("pick", help="Submit a pick")
    p_pick.add_argument("player_id")
    p_pick.add_argument("sport_name", metavar="sport")
    p_pick.add_argument("country")
    p_pick.add_argument("--pin", required=True)

    for name, help_text in (
        ("undo", "Undo the last pick"),
        ("reset", "Reset the draft"),
        ("open", "Open the draft"),
        ("close", "Close the draft"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--pin", required=True)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        code = asyncio.run(run(args))
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
