import argparse

import pytest

from draftboard.app.cli import act, build_parser, build_session, render_session, show, watch
from tests.conftest import json_response, make_client, state_payload


def _session(handler):
    return build_session({"api": {}, "sync": {}}, client=make_client(handler))


def test_parser_commands():
    parser = build_parser()
    args = parser.parse_args(["watch", "--interval", "2", "--cycles", "1", "--sort", "sport"])
    assert (args.command, args.interval, args.cycles, args.sort) == ("watch", 2.0, 1, "sport")
    args = parser.parse_args(["pick", "p1", "Skiing", "NOR", "--pin", "1234"])
    assert (args.player_id, args.sport_name, args.country, args.pin) == ("p1", "Skiing", "NOR", "1234")
    with pytest.raises(SystemExit):
        parser.parse_args(["undo"])


async def test_show_prints_board(capsys):
    session = _session(lambda r: json_response(state_payload()))
    assert await show(session)
    out = capsys.readouterr().out
    assert "Draft: OPEN" in out
    assert "Teams" in out


async def test_show_unconfigured(capsys):
    session = build_session({"api": {"base_url": ""}, "sync": {}})
    assert not await show(session)
    assert "[STATUS] Set the draft API URL" in capsys.readouterr().out


async def test_watch_prints_only_changed_snapshots(capsys):
    session = _session(lambda r: json_response(state_payload()))
    await watch(session, interval_seconds=0, max_cycles=3)
    out = capsys.readouterr().out
    assert out.count("Draft: OPEN") == 1


async def test_act_reports_rejection(capsys):
    session = _session(lambda r: json_response({"ok": False, "error": "Not your turn"}))
    args = argparse.Namespace(player_id="p3", pin="1", sport_name="Luge", country="AUT")
    assert not await act(session, "pick", args)
    assert "[ERROR] Not your turn" in capsys.readouterr().out


async def test_act_admin_success(capsys):
    session = _session(lambda r: json_response({"ok": True, "state": state_payload()}))
    assert await act(session, "close", argparse.Namespace(pin="1"))
    out = capsys.readouterr().out
    assert "[INFO] Done ✅" in out
    assert render_session(session) in out
