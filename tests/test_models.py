import math

import pytest
from pydantic import ValidationError

from draftboard.remote.models import Snapshot
from tests.conftest import state_payload


def test_snapshot_parses_sample(snapshot):
    assert snapshot.config.draft_status == "OPEN"
    assert snapshot.config.is_open
    assert snapshot.current.pick_number == 2
    assert [p.player_id for p in snapshot.players] == ["p1", "p2", "p3"]
    assert snapshot.taken_pair_ids == frozenset({"P1"})
    assert snapshot.teams["p1"][0].country == "NOR"


def test_unparseable_numbers_become_none(snapshot):
    luge = snapshot.find_projection("P5")
    assert luge is not None
    assert luge.power_rank is None
    assert luge.projected_points is None
    assert luge.num_medals is None
    assert luge.last_year_score == 12.0


def test_numeric_strings_and_ids_are_coerced():
    snap = Snapshot.model_validate(state_payload(
        players=[{"player_id": 7, "display_name": "Seven"}],
        projections=[{"pair_id": 11, "sport": "Luge", "country": "AUT",
                      "projected_points": " 12.5 ", "power_rank": "NaN"}],
        taken_pair_ids=[11],
        leaderboard=[], teams={},
    ))
    assert snap.players[0].player_id == "7"
    assert snap.projections[0].pair_id == "11"
    assert snap.projections[0].projected_points == 12.5
    assert math.isnan(snap.projections[0].power_rank)
    assert snap.taken_pair_ids == frozenset({"11"})


def test_null_collections_default_to_empty():
    snap = Snapshot.model_validate({"ok": True, "players": None, "teams": None, "current": None})
    assert snap.players == ()
    assert snap.teams == {}
    assert snap.current.pick_number is None
    assert snap.config.draft_status == ""


def test_snapshot_is_frozen(snapshot):
    with pytest.raises(ValidationError):
        snapshot.taken_pair_ids = frozenset()  # type: ignore[misc]
    with pytest.raises(ValidationError):
        snapshot.projections[0].projected_points = 1.0  # type: ignore[misc]


def test_consistent_sample_has_no_issues(snapshot):
    assert snapshot.consistency_issues() == []


def test_consistency_issues_reported():
    snap = Snapshot.model_validate(state_payload(
        taken_pair_ids=["P1", "GHOST"],
        leaderboard=[
            {"player_id": "p1", "display_name": "Alice",
             "total_projected_points": 99, "picks_made": 2},
        ],
    ))
    issues = snap.consistency_issues()
    assert any("GHOST" in i for i in issues)
    assert any("picks_made=2" in i for i in issues)
    assert any("leaderboard says 99" in i for i in issues)


def test_roster_pair_ids_checked_against_taken_set():
    snap = Snapshot.model_validate(state_payload(
        teams={"p1": [{"sport": "Skiing", "country": "SWE", "projected_points": 50,
                       "pair_id": "P3"}]},
    ))
    assert "taken_pair_ids does not match the pairs on rosters" in snap.consistency_issues()


@pytest.mark.parametrize("blank", ["", None, "n/a"])
def test_blank_counters_do_not_reject_snapshot(blank):
    snap = Snapshot.model_validate(state_payload(
        current={"pick_number": blank, "direction": blank, "on_the_clock_name": "Bob"},
        leaderboard=[
            {"player_id": "p1", "display_name": "Alice",
             "total_projected_points": 50, "picks_made": blank},
        ],
    ))
    assert snap.current.pick_number is None
    assert snap.current.direction is None
    assert snap.leaderboard[0].picks_made is None
    assert snap.consistency_issues() == []


def test_numeric_string_counters_parse():
    snap = Snapshot.model_validate(state_payload(
        current={"pick_number": "4", "direction": "-1"},
        leaderboard=[{"player_id": "p1", "picks_made": "1", "total_projected_points": 50}],
    ))
    assert snap.current.pick_number == 4
    assert snap.current.direction == -1
    assert snap.leaderboard[0].picks_made == 1


def test_teams_are_read_only(snapshot):
    with pytest.raises(TypeError):
        snapshot.teams["p9"] = ()  # type: ignore[index]
    assert "p9" not in snapshot.teams
    assert snapshot.model_dump()["teams"]["p1"][0]["country"] == "NOR"
