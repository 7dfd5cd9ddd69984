import copy
import json
from typing import Any, Callable

import httpx
import pytest

from draftboard.remote.client import DraftClient
from draftboard.remote.models import Snapshot

BASE_URL = "https://draft.example.test/exec"

STATE_PAYLOAD: dict[str, Any] = {
    "ok": True,
    "config": {"draft_status": "OPEN", "rounds": 3},
    "current": {"pick_number": 2, "direction": 1, "on_the_clock_name": "Bob"},
    "players": [
        {"player_id": "p1", "display_name": "Alice"},
        {"player_id": "p2", "display_name": "Bob"},
        {"player_id": "p3", "display_name": "Cara"},
    ],
    "projections": [
        {"pair_id": "P1", "sport": "Skiing", "country": "NOR", "power_rank": 1,
         "projected_points": 50, "num_medals": 10, "last_year_score": 45.5},
        {"pair_id": "P2", "sport": "Biathlon", "country": "GER", "power_rank": 2,
         "projected_points": 40, "num_medals": 6, "last_year_score": 38},
        {"pair_id": "P3", "sport": "Skiing", "country": "SWE", "power_rank": 3,
         "projected_points": 30, "num_medals": 4, "last_year_score": 25},
        {"pair_id": "P4", "sport": "Curling", "country": "CAN", "power_rank": 4,
         "projected_points": 30, "num_medals": 2, "last_year_score": 20},
        {"pair_id": "P5", "sport": "Luge", "country": "AUT", "power_rank": None,
         "projected_points": "", "num_medals": "n/a", "last_year_score": 12},
    ],
    "taken_pair_ids": ["P1"],
    "leaderboard": [
        {"player_id": "p1", "display_name": "Alice", "total_projected_points": 50, "picks_made": 1},
        {"player_id": "p2", "display_name": "Bob", "total_projected_points": 0, "picks_made": 0},
        {"player_id": "p3", "display_name": "Cara", "total_projected_points": 0, "picks_made": 0},
    ],
    "teams": {
        "p1": [{"sport": "Skiing", "country": "NOR", "projected_points": 50}],
    },
}


def state_payload(**overrides: Any) -> dict[str, Any]:
    """Deep copy of the sample state with top-level keys replaced."""
    payload = copy.deepcopy(STATE_PAYLOAD)
    payload.update(overrides)
    return payload


def after_undo_payload() -> dict[str, Any]:
    """Sample state with Alice's pick rolled back."""
    return state_payload(
        current={"pick_number": 1, "direction": 1, "on_the_clock_name": "Alice"},
        taken_pair_ids=[],
        leaderboard=[
            {"player_id": pid, "display_name": name, "total_projected_points": 0, "picks_made": 0}
            for pid, name in (("p1", "Alice"), ("p2", "Bob"), ("p3", "Cara"))
        ],
        teams={},
    )


@pytest.fixture
def snapshot() -> Snapshot:
    return Snapshot.model_validate(state_payload())


Handler = Callable[[httpx.Request], Any]


def make_client(handler: Handler, base_url: str = BASE_URL) -> DraftClient:
    return DraftClient(base_url, transport=httpx.MockTransport(handler))


def json_response(body: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=body)


def request_body(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content or b"{}")
