import httpx
import pytest

from draftboard.errors import ConfigurationError, DomainRejection, TransportFailure
from draftboard.remote.client import DraftClient
from tests.conftest import BASE_URL, json_response, make_client, request_body, state_payload


async def test_get_state_requests_route_without_cache():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return json_response(state_payload())

    async with make_client(handler) as client:
        snap = await client.get_state()

    assert snap.current.on_the_clock_name == "Bob"
    (request,) = seen
    assert request.method == "GET"
    assert request.url.params["route"] == "state"
    assert str(request.url).startswith(BASE_URL)
    assert "no-store" in request.headers["cache-control"]
    assert request.headers["pragma"] == "no-cache"


async def test_state_not_ok_is_a_rejection():
    async with make_client(lambda r: json_response({"ok": False, "error": "Sheet locked"})) as client:
        with pytest.raises(DomainRejection) as exc:
            await client.get_state()
    assert exc.value.message == "Sheet locked"


async def test_state_not_ok_without_reason_uses_default():
    async with make_client(lambda r: json_response({"ok": False})) as client:
        with pytest.raises(DomainRejection) as exc:
            await client.get_state()
    assert exc.value.message == "Error loading state"


@pytest.mark.parametrize("response", [
    httpx.Response(500, text="boom"),
    httpx.Response(200, text="<html>not json</html>"),
    httpx.Response(200, json=["not", "an", "object"]),
    httpx.Response(200, json={"ok": True, "players": "nope"}),
])
async def test_bad_responses_are_transport_failures(response):
    async with make_client(lambda r: response) as client:
        with pytest.raises(TransportFailure):
            await client.get_state()


async def test_network_error_is_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    async with make_client(handler) as client:
        with pytest.raises(TransportFailure):
            await client.get_state()


@pytest.mark.parametrize("base_url", ["", None, "PASTE_YOUR_URL_HERE"])
async def test_unconfigured_client_never_sends(base_url):
    calls = []
    client = DraftClient(base_url, transport=httpx.MockTransport(lambda r: calls.append(r)))
    assert not client.configured
    with pytest.raises(ConfigurationError):
        await client.get_state()
    with pytest.raises(ConfigurationError):
        await client.post_action("undo", {"pin": "1"})
    assert calls == []


async def test_post_action_sends_json_and_returns_state():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return json_response({"ok": True, "state": state_payload(taken_pair_ids=["P1", "P2"])})

    payload = {"player_id": "p2", "pin": "1234", "sport": "Biathlon", "country": "GER"}
    async with make_client(handler) as client:
        snap = await client.post_action("pick", payload)

    assert snap.taken_pair_ids == frozenset({"P1", "P2"})
    (request,) = seen
    assert request.method == "POST"
    assert request.url.params["route"] == "pick"
    assert request_body(request) == payload


@pytest.mark.parametrize("route, expected", [
    ("pick", "Pick rejected."),
    ("undo", "Admin action failed."),
    ("set_status", "Admin action failed."),
])
async def test_post_action_rejection_defaults(route, expected):
    async with make_client(lambda r: json_response({"ok": False})) as client:
        with pytest.raises(DomainRejection) as exc:
            await client.post_action(route, {"pin": "x"})
    assert exc.value.message == expected


async def test_post_action_ok_without_state_is_malformed():
    async with make_client(lambda r: json_response({"ok": True})) as client:
        with pytest.raises(TransportFailure):
            await client.post_action("reset", {"pin": "x"})


async def test_unknown_route_rejected_locally():
    async with make_client(lambda r: json_response({"ok": True})) as client:
        with pytest.raises(ValueError):
            await client.post_action("delete_everything", {})


async def test_redirects_are_followed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "draft.example.test":
            return httpx.Response(302, headers={"Location": "https://echo.example.test/result"})
        return json_response(state_payload())

    async with make_client(handler) as client:
        snap = await client.get_state()
    assert snap.config.draft_status == "OPEN"
