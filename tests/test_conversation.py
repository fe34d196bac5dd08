import asyncio

import httpx
import pytest

from conftest import feature

from assistant.advice_fallback import FallbackAdvisor
from assistant.advisor import RemoteAdvisor
from assistant.categories import CategoryResolver, supported_categories_help
from assistant.conversation import (
    GREETING,
    GREETING_NO_LOCATION,
    LOCATION_REQUIRED,
    MODE_CONFIRMATIONS,
    SEARCH_FAILED,
    SEARCH_NOT_CONFIGURED,
    ConversationOrchestrator,
)
from assistant.errors import ConversationBusyError, LocationAlreadySetError
from assistant.models import Coordinate, Mode, Sender
from assistant.places import PlaceSearchEngine


def _places_handler(request: httpx.Request) -> httpx.Response:
    if request.url.params["filter"].endswith(",50000"):
        return httpx.Response(200, json={"features": [feature(name="Central Police", distance=1500)]})
    return httpx.Response(200, json={"features": []})


def _build(make_client, *, location, places_key="key", advice_key=None, advice_handler=None):
    places_client, places_transport = make_client(_places_handler)
    advice_client, _ = make_client(advice_handler or (lambda req: httpx.Response(500, json={})))
    convo = ConversationOrchestrator(
        CategoryResolver(),
        PlaceSearchEngine(places_key, client=places_client),
        RemoteAdvisor(advice_key, FallbackAdvisor(), client=advice_client),
        location=location,
        clock=lambda: 1_700_000_000.0,
    )
    return convo, places_transport


def test_greeting_depends_on_location(make_client, origin):
    with_location, _ = _build(make_client, location=origin)
    without_location, _ = _build(make_client, location=None)
    assert with_location.start().text == GREETING
    assert without_location.start().text == GREETING_NO_LOCATION


def test_location_is_set_only_once(make_client, origin):
    convo, _ = _build(make_client, location=None)
    convo.set_location(origin)
    convo.set_location(origin)
    with pytest.raises(LocationAlreadySetError):
        convo.set_location(Coordinate(lat=0.0, lon=0.0))
    assert convo.location == origin


@pytest.mark.asyncio
async def test_emergency_search_posts_notices_then_results(make_client, origin):
    convo, transport = _build(make_client, location=origin)

    replies = await convo.handle("Where is the nearest police station?")

    assert len(transport.requests) == 3
    assert [m.sender for m in replies] == [Sender.BOT] * 3
    assert replies[0].text.startswith("I couldn't find any places of that type nearby")
    assert replies[1].text == "Still searching in an even wider area..."
    assert replies[2].text.startswith("I found these police locations within 50km radius:")
    assert "👮 Central Police" in replies[2].text
    assert "1.5km away" in replies[2].text

    assert convo.history[0].sender is Sender.USER
    assert list(convo.history[1:]) == replies


@pytest.mark.asyncio
async def test_unknown_category_gets_help(make_client, origin):
    convo, transport = _build(make_client, location=origin)
    replies = await convo.handle("hello?")
    assert [m.text for m in replies] == [supported_categories_help()]
    assert transport.requests == []


@pytest.mark.asyncio
async def test_no_location_short_circuits(make_client):
    convo, transport = _build(make_client, location=None)
    replies = await convo.handle("nearest hospital")
    assert [m.text for m in replies] == [LOCATION_REQUIRED]
    assert transport.requests == []


@pytest.mark.asyncio
async def test_places_not_configured(make_client, origin):
    convo, transport = _build(make_client, location=origin, places_key=None)
    replies = await convo.handle("nearest hospital")
    assert [m.text for m in replies] == [SEARCH_NOT_CONFIGURED]
    assert transport.requests == []


@pytest.mark.asyncio
async def test_transport_error_message(make_client, origin):
    convo, _ = _build(make_client, location=origin)
    failing, _ = make_client(lambda req: httpx.Response(503, text="down"))
    convo.engine = PlaceSearchEngine("key", client=failing)

    replies = await convo.handle("pharmacy")
    assert [m.text for m in replies] == [SEARCH_FAILED]


@pytest.mark.asyncio
async def test_not_found_message(make_client, origin):
    convo, _ = _build(make_client, location=origin)
    empty, _ = make_client(lambda req: httpx.Response(200, json={"features": []}))
    convo.engine = PlaceSearchEngine("key", client=empty)

    replies = await convo.handle("toilet")
    assert replies[-1].text == (
        "I'm sorry, I couldn't find any locations of that type even within 50km radius."
    )


@pytest.mark.asyncio
async def test_advice_mode_uses_remote_then_fallback(make_client, origin):
    convo, _ = _build(make_client, location=origin, advice_key="key")
    convo.switch_mode(Mode.ADVICE)

    replies = await convo.handle("Is it safe to walk alone at night?")
    assert [m.text for m in replies] == [
        FallbackAdvisor().get_fallback("Is it safe to walk alone at night?")
    ]


@pytest.mark.asyncio
async def test_advice_mode_returns_remote_answer(make_client, origin):
    convo, _ = _build(
        make_client,
        location=origin,
        advice_key="key",
        advice_handler=lambda req: httpx.Response(
            200, json={"choices": [{"message": {"content": "Call a friend."}}]},
        ),
    )
    convo.switch_mode("advice")
    assert [m.text for m in await convo.handle("what now")] == ["Call a friend."]


@pytest.mark.asyncio
async def test_mode_switch_keeps_history(make_client, origin):
    convo, _ = _build(make_client, location=origin)
    convo.start()
    await convo.handle("hello")
    before = convo.history

    confirmation = convo.switch_mode(Mode.ADVICE)

    assert confirmation.text == MODE_CONFIRMATIONS[Mode.ADVICE]
    assert convo.history[: len(before)] == before
    assert convo.history[-1] == confirmation
    assert convo.mode is Mode.ADVICE


@pytest.mark.asyncio
async def test_blank_utterance_is_ignored(make_client, origin):
    convo, _ = _build(make_client, location=origin)
    assert await convo.handle("   ") == []
    assert convo.history == ()


@pytest.mark.asyncio
async def test_busy_while_request_in_flight(make_client, origin):
    convo, _ = _build(make_client, location=origin)
    release = asyncio.Event()

    class SlowAdvisor:
        async def get_advice(self, question):
            await release.wait()
            return "done"

    convo.advisor = SlowAdvisor()
    convo.switch_mode(Mode.ADVICE)

    task = asyncio.create_task(convo.handle("first"))
    await asyncio.sleep(0)
    assert convo.busy
    with pytest.raises(ConversationBusyError):
        await convo.handle("second")

    release.set()
    assert [m.text for m in await task] == ["done"]
    assert not convo.busy


@pytest.mark.asyncio
async def test_in_flight_request_keeps_its_mode(make_client, origin):
    convo, _ = _build(make_client, location=origin)
    release = asyncio.Event()

    class SlowAdvisor:
        async def get_advice(self, question):
            await release.wait()
            return "advice text"

    convo.advisor = SlowAdvisor()
    convo.switch_mode(Mode.ADVICE)
    task = asyncio.create_task(convo.handle("help"))
    await asyncio.sleep(0)

    convo.switch_mode(Mode.EMERGENCY)
    release.set()

    assert [m.text for m in await task] == ["advice text"]
    assert convo.history[-1].text == "advice text"


@pytest.mark.asyncio
async def test_identical_requests_produce_identical_text(make_client, origin):
    convo, _ = _build(make_client, location=origin)
    first = [m.text for m in await convo.handle("Where is the nearest police station?")]
    second = [m.text for m in await convo.handle("Where is the nearest police station?")]
    assert first == second


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [b"NaN", b"1e400", b'"inf"'])
async def test_non_finite_distance_still_posts_results(make_client, origin, raw):
    convo, _ = _build(make_client, location=origin)
    body = b'{"features":[{"properties":{"name":"X","distance":' + raw + b"}}]}"
    provider, _ = make_client(
        lambda req: httpx.Response(200, content=body, headers={"content-type": "application/json"})
    )
    convo.engine = PlaceSearchEngine("key", client=provider)

    replies = await convo.handle("nearest hospital")

    assert len(replies) == 1
    assert "🏥 X" in replies[0].text
    assert "away" not in replies[0].text
