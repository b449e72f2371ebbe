import pytest

from conftest import FakeModelClient
from tripplanner.agents.itinerary import ValidationError, build_prompt, run_itinerary_agent
from tripplanner.llm.client import UpstreamError


def test_prompt_is_exact():
    client = FakeModelClient()

    run_itinerary_agent(client, {"query": "3-day trip to Ooty", "itinerary": None})

    assert client.prompts == [
        "Create a travel itinerary with places to visit based on this plan: 3-day trip to Ooty"
    ]


def test_build_prompt():
    assert build_prompt("weekend in Goa") == (
        "Create a travel itinerary with places to visit based on this plan: weekend in Goa"
    )


def test_reply_is_stored_verbatim():
    reply = "  **Day 1**\n- Rose Garden  "
    state = run_itinerary_agent(FakeModelClient(reply=reply), {"query": "Ooty", "itinerary": None})

    assert state == {"query": "Ooty", "itinerary": reply}


@pytest.mark.parametrize("state", [{}, {"query": ""}, {"query": "   "}, {"query": 42}, {"query": None}])
def test_invalid_query_never_calls_model(state):
    client = FakeModelClient()

    with pytest.raises(ValidationError, match="query is required"):
        run_itinerary_agent(client, state)

    assert client.calls == 0


def test_upstream_error_propagates():
    err = UpstreamError("provider down")
    client = FakeModelClient(errors=[err])

    with pytest.raises(UpstreamError) as info:
        run_itinerary_agent(client, {"query": "Ooty"})

    assert info.value is err
    assert client.calls == 1


def test_empty_reply_is_success():
    state = run_itinerary_agent(FakeModelClient(reply=""), {"query": "Ooty", "itinerary": None})

    assert state["itinerary"] == ""
