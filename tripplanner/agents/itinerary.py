import logging

from tripplanner.graph.state import ItineraryState

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = "Create a travel itinerary with places to visit based on this plan: {query}"


class ValidationError(ValueError):
    pass


def build_prompt(query: str) -> str:
    return PROMPT_TEMPLATE.format(query=query)


def run_itinerary_agent(client, state: ItineraryState) -> ItineraryState:
    """
    Single model call: prompt built from the query, reply stored verbatim.
    `client` is anything with invoke(prompt) -> str (normally a ModelClient).
    """
    query = state.get("query")
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("query is required")

    itinerary = client.invoke(build_prompt(query))
    if not itinerary:
        logger.warning("Model returned an empty itinerary for query of %s chars", len(query))

    state["itinerary"] = itinerary
    return state
