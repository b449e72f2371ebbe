from langgraph.graph import StateGraph, END

from tripplanner.graph.state import ItineraryState
from tripplanner.agents.itinerary import run_itinerary_agent


# ---------------------------
# Build graph
# ---------------------------
def build_graph(model_client):
    """
    start -> itinerary -> END
    """

    def node_itinerary(state: ItineraryState) -> ItineraryState:
        return run_itinerary_agent(model_client, state)

    g = StateGraph(ItineraryState)
    g.add_node("itinerary", node_itinerary)
    g.set_entry_point("itinerary")
    g.add_edge("itinerary", END)

    return g.compile()


def run_workflow(graph, query: str) -> ItineraryState:
    state: ItineraryState = {"query": query, "itinerary": None}
    return graph.invoke(state)
