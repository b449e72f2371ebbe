from typing import Optional, TypedDict


class ItineraryState(TypedDict, total=False):
    query: str
    # filled in by the itinerary node; None until it succeeds
    itinerary: Optional[str]
