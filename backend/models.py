# models.py
# typed event/search/filter models shared by providers, screens and the API

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

PLACEHOLDER_IMAGE = "https://placehold.co/600x400/1a202c/ffffff?text=Event"


class GoogleData(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: float
    userRatingsTotal: int


class Event(BaseModel):
    """Normalized event. Immutable once built; enrich via model_copy."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    subcategory: Optional[str] = None
    # ISO-8601; absent => never matches a time filter
    date: Optional[str] = None
    venueName: Optional[str] = None
    imageUrl: str = PLACEHOLDER_IMAGE
    address: str = ""
    googleData: Optional[GoogleData] = None


class TimeFilter(str, Enum):
    TODAY = "Today"
    THIS_WEEK = "This Week"
    THIS_MONTH = "This Month"
    NEXT_MONTH = "Next Month"


class SearchParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str
    stateCode: str
    radius: int


class SearchRequest(BaseModel):
    # the radius slider bounds live on the input, not in the controller
    city: str = Field(..., min_length=1)
    stateCode: str = Field(..., min_length=2, max_length=2)
    radius: int = Field(..., ge=5, le=100)

    def to_params(self) -> SearchParams:
        return SearchParams(city=self.city, stateCode=self.stateCode.upper(), radius=self.radius)


class FilterState(BaseModel):
    timeFilter: TimeFilter = TimeFilter.THIS_MONTH
    categoryFilter: str


class ActiveModuleRequest(BaseModel):
    module: Literal["Sports", "Music", "Social"]


class EventCard(BaseModel):
    id: str
    name: str
    imageUrl: str
    venueLine: str
    time: str


class EventDetails(EventCard):
    subtitle: str
    venueName: Optional[str] = None
    address: str
    ratingLine: Optional[str] = None


class Suggestion(EventCard):
    header: str
    subHeader: str


class SuggestionResponse(BaseModel):
    suggestion: Optional[Suggestion] = None


class ScreenResponse(BaseModel):
    module: str
    title: str
    available: bool = True
    loading: bool = False
    loadingText: Optional[str] = None
    timeFilters: List[str] = []
    categoryFilters: List[str] = []
    filters: Optional[FilterState] = None
    events: List[EventCard] = []
    emptyText: Optional[str] = None


class PlanResponse(BaseModel):
    eventId: str
    plan: str
