# views.py
# view-models for cards, screens, details and the suggestion modal.
# Per-module presentation settings are explicit ScreenConfig values, passed in.

from __future__ import annotations
from dataclasses import dataclass
from datetime import tzinfo
from typing import List, Optional, Sequence

from models import (
    Event, EventCard, EventDetails, FilterState, ScreenResponse, Suggestion, TimeFilter,
)
from utils import parse_iso

TIME_FILTERS = [tf.value for tf in TimeFilter]


@dataclass(frozen=True)
class ScreenConfig:
    module: str
    title: str            # formatted with city=
    loading_text: str     # formatted with city=
    empty_text: str
    category_options: Sequence[str] = ()
    available: bool = True


SPORTS_SCREEN = ScreenConfig(
    module="Sports",
    title="Sports in {city}",
    loading_text="Finding games in {city}...",
    empty_text="No games match your filters.",
    category_options=("Sports", "NFL", "NBA", "MLB", "NHL"),
)
MUSIC_SCREEN = ScreenConfig(
    module="Music",
    title="Live Music in {city}",
    loading_text="Finding music in {city}...",
    empty_text="No concerts match your filters.",
    category_options=("Music", "Rock", "Hip-Hop", "Electronic", "Country"),
)
SOCIAL_SCREEN = ScreenConfig(
    module="Social",
    title="Social Coming Soon",
    loading_text="",
    empty_text="",
    available=False,
)


def _local(event: Event, tz: Optional[tzinfo]):
    when = parse_iso(event.date, tz)
    if when is not None and tz is not None:
        when = when.astimezone(tz)
    return when


def event_card(event: Event, tz: Optional[tzinfo] = None) -> EventCard:
    when = _local(event, tz)
    rating = event.googleData.rating if event.googleData else None
    return EventCard(
        id=event.id,
        name=event.name,
        imageUrl=event.imageUrl,
        venueLine=f"{event.venueName or ''} • ⭐ {rating or 'N/A'}",
        time=when.strftime("%H:%M") if when else "",
    )


def event_details(event: Event, tz: Optional[tzinfo] = None) -> EventDetails:
    card = event_card(event, tz)
    when = _local(event, tz)
    subtitle = f"{when:%A, %B} {when.day} at {when:%H:%M}" if when else "Date to be announced"
    rating_line = None
    if event.googleData:
        g = event.googleData
        rating_line = f"Google Rating: {g.rating} ({g.userRatingsTotal:,} reviews)"
    return EventDetails(
        **card.model_dump(),
        subtitle=subtitle,
        venueName=event.venueName,
        address=event.address,
        ratingLine=rating_line,
    )


def suggestion(event: Event, tz: Optional[tzinfo] = None) -> Suggestion:
    return Suggestion(
        **event_card(event, tz).model_dump(),
        header="Your night is planned!",
        subHeader=f"How about some {event.category.lower()}?",
    )


def screen(
    config: ScreenConfig,
    city: str,
    loading: bool = False,
    filters: Optional[FilterState] = None,
    events: Sequence[Event] = (),
    tz: Optional[tzinfo] = None,
) -> ScreenResponse:
    if not config.available:
        return ScreenResponse(module=config.module, title=config.title, available=False)
    if loading:
        return ScreenResponse(
            module=config.module,
            title=config.title.format(city=city),
            loading=True,
            loadingText=config.loading_text.format(city=city),
        )
    cards: List[EventCard] = [event_card(ev, tz) for ev in events]
    return ScreenResponse(
        module=config.module,
        title=config.title.format(city=city),
        timeFilters=TIME_FILTERS,
        categoryFilters=list(config.category_options),
        filters=filters,
        events=cards,
        emptyText=None if cards else config.empty_text,
    )
