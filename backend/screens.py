# screens.py
# per-module state (events + filters) and the browsing session that ties them together

from __future__ import annotations
import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional

from filters import (
    CategoryPolicy, EventFilterEngine, MUSIC_POLICY, SOCIAL_POLICY, SPORTS_POLICY,
)
from models import Event, FilterState, ScreenResponse, SearchParams
from picker import FindMyNight, NightPicker
from search import SearchController
from views import MUSIC_SCREEN, SOCIAL_SCREEN, SPORTS_SCREEN, ScreenConfig, screen

log = logging.getLogger(__name__)

# (search params, ticketing classification) -> normalized events
Fetcher = Callable[[SearchParams, Optional[str]], Awaitable[List[Event]]]


class ModuleScreen:
    """
    One browsing module (Sports, Music, ...). Holds the last fetched events
    and its own FilterState. Each load replaces the event list wholesale;
    a load that finishes after a newer one was issued is dropped.
    """

    def __init__(
        self,
        config: ScreenConfig,
        policy: CategoryPolicy,
        fetch: Optional[Fetcher] = None,
        classification: Optional[str] = None,
    ):
        self.config = config
        self.policy = policy
        self.engine = EventFilterEngine(policy)
        self.fetch = fetch
        self.classification = classification
        self.events: List[Event] = []
        self.loading = False
        self.filters = FilterState(categoryFilter=policy.catch_all)
        self._generation = 0

    @property
    def name(self) -> str:
        return self.config.module

    async def load(self, params: SearchParams) -> None:
        if self.fetch is None:
            return
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            events = await self.fetch(params, self.classification)
        except Exception:
            if generation == self._generation:
                self.loading = False
            raise
        if generation != self._generation:
            log.info("%s: dropping stale results for %s, %s", self.name, params.city, params.stateCode)
            return
        self.events = list(events)
        self.loading = False
        log.info("%s: %d events for %s, %s", self.name, len(self.events), params.city, params.stateCode)

    def set_filters(self, filters: FilterState) -> None:
        """Replace the FilterState. Raises ValueError for a category this module cannot show."""
        options = self.config.category_options
        if not self.policy.free_text and filters.categoryFilter not in options:
            raise ValueError(f"Unknown {self.name} category: {filters.categoryFilter}")
        self.filters = filters

    def visible(self, now: datetime) -> List[Event]:
        return self.engine.filter(self.events, self.filters.timeFilter, self.filters.categoryFilter, now)

    def find(self, event_id: str) -> Optional[Event]:
        return next((ev for ev in self.events if ev.id == event_id), None)

    def replace(self, event: Event) -> bool:
        """Swap in an enriched copy of an event already in the list."""
        if self.find(event.id) is None:
            return False
        self.events = [event if ev.id == event.id else ev for ev in self.events]
        return True

    def render(self, city: str, now: datetime) -> ScreenResponse:
        return screen(
            self.config,
            city,
            loading=self.loading,
            filters=self.filters,
            events=self.visible(now),
            tz=now.tzinfo,
        )


class AppSession:
    """
    Everything the single-page client used to hold: search params, the
    modules, which one is active, the selected event and the suggestion modal.
    """

    def __init__(
        self,
        fetch: Fetcher,
        params: SearchParams,
        picker: Optional[NightPicker] = None,
    ):
        self.search = SearchController(params)
        self.screens: Dict[str, ModuleScreen] = {
            "Sports": ModuleScreen(SPORTS_SCREEN, SPORTS_POLICY, fetch, "Sports"),
            "Music": ModuleScreen(MUSIC_SCREEN, MUSIC_POLICY, fetch, "Music"),
            "Social": ModuleScreen(SOCIAL_SCREEN, SOCIAL_POLICY),
        }
        self.active_module = "Sports"
        self.selected: Optional[Event] = None
        self.find_my_night = FindMyNight(picker)
        for module in self.screens.values():
            self.search.subscribe(module.load)

    async def start(self) -> None:
        await asyncio.gather(*(m.load(self.search.params) for m in self.screens.values()))

    def module(self, name: str) -> ModuleScreen:
        return self.screens[name]

    def find_event(self, event_id: str) -> Optional[Event]:
        if self.selected is not None and self.selected.id == event_id:
            return self.selected
        for module in self.screens.values():
            found = module.find(event_id)
            if found is not None:
                return found
        if self.find_my_night.current is not None and self.find_my_night.current.id == event_id:
            return self.find_my_night.current
        return None

    def select(self, event: Event) -> None:
        self.selected = event
        # keep cards in step with the details view (e.g. a newly attached rating)
        for module in self.screens.values():
            module.replace(event)

    def back(self) -> None:
        self.selected = None

    def accept_suggestion(self) -> Optional[Event]:
        event = self.find_my_night.accept()
        if event is not None:
            self.selected = event
        return event
