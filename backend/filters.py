# filters.py
# One parameterized filter for every module: date windows + category policy

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List

from models import Event, TimeFilter
from utils import DateWindows, compute_windows, parse_iso


@dataclass(frozen=True)
class CategoryPolicy:
    """
    How a module reads its category filter.

    catch_all: the value meaning "everything in this module".
    subcategory_tokens: exact filter values matched as substrings of the
      event's subcategory (leagues for sports).
    case_sensitive: whether token matching respects case.
    free_text: whether any other filter value is a case-insensitive
      substring search (genres for music). When False, unknown values match nothing.
    """
    catch_all: str
    subcategory_tokens: frozenset[str] = field(default_factory=frozenset)
    case_sensitive: bool = True
    free_text: bool = False

    def matches(self, event: Event, category_filter: str) -> bool:
        if category_filter == self.catch_all:
            return True
        sub = event.subcategory
        if not sub:
            return False
        if category_filter in self.subcategory_tokens:
            if self.case_sensitive:
                return category_filter in sub
            return category_filter.casefold() in sub.casefold()
        if self.free_text:
            return category_filter.casefold() in sub.casefold()
        return False


SPORTS_POLICY = CategoryPolicy(
    catch_all="Sports",
    subcategory_tokens=frozenset({"NFL", "NBA", "MLB", "NHL"}),
    case_sensitive=True,
)
MUSIC_POLICY = CategoryPolicy(catch_all="Music", case_sensitive=False, free_text=True)
SOCIAL_POLICY = CategoryPolicy(catch_all="Social", case_sensitive=False, free_text=True)


def time_matches(event: Event, time_filter: TimeFilter, windows: DateWindows, tz=None) -> bool:
    when = parse_iso(event.date, tz)
    if when is None:
        return False
    try:
        if time_filter == TimeFilter.TODAY:
            return windows.start_of_day <= when <= windows.end_of_day
        if time_filter == TimeFilter.THIS_WEEK:
            return windows.start_of_day <= when <= windows.end_of_week
        if time_filter == TimeFilter.THIS_MONTH:
            return windows.start_of_day <= when <= windows.end_of_month
        if time_filter == TimeFilter.NEXT_MONTH:
            return windows.end_of_month < when <= windows.end_of_next_month
    except TypeError:
        # aware date against a naive `now`
        return False
    return False


class EventFilterEngine:
    """Stable filter of a module's events by time window and category."""

    def __init__(self, policy: CategoryPolicy):
        self.policy = policy

    def filter(
        self,
        events: Iterable[Event],
        time_filter: TimeFilter,
        category_filter: str,
        now: datetime,
    ) -> List[Event]:
        windows = compute_windows(now)
        tz = now.tzinfo
        return [
            ev for ev in events
            if time_matches(ev, time_filter, windows, tz) and self.policy.matches(ev, category_filter)
        ]
