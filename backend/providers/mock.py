# providers/mock.py
# deterministic fallback data for when live providers fail or come back empty

from datetime import datetime, timedelta
from typing import List

from models import Event, GoogleData
from utils import add_months

MOCK_RATING = GoogleData(rating=4.5, userRatingsTotal=1337)


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds")


def mock_events(now: datetime) -> List[Event]:
    """Five sample events dated today, today, tomorrow, next week and next month."""
    tomorrow = now + timedelta(days=1)
    next_week = now + timedelta(days=7)
    next_month = add_months(now, 1)

    return [
        Event(id="tm-1", name="Mock: Indie Showcase", category="Music", date=_iso(now),
              venueName="The Mockingbird Theater",
              imageUrl="https://placehold.co/600x400/1a202c/ffffff?text=Mock+Music",
              address="123 Mock St, Denver, CO"),
        Event(id="tm-2", name="Mock: Broncos Game", category="Sports", subcategory="NFL", date=_iso(now),
              venueName="Mock Field",
              imageUrl="https://placehold.co/600x400/FB4F14/ffffff?text=Mock+Football",
              address="456 Mock Ave, Denver, CO"),
        Event(id="tm-3", name="Mock: Jazz Night", category="Music", date=_iso(tomorrow),
              venueName="The Mock Note",
              imageUrl="https://placehold.co/600x400/4a5568/ffffff?text=Mock+Jazz",
              address="789 Mock Blvd, Denver, CO"),
        Event(id="tm-4", name="Mock: Nuggets Game", category="Sports", subcategory="NBA", date=_iso(next_week),
              venueName="Mock Arena",
              imageUrl="https://placehold.co/600x400/0E2240/ffffff?text=Mock+Basketball",
              address="111 Mock Ct, Denver, CO"),
        Event(id="tm-5", name="Mock: Art Festival", category="Social", date=_iso(next_month),
              venueName="Mock Museum",
              imageUrl="https://placehold.co/600x400/718096/ffffff?text=Mock+Art",
              address="222 Mock Ln, Denver, CO"),
    ]


def mock_place_details(address: str) -> GoogleData:
    return MOCK_RATING
