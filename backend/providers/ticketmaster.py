# providers/ticketmaster.py
# Ticketmaster Discovery read-only provider; falls back to mock events on failure/empty.

import logging
import httpx
from datetime import datetime
from typing import List, Optional

from models import Event, PLACEHOLDER_IMAGE
from providers.mock import mock_events
from utils import now_local

log = logging.getLogger(__name__)

TM_URL = "https://app.ticketmaster.com/discovery/v2/events.json"

HEADERS = {
    "User-Agent": "NightOut/0.1",
    "Accept": "application/json",
}


def _dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _first(items) -> dict:
    if not isinstance(items, list) or not items:
        return {}
    return _dict(items[0])


def normalize_event(ev: dict) -> Event:
    """Map one raw Discovery event onto Event. Missing fields degrade, never raise."""
    ev = _dict(ev)
    cls = _first(ev.get("classifications"))
    venue = _first(_dict(ev.get("_embedded")).get("venues"))

    line1 = _dict(venue.get("address")).get("line1")
    city = _dict(venue.get("city")).get("name")
    state = _dict(venue.get("state")).get("stateCode")
    address = ", ".join(p for p in [line1, city, state] if p)

    images = ev.get("images") if isinstance(ev.get("images"), list) else []
    image = next(
        (img.get("url") for img in map(_dict, images) if img.get("ratio") == "16_9" and img.get("url")),
        None,
    )

    return Event(
        id=str(ev.get("id") or ""),
        name=ev.get("name") or "Event",
        category=_dict(cls.get("segment")).get("name") or "Social",
        subcategory=_dict(cls.get("subGenre")).get("name") or None,
        date=_dict(_dict(ev.get("dates")).get("start")).get("dateTime") or None,
        venueName=venue.get("name"),
        imageUrl=image or PLACEHOLDER_IMAGE,
        address=address,
    )


async def fetch_events(
    city: str,
    state_code: str,
    radius: int,
    category: Optional[str],
    api_key: str,
    now: Optional[datetime] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Event]:
    """
    Events near city/state within radius miles, optionally narrowed to a
    classification ("Sports", "Music"). Any failure or an empty result
    yields the mock list instead.
    """
    def fallback(reason: str) -> List[Event]:
        log.warning("ticketmaster: %s for %s, %s; using mock events", reason, city, state_code)
        return mock_events(now or now_local())

    if not api_key:
        return fallback("no api key")

    params = {
        "apikey": api_key,
        "city": city,
        "stateCode": state_code,
        "radius": str(radius),
        "unit": "miles",
    }
    if category:
        params["classificationName"] = category

    try:
        async with httpx.AsyncClient(timeout=20.0, headers=HEADERS, transport=transport) as client:
            r = await client.get(TM_URL, params=params)
        if r.status_code != 200:
            return fallback(f"status {r.status_code}")
        js = r.json()
    except (httpx.HTTPError, ValueError) as e:
        return fallback(f"error {e!r}")

    if not isinstance(js, dict):
        return fallback("unexpected body")
    events = _dict(js.get("_embedded")).get("events") or []
    if not isinstance(events, list):
        return fallback("unexpected events shape")
    out: List[Event] = []
    for ev in events:
        try:
            if isinstance(ev, dict):
                out.append(normalize_event(ev))
        except ValueError as e:
            # pydantic rejects non-string scalars (e.g. a numeric name)
            log.warning("ticketmaster: bad event %r: %s", ev.get("id"), e)
    if len(out) < len(events):
        log.warning("ticketmaster: skipped %d malformed events", len(events) - len(out))
    if not out:
        return fallback("no events")
    return out
