# providers/places.py
# Google Places rating lookup by address; mock rating when unkeyed or failing

import logging
import httpx
from typing import Optional

from models import GoogleData
from providers.mock import mock_place_details

log = logging.getLogger(__name__)

FIND_PLACE_URL = "https://maps.googleapis.com/maps/api/place/findplacefromtext/json"

HEADERS = {
    "User-Agent": "NightOut/0.1",
    "Accept": "application/json",
}


async def fetch_place_details(
    address: str,
    api_key: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> GoogleData:
    if not api_key or not address:
        return mock_place_details(address)

    params = {
        "input": address,
        "inputtype": "textquery",
        "fields": "rating,user_ratings_total",
        "key": api_key,
    }
    try:
        async with httpx.AsyncClient(timeout=20.0, headers=HEADERS, transport=transport) as client:
            r = await client.get(FIND_PLACE_URL, params=params)
        if r.status_code != 200:
            log.warning("places: status %s for %r", r.status_code, address)
            return mock_place_details(address)
        js = r.json()
        candidates = js.get("candidates") if isinstance(js, dict) else None
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            log.warning("places: no usable candidate for %r", address)
            return mock_place_details(address)
        candidate = candidates[0]
        return GoogleData(
            rating=float(candidate["rating"]),
            userRatingsTotal=int(candidate.get("user_ratings_total") or 0),
        )
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        log.warning("places: lookup failed for %r: %r", address, e)
        return mock_place_details(address)
