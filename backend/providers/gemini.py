# providers/gemini.py
# Gemini generateContent call that writes a short night-out plan for an event

import logging
import httpx
from typing import Optional

from models import Event
from utils import parse_iso

log = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

NO_PLAN = "Could not generate a plan at this time. Please try again later."
OFFLINE_PLAN = "Sorry, I couldn't come up with a plan right now. Check your connection and try again."


def build_prompt(event: Event) -> str:
    when = parse_iso(event.date)
    day = when.strftime("%m/%d/%Y") if when else "an upcoming date"
    return (
        f'Create a fun, brief plan for a night out based on this event. '
        f'Event: "{event.name}" at {event.venueName or "the venue"} on {day}. '
        "The plan should have three short parts: a pre-event suggestion (like a themed bar "
        "or quick bite nearby), a post-event suggestion (like a late-night food spot or a "
        "place to unwind), and a fun conversation starter related to the event. "
        "Make it sound exciting and engaging."
    )


def _candidate_text(js: dict) -> Optional[str]:
    if not isinstance(js, dict):
        return None
    candidates = js.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text else None


async def generate_plan(
    event: Event,
    api_key: str,
    model: str = "gemini-2.5-flash",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Free-text plan, or one of the fixed apology strings. Never raises on provider trouble."""
    log.info("gemini: planning night for %s", event.id)
    payload = {"contents": [{"role": "user", "parts": [{"text": build_prompt(event)}]}]}
    try:
        async with httpx.AsyncClient(timeout=20.0, transport=transport) as client:
            r = await client.post(
                GEMINI_URL.format(model=model),
                params={"key": api_key},
                json=payload,
            )
            js = r.json()
    except (httpx.HTTPError, ValueError) as e:
        log.warning("gemini: request failed: %r", e)
        return OFFLINE_PLAN

    text = _candidate_text(js)
    if not text:
        log.warning("gemini: no candidate text (status %s)", r.status_code)
        return NO_PLAN
    return text
