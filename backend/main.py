# main.py
# FastAPI app holding the browsing session: search, module screens, details, Find My Night, plans

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional
from zoneinfo import ZoneInfo
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from models import (
    ActiveModuleRequest, EventDetails, FilterState, PlanResponse, ScreenResponse,
    SearchParams, SearchRequest, SuggestionResponse,
)
from screens import AppSession
from utils import now_local as clock
from views import event_details, suggestion
from providers.ticketmaster import fetch_events
from providers.places import fetch_place_details
from providers.gemini import OFFLINE_PLAN, generate_plan

load_dotenv()

# logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("night-out")

# config / env
TICKETMASTER_API_KEY = os.getenv("TICKETMASTER_API_KEY", "")
GOOGLE_PLACES_API_KEY = os.getenv("GOOGLE_PLACES_API_KEY", "")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
# IANA zone for the "today" / "this week" / month windows (default city is Denver)
LOCAL_TZ = ZoneInfo(os.getenv("TIMEZONE", "America/Denver"))

DEFAULT_SEARCH = SearchParams(
    city=os.getenv("DEFAULT_CITY", "Denver"),
    stateCode=os.getenv("DEFAULT_STATE_CODE", "CO"),
    radius=int(os.getenv("DEFAULT_RADIUS", "50")),
)


def now_local():
    return clock(LOCAL_TZ)


async def load_events(params: SearchParams, classification: Optional[str]):
    return await fetch_events(
        params.city, params.stateCode, params.radius, classification, TICKETMASTER_API_KEY,
        now=now_local(),
    )


# one in-process browsing session
session = AppSession(load_events, DEFAULT_SEARCH)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await session.start()
    yield


app = FastAPI(title="Night Out API", version="0.1.0", lifespan=lifespan)
# CORS origins
FRONTEND_LOCAL = "http://localhost:3000"
FRONTEND_PROD = os.getenv("FRONTEND_PROD", "")

origins = [FRONTEND_LOCAL]
if FRONTEND_PROD:
    origins.append(FRONTEND_PROD)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# global JSON error handling
# - HTTPException -> { "error": <detail> }
# - any other exception -> { "error": "Server error" }
@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    log.warning("HTTP %s: %s", exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # log stack once. do not leak details to client
    log.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "Server error"})


def _module(name: str):
    try:
        return session.module(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown module: {name}")


def _suggestion_response() -> SuggestionResponse:
    current = session.find_my_night.current
    if current is None:
        return SuggestionResponse()
    return SuggestionResponse(suggestion=suggestion(current, now_local().tzinfo))


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/search", response_model=SearchParams)
def get_search():
    return session.search.params


@app.put("/search", response_model=SearchParams)
async def update_search(req: SearchRequest):
    """Replace city/state/radius and re-fetch every module before answering."""
    params = req.to_params()
    await session.search.update(params)
    return params


@app.get("/modules")
def list_modules():
    return {"modules": list(session.screens), "active": session.active_module}


@app.put("/modules/active")
def set_active_module(req: ActiveModuleRequest):
    session.active_module = req.module
    return {"modules": list(session.screens), "active": session.active_module}


@app.get("/modules/{name}", response_model=ScreenResponse)
def get_module(name: str):
    module = _module(name)
    return module.render(session.search.params.city, now_local())


@app.put("/modules/{name}/filters", response_model=ScreenResponse)
def set_module_filters(name: str, filters: FilterState):
    module = _module(name)
    try:
        module.set_filters(filters)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return module.render(session.search.params.city, now_local())


@app.post("/modules/{name}/find-my-night", response_model=SuggestionResponse)
def find_my_night(name: str):
    """
    Pick a random event among what the module currently shows.
    No visible events -> {"suggestion": null} and nothing opens.
    """
    module = _module(name)
    session.find_my_night.open(module.visible(now_local()))
    return _suggestion_response()


@app.post("/suggestion/retry", response_model=SuggestionResponse)
def retry_suggestion():
    if not session.find_my_night.visible:
        raise HTTPException(status_code=409, detail="No suggestion open")
    session.find_my_night.retry()
    return _suggestion_response()


@app.post("/suggestion/accept", response_model=EventDetails)
def accept_suggestion():
    event = session.accept_suggestion()
    if event is None:
        raise HTTPException(status_code=409, detail="No suggestion open")
    return event_details(event, now_local().tzinfo)


@app.post("/suggestion/dismiss", response_model=SuggestionResponse)
def dismiss_suggestion():
    session.find_my_night.dismiss()
    return SuggestionResponse()


@app.get("/events/{event_id}", response_model=EventDetails)
async def get_event(event_id: str):
    """Select an event for the details view, attaching its place rating."""
    event = session.find_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Unknown event: {event_id}")
    if event.googleData is None and event.address:
        rating = await fetch_place_details(event.address, GOOGLE_PLACES_API_KEY)
        event = event.model_copy(update={"googleData": rating})
    session.select(event)
    return event_details(event, now_local().tzinfo)


@app.delete("/selection")
def clear_selection():
    session.back()
    return {"selected": None}


@app.post("/events/{event_id}/plan", response_model=PlanResponse)
async def plan_night(event_id: str):
    event = session.find_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Unknown event: {event_id}")
    if not GEMINI_API_KEY:
        log.warning("gemini: no api key configured")
        return PlanResponse(eventId=event.id, plan=OFFLINE_PLAN)
    plan = await generate_plan(event, GEMINI_API_KEY, GEMINI_MODEL)
    return PlanResponse(eventId=event.id, plan=plan)
