# search.py
# city/state/radius holder; a whole-tuple update re-fetches every subscriber

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, List

from models import SearchParams

log = logging.getLogger(__name__)

Listener = Callable[[SearchParams], Awaitable[None]]


class SearchController:
    def __init__(self, params: SearchParams):
        self._params = params
        self._listeners: List[Listener] = []

    @property
    def params(self) -> SearchParams:
        return self._params

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    async def update(self, params: SearchParams) -> None:
        """Replace the search tuple and wait for every listener to re-fetch."""
        self._params = params
        log.info("search: %s, %s within %s mi", params.city, params.stateCode, params.radius)
        if self._listeners:
            await asyncio.gather(*(listener(params) for listener in self._listeners))
