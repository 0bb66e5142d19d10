# picker.py
# "Find My Night": random pick over the visible events + the suggestion flow

from __future__ import annotations
import logging
import random
from typing import List, Optional, Sequence

from models import Event

log = logging.getLogger(__name__)


class NightPicker:
    """
    Uniform random pick. Stateless by default: re-picking may repeat.
    With avoid_repeat=True the previous pick is skipped whenever there is
    another candidate to offer.
    """

    def __init__(self, rng: random.Random | None = None, avoid_repeat: bool = False):
        self._rng = rng or random.Random()
        self.avoid_repeat = avoid_repeat
        self._last_id: Optional[str] = None

    def pick(self, candidates: Sequence[Event]) -> Optional[Event]:
        if not candidates:
            return None
        pool = list(candidates)
        if self.avoid_repeat and self._last_id is not None:
            fresh = [ev for ev in pool if ev.id != self._last_id]
            if fresh:
                pool = fresh
        choice = self._rng.choice(pool)
        self._last_id = choice.id
        return choice


class FindMyNight:
    """
    Suggestion affordance state: closed, or open showing one picked event.

    open()    pick and show; stays closed (returns False) on no candidates
    retry()   pick again from the same candidates, stays open
    accept()  close, hand back the event to show in details
    dismiss() close, nothing selected
    """

    def __init__(self, picker: NightPicker | None = None):
        self.picker = picker or NightPicker()
        self._candidates: List[Event] = []
        self.current: Optional[Event] = None

    @property
    def visible(self) -> bool:
        return self.current is not None

    def open(self, candidates: Sequence[Event]) -> bool:
        picked = self.picker.pick(candidates)
        if picked is None:
            log.info("find-my-night: no events to pick from")
            self._close()
            return False
        self._candidates = list(candidates)
        self.current = picked
        return True

    def retry(self) -> Optional[Event]:
        if not self.visible:
            return None
        self.current = self.picker.pick(self._candidates)
        return self.current

    def accept(self) -> Optional[Event]:
        event = self.current
        self._close()
        return event

    def dismiss(self) -> None:
        self._close()

    def _close(self) -> None:
        self.current = None
        self._candidates = []
