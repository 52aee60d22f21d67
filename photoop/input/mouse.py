"""
Mouse input - pygame motion and left clicks as InputEvents.
"""
import time
from typing import List

import pygame

from photoop.input.input_event import EventType, InputEvent
from photoop.models import Point2D


class MouseInputSource:
    """Pulls mouse events off the pygame queue once per frame.

    Motion becomes MOVE, a left-button press becomes CLICK. Button releases
    and other buttons are dropped. Everything else is put back on the queue
    for the main loop (quit, keys).
    """

    def __init__(self):
        self._pending: List[InputEvent] = []

    def collect(self) -> None:
        """Drain the pygame queue of mouse events."""
        passthrough = []
        for event in pygame.event.get():
            if event.type == pygame.MOUSEMOTION:
                self._queue(event.pos, EventType.MOVE)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._queue(event.pos, EventType.CLICK)
            elif event.type != pygame.MOUSEBUTTONUP:
                passthrough.append(event)

        for event in passthrough:
            pygame.event.post(event)

    def poll_events(self) -> List[InputEvent]:
        """Hand over events collected since the last poll."""
        events, self._pending = self._pending, []
        return events

    def _queue(self, pos, event_type: EventType) -> None:
        x, y = pos
        self._pending.append(InputEvent(
            position=Point2D(x=float(x), y=float(y)),
            timestamp=time.monotonic(),
            event_type=event_type,
        ))
