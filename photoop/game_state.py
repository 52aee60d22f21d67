"""Lifecycle states for a Photo Op session.

The only transitions are:
    NOT_STARTED -> PLAYING      (start)
    PLAYING     -> GAME_OVER    (spawn budget exhausted and track empty)
    GAME_OVER   -> PLAYING      (restart)

Ticks and input only have an effect while PLAYING.
"""
from enum import Enum


class LifecycleState(str, Enum):
    """Session lifecycle state.

    Attributes:
        NOT_STARTED: Waiting for the start command
        PLAYING: Active gameplay, ticks and input are live
        GAME_OVER: Budget exhausted and no targets left; waiting for restart
    """
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    GAME_OVER = "game_over"

    @property
    def accepts_start(self) -> bool:
        """Whether start()/restart() is valid from this state."""
        return self in (LifecycleState.NOT_STARTED, LifecycleState.GAME_OVER)
