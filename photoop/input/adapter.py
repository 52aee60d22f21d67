"""
Input Adapter - turns pointer input into simulation commands.

The adapter knows the on-screen geometry of the track; the engine only
ever sees normalized camera positions and discrete commands.
"""
from dataclasses import dataclass

from photoop.engine import SimulationEngine
from photoop.logging import get_logger

log = get_logger('input_adapter')


@dataclass(frozen=True)
class TrackGeometry:
    """Horizontal extent of the track on screen."""
    left: float
    width: float

    def __post_init__(self):
        if self.width <= 0:
            raise ValueError(f'Track width must be positive, got {self.width}')


class InputAdapter:
    """Feeds pointer movement, clicks and start/restart into an engine."""

    def __init__(self, engine: SimulationEngine, track: TrackGeometry):
        self._engine = engine
        self._track = track

    @property
    def track(self) -> TrackGeometry:
        return self._track

    def resize(self, track: TrackGeometry) -> None:
        """Use new track geometry (window resized)."""
        self._track = track

    def pointer_move(self, x: float, y: float) -> None:
        """Follow the pointer. Only the x coordinate matters."""
        self._engine.set_camera_position(x, self._track.left, self._track.width)

    def click(self) -> bool:
        """Trigger a flash; returns True if one was fired."""
        fired = self._engine.trigger_flash()
        if not fired:
            log.trace("Click dropped (state=%s)", self._engine.state.value)
        return fired

    def start(self) -> None:
        self._engine.start()

    def restart(self) -> None:
        self._engine.restart()
