"""
Photo Op data models.

Targets, flashes and snapshots are immutable Pydantic models; movement and
flash growth return new instances. GameSession is the single mutable
aggregate the engine owns.

All horizontal positions and flash heights are percentages of the play
area, in the range [0, 100].
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from photoop.game_state import LifecycleState

TRACK_MIN = 0.0
TRACK_MAX = 100.0
LANE_COUNT = 3
MODEL_TYPE_COUNT = 3


class Direction(str, Enum):
    """Horizontal travel direction of a target."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def sign(self) -> int:
        """+1 when moving right, -1 when moving left."""
        return 1 if self is Direction.RIGHT else -1

    @property
    def spawn_edge(self) -> float:
        """Track edge a target moving this way enters from."""
        return TRACK_MAX if self is Direction.LEFT else TRACK_MIN


class Point2D(BaseModel):
    """Immutable 2D point in screen coordinates."""
    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"


def on_track(position: float) -> bool:
    """Check if a horizontal position lies within the track bounds."""
    return TRACK_MIN <= position <= TRACK_MAX


class Target(BaseModel):
    """Immutable state of a moving target ("model").

    Attributes:
        id: Unique identifier, stable for the target's lifetime
        position: Horizontal coordinate in [0, 100]
        speed: Distance travelled per tick. Only positivity is checked
            here; the spawner draws it from the GameRules speed range
            ([0.5, 1.0) by default), which GameRules validates.
        direction: Travel direction, fixed at spawn
        row: Lane index in [0, LANE_COUNT)
        model_type: Cosmetic variant in [1, MODEL_TYPE_COUNT]

    Examples:
        >>> t = Target(id=1, position=50.0, speed=0.5,
        ...            direction=Direction.RIGHT, row=1, model_type=2)
        >>> t.advance().position
        50.5
    """
    id: int = Field(..., ge=0)
    position: float = Field(..., ge=TRACK_MIN, le=TRACK_MAX)
    speed: float = Field(..., gt=0)
    direction: Direction
    row: int = Field(..., ge=0, lt=LANE_COUNT)
    model_type: int = Field(..., ge=1, le=MODEL_TYPE_COUNT)

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    def advance(self) -> 'Target':
        """Move one tick along the track.

        The result is not validated: a target that leaves the track is
        returned with an out-of-range position so the caller can drop it.
        """
        return self.model_copy(
            update={'position': self.position + self.direction.sign * self.speed}
        )

    @property
    def is_on_track(self) -> bool:
        return on_track(self.position)

    def __str__(self) -> str:
        return (f"Target(id={self.id}, pos={self.position:.2f}, "
                f"row={self.row}, dir={self.direction.value})")


class FlashEvent(BaseModel):
    """A single in-flight camera flash.

    The horizontal position is fixed at trigger time; only the height grows.
    """
    position: float = Field(..., ge=TRACK_MIN, le=TRACK_MAX)
    height: float = Field(default=0.0, ge=0)

    model_config = ConfigDict(frozen=True)

    def grow(self, increment: float) -> 'FlashEvent':
        """Return a copy raised by `increment`."""
        return self.model_copy(update={'height': self.height + increment})


class GameSnapshot(BaseModel):
    """Read-only view of a session, taken once per frame by the renderer."""
    score: int = Field(..., ge=0)
    models_spawned: int = Field(..., ge=0)
    spawn_budget: int = Field(..., gt=0)
    camera_position: float = Field(..., ge=TRACK_MIN, le=TRACK_MAX)
    models: Tuple[Target, ...] = ()
    flash: Optional[FlashEvent] = None
    lifecycle_state: LifecycleState

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def models_remaining(self) -> int:
        """Targets still to be spawned this session."""
        return self.spawn_budget - self.models_spawned


@dataclass
class GameSession:
    """Mutable state bundle for one play session.

    Owned exclusively by SimulationEngine; everything else reads snapshots.
    """
    lifecycle_state: LifecycleState = LifecycleState.NOT_STARTED
    score: int = 0
    camera_position: float = 50.0
    models_spawned: int = 0
    models: List[Target] = field(default_factory=list)
    flash: Optional[FlashEvent] = None

    def reset(self) -> None:
        """Clear per-session progress. Camera position is left as is."""
        self.score = 0
        self.models_spawned = 0
        self.models = []
        self.flash = None

    def snapshot(self, spawn_budget: int) -> GameSnapshot:
        return GameSnapshot(
            score=self.score,
            models_spawned=self.models_spawned,
            spawn_budget=spawn_budget,
            camera_position=self.camera_position,
            models=tuple(self.models),
            flash=self.flash,
            lifecycle_state=self.lifecycle_state,
        )


@dataclass
class TickReport:
    """What happened during one simulation tick."""
    tick: int
    spawned: Optional[Target] = None
    exited_ids: List[int] = field(default_factory=list)
    hit_ids: List[int] = field(default_factory=list)
    scored: bool = False
    flash_expired: bool = False
    game_over: bool = False
