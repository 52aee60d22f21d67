"""
Input Event - Represents a single pointer action.

Uses a frozen dataclass so events stay immutable once queued.
"""
from dataclasses import dataclass
from enum import Enum

from photoop.models import Point2D


class EventType(str, Enum):
    """Types of pointer events.

    Attributes:
        CLICK: Primary button pressed (trigger flash or press a button)
        MOVE: Pointer moved (camera follows)
    """
    CLICK = "click"
    MOVE = "move"


@dataclass(frozen=True)
class InputEvent:
    """Immutable input event from any source.

    Attributes:
        position: Where the event occurred (screen coordinates)
        timestamp: When the event occurred (seconds, monotonic clock)
        event_type: CLICK or MOVE
    """
    position: Point2D
    timestamp: float
    event_type: EventType = EventType.CLICK

    def __post_init__(self):
        """Validate timestamp is non-negative."""
        if self.timestamp < 0:
            raise ValueError(f'Timestamp must be non-negative, got {self.timestamp}')

    def __str__(self) -> str:
        return (f"InputEvent(pos=({self.position.x:.2f}, {self.position.y:.2f}), "
                f"t={self.timestamp:.3f}, type={self.event_type.value})")
