"""
Input layer for Photo Op.

MouseInputSource turns pygame mouse events into InputEvents; the
InputAdapter maps them onto simulation commands.
"""

from photoop.input.input_event import EventType, InputEvent
from photoop.input.mouse import MouseInputSource
from photoop.input.adapter import InputAdapter, TrackGeometry

__all__ = ['EventType', 'InputEvent', 'MouseInputSource', 'InputAdapter', 'TrackGeometry']
