"""
Photo Op.

Arcade mini-game: a photographer follows the pointer along a track and
times camera flashes to capture models crossing three lanes.

Provides:
- engine: SimulationEngine, the fixed-tick simulation and lifecycle
- ticker: TickTimer, drives the engine at a fixed period
- models: Target, FlashEvent, GameSession, GameSnapshot
- collision: lane geometry and flash hit tests
- spawner: seedable target spawner
- input: mouse source and the InputAdapter
- game_mode: pygame presentation (PhotoOpMode)
"""

from photoop.config import DEFAULT_RULES, GameRules
from photoop.engine import SimulationEngine
from photoop.game_state import LifecycleState
from photoop.models import Direction, FlashEvent, GameSession, GameSnapshot, Target, TickReport
from photoop.ticker import TickTimer

__version__ = "1.0.0"

__all__ = [
    'DEFAULT_RULES',
    'GameRules',
    'SimulationEngine',
    'LifecycleState',
    'Direction',
    'FlashEvent',
    'GameSession',
    'GameSnapshot',
    'Target',
    'TickReport',
    'TickTimer',
]
