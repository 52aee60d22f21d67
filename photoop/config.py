"""
Photo Op - Configuration loader.

Display settings load from a .env file beside this module, with sensible
defaults; real environment variables take precedence. Gameplay constants are
fixed and live in GameRules.
"""
import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Load .env from package directory
_env_path = Path(__file__).parent / '.env'
load_dotenv(_env_path)


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_optional_int(key: str) -> Optional[int]:
    """Get integer from environment, or None when unset/empty."""
    val = os.getenv(key, '').strip()
    return int(val) if val else None


# Display
SCREEN_WIDTH = _get_int('SCREEN_WIDTH', 1280)
SCREEN_HEIGHT = _get_int('SCREEN_HEIGHT', 720)
FPS = _get_int('FPS', 60)
FULLSCREEN = _get_bool('FULLSCREEN', False)
SEED = _get_optional_int('SEED')  # None = nondeterministic spawns

# Visual
BACKGROUND_COLOR = (28, 30, 38)
TRACK_COLOR = (60, 62, 74)
LANE_COLOR = (42, 44, 56)
HUD_COLOR = (240, 240, 240)
FLASH_COLOR = (255, 255, 210)
PHOTOGRAPHER_COLOR = (90, 170, 255)
OVERLAY_COLOR = (0, 0, 0, 170)
BUTTON_COLOR = (255, 196, 0)
BUTTON_TEXT_COLOR = (20, 20, 20)
MODEL_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (255, 105, 180),  # Type 1 - pink
    (120, 220, 140),  # Type 2 - green
    (255, 160, 80),   # Type 3 - orange
)


class GameRules(BaseModel):
    """Fixed gameplay constants for the simulation.

    Positions and heights are percentages of the play area (0-100).
    Per-tick quantities are applied once per fixed tick.
    """
    tick_period: float = Field(default=0.05, gt=0)        # Seconds per tick
    spawn_probability: float = Field(default=0.05, ge=0, le=1)
    max_active_models: int = Field(default=15, gt=0)      # Concurrency cap
    spawn_budget: int = Field(default=100, gt=0)          # Targets per session
    speed_min: float = Field(default=0.5, gt=0)           # Units per tick
    speed_max: float = Field(default=1.0, gt=0)           # Exclusive
    flash_growth: float = Field(default=5.0, gt=0)        # Units per tick
    flash_max_height: float = Field(default=100.0, gt=0)
    hit_tolerance: float = Field(default=5.0, gt=0)
    lane_base: float = 16.0
    lane_spacing: float = 20.0
    lane_band_height: float = 8.0
    initial_camera_position: float = Field(default=50.0, ge=0, le=100)

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    @model_validator(mode='after')
    def check_speed_range(self) -> 'GameRules':
        if self.speed_min >= self.speed_max:
            raise ValueError(
                f'speed_min ({self.speed_min}) must be below speed_max ({self.speed_max})'
            )
        return self


DEFAULT_RULES = GameRules()
