"""
Photo Op game mode.

A photographer slides along the bottom of the screen following the mouse.
Clicking fires a flash that rises straight up; models crossing the three
lanes are captured if the flash reaches their lane while they are in front
of it. The game ends once all models have been sent out and the track is
empty.

This module is presentation only: it forwards input to the InputAdapter,
drives the TickTimer with frame deltas and draws the engine snapshot.
"""
from typing import List, Optional

import pygame

from photoop import config
from photoop.base_game import BaseGame
from photoop.collision import lane_bottom, lane_top
from photoop.config import DEFAULT_RULES, GameRules
from photoop.engine import SimulationEngine
from photoop.game_state import LifecycleState
from photoop.input import EventType, InputAdapter, InputEvent, TrackGeometry
from photoop.logging import get_logger
from photoop.models import Direction, GameSnapshot, LANE_COUNT
from photoop.ticker import TickTimer

log = get_logger('game_mode')

MODEL_WIDTH = 40
MODEL_HEIGHT = 56
PHOTOGRAPHER_WIDTH = 64
PHOTOGRAPHER_HEIGHT = 64
FLASH_RADIUS = 12
BUTTON_WIDTH = 260
BUTTON_HEIGHT = 64


class PhotoOpMode(BaseGame):
    """Photo Op game mode."""

    NAME = "Photo Op"
    DESCRIPTION = "Time your flash to snap the models crossing the runway."
    VERSION = "1.0.0"
    AUTHOR = "Photo Op Team"

    ARGUMENTS = [
        {
            'name': '--width',
            'type': int,
            'default': None,
            'help': 'Screen width'
        },
        {
            'name': '--height',
            'type': int,
            'default': None,
            'help': 'Screen height'
        },
        {
            'name': '--fps',
            'type': int,
            'default': None,
            'help': 'Frame rate cap'
        },
        {
            'name': '--fullscreen',
            'action': 'store_true',
            'default': False,
            'help': 'Run fullscreen'
        },
    ]

    def __init__(
        self,
        screen_width: Optional[int] = None,
        screen_height: Optional[int] = None,
        rules: GameRules = DEFAULT_RULES,
        seed: Optional[int] = None,
        engine: Optional[SimulationEngine] = None,
        **kwargs,
    ):
        """Initialize the game in the NOT_STARTED state.

        Args:
            screen_width: Screen width (default from config)
            screen_height: Screen height (default from config)
            rules: Gameplay constants
            seed: Random seed for spawns (None = nondeterministic)
            engine: Pre-built engine (overrides rules and seed)
        """
        self._screen_width = screen_width or config.SCREEN_WIDTH
        self._screen_height = screen_height or config.SCREEN_HEIGHT

        self._engine = engine or SimulationEngine(rules=rules, seed=seed)
        self._ticker = TickTimer(self._engine)
        self._adapter = InputAdapter(self._engine, self._track_geometry())

        self._font: Optional[pygame.font.Font] = None
        self._font_large: Optional[pygame.font.Font] = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def engine(self) -> SimulationEngine:
        return self._engine

    @property
    def ticker(self) -> TickTimer:
        return self._ticker

    @property
    def state(self) -> LifecycleState:
        return self._engine.state

    def get_score(self) -> int:
        return self._engine.score

    def _track_geometry(self) -> TrackGeometry:
        return TrackGeometry(left=0.0, width=float(self._screen_width))

    def resize(self, width: int, height: int) -> None:
        """Adopt a new screen size."""
        self._screen_width = width
        self._screen_height = height
        self._adapter.resize(self._track_geometry())
        log.debug("Screen resized to %dx%d", width, height)

    def close(self) -> None:
        """Stop ticking; the game can no longer advance."""
        self._ticker.stop()

    # =========================================================================
    # Input
    # =========================================================================

    def button_rect(self) -> pygame.Rect:
        """Screen rectangle of the Start/Restart button."""
        rect = pygame.Rect(0, 0, BUTTON_WIDTH, BUTTON_HEIGHT)
        if self.state == LifecycleState.GAME_OVER:
            rect.center = (self._screen_width // 2, self._screen_height // 2 + 90)
        else:
            rect.center = (self._screen_width // 2, self._screen_height // 2)
        return rect

    def press_start(self) -> None:
        """Start from the title screen or restart after game over."""
        if self.state == LifecycleState.NOT_STARTED:
            self._adapter.start()
        elif self.state == LifecycleState.GAME_OVER:
            self._adapter.restart()

    def handle_input(self, events: List[InputEvent]) -> None:
        """Process input events.

        MOVE events steer the camera; CLICK events press the overlay
        button when it is shown, otherwise fire a flash.
        """
        for event in events:
            if event.event_type == EventType.MOVE:
                self._adapter.pointer_move(event.position.x, event.position.y)
            elif event.event_type == EventType.CLICK:
                self._handle_click(event)

    def _handle_click(self, event: InputEvent) -> None:
        if self.state != LifecycleState.PLAYING:
            if self.button_rect().collidepoint(event.position.x, event.position.y):
                self.press_start()
            return
        self._adapter.click()

    # =========================================================================
    # Update
    # =========================================================================

    def update(self, dt: float) -> None:
        """Advance the simulation by the elapsed frame time."""
        self._ticker.update(dt)

    # =========================================================================
    # Rendering
    # =========================================================================

    def _get_font(self) -> pygame.font.Font:
        """Get or create font."""
        if self._font is None:
            self._font = pygame.font.Font(None, 36)
        return self._font

    def _get_font_large(self) -> pygame.font.Font:
        """Get or create large font."""
        if self._font_large is None:
            self._font_large = pygame.font.Font(None, 72)
        return self._font_large

    def _to_screen_x(self, position: float) -> int:
        return int(self._screen_width * position / 100.0)

    def _to_screen_y(self, height: float) -> int:
        """Convert a height measured up from the bottom into screen y."""
        return int(self._screen_height * (1.0 - height / 100.0))

    def render(self, screen: pygame.Surface) -> None:
        """Render the current snapshot."""
        snapshot = self._engine.snapshot()

        screen.fill(config.BACKGROUND_COLOR)
        self._render_lanes(screen)
        for target in snapshot.models:
            self._render_model(screen, target.position, target.row, target.model_type, target.direction)
        if snapshot.flash is not None:
            self._render_flash(screen, snapshot.flash.position, snapshot.flash.height)
        self._render_photographer(screen, snapshot.camera_position)
        self._render_ui(screen, snapshot)

        if snapshot.lifecycle_state == LifecycleState.NOT_STARTED:
            self._render_title(screen)
        elif snapshot.lifecycle_state == LifecycleState.GAME_OVER:
            self._render_game_over(screen, snapshot)

    def _render_lanes(self, screen: pygame.Surface) -> None:
        rules = self._engine.rules
        for row in range(LANE_COUNT):
            top = self._to_screen_y(lane_top(row, rules))
            bottom = self._to_screen_y(lane_bottom(row, rules))
            pygame.draw.rect(screen, config.LANE_COLOR, (0, top, self._screen_width, bottom - top))

        # Runway the photographer walks on
        track_top = self._to_screen_y(PHOTOGRAPHER_HEIGHT * 100.0 / self._screen_height)
        pygame.draw.rect(
            screen, config.TRACK_COLOR,
            (0, track_top, self._screen_width, self._screen_height - track_top),
        )

    def _render_model(
        self,
        screen: pygame.Surface,
        position: float,
        row: int,
        model_type: int,
        direction: Direction,
    ) -> None:
        """Draw a model standing in its lane; left edge at its position."""
        x = self._to_screen_x(position)
        bottom = self._to_screen_y(lane_bottom(row, self._engine.rules))
        rect = pygame.Rect(x, bottom - MODEL_HEIGHT, MODEL_WIDTH, MODEL_HEIGHT)
        color = config.MODEL_COLORS[(model_type - 1) % len(config.MODEL_COLORS)]
        pygame.draw.rect(screen, color, rect, border_radius=8)

        # Face marker shows which way the model is walking
        face_x = rect.left + 8 if direction == Direction.LEFT else rect.right - 8
        pygame.draw.circle(screen, (255, 255, 255), (face_x, rect.top + 12), 5)

    def _render_flash(self, screen: pygame.Surface, position: float, height: float) -> None:
        center = (self._to_screen_x(position), self._to_screen_y(height))
        surf = pygame.Surface((FLASH_RADIUS * 4, FLASH_RADIUS * 4), pygame.SRCALPHA)
        pygame.draw.circle(surf, (*config.FLASH_COLOR, 90), (FLASH_RADIUS * 2, FLASH_RADIUS * 2), FLASH_RADIUS * 2)
        pygame.draw.circle(surf, config.FLASH_COLOR, (FLASH_RADIUS * 2, FLASH_RADIUS * 2), FLASH_RADIUS)
        screen.blit(surf, (center[0] - FLASH_RADIUS * 2, center[1] - FLASH_RADIUS * 2))

    def _render_photographer(self, screen: pygame.Surface, camera_position: float) -> None:
        x = self._to_screen_x(camera_position)
        body = pygame.Rect(0, 0, PHOTOGRAPHER_WIDTH, PHOTOGRAPHER_HEIGHT)
        body.midbottom = (x, self._screen_height)
        pygame.draw.rect(screen, config.PHOTOGRAPHER_COLOR, body, border_radius=10)
        # Camera lens pointing up
        pygame.draw.circle(screen, (30, 30, 30), (x, body.top + 14), 10)

    def _render_ui(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        font = self._get_font()

        score_text = font.render(f"Score: {snapshot.score}", True, config.HUD_COLOR)
        screen.blit(score_text, (10, 10))

        models_text = font.render(
            f"Models: {snapshot.models_spawned}/{snapshot.spawn_budget}",
            True, config.HUD_COLOR,
        )
        screen.blit(models_text, (self._screen_width - models_text.get_width() - 10, 10))

    def _render_overlay(self, screen: pygame.Surface) -> None:
        overlay = pygame.Surface((self._screen_width, self._screen_height), pygame.SRCALPHA)
        overlay.fill(config.OVERLAY_COLOR)
        screen.blit(overlay, (0, 0))

    def _render_button(self, screen: pygame.Surface, label: str) -> None:
        rect = self.button_rect()
        pygame.draw.rect(screen, config.BUTTON_COLOR, rect, border_radius=12)
        text = self._get_font().render(label, True, config.BUTTON_TEXT_COLOR)
        screen.blit(text, text.get_rect(center=rect.center))

    def _render_title(self, screen: pygame.Surface) -> None:
        """Render the start screen."""
        self._render_overlay(screen)
        self._render_button(screen, "Start Game")

    def _render_game_over(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Render game over panel."""
        self._render_overlay(screen)
        cx, cy = self._screen_width // 2, self._screen_height // 2

        title = self._get_font_large().render("Game Over!", True, (255, 80, 80))
        screen.blit(title, title.get_rect(center=(cx, cy - 60)))

        score_text = self._get_font().render(f"Final Score: {snapshot.score}", True, config.HUD_COLOR)
        screen.blit(score_text, score_text.get_rect(center=(cx, cy + 10)))

        self._render_button(screen, "Restart Game")
