"""
Photo Op simulation engine.

Owns the GameSession and applies one ordered transaction per tick:

    1. movement   - targets step along the track; those leaving it are dropped
    2. spawn      - at most one new target under the spawn policy
    3. flash      - the active flash rises; targets it captures are removed
                    and at most one point is scored
    4. terminal   - budget exhausted and track empty -> GAME_OVER

External commands (camera position, flash trigger, start/restart) take the
same lock as tick(), so a tick never observes a half-applied update.
"""
import random
import threading
from typing import Callable, List, Optional

from photoop.collision import resolve_flash
from photoop.config import DEFAULT_RULES, GameRules
from photoop.game_state import LifecycleState
from photoop.logging import emit_record, get_logger
from photoop.models import FlashEvent, GameSession, GameSnapshot, TickReport
from photoop.spawner import TargetSpawner

log = get_logger('engine')

StateListener = Callable[[LifecycleState, LifecycleState], None]


class SimulationEngine:
    """Fixed-tick simulation of a Photo Op session."""

    def __init__(
        self,
        rules: GameRules = DEFAULT_RULES,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        """Create an engine in the NOT_STARTED state.

        Args:
            rules: Gameplay constants
            rng: Random source for spawn draws
            seed: Seed used when no rng is given
        """
        self._rules = rules
        self._spawner = TargetSpawner(rules, rng=rng, seed=seed)
        self._session = GameSession(camera_position=rules.initial_camera_position)
        self._lock = threading.RLock()
        self._in_tick = False
        self._tick_count = 0
        self._listeners: List[StateListener] = []

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def state(self) -> LifecycleState:
        return self._session.lifecycle_state

    @property
    def is_playing(self) -> bool:
        return self._session.lifecycle_state == LifecycleState.PLAYING

    @property
    def score(self) -> int:
        return self._session.score

    @property
    def tick_count(self) -> int:
        """Ticks processed in the current session."""
        return self._tick_count

    @property
    def session(self) -> GameSession:
        """The live session. Mutate only through engine commands."""
        return self._session

    def snapshot(self) -> GameSnapshot:
        """Take a consistent read-only view of the session."""
        with self._lock:
            return self._session.snapshot(self._rules.spawn_budget)

    def add_state_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with (old_state, new_state).

        Callbacks run outside the engine lock and may call back into the
        engine. A callback can therefore observe a transition after a later
        one has already happened; read engine.state for the live value.
        """
        self._listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Begin a new session from NOT_STARTED or GAME_OVER."""
        with self._lock:
            old_state = self._session.lifecycle_state
            if not old_state.accepts_start:
                log.warning("start() ignored while %s", old_state.value)
                return

            self._session.reset()
            self._session.lifecycle_state = LifecycleState.PLAYING
            self._tick_count = 0

        log.info("Session started (from %s)", old_state.value)
        emit_record('session', {'type': 'start', 'from_state': old_state.value})
        self._notify(old_state, LifecycleState.PLAYING)

    def restart(self) -> None:
        """Alias for start(), issued from the game-over screen."""
        self.start()

    def _notify(self, old_state: LifecycleState, new_state: LifecycleState) -> None:
        for listener in list(self._listeners):
            listener(old_state, new_state)

    # =========================================================================
    # Input commands
    # =========================================================================

    def set_camera_position(self, raw_x: float, track_left: float, track_width: float) -> None:
        """Map a raw pointer x coordinate onto the track and store it.

        Args:
            raw_x: Pointer x in screen coordinates
            track_left: Screen x of the track's left edge
            track_width: Track width in screen units

        Raises:
            ValueError: If track_width is not positive
        """
        if track_width <= 0:
            raise ValueError(f'Track width must be positive, got {track_width}')

        with self._lock:
            if not self.is_playing:
                return
            position = 100.0 * (raw_x - track_left) / track_width
            self._session.camera_position = max(0.0, min(100.0, position))

    def trigger_flash(self) -> bool:
        """Fire a flash from the current camera position.

        Returns:
            True if a flash was created; False if not playing or one is
            already in flight
        """
        with self._lock:
            if not self.is_playing or self._session.flash is not None:
                return False
            self._session.flash = FlashEvent(position=self._session.camera_position)
            log.debug("Flash triggered at %.2f", self._session.camera_position)
            return True

    # =========================================================================
    # Tick
    # =========================================================================

    def tick(self) -> Optional[TickReport]:
        """Advance the simulation by one fixed step.

        Returns:
            What happened this tick, or None if the session is not PLAYING

        Raises:
            RuntimeError: If called from inside another tick
        """
        with self._lock:
            if self._in_tick:
                raise RuntimeError('SimulationEngine.tick() re-entered')
            if not self.is_playing:
                return None

            self._in_tick = True
            try:
                report = self._step()
            finally:
                self._in_tick = False

            # Read under the lock; a listener may restart the session
            final = None
            if report.game_over:
                final = {
                    'type': 'game_over',
                    'score': self._session.score,
                    'ticks': report.tick,
                    'models_spawned': self._session.models_spawned,
                }

        if final is not None:
            log.info("Game over: score=%d after %d ticks", final['score'], final['ticks'])
            emit_record('session', final)
            self._notify(LifecycleState.PLAYING, LifecycleState.GAME_OVER)
        return report

    def _step(self) -> TickReport:
        session = self._session
        rules = self._rules
        self._tick_count += 1
        report = TickReport(tick=self._tick_count)

        # 1. Movement
        survivors = []
        for target in session.models:
            moved = target.advance()
            if moved.is_on_track:
                survivors.append(moved)
            else:
                report.exited_ids.append(target.id)
        session.models = survivors

        # 2. Spawn
        if self._spawner.should_spawn(len(session.models), session.models_spawned):
            target = self._spawner.spawn()
            session.models.append(target)
            session.models_spawned += 1
            report.spawned = target

        # 3. Flash advance and collisions
        if session.flash is not None:
            flash = session.flash.grow(rules.flash_growth)
            remaining, hits = resolve_flash(session.models, flash.position, flash.height, rules)
            if hits:
                session.models = remaining
                session.score += 1
                report.hit_ids = [t.id for t in hits]
                report.scored = True
                log.debug("Flash at %.2f/%.0f hit %s", flash.position, flash.height, report.hit_ids)
                emit_record('session', {
                    'type': 'hit',
                    'tick': report.tick,
                    'target_ids': report.hit_ids,
                    'score': session.score,
                })

            if flash.height >= rules.flash_max_height:
                session.flash = None
                report.flash_expired = True
            else:
                session.flash = flash

        # 4. Terminal check
        if session.models_spawned >= rules.spawn_budget and not session.models:
            session.lifecycle_state = LifecycleState.GAME_OVER
            report.game_over = True

        log.trace(
            "tick %d: active=%d spawned=%d score=%d flash=%s",
            report.tick, len(session.models), session.models_spawned,
            session.score, session.flash,
        )
        return report