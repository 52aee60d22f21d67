"""
Fixed-period tick timer.

The frame loop runs at whatever rate the display allows; the simulation
advances in fixed steps. TickTimer accumulates frame deltas and fires
engine.tick() once per elapsed period.

The timer follows the engine lifecycle through a state listener: it starts
when the engine enters PLAYING and stops (dropping any accumulated time) as
soon as it leaves, including when a tick it fired ends the game.
"""
from typing import List, Optional

from photoop.engine import SimulationEngine
from photoop.game_state import LifecycleState
from photoop.logging import get_logger
from photoop.models import TickReport

log = get_logger('ticker')

# Cap on ticks fired by a single update(); older backlog is dropped
MAX_TICKS_PER_UPDATE = 5


class TickTimer:
    """Drives a SimulationEngine at a fixed period from frame deltas."""

    def __init__(
        self,
        engine: SimulationEngine,
        period: Optional[float] = None,
        max_ticks_per_update: int = MAX_TICKS_PER_UPDATE,
    ):
        """Attach a timer to an engine.

        Args:
            engine: Engine to tick
            period: Seconds per tick (default: engine.rules.tick_period)
            max_ticks_per_update: Upper bound on ticks fired per update()
        """
        self._engine = engine
        self._period = period if period is not None else engine.rules.tick_period
        self._max_ticks = max_ticks_per_update
        self._accumulator = 0.0
        self._running = False
        self._attached = True

        engine.add_state_listener(self._on_state_change)
        if engine.is_playing:
            self._start()

    @property
    def period(self) -> float:
        return self._period

    @property
    def running(self) -> bool:
        """True while the timer will fire ticks."""
        return self._running

    @property
    def pending(self) -> float:
        """Accumulated time not yet consumed by a tick."""
        return self._accumulator

    def _on_state_change(self, old_state: LifecycleState, new_state: LifecycleState) -> None:
        # Notifications may arrive out of order; follow the live state
        if self._engine.is_playing:
            self._start()
        else:
            self._halt()

    def _start(self) -> None:
        if not self._attached or self._running:
            return
        self._accumulator = 0.0
        self._running = True
        log.debug("Tick timer started (period=%.3fs)", self._period)

    def _halt(self) -> None:
        if self._running:
            log.debug("Tick timer stopped")
        self._running = False
        self._accumulator = 0.0

    def stop(self) -> None:
        """Tear the timer down for good; no tick fires after this."""
        self._halt()
        self._attached = False
        self._engine.remove_state_listener(self._on_state_change)

    def update(self, dt: float) -> List[TickReport]:
        """Consume elapsed time and fire due ticks.

        Args:
            dt: Seconds since the previous update

        Returns:
            Reports of the ticks fired, in order
        """
        reports: List[TickReport] = []
        if not self._running:
            return reports

        self._accumulator += dt
        while self._running and self._accumulator >= self._period:
            if len(reports) >= self._max_ticks:
                log.warning("Dropping %.3fs of tick backlog", self._accumulator)
                self._accumulator = 0.0
                break
            self._accumulator -= self._period
            report = self._engine.tick()
            if report is None:
                self._halt()
                break
            reports.append(report)

        return reports
