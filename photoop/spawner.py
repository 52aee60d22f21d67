"""
Photo Op - Target spawner.

Each tick rolls once against the spawn probability. Random draws come from
an injected random.Random so scenarios can be replayed from a seed; target
ids come from a monotonic counter that is never reset, so ids cannot
collide within (or across) sessions.
"""
import itertools
import random
from typing import Optional

from photoop.config import DEFAULT_RULES, GameRules
from photoop.logging import get_logger
from photoop.models import Direction, LANE_COUNT, MODEL_TYPE_COUNT, Target

log = get_logger('spawner')


class TargetSpawner:
    """Spawns targets at the track edges under the per-tick spawn policy."""

    def __init__(
        self,
        rules: GameRules = DEFAULT_RULES,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        """Initialize the spawner.

        Args:
            rules: Spawn probability, caps and speed range
            rng: Random source to draw from (takes precedence over seed)
            seed: Seed for a private random source
        """
        self._rules = rules
        self._rng = rng if rng is not None else random.Random(seed)
        self._ids = itertools.count(1)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def should_spawn(self, active_count: int, spawned_count: int) -> bool:
        """Roll for a spawn this tick.

        The probability roll is always drawn first so the random stream
        advances once per tick regardless of the caps.

        Args:
            active_count: Targets currently on the track (after movement)
            spawned_count: Targets spawned so far this session

        Returns:
            True if a target should spawn
        """
        roll = self._rng.random()
        if roll >= self._rules.spawn_probability:
            return False

        # Don't exceed max targets
        if active_count >= self._rules.max_active_models:
            return False

        if spawned_count >= self._rules.spawn_budget:
            return False

        return True

    def spawn(self) -> Target:
        """Create a new target at the edge it moves away from."""
        direction = Direction.LEFT if self._rng.random() < 0.5 else Direction.RIGHT
        row = self._rng.randrange(LANE_COUNT)
        model_type = self._rng.randrange(MODEL_TYPE_COUNT) + 1
        speed_span = self._rules.speed_max - self._rules.speed_min
        speed = self._rng.random() * speed_span + self._rules.speed_min

        target = Target(
            id=next(self._ids),
            position=direction.spawn_edge,
            speed=speed,
            direction=direction,
            row=row,
            model_type=model_type,
        )
        log.debug("Spawned %s speed=%.3f", target, speed)
        return target
