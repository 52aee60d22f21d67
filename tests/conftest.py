"""Shared fixtures for Photo Op tests."""
import os

# Headless pygame for input and rendering tests
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pygame
import pytest

from photoop import logging as photoop_logging
from photoop.config import GameRules
from photoop.engine import SimulationEngine
from photoop.models import Direction, Target


@pytest.fixture
def quiet_rules():
    """Rules with spawning disabled, for hand-built scenarios."""
    return GameRules(spawn_probability=0.0)


@pytest.fixture
def busy_rules():
    """Rules that spawn on every tick the caps allow."""
    return GameRules(spawn_probability=1.0)


@pytest.fixture
def engine(quiet_rules):
    """Engine that never spawns on its own, in NOT_STARTED."""
    return SimulationEngine(rules=quiet_rules, seed=1234)


@pytest.fixture
def playing_engine(engine):
    """Engine that never spawns on its own, already PLAYING."""
    engine.start()
    return engine


@pytest.fixture
def make_target():
    """Factory for targets with sensible defaults."""
    counter = iter(range(1000, 100000))

    def _make(position=50.0, speed=0.5, direction=Direction.RIGHT, row=0, model_type=1, id=None):
        return Target(
            id=next(counter) if id is None else id,
            position=position,
            speed=speed,
            direction=direction,
            row=row,
            model_type=model_type,
        )

    return _make


@pytest.fixture(autouse=True)
def clean_sinks():
    """Make sure no structured-log sink leaks between tests."""
    yield
    photoop_logging.close_all_sinks()


@pytest.fixture
def logging_config():
    """Snapshot and restore the global logging configuration."""
    saved = {
        'default_level': photoop_logging._config['default_level'],
        'module_levels': dict(photoop_logging._config['module_levels']),
        'log_dir': photoop_logging._config['log_dir'],
        'channels': dict(photoop_logging._config['channels']),
    }
    yield photoop_logging._config
    photoop_logging._config.update(saved)


@pytest.fixture
def pygame_display():
    """Initialize pygame with a tiny hidden display."""
    pygame.init()
    pygame.display.set_mode((1, 1))
    pygame.event.clear()
    yield
    pygame.quit()
