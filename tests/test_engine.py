"""
Tests for the simulation engine.

Covers the lifecycle state machine, input commands, the ordered tick
transaction, scoring and the terminal condition.
"""

import threading
from unittest.mock import Mock

import pytest

from photoop import logging as photoop_logging
from photoop.engine import SimulationEngine
from photoop.game_state import LifecycleState
from photoop.models import Direction, FlashEvent


# ============================================================================
# Lifecycle
# ============================================================================


class TestLifecycle:
    """Test start/restart and the NOT_STARTED -> PLAYING -> GAME_OVER cycle."""

    def test_initial_state(self, engine):
        assert engine.state == LifecycleState.NOT_STARTED
        assert engine.score == 0
        assert engine.session.camera_position == 50.0

    def test_start_enters_playing(self, engine):
        engine.start()
        assert engine.state == LifecycleState.PLAYING
        assert engine.is_playing

    def test_start_while_playing_is_ignored(self, playing_engine, make_target):
        """A second start does not wipe a running session."""
        playing_engine.session.score = 3
        playing_engine.session.models.append(make_target())

        playing_engine.start()

        assert playing_engine.score == 3
        assert len(playing_engine.session.models) == 1

    def test_restart_resets_state(self, playing_engine, make_target):
        """Restart from GAME_OVER with score 7 clears everything."""
        session = playing_engine.session
        session.score = 7
        session.models_spawned = 100
        session.lifecycle_state = LifecycleState.GAME_OVER
        session.models.append(make_target())
        session.flash = FlashEvent(position=10.0, height=30.0)

        playing_engine.restart()

        assert playing_engine.state == LifecycleState.PLAYING
        assert session.score == 0
        assert session.models_spawned == 0
        assert session.models == []
        assert session.flash is None

    def test_tick_ignored_before_start(self, engine):
        assert engine.tick() is None
        assert engine.tick_count == 0

    def test_state_listeners(self, engine):
        listener = Mock()
        engine.add_state_listener(listener)

        engine.start()
        listener.assert_called_once_with(LifecycleState.NOT_STARTED, LifecycleState.PLAYING)

        listener.reset_mock()
        engine.session.models_spawned = engine.rules.spawn_budget
        engine.tick()
        listener.assert_called_once_with(LifecycleState.PLAYING, LifecycleState.GAME_OVER)

    def test_removed_listener_not_called(self, engine):
        listener = Mock()
        engine.add_state_listener(listener)
        engine.remove_state_listener(listener)
        engine.start()
        listener.assert_not_called()


# ============================================================================
# Input commands
# ============================================================================


class TestCameraPosition:
    """Test set_camera_position()."""

    def test_maps_pointer_onto_track(self, playing_engine):
        playing_engine.set_camera_position(350.0, track_left=100.0, track_width=1000.0)
        assert playing_engine.session.camera_position == pytest.approx(25.0)

    @pytest.mark.parametrize('raw_x,expected', [(-50.0, 0.0), (5000.0, 100.0)])
    def test_clamped(self, playing_engine, raw_x, expected):
        """Out-of-range pointer positions are clamped, not rejected."""
        playing_engine.set_camera_position(raw_x, track_left=0.0, track_width=1000.0)
        assert playing_engine.session.camera_position == expected

    def test_ignored_when_not_playing(self, engine):
        engine.set_camera_position(0.0, track_left=0.0, track_width=1000.0)
        assert engine.session.camera_position == 50.0

    @pytest.mark.parametrize('width', [0.0, -10.0])
    def test_invalid_track_width(self, playing_engine, width):
        with pytest.raises(ValueError, match='Track width must be positive'):
            playing_engine.set_camera_position(10.0, track_left=0.0, track_width=width)


class TestTriggerFlash:
    """Test trigger_flash()."""

    def test_creates_flash_at_camera(self, playing_engine):
        playing_engine.set_camera_position(300.0, track_left=0.0, track_width=1000.0)
        assert playing_engine.trigger_flash() is True
        flash = playing_engine.session.flash
        assert flash.position == pytest.approx(30.0)
        assert flash.height == 0.0

    def test_at_most_one_flash(self, playing_engine):
        """A second trigger while one is in flight is dropped."""
        assert playing_engine.trigger_flash() is True
        playing_engine.set_camera_position(900.0, track_left=0.0, track_width=1000.0)
        assert playing_engine.trigger_flash() is False
        assert playing_engine.session.flash.position == 50.0

    def test_ignored_when_not_playing(self, engine):
        assert engine.trigger_flash() is False
        assert engine.session.flash is None

    def test_flash_position_fixed_after_camera_moves(self, playing_engine):
        playing_engine.trigger_flash()
        playing_engine.set_camera_position(0.0, track_left=0.0, track_width=1000.0)
        playing_engine.tick()
        assert playing_engine.session.flash.position == 50.0


# ============================================================================
# Tick
# ============================================================================


class TestMovement:
    """Test step 1 of the tick."""

    def test_targets_move(self, playing_engine, make_target):
        session = playing_engine.session
        session.models = [
            make_target(id=1, position=40.0, speed=0.5, direction=Direction.RIGHT),
            make_target(id=2, position=40.0, speed=0.75, direction=Direction.LEFT),
        ]
        playing_engine.tick()
        assert [t.position for t in session.models] == [pytest.approx(40.5), pytest.approx(39.25)]

    def test_right_edge_removal(self, playing_engine, make_target):
        """A target at 99.6 moving right at 0.5 leaves the track next tick."""
        playing_engine.session.models = [make_target(id=9, position=99.6, speed=0.5)]
        report = playing_engine.tick()
        assert playing_engine.session.models == []
        assert report.exited_ids == [9]

    def test_left_edge_removal(self, playing_engine, make_target):
        playing_engine.session.models = [
            make_target(id=4, position=0.3, speed=0.5, direction=Direction.LEFT),
        ]
        report = playing_engine.tick()
        assert playing_engine.session.models == []
        assert report.exited_ids == [4]

    def test_landing_exactly_on_edge_stays(self, playing_engine, make_target):
        playing_engine.session.models = [make_target(position=99.5, speed=0.5)]
        playing_engine.tick()
        assert playing_engine.session.models[0].position == pytest.approx(100.0)


class TestSpawning:
    """Test step 2 of the tick."""

    def test_spawn_increments_count(self, busy_rules):
        engine = SimulationEngine(rules=busy_rules, seed=1)
        engine.start()
        report = engine.tick()
        assert report.spawned is not None
        assert engine.session.models_spawned == 1
        assert engine.session.models == [report.spawned]

    def test_no_spawn_when_not_rolled(self, playing_engine):
        report = playing_engine.tick()
        assert report.spawned is None
        assert playing_engine.session.models_spawned == 0

    def test_invariants_over_full_game(self, busy_rules):
        """Cap, budget and bounds hold every tick until the game ends."""
        engine = SimulationEngine(rules=busy_rules, seed=2024)
        engine.start()
        last_spawned = 0

        for _ in range(5000):
            report = engine.tick()
            session = engine.session
            assert len(session.models) <= 15
            assert last_spawned <= session.models_spawned <= 100
            assert all(0.0 <= t.position <= 100.0 for t in session.models)
            last_spawned = session.models_spawned
            if report.game_over:
                break

        assert engine.state == LifecycleState.GAME_OVER
        assert engine.session.models_spawned == 100
        assert engine.session.models == []

    def test_ids_unique_within_session(self, busy_rules):
        engine = SimulationEngine(rules=busy_rules, seed=5)
        engine.start()
        seen = set()
        for _ in range(400):
            report = engine.tick()
            if report.spawned is not None:
                assert report.spawned.id not in seen
                seen.add(report.spawned.id)

    def test_seed_reproducible(self):
        a = SimulationEngine(seed=77)
        b = SimulationEngine(seed=77)
        a.start()
        b.start()
        for _ in range(300):
            a.tick()
            b.tick()
        assert a.snapshot() == b.snapshot()


class TestFlashAdvance:
    """Test step 3 of the tick: growth, collisions, scoring."""

    def test_flash_grows_five_per_tick(self, playing_engine):
        playing_engine.trigger_flash()
        playing_engine.tick()
        assert playing_engine.session.flash.height == 5.0
        playing_engine.tick()
        assert playing_engine.session.flash.height == 10.0

    def test_flash_expires_at_full_height(self, playing_engine):
        """Twenty ticks take the flash to 100, where it is destroyed."""
        playing_engine.trigger_flash()
        reports = [playing_engine.tick() for _ in range(20)]

        assert playing_engine.session.flash is None
        assert reports[-1].flash_expired
        assert not any(r.flash_expired for r in reports[:-1])

    def test_new_flash_allowed_after_expiry(self, playing_engine):
        playing_engine.trigger_flash()
        for _ in range(20):
            playing_engine.tick()
        assert playing_engine.trigger_flash() is True

    def test_hit_scores_and_removes(self, playing_engine, make_target):
        session = playing_engine.session
        session.models = [make_target(id=1, position=49.5, speed=0.5, row=0)]
        session.flash = FlashEvent(position=50.0, height=15.0)

        report = playing_engine.tick()

        assert report.scored
        assert report.hit_ids == [1]
        assert session.score == 1
        assert session.models == []

    def test_three_hits_score_once(self, playing_engine, make_target):
        """Three simultaneous hits: +1 score, all three removed."""
        session = playing_engine.session
        session.models = [
            make_target(id=1, position=48.0, row=0),
            make_target(id=2, position=50.0, row=0, direction=Direction.LEFT),
            make_target(id=3, position=51.0, row=0),
        ]
        session.flash = FlashEvent(position=50.0, height=15.0)

        report = playing_engine.tick()

        assert session.score == 1
        assert session.models == []
        assert sorted(report.hit_ids) == [1, 2, 3]

    def test_collision_uses_moved_positions(self, playing_engine, make_target):
        """Targets are tested after this tick's movement."""
        session = playing_engine.session
        # 54.8 -> 55.3 after moving: out of reach of a flash at 50
        session.models = [make_target(id=1, position=54.8, speed=0.5, row=0)]
        session.flash = FlashEvent(position=50.0, height=15.0)

        report = playing_engine.tick()

        assert not report.scored
        assert len(session.models) == 1

    def test_miss_keeps_targets(self, playing_engine, make_target):
        session = playing_engine.session
        session.models = [make_target(position=50.0, row=2)]
        session.flash = FlashEvent(position=50.0, height=15.0)

        report = playing_engine.tick()

        assert not report.scored
        assert session.score == 0
        assert len(session.models) == 1

    def test_flash_continues_after_hit(self, playing_engine, make_target):
        """A hit does not consume the flash; it keeps rising."""
        session = playing_engine.session
        session.models = [make_target(position=50.0, row=0)]
        session.flash = FlashEvent(position=50.0, height=15.0)

        playing_engine.tick()

        assert session.flash is not None
        assert session.flash.height == 20.0

    def test_one_flash_can_score_in_two_lanes(self, playing_engine, make_target):
        """Scoring is capped per tick, not per flash."""
        session = playing_engine.session
        session.models = [
            make_target(id=1, position=50.0, speed=0.5, row=0),
            make_target(id=2, position=50.0, speed=0.5, row=1),
        ]
        session.flash = FlashEvent(position=50.0, height=15.0)

        for _ in range(5):
            playing_engine.tick()

        assert session.score == 2
        assert session.models == []


class TestTerminalCondition:
    """Test step 4 of the tick."""

    def test_game_over_when_budget_spent_and_track_empty(self, playing_engine):
        playing_engine.session.models_spawned = 100
        report = playing_engine.tick()
        assert report.game_over
        assert playing_engine.state == LifecycleState.GAME_OVER

    def test_not_over_while_targets_remain(self, playing_engine, make_target):
        playing_engine.session.models_spawned = 100
        playing_engine.session.models = [make_target(position=50.0)]
        report = playing_engine.tick()
        assert not report.game_over
        assert playing_engine.is_playing

    def test_not_over_before_budget_spent(self, playing_engine):
        playing_engine.session.models_spawned = 99
        assert not playing_engine.tick().game_over

    def test_exit_on_same_tick_ends_game(self, playing_engine, make_target):
        """The check reads the track after this tick's removals."""
        playing_engine.session.models_spawned = 100
        playing_engine.session.models = [make_target(position=99.6, speed=0.5)]
        assert playing_engine.tick().game_over

    def test_hit_on_same_tick_ends_game(self, playing_engine, make_target):
        session = playing_engine.session
        session.models_spawned = 100
        session.models = [make_target(position=50.0, row=0)]
        session.flash = FlashEvent(position=50.0, height=15.0)

        report = playing_engine.tick()

        assert report.scored
        assert report.game_over
        assert session.score == 1

    def test_no_ticks_after_game_over(self, playing_engine):
        playing_engine.session.models_spawned = 100
        playing_engine.tick()
        assert playing_engine.tick() is None
        assert playing_engine.trigger_flash() is False


# ============================================================================
# Concurrency and structured records
# ============================================================================


class TestConcurrency:
    """Test tick re-entry and cross-thread commands."""

    def test_reentrant_tick_raises(self, playing_engine, monkeypatch):
        def nested(active_count, spawned_count):
            playing_engine.tick()
            return False

        monkeypatch.setattr(playing_engine._spawner, 'should_spawn', nested)
        with pytest.raises(RuntimeError, match='re-entered'):
            playing_engine.tick()

    def test_commands_from_other_thread(self, busy_rules):
        """Camera updates from another thread interleave safely with ticks."""
        engine = SimulationEngine(rules=busy_rules, seed=9)
        engine.start()
        stop = threading.Event()

        def steer():
            x = 0.0
            while not stop.is_set():
                engine.set_camera_position(x, track_left=0.0, track_width=100.0)
                engine.trigger_flash()
                x = (x + 7.0) % 120.0

        worker = threading.Thread(target=steer)
        worker.start()
        try:
            for _ in range(500):
                engine.tick()
                snapshot = engine.snapshot()
                assert 0.0 <= snapshot.camera_position <= 100.0
                assert len(snapshot.models) <= 15
        finally:
            stop.set()
            worker.join()


class TestSessionRecords:
    """Test structured 'session' records."""

    def test_records_emitted(self, playing_engine, make_target):
        sink = Mock()
        photoop_logging.register_sink('session', sink)

        session = playing_engine.session
        session.models_spawned = 100
        session.models = [make_target(id=5, position=50.0, row=0)]
        session.flash = FlashEvent(position=50.0, height=15.0)
        playing_engine.tick()

        records = [c.args[1] for c in sink.emit.call_args_list]
        assert [r['type'] for r in records] == ['hit', 'game_over']
        assert records[0]['target_ids'] == [5]
        assert records[1]['score'] == 1

    def test_start_record(self, engine):
        sink = Mock()
        photoop_logging.register_sink('session', sink)
        engine.start()
        sink.emit.assert_called_once_with('session', {'type': 'start', 'from_state': 'not_started'})

    def test_game_over_record_survives_restart_by_listener(self, playing_engine):
        """The final score is captured before any listener can reset it."""
        sink = Mock()
        photoop_logging.register_sink('session', sink)

        def restart(old_state, new_state):
            if new_state == LifecycleState.GAME_OVER:
                playing_engine.restart()

        playing_engine.add_state_listener(restart)
        playing_engine.session.score = 4
        playing_engine.session.models_spawned = 100

        playing_engine.tick()

        records = [c.args[1] for c in sink.emit.call_args_list]
        game_over = next(r for r in records if r['type'] == 'game_over')
        assert game_over['score'] == 4
        assert game_over['models_spawned'] == 100
        assert playing_engine.score == 0
