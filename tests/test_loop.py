import dataclasses
import threading
import time

import numpy as np
import pytest

from ballpit.engine import PitConfig
from ballpit.loop import BodySnapshot, SimulationLoop


@pytest.fixture
def loop(small_config):
    return SimulationLoop(small_config)


def test_refresh_before_start_is_noop(loop):
    before = loop.states()
    assert not loop.running
    assert loop.on_refresh() is False
    np.testing.assert_array_equal(loop.states(), before)
    assert loop.tick_count == 0


def test_start_is_idempotent(loop):
    loop.start()
    loop.start()
    assert loop.running
    assert loop.on_refresh()
    assert loop.tick_count == 1


def test_each_refresh_is_one_step(loop):
    loop.start()
    for _ in range(5):
        loop.on_refresh()
    assert loop.tick_count == 5


def test_run_drives_explicit_ticks(loop):
    assert loop.run(25) == 25
    assert loop.tick_count == 25
    assert loop.running


def test_stop_freezes_state(loop):
    loop.run(10)
    loop.stop()
    frozen = loop.states()
    for _ in range(50):
        assert loop.on_refresh() is False
    np.testing.assert_array_equal(loop.states(), frozen)
    assert loop.tick_count == 10
    loop.stop()
    assert not loop.running


def test_stop_from_another_thread_holds(loop):
    loop.start()
    done = threading.Event()

    def host():
        while not done.is_set():
            loop.on_refresh()

    worker = threading.Thread(target=host)
    worker.start()
    try:
        time.sleep(0.05)
        loop.stop()
        frozen = loop.states()
        ticks = loop.tick_count
        time.sleep(0.05)
        np.testing.assert_array_equal(loop.states(), frozen)
        assert loop.tick_count == ticks
    finally:
        done.set()
        worker.join()


def test_snapshot_matches_state(loop):
    loop.run(3)
    snap = loop.snapshot()
    states = loop.states()
    assert len(snap) == len(loop) == states.shape[0]
    for i, body in enumerate(snap):
        assert isinstance(body, BodySnapshot)
        assert body.body_id == i
        assert (body.x, body.y) == (states[i, 0], states[i, 1])
        assert body.radius > 0


def test_snapshot_is_read_only(loop):
    body = loop.snapshot()[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        body.x = 0.0


def test_snapshot_keeps_visual_identity(loop):
    first = [(b.radius, b.visual_id) for b in loop.snapshot()]
    loop.run(100)
    assert [(b.radius, b.visual_id) for b in loop.snapshot()] == first


def test_snapshot_stays_in_viewport(loop):
    width, height = loop.config.viewport
    loop.start()
    for _ in range(300):
        loop.on_refresh()
        for b in loop.snapshot():
            assert 0 <= b.x <= width - 2 * b.radius
            assert 0 <= b.y <= height - 2 * b.radius


def test_reset_recreates_bodies_for_new_viewport(loop):
    loop.run(5)
    loop.reset((200.0, 150.0))
    assert loop.config.viewport == (200.0, 150.0)
    assert len(loop) == loop.config.body_count
    assert [b.body_id for b in loop.snapshot()] == list(range(len(loop)))
    for b in loop.snapshot():
        assert 0 <= b.x <= 200.0 - 2 * b.radius
        assert 0 <= b.y <= 150.0 - 2 * b.radius


def test_reset_rejects_viewport_too_small(loop):
    with pytest.raises(ValueError):
        loop.reset((20.0, 20.0))
    assert loop.config.viewport == (400.0, 300.0)


def test_default_loop_builds():
    loop = SimulationLoop(PitConfig(seed=0))
    assert len(loop) == loop.config.body_count


def test_reset_restarts_counters(loop):
    loop.run(50)
    assert loop.tick_count == 50
    loop.reset()
    assert loop.tick_count == 0
    assert loop.collision_count == 0
    assert loop.config.viewport == (400.0, 300.0)


def test_concurrent_resets_keep_a_full_set(loop):
    def resize(size):
        for _ in range(20):
            loop.reset(size)

    workers = [threading.Thread(target=resize, args=(size,))
               for size in [(200.0, 150.0), (400.0, 300.0)]]
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    width, height = loop.config.viewport
    snap = loop.snapshot()
    assert len(snap) == loop.config.body_count
    for b in snap:
        assert 0 <= b.x <= width - 2 * b.radius
        assert 0 <= b.y <= height - 2 * b.radius
