import logging
import threading
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

from ballpit.engine import Body, PitConfig, create_bodies, step

logger = logging.getLogger("ballpit")


@dataclass(frozen=True)
class BodySnapshot:
    """What the renderer may read about one body after a completed tick."""
    body_id: int
    x: float
    y: float
    radius: float
    visual_id: int


class SimulationLoop:
    """
    Owns the body set and advances it once per display refresh.

    The host calls on_refresh() from its frame callback (pygame clock,
    browser-style animation frame, or a plain loop via run()). A lock is held
    for the full duration of every step, snapshot and reset, so a reader never
    sees a half-finished tick and nothing mutates the bodies after stop()
    has returned.
    """

    def __init__(self, config: Optional[PitConfig] = None,
                 rng: Optional[np.random.RandomState] = None):
        self.config = config or PitConfig()
        self.rng = rng if rng is not None else np.random.RandomState(self.config.seed)
        self._lock = threading.Lock()
        self._running = False
        self.tick_count = 0
        self.collision_count = 0
        self._bodies: List[Body] = create_bodies(self.config, self.rng)
        logger.info(f"SimulationLoop created with {len(self._bodies)} bodies "
                    f"in a {self.config.width}x{self.config.height} viewport.")

    @property
    def running(self) -> bool:
        return self._running

    def __len__(self):
        return len(self._bodies)

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
        logger.debug("SimulationLoop started.")

    def stop(self):
        with self._lock:
            if not self._running:
                return
            self._running = False
        logger.debug(f"SimulationLoop stopped after {self.tick_count} ticks.")

    def on_refresh(self) -> bool:
        """One refresh signal. Steps once if running; returns whether it did."""
        with self._lock:
            if not self._running:
                return False
            width, height = self.config.viewport
            pairs = step(self._bodies, width, height, self.config.separation_slack)
            self.tick_count += 1
            self.collision_count += len(pairs)
        if pairs:
            logger.debug(f"tick {self.tick_count}: {len(pairs)} collisions {pairs}")
        return True

    def run(self, n_ticks: int) -> int:
        """Explicit caller loop for hosts without a refresh signal."""
        self.start()
        done = 0
        for _ in range(n_ticks):
            if not self.on_refresh():
                break
            done += 1
        return done

    def snapshot(self) -> Tuple[BodySnapshot, ...]:
        with self._lock:
            return tuple(
                BodySnapshot(body_id=b.body_id, x=b.x, y=b.y,
                             radius=b.radius, visual_id=b.visual_id)
                for b in self._bodies)

    def states(self) -> np.ndarray:
        """(n_bodies, 4) → [x, y, vx, vy]"""
        with self._lock:
            return np.array([b.state for b in self._bodies]).reshape(-1, 4)

    def reset(self, viewport: Optional[Tuple[float, float]] = None):
        """Recreate the whole body set, optionally for a new viewport.

        Counters restart from zero; an invalid viewport raises ValueError and
        leaves the current set untouched.
        """
        with self._lock:
            config = self.config
            if viewport is not None:
                config = replace(config, viewport=tuple(viewport))
            bodies = create_bodies(config, self.rng)
            self.config = config
            self._bodies = bodies
            self.tick_count = 0
            self.collision_count = 0
        logger.info(f"SimulationLoop reset: {len(bodies)} bodies "
                    f"in a {config.width}x{config.height} viewport.")
