"""
2D ballpit engine: equal-mass bodies bouncing inside a viewport.

- N circular bodies in a rectangular viewport, upper-left origin, pixel units
- Specular wall reflection, elastic equal-mass body-body exchange
- One tick = one display refresh; velocities are in pixels/tick
- State per body: (x, y, vx, vy, radius, visual_id), (x, y) is the
  upper-left corner of the body's bounding box
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Tuple, Optional, Dict

import ballpit as P


@dataclass
class Body:
    """Physics state plus an opaque visual identity for the renderer."""
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    visual_id: int = 0
    body_id: int = 0

    def __post_init__(self):
        if not (self.radius > 0 and np.isfinite(self.radius)):
            raise ValueError(f"radius must be positive and finite, got {self.radius}")

    def __setattr__(self, name, value):
        if name == "radius" and "radius" in self.__dict__:
            raise AttributeError("radius is fixed at creation")
        super().__setattr__(name, value)

    @property
    def diameter(self) -> float:
        return 2.0 * self.radius

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.radius, self.y + self.radius

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])

    @property
    def velocity(self) -> np.ndarray:
        return np.array([self.vx, self.vy])

    @velocity.setter
    def velocity(self, v: np.ndarray):
        self.vx, self.vy = float(v[0]), float(v[1])

    @property
    def speed(self) -> float:
        return np.sqrt(self.vx**2 + self.vy**2)

    @property
    def state(self) -> np.ndarray:
        return np.array([self.x, self.y, self.vx, self.vy])


def _positive(*values) -> bool:
    """True when every value is a finite number > 0. NaN fails."""
    return all(v > 0 and np.isfinite(v) for v in values)


@dataclass
class PitConfig:
    body_count: int = P.BODY_COUNT
    radius_range: Tuple[float, float] = P.RADIUS_RANGE
    viewport: Tuple[float, float] = P.VIEWPORT
    speed_range: Tuple[float, float] = P.SPEED_RANGE
    n_visuals: int = P.N_VISUALS
    edge_margin: float = P.EDGE_MARGIN
    separation_slack: float = P.SEPARATION_SLACK
    seed: Optional[int] = None

    def __post_init__(self):
        width, height = self.viewport
        if not _positive(width, height):
            raise ValueError(f"viewport must be positive and finite, got {self.viewport}")
        if self.body_count < 0:
            raise ValueError(f"body_count must be >= 0, got {self.body_count}")
        r_min, r_max = self.radius_range
        if not _positive(r_min, r_max) or r_max < r_min:
            raise ValueError(
                f"radius_range must satisfy 0 < min <= max < inf, got {self.radius_range}")
        if 2 * r_max > min(width, height):
            raise ValueError(
                f"largest diameter {2 * r_max} does not fit viewport {self.viewport}")
        s_min, s_max = self.speed_range
        if not _positive(s_min, s_max) or s_max < s_min:
            raise ValueError(
                f"speed_range must satisfy 0 < min <= max < inf, got {self.speed_range}")
        if self.n_visuals < 1:
            raise ValueError(f"n_visuals must be >= 1, got {self.n_visuals}")
        if not (self.edge_margin >= 0 and np.isfinite(self.edge_margin)):
            raise ValueError(f"edge_margin must be >= 0, got {self.edge_margin}")
        if not (self.separation_slack >= 0 and np.isfinite(self.separation_slack)):
            raise ValueError(
                f"separation_slack must be >= 0, got {self.separation_slack}")

    @property
    def width(self) -> float:
        return self.viewport[0]

    @property
    def height(self) -> float:
        return self.viewport[1]


# Body set creation

def _create_random_body(config: PitConfig, rng: np.random.RandomState,
                        body_id: int) -> Body:
    r = rng.uniform(*config.radius_range)
    d = 2.0 * r
    # Keep spawns off the right/bottom edge, never past the last legal spot.
    x_max = max(0.0, config.width - max(config.edge_margin, d))
    y_max = max(0.0, config.height - max(config.edge_margin, d))
    x = rng.uniform(0.0, x_max)
    y = rng.uniform(0.0, y_max)
    speed = rng.uniform(*config.speed_range)
    angle = rng.uniform(0, 2 * np.pi)
    return Body(x=float(x), y=float(y),
                vx=float(speed * np.cos(angle)), vy=float(speed * np.sin(angle)),
                radius=float(r), visual_id=int(rng.randint(0, config.n_visuals)),
                body_id=body_id)


def _overlaps_any(body: Body, others: List[Body]) -> bool:
    cx, cy = body.center
    for other in others:
        ox, oy = other.center
        if np.sqrt((cx - ox)**2 + (cy - oy)**2) < body.radius + other.radius:
            return True
    return False


def create_bodies(config: PitConfig,
                  rng: Optional[np.random.RandomState] = None) -> List[Body]:
    """Build the fixed-size body set. Overlap-free placement is best effort."""
    if rng is None:
        rng = np.random.RandomState(config.seed)
    bodies: List[Body] = []
    for i in range(config.body_count):
        body = _create_random_body(config, rng, i)
        for _ in range(P.PLACEMENT_ATTEMPTS):
            if not _overlaps_any(body, bodies):
                break
            body = _create_random_body(config, rng, i)
        bodies.append(body)
    return bodies


# Walls

def reflect_boundary(body: Body, width: float,
                     height: float) -> Tuple[bool, bool]:
    """Clamp the body inside [0, width] x [0, height], flipping the velocity
    component of every axis that had to be clamped.

    Returns (clamped_x, clamped_y).
    """
    clamped_x = clamped_y = False
    d = body.diameter

    if body.x < 0:
        body.x = 0.0
        clamped_x = True
    elif body.x > width - d:
        body.x = width - d
        clamped_x = True

    if body.y < 0:
        body.y = 0.0
        clamped_y = True
    elif body.y > height - d:
        body.y = height - d
        clamped_y = True

    if clamped_x:
        body.vx = -body.vx
    if clamped_y:
        body.vy = -body.vy
    return clamped_x, clamped_y


def contain(body: Body, width: float, height: float):
    """Position-only clamp. Velocity is left for the next reflection."""
    d = body.diameter
    body.x = min(max(body.x, 0.0), width - d)
    body.y = min(max(body.y, 0.0), height - d)


# Body-body collisions

def resolve_pair(a: Body, b: Body,
                 slack: float = P.SEPARATION_SLACK) -> bool:
    """
    Equal-mass elastic collision between two overlapping bodies.

    The normal points from b's centre to a's centre. In that frame the normal
    velocity components are swapped and the tangential ones kept; then both
    bodies are pushed apart by half of (overlap + slack) each.
    Coincident centres fall back to the angle 0, i.e. the normal (1, 0).
    """
    ax, ay = a.center
    bx, by = b.center
    dx = ax - bx
    dy = ay - by
    dist = np.sqrt(dx**2 + dy**2)
    min_dist = a.radius + b.radius

    if dist >= min_dist:
        return False

    if dist > 0:
        cos, sin = dx / dist, dy / dist
    else:
        cos, sin = 1.0, 0.0

    # Rotate into the collision frame: (normal, tangential)
    an = a.vx * cos + a.vy * sin
    at = a.vy * cos - a.vx * sin
    bn = b.vx * cos + b.vy * sin
    bt = b.vy * cos - b.vx * sin

    an, bn = bn, an

    a.vx = float(an * cos - at * sin)
    a.vy = float(at * cos + an * sin)
    b.vx = float(bn * cos - bt * sin)
    b.vy = float(bt * cos + bn * sin)

    overlap = (min_dist - dist) + slack
    move_x = overlap * cos / 2
    move_y = overlap * sin / 2
    a.x = float(a.x + move_x)
    a.y = float(a.y + move_y)
    b.x = float(b.x - move_x)
    b.y = float(b.y - move_y)
    return True


def resolve_collisions(bodies: List[Body],
                       slack: float = P.SEPARATION_SLACK) -> List[Tuple[int, int]]:
    """Single pass over every unordered pair, in index order."""
    collisions = []
    n = len(bodies)
    for i in range(n):
        for j in range(i + 1, n):
            if resolve_pair(bodies[i], bodies[j], slack):
                collisions.append((bodies[i].body_id, bodies[j].body_id))
    return collisions


# Tick

def step(bodies: List[Body], width: float, height: float,
         slack: float = P.SEPARATION_SLACK) -> List[Tuple[int, int]]:
    """
    Advance every body by one tick.

    integrate → reflect off walls → resolve collisions (one pass) → contain
    Returns the (body_id, body_id) pairs that collided this tick.
    """
    for body in bodies:
        body.x += body.vx
        body.y += body.vy
    for body in bodies:
        reflect_boundary(body, width, height)
    collisions = resolve_collisions(bodies, slack)
    for body in bodies:
        contain(body, width, height)
    return collisions


def kinetic_energy(bodies: List[Body]) -> float:
    return sum(0.5 * (b.vx**2 + b.vy**2) for b in bodies)


def generate_trajectory(config: PitConfig, n_steps: int = P.N_STEPS) -> Dict:
    """Headless run. Returns dict with states, radii, visual_ids, collisions, energy."""
    bodies = create_bodies(config)
    width, height = config.viewport

    states = [np.array([b.state for b in bodies]).reshape(len(bodies), 4)]
    energy = [kinetic_energy(bodies)]
    collisions = []

    for t in range(n_steps):
        pairs = step(bodies, width, height, config.separation_slack)
        collisions.extend({'tick': t + 1, 'pair': pair} for pair in pairs)
        states.append(np.array([b.state for b in bodies]).reshape(len(bodies), 4))
        energy.append(kinetic_energy(bodies))

    return {
        'states': np.array(states),
        'radii': np.array([b.radius for b in bodies]),
        'visual_ids': np.array([b.visual_id for b in bodies], dtype=int),
        'config': config,
        'collisions': collisions,
        'energy': np.array(energy),
    }
