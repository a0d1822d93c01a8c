import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')

import pytest

from ballpit.engine import Body, PitConfig


@pytest.fixture
def viewport():
    return (800.0, 600.0)


@pytest.fixture
def small_config():
    return PitConfig(body_count=8, radius_range=(10.0, 20.0),
                     viewport=(400.0, 300.0), edge_margin=50.0, seed=3)


@pytest.fixture
def make_body():
    """Factory placing a body by its centre."""
    def _make(cx, cy, vx=0.0, vy=0.0, radius=30.0, body_id=0, visual_id=0):
        return Body(x=cx - radius, y=cy - radius, vx=vx, vy=vy, radius=radius,
                    visual_id=visual_id, body_id=body_id)
    return _make
