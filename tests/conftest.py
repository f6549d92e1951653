import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pytest

from particle import ParticleSystem


class RecordingSurface:
    """DrawingSurface that records every call instead of drawing."""

    def __init__(self):
        self.calls = []

    def configure(self, width, height, device_pixel_ratio):
        self.calls.append(("configure", width, height, device_pixel_ratio))

    def fill_rect(self, x, y, width, height, rgba):
        self.calls.append(("fill_rect", x, y, width, height, rgba))

    def fill_circle(self, x, y, radius, hsla):
        self.calls.append(("fill_circle", x, y, radius, hsla))

    def stroke_line(self, x1, y1, x2, y2, hsla, width):
        self.calls.append(("stroke_line", x1, y1, x2, y2, hsla, width))

    def flush(self):
        self.calls.append(("flush",))

    def export_image(self, fmt="png"):
        return b""

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def surface():
    return RecordingSurface()


def make_particles(positions, velocities=None, rng=None):
    """Builds an arena with explicit positions for deterministic tests."""
    positions = np.asarray(positions, dtype=float).reshape(-1, 2)
    count = len(positions)
    if velocities is None:
        velocities = np.zeros((count, 2))
    return ParticleSystem(
        ids=np.arange(1, count + 1),
        positions=positions.copy(),
        base_velocities=np.asarray(velocities, dtype=float).reshape(-1, 2),
        gravity_velocities=np.zeros(count),
        sizes=np.full(count, 2.0),
        phases=np.zeros(count),
        rng=rng if rng is not None else np.random.default_rng(0),
    )


@pytest.fixture
def particles_at():
    return make_particles
