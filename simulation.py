# simulation.py
"""
Handles the per-frame driving of the plexus field.

This module defines the FrameEngine, which advances the shared time counter,
updates every particle, and issues the draw calls for the trail fade, the
particle dots and the connection lines. The pairwise connection scan is the
hot loop and is compiled with Numba.
"""
import logging
import numpy as np
from dataclasses import dataclass
from numba import jit
from typing import Tuple

from constants import (
    TRAIL_FADE_RGBA, PARTICLE_SATURATION, PARTICLE_LIGHTNESS,
    PARTICLE_HUE_PER_PIXEL, LINK_SATURATION, LINK_LIGHTNESS, LINK_WIDTH,
    RANGE_TO_PIXELS
)
from parameters import Parameters
from particle import ParticleSystem
from surface import DrawingSurface
from viewport import Viewport

# --- Data Contracts ---
#
# find_connections(positions: np.ndarray, threshold: float)
#     -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
#   - Inputs: (N, 2) positions, link distance in logical pixels.
#   - Outputs: (first, second, opacity) for every pair i < j whose distance is
#     strictly below threshold. opacity = 1 - distance / threshold.
#
# class FrameEngine:
#   - tick(self, particles, params, viewport, surface) -> FrameStats:
#     - Side Effects: Increments self.time exactly once, updates particles in
#       place, issues draw calls on the surface and flushes it.
#     - Invariants: self.time is never reset. An empty viewport advances time
#       but leaves particles untouched.


@jit(nopython=True)
def _find_connections_numba(positions, threshold):
    """
    Numba-jitted brute-force scan over every unordered pair.
    """
    count = positions.shape[0]
    max_pairs = count * (count - 1) // 2
    first = np.empty(max_pairs, dtype=np.int64)
    second = np.empty(max_pairs, dtype=np.int64)
    opacity = np.empty(max_pairs, dtype=np.float64)
    found = 0

    for i in range(count):
        for j in range(i + 1, count):
            dx = positions[i, 0] - positions[j, 0]
            dy = positions[i, 1] - positions[j, 1]
            distance = np.sqrt(dx * dx + dy * dy)
            if distance < threshold:
                first[found] = i
                second[found] = j
                opacity[found] = 1.0 - distance / threshold
                found += 1

    return first[:found], second[:found], opacity[:found]


def find_connections(positions: np.ndarray, threshold: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    positions = np.ascontiguousarray(positions, dtype=np.float64).reshape(-1, 2)
    return _find_connections_numba(positions, float(threshold))


def hue_shift(time: int, params: Parameters) -> float:
    """The global hue of this frame, rotating at the color-cycle rate."""
    return time * (params.color_speed / 50.0) + params.base_hue


@dataclass(frozen=True)
class FrameStats:
    time: int
    particle_count: int
    connection_count: int


class FrameEngine:
    """
    Drives one frame of the field at a time.
    """
    def __init__(self, time: int = 0):
        self.time = time
        logging.info("Frame engine initialized.")

    def tick(
        self,
        particles: ParticleSystem,
        params: Parameters,
        viewport: Viewport,
        surface: DrawingSurface,
    ) -> FrameStats:
        """
        Executes one frame: fade, update and draw particles, draw connections.
        """
        self.time += 1
        time = self.time
        params = params.clamped()
        width, height = viewport.width, viewport.height

        if viewport.is_empty:
            # Nothing to draw into; particles wait for the surface to come back.
            surface.flush()
            return FrameStats(time, particles.particle_count, 0)

        # 1. Fade the previous frame instead of clearing it, leaving trails.
        surface.fill_rect(0, 0, width, height, TRAIL_FADE_RGBA)

        shift = hue_shift(time, params)

        # 2. Move and draw the particles.
        particles.update(width, height, params, time)
        for (x, y), size in zip(particles.positions, particles.sizes):
            hue = shift + x * PARTICLE_HUE_PER_PIXEL
            surface.fill_circle(x, y, size, (hue, PARTICLE_SATURATION, PARTICLE_LIGHTNESS, 1.0))

        # 3. Link every pair closer than the scaled range.
        threshold = params.range * RANGE_TO_PIXELS
        first, second, opacity = find_connections(particles.positions, threshold)
        positions = particles.positions
        for i, j, alpha in zip(first, second, opacity):
            surface.stroke_line(
                positions[i, 0], positions[i, 1], positions[j, 0], positions[j, 1],
                (shift, LINK_SATURATION, LINK_LIGHTNESS, alpha), LINK_WIDTH
            )

        surface.flush()
        return FrameStats(time, particles.particle_count, len(opacity))
