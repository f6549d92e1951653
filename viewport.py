# viewport.py
"""
Tracks the size of the drawing area and keeps the field continuous across
resizes.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional

from particle import ParticleSystem
from surface import DrawingSurface

# --- Data Contracts ---
#
# class ViewportTracker:
#   - handle_resize(self, width, height, device_pixel_ratio, particles) -> Viewport:
#     - Inputs: New logical size, device pixel ratio and the live population
#       (may be None before the first population exists).
#     - Outputs: The committed viewport, which the caller forwards to the
#       population manager and the frame engine.
#     - Side Effects: Reconfigures the surface buffer, relocates particles.
#     - Invariants: The old size is captured before anything else changes, and
#       the new size is committed only after particles are relocated. An empty
#       size is returned but never committed, and never relocates particles.


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    device_pixel_ratio: float = 1.0

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def physical_size(self):
        return (
            max(1, round(self.width * self.device_pixel_ratio)),
            max(1, round(self.height * self.device_pixel_ratio)),
        )


def _non_negative(value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) and value > 0 else 0.0


class ViewportTracker:
    """
    Applies surface size changes in a fixed order: capture the old size,
    reconfigure the buffer, relocate particles, commit the new size.
    """
    def __init__(self, surface: DrawingSurface, previous: Optional[Viewport] = None):
        self.surface = surface
        self.previous = previous if previous is not None else Viewport(0.0, 0.0)

    def handle_resize(
        self,
        width: float,
        height: float,
        device_pixel_ratio: float = 1.0,
        particles: Optional[ParticleSystem] = None,
    ) -> Viewport:
        old_width, old_height = self.previous.width, self.previous.height

        width, height = _non_negative(width), _non_negative(height)
        ratio = _non_negative(device_pixel_ratio) or 1.0
        viewport = Viewport(width, height, ratio)

        self.surface.configure(width, height, ratio)

        if viewport.is_empty:
            # A collapsed surface (e.g. a minimized window) keeps the last real
            # size, so particles are restored in place when it comes back.
            logging.debug(f"Viewport collapsed to {width:.0f}x{height:.0f}; keeping particles as they are.")
            return viewport

        if old_width > 0 and old_height > 0 and particles is not None and particles.particle_count > 0:
            particles.relocate(width, height, old_width, old_height)
            logging.debug(
                f"Relocated {particles.particle_count} particles from "
                f"{old_width:.0f}x{old_height:.0f} to {width:.0f}x{height:.0f}."
            )

        self.previous = viewport
        logging.info(f"Viewport set to {width:.0f}x{height:.0f} (device pixel ratio {ratio:g}).")
        return viewport
