# population.py
"""
Keeps the particle population sized to the density knob.

Changing density never rebuilds the field: particles are appended when the
target grows and dropped from the end when it shrinks, so everything already
on screen keeps moving undisturbed.
"""
import itertools
import logging
import math

from constants import BASELINE_PARTICLES, PARTICLES_PER_FULL_DENSITY
from parameters import Parameters, CORE_LIMITS
from particle import ParticleSystem
from viewport import Viewport

# --- Data Contracts ---
#
# target_count(density: float) -> int:
#   - Outputs: floor(density / 100 * 150) + 20 on the clamped density.
#   - Invariants: Result is always >= 20.
#
# class PopulationManager:
#   - resize(self, population, target, width, height) -> ParticleSystem:
#     - Outputs: The same object when the count already matches, otherwise a
#       new arena. The input arena is never modified.
#     - Invariants: Retained particles keep their order, ids and state.


def target_count(density: float) -> int:
    """
    Particles for a density value: floor(density / 100 * 150) + 20.

    Density is clamped to [0, 200] first, so the count never exceeds 320.
    Malformed or non-finite input yields the 20-particle baseline.
    """
    low, high = CORE_LIMITS["density"]
    try:
        density = float(density)
    except (TypeError, ValueError):
        density = low
    if not math.isfinite(density):
        density = low
    density = min(max(density, low), high)
    return math.floor((density / 100.0) * PARTICLES_PER_FULL_DENSITY) + BASELINE_PARTICLES


class PopulationManager:
    """
    Grows and shrinks particle arenas, handing out fresh ids.
    """
    def __init__(self, first_id: int = 1):
        self._ids = itertools.count(first_id)

    def resize(self, population: ParticleSystem, target: int, width: float, height: float) -> ParticleSystem:
        target = max(0, int(target))
        current = population.particle_count
        if target == current:
            return population

        if target < current:
            logging.debug(f"Population shrinking from {current} to {target} particles.")
            return population.head(target)

        to_add = target - current
        new_ids = [next(self._ids) for _ in range(to_add)]
        spawned = ParticleSystem.spawn(new_ids, width, height, rng=population.rng)
        logging.debug(
            f"Population growing from {current} to {target} particles "
            f"(ids {new_ids[0]}..{new_ids[-1]})."
        )
        return population.extend(spawned)

    def sync(self, population: ParticleSystem, params: Parameters, viewport: Viewport) -> ParticleSystem:
        """Resizes the population to the count implied by the density knob."""
        return self.resize(population, target_count(params.density), viewport.width, viewport.height)
