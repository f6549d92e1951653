# particle.py
"""
Manages the kinematic state of every particle in the plexus field.

This module defines the ParticleSystem class, an arena of NumPy arrays where
each particle is a row addressed by its integer index. The arena knows how to
reset, advance and relocate its particles, but nothing about connections or
drawing.
"""
import numpy as np
from typing import Optional, Sequence

from constants import (
    SPAWN_SPEED_MIN, SPAWN_SPEED_MAX, SPAWN_SIZE_MIN, SPAWN_SIZE_MAX,
    FULL_TURN, RESPAWN_Y, BOUNDARY_MARGIN, NEUTRAL_SPEED, GRAVITY_SCALE,
    GRAVITY_DAMPING, FALLING_GRAVITY_THRESHOLD, WIGGLE_FREQUENCY
)
from parameters import Parameters

# --- Data Contracts ---
#
# class ParticleSystem:
#   - Arrays (all of length N, row i is particle i):
#     - ids: int64, unique and stable for the particle's lifetime.
#     - positions: float64 (N, 2), logical pixels.
#     - base_velocities: float64 (N, 2), ambient drift, changed only by reset.
#     - gravity_velocities: float64 (N,), accumulated and damped every frame.
#     - sizes: float64 (N,) in [1, 3); phases: float64 (N,) in [0, 2*pi).
#     - respawns: int64 (N,), falling-regime resets seen by each particle.
#
#   - update(self, width, height, params, time) -> None:
#     - Side Effects: Advances every particle by one frame in place.
#     - Invariants: After the call every x lies in [0, width].
#
#   - relocate(self, width, height, old_width, old_height) -> None:
#     - Side Effects: Scales positions by new/old size. No-op when either old
#       dimension is zero.
#
#   - head(count) / extend(other) -> ParticleSystem:
#     - Outputs: New arenas holding copies. The receiver is left untouched.


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(
        self,
        ids: np.ndarray,
        positions: np.ndarray,
        base_velocities: np.ndarray,
        gravity_velocities: np.ndarray,
        sizes: np.ndarray,
        phases: np.ndarray,
        respawns: Optional[np.ndarray] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.ids = np.asarray(ids, dtype=np.int64)
        self.positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        self.base_velocities = np.asarray(base_velocities, dtype=np.float64).reshape(-1, 2)
        self.gravity_velocities = np.asarray(gravity_velocities, dtype=np.float64)
        self.sizes = np.asarray(sizes, dtype=np.float64)
        self.phases = np.asarray(phases, dtype=np.float64)
        if respawns is None:
            respawns = np.zeros(len(self.ids), dtype=np.int64)
        self.respawns = np.asarray(respawns, dtype=np.int64)
        self.rng = rng if rng is not None else np.random.default_rng()

        lengths = {
            len(self.ids), len(self.positions), len(self.base_velocities),
            len(self.gravity_velocities), len(self.sizes), len(self.phases),
            len(self.respawns),
        }
        if len(lengths) != 1:
            raise ValueError(f"Particle arrays have mismatched lengths: {sorted(lengths)}")

    @classmethod
    def empty(cls, rng: Optional[np.random.Generator] = None) -> "ParticleSystem":
        return cls(
            ids=np.empty(0, dtype=np.int64),
            positions=np.empty((0, 2)),
            base_velocities=np.empty((0, 2)),
            gravity_velocities=np.empty(0),
            sizes=np.empty(0),
            phases=np.empty(0),
            rng=rng,
        )

    @classmethod
    def spawn(
        cls,
        ids: Sequence[int],
        width: float,
        height: float,
        rng: Optional[np.random.Generator] = None,
    ) -> "ParticleSystem":
        """Creates one particle per id, scattered anywhere in the viewport."""
        count = len(ids)
        system = cls(
            ids=np.asarray(ids, dtype=np.int64),
            positions=np.zeros((count, 2)),
            base_velocities=np.zeros((count, 2)),
            gravity_velocities=np.zeros(count),
            sizes=np.zeros(count),
            phases=np.zeros(count),
            rng=rng,
        )
        system.reset(np.arange(count), width, height, randomize_y=True)
        return system

    @property
    def particle_count(self) -> int:
        return len(self.ids)

    def __len__(self) -> int:
        return self.particle_count

    def reset(self, indices, width: float, height: float, randomize_y: bool = False) -> None:
        """
        Re-initializes the spawn state of the selected particles.

        Args:
            indices: Integer indices or a boolean mask into the arena.
            width (float): Current viewport width.
            height (float): Current viewport height.
            randomize_y (bool): Scatter over the full height instead of placing
                the particle just above the top edge.
        """
        indices = np.flatnonzero(indices) if np.asarray(indices).dtype == bool else np.asarray(indices, dtype=np.int64)
        count = len(indices)
        if count == 0:
            return

        self.positions[indices, 0] = self.rng.uniform(0.0, width, count)
        if randomize_y:
            self.positions[indices, 1] = self.rng.uniform(0.0, height, count)
        else:
            self.positions[indices, 1] = RESPAWN_Y

        angle = self.rng.uniform(0.0, FULL_TURN, count)
        speed = self.rng.uniform(SPAWN_SPEED_MIN, SPAWN_SPEED_MAX, count)
        self.base_velocities[indices, 0] = np.cos(angle) * speed
        self.base_velocities[indices, 1] = np.sin(angle) * speed

        self.gravity_velocities[indices] = 0.0
        self.sizes[indices] = self.rng.uniform(SPAWN_SIZE_MIN, SPAWN_SIZE_MAX, count)
        self.phases[indices] = self.rng.uniform(0.0, FULL_TURN, count)

    def update(self, width: float, height: float, params: Parameters, time: int) -> None:
        """
        Advances every particle by one frame.
        """
        if self.particle_count == 0:
            return

        speed_multiplier = params.speed / NEUTRAL_SPEED

        # 1. Gravity accumulates into its own component, then decays.
        self.gravity_velocities += (params.gravity / 50.0) * GRAVITY_SCALE
        self.gravity_velocities *= GRAVITY_DAMPING

        # 2. Flow scales the drift only; gravity stays independent of speed.
        move_x = self.base_velocities[:, 0] * speed_multiplier
        move_y = self.base_velocities[:, 1] * speed_multiplier + self.gravity_velocities

        # 3. Lateral wiggle, desynchronized by each particle's phase.
        wiggle = np.sin(time * WIGGLE_FREQUENCY + self.phases) * (params.speed / 100.0)

        self.positions[:, 0] += move_x + wiggle
        self.positions[:, 1] += move_y

        self._handle_boundaries(width, height, params.gravity > FALLING_GRAVITY_THRESHOLD)

    def _handle_boundaries(self, width: float, height: float, falling: bool) -> None:
        x = self.positions[:, 0]
        y = self.positions[:, 1]
        # The top edge gets the same slack as the bottom one so upward drift
        # cannot leave the field indefinitely.
        out = (x < 0) | (x > width) | (y > height + BOUNDARY_MARGIN) | (y < -BOUNDARY_MARGIN)
        if not out.any():
            return

        if falling:
            # Falling objects that drift off the top start over as well.
            dropped = out & ((y > height) | (y < -BOUNDARY_MARGIN))
            if dropped.any():
                self.reset(dropped, width, height, randomize_y=False)
                self.respawns[dropped] += 1
            # x is a view, so respawned particles are wrapped on their new position.
            x[out & (x < 0)] = width
            x[out & (x > width)] = 0.0
        else:
            left, right = out & (x < 0), out & (x > width)
            x[left] = width
            x[right] = 0.0
            above, below = out & (y < 0), out & (y > height)
            y[above] = height
            y[below] = 0.0

    def relocate(self, width: float, height: float, old_width: float, old_height: float) -> None:
        """Keeps each particle at the same relative spot across a resize."""
        if old_width == 0 or old_height == 0:
            return
        self.positions[:, 0] *= width / old_width
        self.positions[:, 1] *= height / old_height

    def head(self, count: int) -> "ParticleSystem":
        """Returns a new arena holding copies of the first `count` particles."""
        count = max(0, count)
        return ParticleSystem(
            ids=self.ids[:count].copy(),
            positions=self.positions[:count].copy(),
            base_velocities=self.base_velocities[:count].copy(),
            gravity_velocities=self.gravity_velocities[:count].copy(),
            sizes=self.sizes[:count].copy(),
            phases=self.phases[:count].copy(),
            respawns=self.respawns[:count].copy(),
            rng=self.rng,
        )

    def extend(self, other: "ParticleSystem") -> "ParticleSystem":
        """Returns a new arena with `other` appended after this one."""
        return ParticleSystem(
            ids=np.concatenate([self.ids, other.ids]),
            positions=np.concatenate([self.positions, other.positions]),
            base_velocities=np.concatenate([self.base_velocities, other.base_velocities]),
            gravity_velocities=np.concatenate([self.gravity_velocities, other.gravity_velocities]),
            sizes=np.concatenate([self.sizes, other.sizes]),
            phases=np.concatenate([self.phases, other.phases]),
            respawns=np.concatenate([self.respawns, other.respawns]),
            rng=self.rng,
        )
