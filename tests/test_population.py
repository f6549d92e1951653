import math

import numpy as np
import pytest

from parameters import Parameters
from particle import ParticleSystem
from population import PopulationManager, target_count
from viewport import Viewport


@pytest.mark.parametrize("density, expected", [
    (0, 20),
    (10, 35),
    (33, 69),
    (50, 95),
    (100, 170),
    (150, 245),
    (200, 320),
])
def test_target_count_formula(density, expected):
    assert target_count(density) == expected
    assert target_count(density) == math.floor(density / 100 * 150) + 20


@pytest.mark.parametrize("density", [-50, float("nan"), "lots", None])
def test_target_count_degrades_to_baseline(density):
    assert target_count(density) == 20


def test_target_count_clamps_runaway_density():
    assert target_count(10_000) == target_count(200)


def test_resize_to_same_count_returns_same_object(rng):
    manager = PopulationManager()
    population = manager.resize(ParticleSystem.empty(rng), 30, 640, 480)

    assert manager.resize(population, 30, 640, 480) is population
    assert manager.resize(population, 30, 1920, 1080) is population


def test_growth_preserves_existing_particles(rng):
    manager = PopulationManager()
    population = manager.resize(ParticleSystem.empty(rng), 10, 640, 480)
    ids = population.ids.copy()
    positions = population.positions.copy()

    grown = manager.resize(population, 25, 640, 480)

    assert grown is not population
    assert population.particle_count == 10
    assert grown.particle_count == 25
    assert np.array_equal(grown.ids[:10], ids)
    assert np.array_equal(grown.positions[:10], positions)
    assert len(set(grown.ids.tolist())) == 25


def test_new_particles_spawn_inside_current_viewport(rng):
    manager = PopulationManager()

    population = manager.resize(ParticleSystem.empty(rng), 200, 300, 150)

    assert np.all((population.positions[:, 0] >= 0) & (population.positions[:, 0] < 300))
    assert np.all((population.positions[:, 1] >= 0) & (population.positions[:, 1] < 150))


def test_shrink_keeps_prefix(rng):
    manager = PopulationManager()
    population = manager.resize(ParticleSystem.empty(rng), 40, 640, 480)

    shrunk = manager.resize(population, 15, 640, 480)

    assert population.particle_count == 40
    assert shrunk.particle_count == 15
    assert np.array_equal(shrunk.ids, population.ids[:15])
    assert np.array_equal(shrunk.positions, population.positions[:15])
    assert np.array_equal(shrunk.sizes, population.sizes[:15])


def test_shrunk_population_does_not_alias_its_source(rng):
    manager = PopulationManager()
    population = manager.resize(ParticleSystem.empty(rng), 5, 640, 480)

    shrunk = manager.resize(population, 3, 640, 480)
    shrunk.positions[:] = -1.0

    assert np.all(population.positions >= 0)


def test_ids_stay_unique_across_density_tweaks(rng):
    manager = PopulationManager()
    population = ParticleSystem.empty(rng)
    seen = set()

    for target in (20, 35, 25, 60, 20, 80):
        population = manager.resize(population, target, 640, 480)
        assert len(set(population.ids.tolist())) == population.particle_count
        seen.update(population.ids.tolist())

    assert len(seen) == 20 + 15 + 35 + 60


def test_negative_target_empties_population(rng):
    manager = PopulationManager()
    population = manager.resize(ParticleSystem.empty(rng), 5, 640, 480)

    assert manager.resize(population, -3, 640, 480).particle_count == 0


def test_sync_uses_density(rng):
    manager = PopulationManager()

    population = manager.sync(ParticleSystem.empty(rng), Parameters(density=50), Viewport(800, 600))

    assert population.particle_count == 95
