import numpy as np
import pytest

from cloud_generator.noise import (
    NoiseEngine,
    UninitializedStateError,
    build_permutation_table,
    validate_permutation_table,
)


class _FirstItemRng:
    """Always draws the first remaining pool entry."""
    def __init__(self, seed):
        self.seed = seed

    def integers(self, low, high):
        return low


def test_same_seed_gives_same_sample():
    first = NoiseEngine()
    first.init(42)
    second = NoiseEngine()
    second.init(42)

    assert first.sample(1.3, 2.7) == pytest.approx(second.sample(1.3, 2.7), abs=1e-12)
    assert np.array_equal(first.permutation_table, second.permutation_table)


def test_reinit_restores_table(engine):
    before = engine.sample(1.3, 2.7)
    engine.init(7)
    engine.init(42)
    assert engine.sample(1.3, 2.7) == pytest.approx(before, abs=1e-12)


def test_different_seeds_give_different_tables():
    assert not np.array_equal(build_permutation_table(1), build_permutation_table(2))


def test_table_holds_each_value_twice(engine):
    p = engine.permutation_table
    assert p.shape == (512,)
    assert np.all(np.bincount(p, minlength=256) == 2)
    assert np.array_equal(p[:256], p[256:])
    assert sorted(p[:256].tolist()) == list(range(256))


def test_table_is_read_only(engine):
    with pytest.raises(ValueError):
        engine.permutation_table[0] = 1


def test_rng_factory_receives_seed_and_drives_shuffle():
    table = build_permutation_table(99, rng_factory=_FirstItemRng)
    expected = np.arange(256)
    assert np.array_equal(table, np.concatenate([expected, expected]))


def test_samples_stay_in_unit_interval(engine):
    coords = np.linspace(-300.0, 300.0, 97)
    for x in coords:
        for y in coords[::7]:
            value = engine.sample(x, y)
            assert 0.0 <= value <= 1.0


@pytest.mark.parametrize("x, y", [(1.3, 2.7), (0.05, 10.9), (-3.4, 7.25), (100.5, 200.125)])
def test_noise_is_periodic(engine, x, y):
    value = engine.sample(x, y)
    assert engine.sample(x + 256, y) == pytest.approx(value, abs=1e-9)
    assert engine.sample(x, y + 256) == pytest.approx(value, abs=1e-9)


def test_lattice_points_sample_to_midpoint():
    engine = NoiseEngine()
    engine.init(1337)
    # Every gradient dotted with a zero offset is zero, which remaps to 0.5.
    assert engine.sample(0, 0) == 0.5
    assert engine.sample(17, -4) == 0.5


def test_hand_computed_values_on_identity_table(identity_table):
    engine = NoiseEngine()
    engine.init(permutation_table=identity_table)
    # (0.5, 0.5): corners hash to 0, 1, 1, 2 -> lerp(1.0, -0.5, 0.5) = 0.25 -> 0.625
    assert engine.sample(0.5, 0.5) == pytest.approx(0.625)
    # (1.5, 0.5): corners hash to 1, 2, 2, 3 -> lerp(-0.5, 1.0, 0.5) = 0.25 -> 0.625
    assert engine.sample(1.5, 0.5) == pytest.approx(0.625)


def test_noise_is_continuous(engine):
    step = 1e-6
    for x in (0.999999, 3.5, 12.0):
        assert abs(engine.sample(x, 2.2) - engine.sample(x + step, 2.2)) < 1e-4


def test_sample_before_init_raises():
    engine = NoiseEngine()
    assert not engine.is_initialized
    with pytest.raises(UninitializedStateError):
        engine.sample(0.5, 0.5)
    with pytest.raises(UninitializedStateError):
        engine.permutation_table


def test_sample_grid_matches_scalar_samples(engine):
    ys, xs = np.mgrid[0:4, 0:5] * 0.37
    grid = engine.sample_grid(xs, ys)
    assert grid.shape == (4, 5)
    for i in range(4):
        for j in range(5):
            assert grid[i, j] == pytest.approx(engine.sample(xs[i, j], ys[i, j]))


def test_sample_grid_rejects_mismatched_shapes(engine):
    with pytest.raises(ValueError):
        engine.sample_grid(np.zeros((2, 2)), np.zeros((2, 3)))


def test_init_bumps_generation():
    engine = NoiseEngine()
    assert engine.generation == 0
    engine.init(1)
    engine.init(1)
    assert engine.generation == 2


@pytest.mark.parametrize("table", [
    list(range(256)),
    list(range(256)) * 2 + [0],
    [0] * 512,
    list(range(1, 257)) * 2,
])
def test_invalid_injected_tables_are_rejected(table):
    with pytest.raises(ValueError):
        validate_permutation_table(table)
    engine = NoiseEngine()
    with pytest.raises(ValueError):
        engine.init(permutation_table=table)
    assert not engine.is_initialized


def test_seed_42_reference_sample():
    engine = NoiseEngine()
    engine.init(42)
    assert engine.sample(1.3, 2.7) == pytest.approx(0.5223289136, abs=1e-9)


def test_seed_1337_reference_table():
    engine = NoiseEngine()
    engine.init(1337)
    assert engine.permutation_table[:8].tolist() == [139, 224, 185, 46, 137, 236, 98, 242]
    assert engine.permutation_table[256:264].tolist() == [139, 224, 185, 46, 137, 236, 98, 242]


def test_injected_table_records_no_seed(identity_table):
    engine = NoiseEngine()
    engine.init(42)
    assert engine.seed == 42
    engine.init(permutation_table=identity_table)
    assert engine.seed is None
