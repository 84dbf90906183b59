# cloud_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides seeded 2D gradient noise for the cloud texture
synthesizer. The numeric kernels are pure, stateless functions over a
permutation table; the NoiseEngine class owns the table for one sky.

Data Contract:
---------------
- Inputs:
    - seed: An integer used to derive the permutation table.
    - p: A 512-entry NumPy permutation table (int array).
    - x, y: Scalar coordinates, or NumPy arrays of coordinates.
- Outputs:
    - Noise values in the range [0, 1].
- Side Effects: NoiseEngine logs using the provided logger.
- Invariants:
    - The same seed always produces the same table and the same samples.
    - Noise is periodic with period 256 along both axes.
================================================================================
"""

import logging

import numpy as np
from numba import njit

from . import config as DEFAULTS


class UninitializedStateError(RuntimeError):
    """Raised when noise is requested before a permutation table exists."""


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)

@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)

@njit
def _gradient(h, x, y):
    """Dot product of (x, y) with one of the four diagonal gradients."""
    selector = h & 3
    if selector == 0:
        return x + y
    elif selector == 1:
        return -x + y
    elif selector == 2:
        return x - y
    return -x - y

@njit
def perlin_noise_2d(p, x, y):
    """
    Samples 2D gradient noise at a single point and remaps it to [0, 1].
    The table `p` must hold 512 entries so that `p[xi + 1]` and
    `p[... + yi + 1]` never need an explicit wrap.
    """
    x_floor = np.floor(x)
    y_floor = np.floor(y)
    xi = int(x_floor) & 255
    yi = int(y_floor) & 255
    xf = x - x_floor
    yf = y - y_floor

    u = _fade(xf)
    v = _fade(yf)

    aa = p[p[xi] + yi]
    ab = p[p[xi] + yi + 1]
    ba = p[p[xi + 1] + yi]
    bb = p[p[xi + 1] + yi + 1]

    x1 = _lerp(_gradient(aa, xf, yf), _gradient(ba, xf - 1, yf), u)
    x2 = _lerp(_gradient(ab, xf, yf - 1), _gradient(bb, xf - 1, yf - 1), u)
    value = (_lerp(x1, x2, v) + 1.0) / 2.0

    # Guard against rounding just outside the unit interval.
    return min(max(value, 0.0), 1.0)

@njit
def perlin_noise_grid(p, x, y):
    """
    Evaluates `perlin_noise_2d` over two coordinate arrays of equal shape.
    This function is JIT-compiled with Numba and uses explicit loops.
    """
    rows, cols = x.shape
    total_noise = np.zeros((rows, cols))
    for i in range(rows):
        for j in range(cols):
            total_noise[i, j] = perlin_noise_2d(p, x[i, j], y[i, j])
    return total_noise


def build_permutation_table(seed: int, rng_factory=np.random.default_rng) -> np.ndarray:
    """
    Derives the 512-entry permutation table for a seed.

    Values are pulled one at a time, without replacement, from the ordered
    pool [0, 255] using a seeded uniform integer source; the resulting
    permutation is then stored twice.

    Args:
        seed (int): The seed handed to `rng_factory`.
        rng_factory (callable): Builds a generator exposing `integers(low, high)`.
            Defaults to NumPy's `default_rng`.
    """
    rng = rng_factory(seed)
    pool = list(range(DEFAULTS.PERMUTATION_SIZE))
    drawn = []
    while pool:
        index = int(rng.integers(0, len(pool)))
        drawn.append(pool.pop(index))

    p = np.array(drawn, dtype=np.int64)
    return np.concatenate([p, p])


def validate_permutation_table(table) -> np.ndarray:
    """
    Checks that a table has 512 entries with every value 0..255 exactly twice.
    Returns it as an int64 array, raising ValueError otherwise.
    """
    p = np.asarray(table, dtype=np.int64)
    if p.shape != (DEFAULTS.PERMUTATION_TABLE_LENGTH,):
        raise ValueError(
            f"Permutation table must have {DEFAULTS.PERMUTATION_TABLE_LENGTH} entries, got shape {p.shape}"
        )
    if p.min() < 0 or p.max() >= DEFAULTS.PERMUTATION_SIZE:
        raise ValueError("Permutation table values must lie in [0, 255]")
    counts = np.bincount(p, minlength=DEFAULTS.PERMUTATION_SIZE)
    if not np.all(counts == 2):
        raise ValueError("Permutation table must contain each value 0..255 exactly twice")
    return p


class NoiseEngine:
    """
    Owns the permutation table for one cloud system and evaluates noise on it.
    """
    def __init__(self, logger: logging.Logger = None, rng_factory=np.random.default_rng):
        """
        Args:
            logger (logging.Logger, optional): Logger for runtime messages.
            rng_factory (callable): Seeded uniform integer source used by `init`.
        """
        self.logger = logger or logging.getLogger(__name__)
        self._rng_factory = rng_factory
        self._p = None
        self.seed = None
        # Bumped on every init so callers can invalidate anything derived from the table.
        self.generation = 0

    @property
    def is_initialized(self) -> bool:
        return self._p is not None

    @property
    def permutation_table(self) -> np.ndarray:
        """The current table as a read-only array."""
        self._require_table()
        return self._p

    def init(self, seed: int = DEFAULTS.DEFAULT_SEED, permutation_table=None):
        """
        (Re)builds the permutation table, replacing any previous one wholesale.

        Args:
            seed (int): Seed for the shuffle. Defaults to 1337. Ignored, and
                recorded as None, when a table is injected.
            permutation_table (array-like, optional): A pre-computed table to use
                instead of deriving one from the seed. It is validated first.
        """
        if permutation_table is not None:
            p = validate_permutation_table(permutation_table).copy()
            self.logger.debug("Initialized with injected permutation table.")
        else:
            p = build_permutation_table(seed, self._rng_factory)
            self.logger.debug("No permutation table provided, generating new one from seed.")

        p.setflags(write=False)
        self._p = p
        # An injected table was not derived from any seed.
        self.seed = seed if permutation_table is None else None
        self.generation += 1
        self.logger.info(f"NoiseEngine initialized with seed: {self.seed}")

    def sample(self, x: float, y: float) -> float:
        """Returns the noise value in [0, 1] at (x, y)."""
        self._require_table()
        return float(perlin_noise_2d(self._p, float(x), float(y)))

    def sample_grid(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Returns noise values in [0, 1] for 2D coordinate arrays of equal shape."""
        self._require_table()
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if x.shape != y.shape or x.ndim != 2:
            raise ValueError("sample_grid expects two 2D coordinate arrays of the same shape")
        return perlin_noise_grid(self._p, x, y)

    def _require_table(self):
        if self._p is None:
            raise UninitializedStateError("NoiseEngine.init() must be called before sampling noise.")
