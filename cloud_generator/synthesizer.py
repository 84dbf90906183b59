# cloud_generator/synthesizer.py

"""
================================================================================
CLOUD TEXTURE SYNTHESIZER
================================================================================
This module paints small palette-indexed cloud tiles from gradient noise.

Data Contract:
---------------
- Inputs (on initialization):
    - engine (NoiseEngine): An initialized (or soon to be initialized) engine.
    - logger: A Python logging object for runtime messages.
- Inputs (per call):
    - layer (int): Depth band, clamped into [0, layer_count - 1].
    - weather (Weather): The current weather.
    - transition (float): Day/night blend in [0, 1], clamped.
- Outputs:
    - A fresh (IMAGE_HEIGHT, IMAGE_WIDTH) uint8 NumPy array of palette indices,
      where 0 is transparent. The caller owns it.
- Side Effects: None beyond an internal memoization cache.
- Invariants:
    - A pixel whose density bucket is 0 is never painted.
    - The output is a pure function of (layer, weather, transition, table).
================================================================================
"""

import logging
import math
from collections import OrderedDict

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .noise import NoiseEngine, perlin_noise_2d
from .weather import Weather


@njit
def _paint_tile(p, width, height, scale, offset_x, offset_y, transition,
                buckets, day_base, night_base, storm_darkening, min_opaque):
    """Fills one tile, row-major, with blended palette indices."""
    tile = np.zeros((height, width), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            n = perlin_noise_2d(p, x * scale + offset_x, y * scale + offset_y)
            bucket = min(int(np.floor(n * buckets)), buckets - 1)
            if bucket <= 0:
                continue

            day_index = bucket + day_base
            night_index = night_base - bucket
            blended = day_index * (1.0 - transition) + night_index * transition
            # Round half up, so 2.5 becomes 3 rather than 2.
            color = int(np.floor(blended + 0.5))
            if storm_darkening > 0:
                color = max(min_opaque, color - storm_darkening)
            tile[y, x] = color
    return tile


class TextureSynthesizer:
    """
    Generates cloud tiles for a given depth layer, weather and time of day.
    """
    def __init__(self, engine: NoiseEngine, logger: logging.Logger = None,
                 width: int = DEFAULTS.IMAGE_WIDTH, height: int = DEFAULTS.IMAGE_HEIGHT,
                 layer_count: int = DEFAULTS.DEFAULT_LAYER_COUNT,
                 cache_size: int = DEFAULTS.TEXTURE_CACHE_SIZE):
        if layer_count < 1:
            raise ValueError("layer_count must be at least 1")
        self.engine = engine
        self.logger = logger or logging.getLogger(__name__)
        self.width = width
        self.height = height
        self.layer_count = layer_count
        self.cache_size = cache_size
        self._cache = OrderedDict()

    def clamp_layer(self, layer: int) -> int:
        """Maps any layer index into the configured range."""
        return min(max(int(layer), 0), self.layer_count - 1)

    def generate(self, layer: int, weather: Weather, transition: float) -> np.ndarray:
        """
        Paints one tile.

        Args:
            layer (int): Depth band. Out-of-range values are clamped.
            weather (Weather): Stormy darkens every opaque pixel by two indices.
            transition (float): 0 for full day, 1 for full night.

        Returns:
            np.ndarray: A new (height, width) uint8 array of palette indices.
        """
        # Raises UninitializedStateError before anything is cached.
        p = self.engine.permutation_table

        if not isinstance(weather, Weather):
            raise TypeError(f"weather must be a Weather, got {weather!r}")
        transition = float(transition)
        if not math.isfinite(transition):
            raise ValueError(f"transition must be a finite number, got {transition}")

        layer = self.clamp_layer(layer)
        transition = min(max(transition, 0.0), 1.0)
        key = (layer, weather, transition, self.engine.generation)

        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            self.logger.debug(f"Texture cache hit for layer {layer}, {weather.value}, transition {transition:.3f}")
            return cached.copy()

        tile = _paint_tile(
            p,
            self.width,
            self.height,
            DEFAULTS.NOISE_SAMPLE_SCALE,
            layer * DEFAULTS.LAYER_OFFSET_X,
            layer * DEFAULTS.LAYER_OFFSET_Y,
            transition,
            DEFAULTS.DENSITY_BUCKETS,
            DEFAULTS.DAY_INDEX_BASE,
            DEFAULTS.NIGHT_INDEX_BASE,
            DEFAULTS.STORM_DARKENING if weather is Weather.STORMY else 0,
            DEFAULTS.MIN_OPAQUE_INDEX,
        )

        if self.cache_size > 0:
            self._cache[key] = tile
            if len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
            return tile.copy()
        return tile

    def clear_cache(self):
        self._cache.clear()
