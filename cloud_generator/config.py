# cloud_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the cloud
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC SKY.
Instead, pass a configuration dictionary to the CloudSky instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 1337
# The permutation covers one lattice period; the table stores it twice.
PERMUTATION_SIZE = 256
PERMUTATION_TABLE_LENGTH = PERMUTATION_SIZE * 2

# --- Tile Geometry ---
IMAGE_WIDTH = 32
IMAGE_HEIGHT = 16

# --- Texture Synthesis ---
# Pixel-to-noise coordinate scale. Smaller values give larger, softer puffs.
NOISE_SAMPLE_SCALE = 0.1
# Per-layer coordinate offsets that decorrelate the depth bands.
LAYER_OFFSET_X = 10.0
LAYER_OFFSET_Y = 20.0
# Number of density buckets a noise sample is quantized into. Bucket 0 is clear sky.
DENSITY_BUCKETS = 4
# Day colours sit low in the palette, night colours are mirrored from the top.
DAY_INDEX_BASE = 1
NIGHT_INDEX_BASE = 14
# How far a storm darkens an opaque pixel, and the darkest it may become.
STORM_DARKENING = 2
MIN_OPAQUE_INDEX = 1
TRANSPARENT_INDEX = 0
DEFAULT_LAYER_COUNT = 2
TEXTURE_CACHE_SIZE = 64

# --- Day/Night Cycle ---
TRANSITION_SPEED = 0.01
DAY_BRIGHTNESS = 100
NIGHT_BRIGHTNESS = 40

# --- Storm Lightning ---
FLASH_BRIGHTNESS = 255
# Probability per tick, as a fraction (0.5%).
FLASH_CHANCE = 0.005
FLASH_DURATION_TICKS = 2

# --- Sky Layout (screen pixels) ---
SCREEN_WIDTH = 160
SCREEN_HEIGHT = 120
DEFAULT_CLOUD_COUNT = 8
# Spawn band for a fresh cloud; each layer shifts it down by LAYER_SPAWN_STEP.
SPAWN_Y_MIN = 10
SPAWN_Y_MAX = 40
LAYER_SPAWN_STEP = 10
# Band used when a cloud is recycled back to the right edge.
RESPAWN_Y_MIN = 10
RESPAWN_Y_MAX = 50
# Clouds further left than this are recycled; they re-enter this far to the right.
RECYCLE_MARGIN = 32
# Base drift of layer 0, in pixels per tick. Deeper layers drift faster.
BASE_DRIFT_SPEED = 0.5
STORM_EXTRA_DRIFT = 1.0
