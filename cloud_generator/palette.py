# cloud_generator/palette.py

"""
================================================================================
SHARED PALETTE UTILITIES
================================================================================
This module holds the fixed 16-colour palette that cloud tiles index into and
the helpers that turn a tile of palette indices into displayable pixels.

It is designed to be a pure, stateless utility with no dependencies on Pygame,
allowing it to be used by both the real-time sky and the offline tile baker.
================================================================================
"""
import numpy as np
from PIL import Image

from . import config as DEFAULTS

# --- Default Palette (Rule 1) ---
# Index 0 is reserved for transparency; its colour is never shown.
ARCADE_PALETTE = np.array([
    (0, 0, 0),        # 0  transparent
    (255, 255, 255),  # 1  white
    (255, 33, 33),    # 2  red
    (255, 147, 196),  # 3  pink
    (255, 129, 53),   # 4  orange
    (255, 246, 9),    # 5  yellow
    (36, 156, 163),   # 6  teal
    (120, 220, 82),   # 7  green
    (0, 63, 173),     # 8  blue
    (135, 242, 255),  # 9  light blue
    (142, 46, 196),   # 10 purple
    (164, 131, 159),  # 11 light purple
    (92, 64, 108),    # 12 dark purple
    (229, 205, 196),  # 13 tan
    (145, 70, 61),    # 14 brown
    (0, 0, 0),        # 15 black
], dtype=np.uint8)

PALETTE_SIZE = len(ARCADE_PALETTE)


def _check_palette(palette: np.ndarray) -> np.ndarray:
    palette = np.asarray(palette, dtype=np.uint8)
    if palette.shape != (PALETTE_SIZE, 3):
        raise ValueError(f"Palette must be a ({PALETTE_SIZE}, 3) array of RGB values")
    return palette


def create_rgba_lut(palette: np.ndarray = ARCADE_PALETTE) -> np.ndarray:
    """Creates a 16-entry RGBA lookup table with index 0 fully transparent."""
    palette = _check_palette(palette)
    lut = np.empty((PALETTE_SIZE, 4), dtype=np.uint8)
    lut[:, :3] = palette
    lut[:, 3] = 255
    lut[DEFAULTS.TRANSPARENT_INDEX, 3] = 0
    return lut


def image_to_rgba(image: np.ndarray, palette: np.ndarray = ARCADE_PALETTE) -> np.ndarray:
    """
    Converts a (H, W) tile of palette indices to a (H, W, 4) RGBA array.
    """
    image = np.asarray(image)
    if image.size and image.max() >= PALETTE_SIZE:
        raise ValueError(f"Tile contains palette indices outside [0, {PALETTE_SIZE - 1}]")
    return create_rgba_lut(palette)[image]


def image_to_pil(image: np.ndarray, palette: np.ndarray = ARCADE_PALETTE) -> Image.Image:
    """
    Wraps a tile in a palettized ("P" mode) Pillow image, with index 0
    marked as the transparent colour.
    """
    image = np.ascontiguousarray(image, dtype=np.uint8)
    palette = _check_palette(palette)
    height, width = image.shape
    img = Image.frombytes('P', (width, height), image.tobytes())
    img.putpalette(palette.flatten().tolist())
    img.info['transparency'] = DEFAULTS.TRANSPARENT_INDEX
    return img
