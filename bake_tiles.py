# FOLDER: /

# bake_tiles.py

import logging
import os
import json
import sys
import time
import hashlib

import numpy as np

from cloud_generator.noise import NoiseEngine
from cloud_generator.synthesizer import TextureSynthesizer
from cloud_generator.palette import image_to_pil
from cloud_generator.weather import Weather
from cloud_generator import config as DEFAULTS

# --- Baking Constants (Rule 1) ---
DEFAULT_PHASE_COUNT = 5
DEFAULT_OUTPUT_DIR = "BakedCloudTiles"


def bake_tiles(
    synthesizer: TextureSynthesizer,
    output_dir: str,
    logger: logging.Logger,
    phase_count: int = DEFAULT_PHASE_COUNT,
) -> dict:
    """
    Bakes every (weather, layer, phase) tile into a folder of palettized PNGs.
    Identical tiles are written once, named by the SHA-256 of their pixels,
    and `manifest.json` maps each combination to its file.

    Returns:
        dict: The manifest that was written.
    """
    if phase_count < 2:
        raise ValueError("phase_count must be at least 2 so both day and night are baked")

    start_time = time.time()

    # 1. Create directory structure
    tiles_dir = os.path.join(output_dir, "tiles")
    os.makedirs(tiles_dir, exist_ok=True)
    logger.info(f"Output directory set to '{output_dir}'")

    phases = np.linspace(0.0, 1.0, phase_count)
    manifest = {
        "seed": synthesizer.engine.seed,
        "tile_size_pixels": [synthesizer.width, synthesizer.height],
        "layer_count": synthesizer.layer_count,
        "phases": [round(float(t), 4) for t in phases],
        "tile_map": {},
    }

    # 2. Main baking loop with deduplication
    seen_hashes = set()
    total_tiles = 0
    for weather in Weather:
        weather_map = manifest["tile_map"].setdefault(weather.value, {})
        for layer in range(synthesizer.layer_count):
            for phase in phases:
                tile = synthesizer.generate(layer, weather, float(phase))
                tile_hash = hashlib.sha256(tile.tobytes()).hexdigest()
                total_tiles += 1

                if tile_hash not in seen_hashes:
                    seen_hashes.add(tile_hash)
                    output_path = os.path.join(tiles_dir, f"{tile_hash}.png")
                    image_to_pil(tile).save(output_path, optimize=True)

                weather_map[f"{layer},{float(phase):.4f}"] = tile_hash

    # 3. Save the manifest file
    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=4)

    end_time = time.time()
    logger.info("--- Bake Complete ---")
    logger.info(f"Total tiles processed: {total_tiles}")
    logger.info(f"Unique tiles saved:    {len(seen_hashes)}")
    logger.info(f"Total time: {end_time - start_time:.2f} seconds.")
    return manifest


def load_config(path: str, logger: logging.Logger) -> dict:
    """Reads an optional JSON config, falling back to the built-in defaults."""
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.info(f"No config found at '{path}', using defaults.")
        return {}


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logger = logging.getLogger("TileBaker")

    config_path = sys.argv[1] if len(sys.argv) > 1 else "sky_config.json"
    config = load_config(config_path, logger)

    engine = NoiseEngine(logger=logger)
    engine.init(config.get('seed', DEFAULTS.DEFAULT_SEED))
    synthesizer = TextureSynthesizer(
        engine,
        logger=logger,
        layer_count=config.get('layer_count', DEFAULTS.DEFAULT_LAYER_COUNT),
    )

    bake_tiles(synthesizer, config.get('output_dir', DEFAULT_OUTPUT_DIR), logger)
