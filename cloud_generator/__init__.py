# cloud_generator/__init__.py

"""Procedural cloud tiles from seeded gradient noise."""

from .noise import NoiseEngine, UninitializedStateError, build_permutation_table
from .synthesizer import TextureSynthesizer
from .weather import Weather, parse_weather

__all__ = [
    "NoiseEngine",
    "UninitializedStateError",
    "build_permutation_table",
    "TextureSynthesizer",
    "Weather",
    "parse_weather",
]
