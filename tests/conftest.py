import os

# Pygame must never try to open a real window while the suite runs.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import logging

import numpy as np
import pytest

from cloud_generator.noise import NoiseEngine
from cloud_generator.synthesizer import TextureSynthesizer


@pytest.fixture
def logger():
    return logging.getLogger("cloud_generator.tests")


@pytest.fixture
def engine(logger):
    engine = NoiseEngine(logger=logger)
    engine.init(42)
    return engine


@pytest.fixture
def synthesizer(engine, logger):
    return TextureSynthesizer(engine, logger=logger)


@pytest.fixture
def identity_table():
    p = np.arange(256, dtype=np.int64)
    return np.concatenate([p, p])
