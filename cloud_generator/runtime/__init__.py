# cloud_generator/runtime/__init__.py

# This file makes the 'runtime' directory a Python package.
# We can also use it to define the public API of the package.

from .appearance import AppearanceState
from .sky import BrightnessActuator, Cloud, CloudSky

__all__ = ["AppearanceState", "BrightnessActuator", "Cloud", "CloudSky"]
