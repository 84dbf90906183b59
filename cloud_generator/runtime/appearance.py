# cloud_generator/runtime/appearance.py

"""
================================================================================
APPEARANCE STATE
================================================================================
This module provides a class to manage the weather and the day/night
transition that parameterize cloud synthesis, and the screen brightness that
follows from them.

Data Contract:
---------------
- Inputs (on initialization):
    - speed (float): Transition change per tick while the cycle is armed.
    - day_brightness, night_brightness: Brightness endpoints.
- Public Methods:
    - set_weather(name): Case-insensitive weather change; unknown names are ignored.
    - set_daytime(is_day): Snaps the transition to day (0) or night (1).
    - enable_cycle(period_ticks): Arms the oscillating day/night cycle.
    - tick(): Advances the cycle by one frame.
- Public Properties:
    - weather (Weather), transition (float in [0, 1]), direction (+1/-1).
    - brightness (float): Linear map of the transition onto the endpoints.
    - revision (int): Incremented whenever tiles must be resynthesized.
- Side Effects: Logs state changes.
- Invariants: The transition is always clamped to [0, 1].
================================================================================
"""
import logging

from .. import config as DEFAULTS
from ..weather import Weather, parse_weather


def _lerp_float(val1: float, val2: float, t: float) -> float:
    """Linearly interpolates between two float values."""
    t = min(max(t, 0.0), 1.0)
    return val1 * (1 - t) + val2 * t


class AppearanceState:
    """
    Holds the weather and the oscillating day/night transition for one sky.
    """
    def __init__(self, speed: float = DEFAULTS.TRANSITION_SPEED,
                 day_brightness: float = DEFAULTS.DAY_BRIGHTNESS,
                 night_brightness: float = DEFAULTS.NIGHT_BRIGHTNESS,
                 logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)

        # --- 1. Load Configuration ---
        self.speed = speed
        self.day_brightness = day_brightness
        self.night_brightness = night_brightness

        # --- 2. Public State Variables ---
        self.weather = Weather.CLEAR
        self.transition = 0.0
        self.direction = 1
        self.cycle_period = None
        self.revision = 0

        # --- 3. Cycle Bookkeeping ---
        self._ticks_in_period = 0

    @property
    def cycle_enabled(self) -> bool:
        return self.cycle_period is not None

    @property
    def brightness(self) -> float:
        """Brightness for the display, from day_brightness (0) to night_brightness (1)."""
        return _lerp_float(self.day_brightness, self.night_brightness, self.transition)

    def set_weather(self, name: str) -> bool:
        """
        Changes the weather by name, ignoring case.

        An unrecognized name leaves the weather untouched and requests no
        resynthesis. Returns True when the weather was applied.
        """
        weather = parse_weather(name)
        if weather is None:
            self.logger.debug(f"Ignoring unrecognized weather '{name}'.")
            return False

        self.weather = weather
        self._request_resynthesis()
        self.logger.info(f"Weather set to '{weather.value}'.")
        return True

    def set_daytime(self, is_day: bool):
        """Snaps straight to full day or full night."""
        self.transition = 0.0 if is_day else 1.0
        self._request_resynthesis()
        self.logger.info(f"Daytime snapped to {'day' if is_day else 'night'}.")

    def enable_cycle(self, period_ticks: int):
        """
        Arms the day/night oscillation. Every `period_ticks` ticks the
        direction of travel flips. Calling it again restarts the period count.
        """
        period = int(period_ticks)
        if period <= 0:
            raise ValueError("period_ticks must be a positive number of ticks")
        self.cycle_period = period
        self._ticks_in_period = 0
        self.logger.info(f"Day/night cycle enabled with a period of {self.cycle_period} ticks.")

    def tick(self) -> bool:
        """
        Advances the transition by one step. A no-op until `enable_cycle`
        has been called. Returns True when tiles need resynthesis.
        """
        if not self.cycle_enabled:
            return False

        self.transition = min(max(self.transition + self.speed * self.direction, 0.0), 1.0)

        self._ticks_in_period += 1
        if self._ticks_in_period >= self.cycle_period:
            self._ticks_in_period = 0
            self.direction = -self.direction

        self._request_resynthesis()
        return True

    def _request_resynthesis(self):
        self.revision += 1
