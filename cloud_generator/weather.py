# cloud_generator/weather.py

"""Weather states understood by the cloud texture synthesizer."""

from enum import Enum


class Weather(Enum):
    CLEAR = "clear"
    CLOUDY = "cloudy"
    STORMY = "stormy"


def parse_weather(name: str):
    """
    Matches a weather name case-insensitively.

    Returns the matching Weather, or None when the name is not one of
    "clear", "cloudy" or "stormy". Callers treat None as "leave the
    weather unchanged" rather than as an error.
    """
    if not isinstance(name, str):
        return None
    try:
        return Weather(name.lower())
    except ValueError:
        return None
