import pytest

from cloud_generator.weather import Weather, parse_weather


@pytest.mark.parametrize("name, expected", [
    ("clear", Weather.CLEAR),
    ("Cloudy", Weather.CLOUDY),
    ("STORMY", Weather.STORMY),
    ("sToRmY", Weather.STORMY),
])
def test_names_match_ignoring_case(name, expected):
    assert parse_weather(name) is expected


@pytest.mark.parametrize("name", ["foggy", "", "clear ", "storm", None, 3])
def test_unrecognized_names_return_none(name):
    assert parse_weather(name) is None
