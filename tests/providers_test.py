from __future__ import annotations

from dataclasses import replace

import pytest
import requests

from weatherlookup.entities import Coordinates, PlaceName
from weatherlookup.errors import (
    ErrorKind,
    InvalidInput,
    NetworkError,
    PlaceNotFound,
    ProviderError,
    UnknownLookupError,
)
from weatherlookup.providers.base import WeatherClient
from weatherlookup.providers.weatherapi import WEATHERAPI
from weatherlookup.providers.weatherstack import WEATHERSTACK


WEATHERSTACK_URL = "https://weatherstack.test/current"
WEATHERAPI_URL = "https://weatherapi.test/v1/current.json"

LONDON_WEATHERAPI = {
    "location": {"name": "London", "region": "City of London", "country": "UK"},
    "current": {
        "temp_f": 60,
        "condition": {"text": "Cloudy"},
        "humidity": 70,
        "wind_mph": 5,
        "feelslike_f": 58,
    },
}

LONDON_WEATHERSTACK = {
    "request": {"type": "LatLon", "query": "Lat 51.50 and Lon -0.12", "unit": "f"},
    "location": {"name": "London", "region": "City of London, Greater London", "country": "United Kingdom"},
    "current": {
        "temperature": 61,
        "weather_descriptions": ["Partly cloudy"],
        "humidity": 72,
        "wind_speed": 8,
        "feelslike": 59,
    },
}


def weatherstack_client(**kwargs) -> WeatherClient:
    return WeatherClient(replace(WEATHERSTACK, base_url=WEATHERSTACK_URL), api_key="test", **kwargs)


def weatherapi_client() -> WeatherClient:
    return WeatherClient(replace(WEATHERAPI, base_url=WEATHERAPI_URL), api_key="test")


def test_coordinates_lookup_sends_single_request(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, json=LONDON_WEATHERSTACK)

    observation = weatherstack_client().fetch_weather(Coordinates(51.5, -0.12))

    assert requests_mock.call_count == 1
    qs = requests_mock.last_request.qs
    assert qs["query"] == ["51.5,-0.12"]
    assert qs["access_key"] == ["test"]
    assert qs["units"] == ["f"]
    assert observation.place_name == "London"
    assert observation.region == "City of London, Greater London"
    assert observation.temperature_f == 61
    assert observation.condition == "Partly cloudy"
    assert observation.humidity_pct == 72
    assert observation.wind_mph == 8
    assert observation.feels_like_f == 59
    assert observation.source == "weatherstack"


def test_weatherapi_normalization(requests_mock):
    requests_mock.get(WEATHERAPI_URL, json=LONDON_WEATHERAPI)

    observation = weatherapi_client().fetch_weather(PlaceName("London"))

    qs = requests_mock.last_request.qs
    assert qs["q"] == ["London"]
    assert qs["key"] == ["test"]
    assert observation.place_name == "London"
    assert observation.country == "UK"
    assert observation.temperature_f == 60
    assert observation.condition == "Cloudy"
    assert observation.humidity_pct == 70
    assert observation.wind_mph == 5
    assert observation.feels_like_f == 58


def test_place_name_is_trimmed_and_percent_encoded(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, json=LONDON_WEATHERSTACK)

    weatherstack_client().fetch_weather(PlaceName("  São Paulo "))

    assert "S%C3%A3o" in requests_mock.last_request.url
    assert requests_mock.last_request.qs["query"] == ["São Paulo"]


def test_missing_optional_fields_are_unavailable(requests_mock):
    requests_mock.get(
        WEATHERAPI_URL,
        json={"location": {"name": "Reykjavik"}, "current": {"temp_f": 33.8}},
    )

    observation = weatherapi_client().fetch_weather(PlaceName("Reykjavik"))

    assert observation.place_name == "Reykjavik"
    assert observation.temperature_f == pytest.approx(33.8)
    assert observation.region is None
    assert observation.condition is None
    assert observation.humidity_pct is None
    assert observation.wind_mph is None
    assert observation.feels_like_f is None


def test_missing_current_block_still_succeeds(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, json={"location": {"name": "Oslo", "country": "Norway"}})

    observation = weatherstack_client().fetch_weather(PlaceName("Oslo"))

    assert observation.place_name == "Oslo"
    assert observation.temperature_f is None
    assert observation.condition is None


def test_malformed_values_are_unavailable(requests_mock):
    payload = {
        "location": {"name": "Lima"},
        "current": {"temperature": "n/a", "humidity": 140, "weather_descriptions": [], "wind_speed": True},
    }
    requests_mock.get(WEATHERSTACK_URL, json=payload)

    observation = weatherstack_client().fetch_weather(PlaceName("Lima"))

    assert observation.temperature_f is None
    assert observation.humidity_pct is None
    assert observation.condition is None
    assert observation.wind_mph is None


def test_http_error_with_error_payload_surfaces_message(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, status_code=404, json={"error": {"info": "city not found"}})

    with pytest.raises(PlaceNotFound) as excinfo:
        weatherstack_client().fetch_weather(PlaceName("Atlantis"))

    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert excinfo.value.message == "city not found"


def test_weatherstack_unresolved_query_is_not_found(requests_mock):
    requests_mock.get(
        WEATHERSTACK_URL,
        json={
            "success": False,
            "error": {
                "code": 615,
                "type": "request_failed",
                "info": "Your API request failed. Please try again or contact support.",
            },
        },
    )

    with pytest.raises(PlaceNotFound) as excinfo:
        weatherstack_client().fetch_weather(PlaceName("Nowhere"))

    assert excinfo.value.message.startswith("Your API request failed")


def test_weatherstack_structured_error_is_provider_error(requests_mock):
    requests_mock.get(
        WEATHERSTACK_URL,
        json={
            "success": False,
            "error": {"code": 101, "type": "invalid_access_key", "info": "You have not supplied a valid API Access Key."},
        },
    )

    with pytest.raises(ProviderError) as excinfo:
        weatherstack_client().fetch_weather(PlaceName("Paris"))

    assert excinfo.value.kind is ErrorKind.PROVIDER_ERROR
    assert excinfo.value.message == "You have not supplied a valid API Access Key."


def test_weatherapi_no_matching_location(requests_mock):
    requests_mock.get(
        WEATHERAPI_URL,
        status_code=400,
        json={"error": {"code": 1006, "message": "No matching location found."}},
    )

    with pytest.raises(PlaceNotFound) as excinfo:
        weatherapi_client().fetch_weather(PlaceName("Qwxyz"))

    assert excinfo.value.message == "No matching location found."


def test_http_error_without_payload(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, status_code=502, text="bad gateway")

    with pytest.raises(ProviderError) as excinfo:
        weatherstack_client().fetch_weather(PlaceName("Paris"))

    assert excinfo.value.message == "HTTP 502"


def test_payload_without_location_is_not_found(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, json={"current": {"temperature": 50}})

    with pytest.raises(PlaceNotFound):
        weatherstack_client().fetch_weather(PlaceName("Paris"))


def test_connection_failure_is_network_error(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, exc=requests.exceptions.ConnectionError)

    with pytest.raises(NetworkError) as excinfo:
        weatherstack_client().fetch_weather(PlaceName("Paris"))

    assert excinfo.value.kind is ErrorKind.NETWORK


def test_timeout_is_network_error(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, exc=requests.exceptions.ConnectTimeout)

    with pytest.raises(NetworkError):
        weatherstack_client().fetch_weather(Coordinates(0.0, 0.0))


def test_invalid_json_is_unknown_error(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, text="<html>oops</html>")

    with pytest.raises(UnknownLookupError) as excinfo:
        weatherstack_client().fetch_weather(PlaceName("Paris"))

    assert excinfo.value.kind is ErrorKind.UNKNOWN


def test_non_object_body_is_unknown_error(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, json=["London"])

    with pytest.raises(UnknownLookupError):
        weatherstack_client().fetch_weather(PlaceName("London"))


def test_missing_api_key_fails_without_request(requests_mock):
    client = WeatherClient(replace(WEATHERSTACK, base_url=WEATHERSTACK_URL), api_key="")

    with pytest.raises(ProviderError) as excinfo:
        client.fetch_weather(PlaceName("London"))

    assert "missing API key" in excinfo.value.message
    assert requests_mock.call_count == 0


def test_unencodable_query_is_invalid_input(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, json=LONDON_WEATHERSTACK)

    with pytest.raises(InvalidInput):
        weatherstack_client().fetch_weather(PlaceName("Lon\udc80don"))

    assert requests_mock.call_count == 0


def test_unexpected_request_error_is_unknown(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, exc=RuntimeError("adapter broke"))

    with pytest.raises(UnknownLookupError):
        weatherstack_client().fetch_weather(PlaceName("London"))


def test_tiny_coordinates_use_fixed_point(requests_mock):
    requests_mock.get(WEATHERSTACK_URL, json=LONDON_WEATHERSTACK)

    weatherstack_client().fetch_weather(Coordinates(1e-05, -0.0))

    assert requests_mock.last_request.qs["query"] == ["0.00001,0"]
