"""weatherstack current conditions endpoint."""
from __future__ import annotations

from .base import ProviderConfig


# Code 615 ("request_failed") is what weatherstack answers for a query it
# cannot resolve to a location.
WEATHERSTACK = ProviderConfig(
    name="weatherstack",
    base_url="https://api.weatherstack.com/current",
    key_param="access_key",
    query_param="query",
    extra_params={"units": "f"},
    fields={
        "place_name": ("location", "name"),
        "region": ("location", "region"),
        "country": ("location", "country"),
        "temperature_f": ("current", "temperature"),
        "condition": ("current", "weather_descriptions", 0),
        "humidity_pct": ("current", "humidity"),
        "wind_mph": ("current", "wind_speed"),
        "feels_like_f": ("current", "feelslike"),
    },
    error_message_key="info",
    not_found_codes=frozenset({615}),
)


__all__ = ["WEATHERSTACK"]
