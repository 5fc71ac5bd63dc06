"""WeatherAPI.com current conditions endpoint."""
from __future__ import annotations

from .base import ProviderConfig


WEATHERAPI = ProviderConfig(
    name="weatherapi",
    base_url="https://api.weatherapi.com/v1/current.json",
    key_param="key",
    query_param="q",
    fields={
        "place_name": ("location", "name"),
        "region": ("location", "region"),
        "country": ("location", "country"),
        "temperature_f": ("current", "temp_f"),
        "condition": ("current", "condition", "text"),
        "humidity_pct": ("current", "humidity"),
        "wind_mph": ("current", "wind_mph"),
        "feels_like_f": ("current", "feelslike_f"),
    },
    error_message_key="message",
    # 1006: no location found matching parameter 'q'
    not_found_codes=frozenset({1006}),
)


__all__ = ["WEATHERAPI"]
