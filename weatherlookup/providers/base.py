from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Sequence, Tuple, Union

import requests
from requests import Response

from ..entities import LocationQuery, WeatherObservation
from ..errors import (
    InvalidInput,
    LookupFailure,
    NetworkError,
    PlaceNotFound,
    ProviderError,
    UnknownLookupError,
)


FieldPath = Tuple[Union[str, int], ...]


@dataclass(frozen=True)
class ProviderConfig:
    """Everything that differs between two "current conditions" APIs.

    ``fields`` maps :class:`WeatherObservation` attribute names to a path
    into the decoded JSON body. String steps index objects, integer steps
    index lists.
    """

    name: str
    base_url: str
    key_param: str
    query_param: str
    fields: Mapping[str, FieldPath]
    error_message_key: str = "info"
    not_found_codes: FrozenSet[int] = frozenset()
    extra_params: Mapping[str, str] = field(default_factory=dict)


@dataclass
class RequestConfig:
    timeout: float = 10.0


class WeatherClient:
    """Single-request client for one provider's current conditions endpoint."""

    def __init__(
        self,
        config: ProviderConfig,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.config = config
        self.api_key = api_key or ""
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def fetch_weather(self, query: LocationQuery) -> WeatherObservation:
        if not self.api_key:
            self._log.error("No API key configured for %s", self.config.name)
            raise ProviderError(f"missing API key for {self.config.name}")
        params: Dict[str, Any] = dict(self.config.extra_params)
        params[self.config.key_param] = self.api_key
        params[self.config.query_param] = query.as_query()
        self._log.debug("Fetching %s weather for %r", self.config.name, query.as_query())

        response = self._request(params)
        try:
            data = self._json(response)
            self._raise_for_error(response, data)
            return self._normalize(data)
        except LookupFailure:
            raise
        except Exception as exc:
            self._log.error("Failed to parse %s response", self.config.name, exc_info=exc)
            raise UnknownLookupError("Error fetching data") from exc

    # Helpers ------------------------------------------------------------
    def _request(self, params: Dict[str, Any]) -> Response:
        try:
            return self.session.get(
                self.config.base_url,
                params=params,
                timeout=self.request_config.timeout,
            )
        except requests.Timeout as exc:
            self._log.error("Request to %s timed out", self.config.name, exc_info=exc)
            raise NetworkError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request to %s failed", self.config.name, exc_info=exc)
            raise NetworkError("request failed") from exc
        except UnicodeError as exc:
            self._log.warning("Query for %s cannot be encoded", self.config.name, exc_info=exc)
            raise InvalidInput("Search text contains invalid characters") from exc
        except Exception as exc:
            self._log.error("Could not build request to %s", self.config.name, exc_info=exc)
            raise UnknownLookupError("Error fetching data") from exc

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError:
            if response.status_code >= 400:
                return None
            raise

    def _raise_for_error(self, response: Response, data: Any) -> None:
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict):
            message = error.get(self.config.error_message_key) or error.get("type")
            code = error.get("code")
            self._log.warning(
                "%s returned error %s (HTTP %s): %s",
                self.config.name,
                code,
                response.status_code,
                message,
            )
            if response.status_code == 404 or code in self.config.not_found_codes:
                raise PlaceNotFound(message)
            raise ProviderError(message)
        if response.status_code == 404:
            raise PlaceNotFound("Location data not available")
        if response.status_code >= 400:
            self._log.error("%s returned %s: %s", self.config.name, response.status_code, response.text)
            raise ProviderError(f"HTTP {response.status_code}")

    def _normalize(self, data: Any) -> WeatherObservation:
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        fields = self.config.fields
        place_name = _dig(data, fields["place_name"])
        if not place_name:
            self._log.warning("%s response has no location", self.config.name)
            raise PlaceNotFound("Location data not available")
        return WeatherObservation(
            place_name=str(place_name),
            region=_safe_text(_dig(data, fields.get("region"))),
            country=_safe_text(_dig(data, fields.get("country"))),
            temperature_f=_safe_float(_dig(data, fields.get("temperature_f"))),
            condition=_safe_text(_dig(data, fields.get("condition"))),
            humidity_pct=_safe_percent(_dig(data, fields.get("humidity_pct"))),
            wind_mph=_safe_float(_dig(data, fields.get("wind_mph"))),
            feels_like_f=_safe_float(_dig(data, fields.get("feels_like_f"))),
            source=self.config.name,
        )


def _dig(payload: Any, path: Optional[Sequence[Union[str, int]]]) -> Any:
    if not path:
        return None
    value = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(value, list) or not -len(value) <= step < len(value):
                return None
        elif not isinstance(value, dict):
            return None
        value = value[step] if isinstance(step, int) else value.get(step)
        if value is None:
            return None
    return value


def _safe_float(value: Optional[object]) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_percent(value: Optional[object]) -> Optional[int]:
    number = _safe_float(value)
    if number is None or not 0 <= number <= 100:
        return None
    return int(round(number))


def _safe_text(value: Optional[object]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = ["ProviderConfig", "RequestConfig", "WeatherClient"]
