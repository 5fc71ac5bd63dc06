from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import ErrorKind, InvalidInput


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidInput(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidInput(f"longitude out of range: {self.longitude}")

    def as_query(self) -> str:
        return f"{_degrees(self.latitude)},{_degrees(self.longitude)}"


@dataclass(frozen=True)
class PlaceName:
    text: str

    def __post_init__(self) -> None:
        trimmed = (self.text or "").strip()
        if not trimmed:
            raise InvalidInput("Please enter a city or town")
        object.__setattr__(self, "text", trimmed)

    def as_query(self) -> str:
        return self.text


LocationQuery = Union[Coordinates, PlaceName]


def _degrees(value: float) -> str:
    # Fixed-point with at most six decimals, never exponent notation.
    text = format(value, ".6f").rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


@dataclass(frozen=True)
class WeatherObservation:
    """Normalized current conditions for one place.

    Temperatures are in Fahrenheit and wind speed in miles per hour, the
    units both supported providers are asked for. Everything except the
    place name is optional; ``None`` means the provider did not report it.
    """

    place_name: str
    region: Optional[str] = None
    country: Optional[str] = None
    temperature_f: Optional[float] = None
    condition: Optional[str] = None
    humidity_pct: Optional[int] = None
    wind_mph: Optional[float] = None
    feels_like_f: Optional[float] = None
    source: str = ""


class LookupStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupState:
    status: LookupStatus
    observation: Optional[WeatherObservation] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "LookupState":
        return cls(LookupStatus.IDLE)

    @classmethod
    def loading(cls) -> "LookupState":
        return cls(LookupStatus.LOADING)

    @classmethod
    def success(cls, observation: WeatherObservation) -> "LookupState":
        return cls(LookupStatus.SUCCESS, observation=observation)

    @classmethod
    def failed(cls, kind: ErrorKind, message: Optional[str] = None) -> "LookupState":
        return cls(LookupStatus.FAILED, error_kind=kind, message=message)

    @property
    def is_terminal(self) -> bool:
        return self.status in (LookupStatus.SUCCESS, LookupStatus.FAILED)


@dataclass(frozen=True)
class LookupSnapshot:
    """Read-only view handed to the presentation layer.

    ``observation`` and ``location_label`` keep showing the last successful
    result while a newer lookup is loading or after it failed.
    """

    state: LookupState
    observation: Optional[WeatherObservation] = None
    location_label: Optional[str] = None
    error: Optional[str] = None
    sequence: int = 0


__all__ = [
    "Coordinates",
    "PlaceName",
    "LocationQuery",
    "WeatherObservation",
    "LookupStatus",
    "LookupState",
    "LookupSnapshot",
]
