"""Host geolocation sources.

A source answers a single "where am I" question with :class:`Coordinates`
or raises :class:`GeolocationError` when the position is denied or cannot
be determined. There is no continuous tracking.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from .entities import Coordinates
from .errors import GeolocationError, InvalidInput


class GeolocationSource(Protocol):
    def current_position(self) -> Coordinates:
        """Return the host's current position or raise GeolocationError."""
        ...


class StaticGeolocation:
    """Always reports the same, preconfigured position."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self.coordinates = Coordinates(latitude=latitude, longitude=longitude)

    def current_position(self) -> Coordinates:
        return self.coordinates


class DeniedGeolocation:
    """Stands in for a host that refuses or lacks the capability."""

    def __init__(self, reason: str = "User denied Geolocation") -> None:
        self.reason = reason

    def current_position(self) -> Coordinates:
        raise GeolocationError(self.reason)


class IpGeolocation:
    """Approximate position from the public IP address via ip-api.com."""

    base_url = "http://ip-api.com/json/"

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 5.0,
    ) -> None:
        self.base_url = base_url or self.base_url
        self.session = session or requests.Session()
        self.timeout = timeout
        self._log = logging.getLogger(self.__class__.__name__)

    def current_position(self) -> Coordinates:
        try:
            response = self.session.get(
                self.base_url,
                params={"fields": "status,message,lat,lon"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            self._log.warning("IP geolocation request failed", exc_info=exc)
            raise GeolocationError("position unavailable") from exc
        except ValueError as exc:
            raise GeolocationError("invalid geolocation response") from exc

        if not isinstance(data, dict) or data.get("status") != "success":
            message = data.get("message") if isinstance(data, dict) else None
            raise GeolocationError(message or "position unavailable")
        try:
            return Coordinates(latitude=float(data["lat"]), longitude=float(data["lon"]))
        except (KeyError, TypeError, ValueError, InvalidInput) as exc:
            raise GeolocationError("invalid coordinates in geolocation response") from exc


__all__ = ["GeolocationSource", "StaticGeolocation", "DeniedGeolocation", "IpGeolocation"]
