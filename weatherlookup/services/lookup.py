from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Protocol

from ..entities import (
    LocationQuery,
    LookupSnapshot,
    LookupState,
    PlaceName,
    WeatherObservation,
)
from ..errors import ErrorKind, GeolocationError, InvalidInput, LookupFailure
from ..geolocation import GeolocationSource


Subscriber = Callable[[LookupSnapshot], None]

DEMO_OBSERVATION = WeatherObservation(
    place_name="New York",
    region="New York",
    country="United States of America",
    temperature_f=68.0,
    condition="Partly cloudy",
    humidity_pct=55,
    wind_mph=7.0,
    feels_like_f=68.0,
    source="demo",
)

ERROR_TEXT = {
    ErrorKind.INVALID_INPUT: "Please enter a city or town",
    ErrorKind.NETWORK: "Network error, please try again later.",
    ErrorKind.UNKNOWN: "Error fetching data",
}


class WeatherFetcher(Protocol):
    def fetch_weather(self, query: LocationQuery) -> WeatherObservation:
        ...


@dataclass(frozen=True)
class PendingLookup:
    sequence: int
    query: LocationQuery
    trigger: str = "search"


def describe_failure(kind: ErrorKind, message: Optional[str] = None) -> str:
    """Turn a failure into the text shown to the user."""
    if kind is ErrorKind.INVALID_INPUT and message:
        return message
    if kind in (ErrorKind.NOT_FOUND, ErrorKind.PROVIDER_ERROR):
        return f"Error: {message}" if message else ERROR_TEXT[ErrorKind.UNKNOWN]
    return ERROR_TEXT[kind]


class LookupController:
    """Owns the lookup lifecycle and the snapshot shown to the user.

    Every dispatched lookup gets a sequence number. Only the most recently
    dispatched lookup may change the visible state; older ones are either
    cancelled before their request goes out or have their response dropped.
    """

    def __init__(
        self,
        client: WeatherFetcher,
        geolocation: Optional[GeolocationSource] = None,
        *,
        seed: Optional[WeatherObservation] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.geolocation = geolocation
        self._seed = seed
        self._sequence = 0
        self._started = False
        self._snapshot = LookupSnapshot(state=LookupState.idle())
        self._subscribers: List[Subscriber] = []
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    @property
    def snapshot(self) -> LookupSnapshot:
        return self._snapshot

    @property
    def state(self) -> LookupState:
        return self._snapshot.state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def seed(self, observation: WeatherObservation) -> LookupSnapshot:
        """Show a placeholder observation without contacting the provider."""
        self._publish(
            replace(
                self._snapshot,
                state=LookupState.success(observation),
                observation=observation,
                location_label=observation.place_name,
                error=None,
            )
        )
        return self._snapshot

    def start(self) -> LookupSnapshot:
        if self._started:
            self._log.warning("Lookup controller already started")
            return self._snapshot
        self._started = True
        if self._seed is not None:
            self.seed(self._seed)
        if self.geolocation is None:
            return self._snapshot
        try:
            coordinates = self.geolocation.current_position()
        except GeolocationError as exc:
            # The seeded observation, if any, stays on screen.
            self._log.warning("Error fetching geolocation: %s", exc)
            return self._snapshot
        return self.lookup(coordinates, trigger="geolocation")

    def search(self, text: str) -> LookupSnapshot:
        try:
            query = PlaceName(text)
        except InvalidInput as exc:
            self._log.info("Rejected empty search")
            self._fail(exc.kind, exc.message)
            return self._snapshot
        return self.lookup(query, trigger="search")

    def lookup(self, query: LocationQuery, trigger: str = "search") -> LookupSnapshot:
        return self.complete(self.dispatch(query, trigger=trigger))

    def dispatch(self, query: LocationQuery, trigger: str = "search") -> PendingLookup:
        self._sequence += 1
        pending = PendingLookup(sequence=self._sequence, query=query, trigger=trigger)
        self._log.debug("Dispatching %s lookup #%s", trigger, pending.sequence)
        self._publish(
            replace(
                self._snapshot,
                state=LookupState.loading(),
                error=None,
                sequence=pending.sequence,
            )
        )
        return pending

    def complete(self, pending: PendingLookup) -> LookupSnapshot:
        if self.is_superseded(pending):
            self._log.debug("Lookup #%s superseded before sending; cancelled", pending.sequence)
            return self._snapshot
        try:
            observation = self.client.fetch_weather(pending.query)
        except LookupFailure as exc:
            if self._drop_stale(pending):
                return self._snapshot
            self._log.warning("Lookup #%s failed (%s): %s", pending.sequence, exc.kind.value, exc)
            self._fail(exc.kind, exc.message)
            return self._snapshot
        except Exception as exc:  # noqa: BLE001
            if self._drop_stale(pending):
                return self._snapshot
            self._log.error("Lookup #%s failed unexpectedly", pending.sequence, exc_info=exc)
            self._fail(ErrorKind.UNKNOWN, None)
            return self._snapshot
        if self._drop_stale(pending):
            return self._snapshot
        self._publish(
            replace(
                self._snapshot,
                state=LookupState.success(observation),
                observation=observation,
                location_label=observation.place_name,
                error=None,
            )
        )
        return self._snapshot

    def is_superseded(self, pending: PendingLookup) -> bool:
        return pending.sequence < self._sequence

    # Helpers ------------------------------------------------------------
    def _drop_stale(self, pending: PendingLookup) -> bool:
        if self.is_superseded(pending):
            self._log.debug(
                "Ignoring stale response for lookup #%s (latest #%s)",
                pending.sequence,
                self._sequence,
            )
            return True
        return False

    def _fail(self, kind: ErrorKind, message: Optional[str]) -> None:
        self._publish(
            replace(
                self._snapshot,
                state=LookupState.failed(kind, message),
                error=describe_failure(kind, message),
            )
        )

    def _publish(self, snapshot: LookupSnapshot) -> None:
        self._snapshot = snapshot
        self._log.debug("State -> %s", snapshot.state.status.value)
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as exc:  # noqa: BLE001
                self._log.error("Snapshot subscriber failed", exc_info=exc)


__all__ = [
    "LookupController",
    "PendingLookup",
    "DEMO_OBSERVATION",
    "describe_failure",
]
