"""Environment driven settings for weather lookups."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError


PROVIDERS = ("weatherstack", "weatherapi")
API_KEY_VARIABLES = ("WEATHER_API_KEY", "WEATHERSTACK_API_KEY", "WEATHERAPI_KEY")


def env(name: str, default: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Fetch an environment variable, falling back to ``default``."""

    source = os.environ if environ is None else environ
    return source.get(name, default)


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _optional_float(name: str, environ: Mapping[str, str]) -> Optional[float]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    provider: str = "weatherstack"
    api_key: str = ""
    base_url: Optional[str] = None
    timeout: float = 10.0
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None
    use_ip_geolocation: bool = False
    seed_demo: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ

        provider = env("WEATHER_PROVIDER", "weatherstack", environ).strip().lower()
        if provider not in PROVIDERS:
            raise ConfigurationError(
                f"WEATHER_PROVIDER must be one of {', '.join(PROVIDERS)}, got {provider!r}"
            )

        # A missing key is reported by the client on the first request.
        api_key = next((environ[name] for name in API_KEY_VARIABLES if environ.get(name)), "")

        timeout = _optional_float("WEATHER_TIMEOUT", environ)
        if timeout is None:
            timeout = cls.timeout
        if timeout <= 0:
            raise ConfigurationError("WEATHER_TIMEOUT must be positive")

        latitude = _optional_float("WEATHER_DEFAULT_LAT", environ)
        longitude = _optional_float("WEATHER_DEFAULT_LON", environ)
        if (latitude is None) != (longitude is None):
            raise ConfigurationError("WEATHER_DEFAULT_LAT and WEATHER_DEFAULT_LON must be set together")

        log_level = env("WEATHER_LOG_LEVEL", "INFO", environ).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"Unknown WEATHER_LOG_LEVEL {log_level!r}")

        return cls(
            provider=provider,
            api_key=api_key.strip(),
            base_url=environ.get("WEATHER_BASE_URL") or None,
            timeout=timeout,
            default_latitude=latitude,
            default_longitude=longitude,
            use_ip_geolocation=_flag(env("WEATHER_IP_GEOLOCATION", "0", environ)),
            seed_demo=_flag(env("WEATHER_SEED_DEMO", "1", environ)),
            log_level=log_level,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # basicConfig leaves existing handlers alone, the level is applied regardless.
    logging.getLogger().setLevel(level)


__all__ = ["Settings", "env", "configure_logging", "PROVIDERS"]
