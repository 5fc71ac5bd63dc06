"""Wire settings, provider client, geolocation and controller together."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import requests

from .errors import ConfigurationError
from .geolocation import GeolocationSource, IpGeolocation, StaticGeolocation
from .providers.base import ProviderConfig, RequestConfig, WeatherClient
from .providers.weatherapi import WEATHERAPI
from .providers.weatherstack import WEATHERSTACK
from .services.lookup import DEMO_OBSERVATION, LookupController
from .settings import Settings, configure_logging


logger = logging.getLogger(__name__)

PROVIDER_CONFIGS = {config.name: config for config in (WEATHERSTACK, WEATHERAPI)}


def get_provider_config(name: str, base_url: Optional[str] = None) -> ProviderConfig:
    try:
        config = PROVIDER_CONFIGS[name]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown weather provider {name!r}") from exc
    if base_url:
        config = replace(config, base_url=base_url)
    return config


def build_client(settings: Settings, session: Optional[requests.Session] = None) -> WeatherClient:
    config = get_provider_config(settings.provider, settings.base_url)
    return WeatherClient(
        config,
        api_key=settings.api_key,
        session=session,
        request_config=RequestConfig(timeout=settings.timeout),
    )


def build_geolocation(
    settings: Settings, session: Optional[requests.Session] = None
) -> Optional[GeolocationSource]:
    if settings.default_latitude is not None and settings.default_longitude is not None:
        return StaticGeolocation(settings.default_latitude, settings.default_longitude)
    if settings.use_ip_geolocation:
        return IpGeolocation(session=session, timeout=settings.timeout)
    return None


def build_controller(
    settings: Optional[Settings] = None, session: Optional[requests.Session] = None
) -> LookupController:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    session = session or requests.Session()
    if not settings.api_key:
        logger.warning("No API key configured for %s; lookups will fail", settings.provider)
    return LookupController(
        build_client(settings, session=session),
        build_geolocation(settings, session=session),
        seed=DEMO_OBSERVATION if settings.seed_demo else None,
    )


__all__ = ["build_client", "build_controller", "build_geolocation", "get_provider_config"]
