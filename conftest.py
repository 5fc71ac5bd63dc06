from __future__ import annotations

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_weather_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith(("WEATHER_", "WEATHERSTACK_", "WEATHERAPI_")):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
