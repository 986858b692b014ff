"""
Pytest fixtures and configuration for Sun Path Renderer tests.
"""
from datetime import date

import pytest

from sunpath_renders.core import Renderer, RenderRequest
from sunpath_renders.ephemeris import SolarEphemeris
from sunpath_renders.projection import Viewport
from sunpath_renders.surface import RecordingSurface
from sunpath_renders.timezones import TimeZoneResolver

SUMMER_SOLSTICE = date(2025, 6, 21)


@pytest.fixture
def renderer():
    """Renderer with caching disabled so every call draws."""
    return Renderer(cache_size=0)


@pytest.fixture
def timezones():
    return TimeZoneResolver()


@pytest.fixture
def ephemeris(timezones):
    return SolarEphemeris(timezones)


@pytest.fixture
def south_view():
    """Default camera: due south, level, 110 deg."""
    return Viewport(180.0, 0.0, 110.0)


@pytest.fixture
def recording():
    return RecordingSurface(800, 600)


@pytest.fixture
def locations():
    """(latitude, longitude, timezone) for common observers."""
    return {
        'tokyo': (35.6762, 139.6503, 'Asia/Tokyo'),
        'tromso': (69.6492, 18.9553, 'Europe/Oslo'),
        'sydney': (-33.8688, 151.2093, 'Australia/Sydney'),
        'equator': (0.0, 0.0, 'UTC'),
    }


@pytest.fixture
def make_request():
    """Factory for RenderRequests at a (lat, lon, tz) location on a small canvas."""
    def _make(location, day=SUMMER_SOLSTICE, hour=12.0, **kwargs):
        latitude, longitude, tz_name = location
        kwargs.setdefault('width', 160)
        kwargs.setdefault('height', 120)
        return RenderRequest(date=day, hour=hour, latitude=latitude, longitude=longitude,
                             timezone=tz_name, **kwargs)
    return _make
