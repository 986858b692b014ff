from datetime import date, datetime, timezone
from zoneinfo import ZoneInfoNotFoundError

import numpy as np
import pytest

from sunpath_renders.ephemeris import (
    PolarCondition,
    check_polar_conditions,
    validate_coordinates,
)
from sunpath_renders.projection import HorizontalCoordinate
from sunpath_renders.timezones import TimeZoneResolver

SOLSTICE = date(2025, 6, 21)


def test_tokyo_summer_noon(ephemeris, locations):
    sun = ephemeris.calculate(SOLSTICE, 12.0, *locations['tokyo'])
    assert sun.altitude > 70.0
    assert 150.0 < sun.azimuth < 240.0
    assert sun.polar_condition is PolarCondition.NORMAL
    assert sun.sunrise < sun.solar_noon < sun.sunset
    assert 14.0 < sun.day_length_hours < 15.0
    assert sun.timezone == 'Asia/Tokyo'


def test_tokyo_events_in_local_zone(ephemeris, locations):
    times = ephemeris.day_events(SOLSTICE, *locations['tokyo'])
    assert times.solar_noon.utcoffset().total_seconds() == 9 * 3600
    assert 4 <= times.sunrise.hour <= 5
    assert 18 <= times.sunset.hour <= 19


def test_tromso_midnight_sun(ephemeris, locations):
    sun = ephemeris.calculate(SOLSTICE, 0.0, *locations['tromso'])
    assert sun.sunrise is None
    assert sun.sunset is None
    assert sun.polar_condition is PolarCondition.POLAR_DAY
    assert sun.day_length_hours == 24.0
    assert sun.altitude > 0.0


def test_tromso_polar_night(ephemeris, locations):
    sun = ephemeris.calculate(date(2025, 12, 21), 12.0, *locations['tromso'])
    assert sun.sunrise is None and sun.sunset is None
    assert sun.polar_condition is PolarCondition.POLAR_NIGHT
    assert sun.day_length_hours == 0.0
    assert sun.altitude < 0.0


def test_southern_hemisphere_noon_sun_is_north(ephemeris, locations):
    sun = ephemeris.calculate(SOLSTICE, 12.0, *locations['sydney'])
    assert sun.azimuth < 30.0 or sun.azimuth > 330.0
    assert 0.0 < sun.altitude < 40.0


def test_position_is_horizontal_coordinate(ephemeris):
    instant = datetime(2025, 3, 20, 12, 0, tzinfo=timezone.utc)
    coord = ephemeris.position(instant, 0.0, 0.0)
    assert isinstance(coord, HorizontalCoordinate)
    assert coord.altitude > 80.0
    assert 0.0 <= coord.azimuth < 360.0


def test_coordinate_property(ephemeris, locations):
    sun = ephemeris.calculate(SOLSTICE, 9.0, *locations['tokyo'])
    assert sun.coordinate == HorizontalCoordinate(sun.azimuth, sun.altitude)


def test_sample_day(ephemeris, locations):
    hours, azimuths, altitudes = ephemeris.sample_day(SOLSTICE, *locations['tokyo'])
    assert len(hours) == len(azimuths) == len(altitudes) == 97
    assert hours[0] == 0.0 and hours[-1] == 24.0
    assert np.all((altitudes >= -90.0) & (altitudes <= 90.0))
    assert np.all((azimuths >= 0.0) & (azimuths < 360.0))
    # Highest sample is close to local noon
    assert 11.0 <= hours[np.argmax(altitudes)] <= 12.5


def test_unknown_zone_raises(ephemeris):
    with pytest.raises(ZoneInfoNotFoundError):
        ephemeris.calculate(SOLSTICE, 12.0, 35.0, 139.0, 'Mars/Olympus_Mons')


@pytest.mark.parametrize("sunrise, sunset, noon_altitude, expected", [
    ('rise', 'set', None, PolarCondition.NORMAL),
    ('rise', None, None, PolarCondition.POLAR_DAY),
    (None, 'set', None, PolarCondition.POLAR_NIGHT),
    (None, None, 12.0, PolarCondition.POLAR_DAY),
    (None, None, -8.0, PolarCondition.POLAR_NIGHT),
    (None, None, None, PolarCondition.POLAR_NIGHT),
])
def test_check_polar_conditions(sunrise, sunset, noon_altitude, expected):
    assert check_polar_conditions(sunrise, sunset, noon_altitude) is expected


@pytest.mark.parametrize("latitude, longitude, valid", [
    (0.0, 0.0, True),
    (90.0, 180.0, True),
    (-90.0, -180.0, True),
    (90.1, 0.0, False),
    (0.0, -180.5, False),
])
def test_validate_coordinates(latitude, longitude, valid):
    ok, message = validate_coordinates(latitude, longitude)
    assert ok is valid
    assert (message is None) == valid


def test_resolver_caches_zones():
    resolver = TimeZoneResolver()
    first = resolver.zone('Asia/Tokyo')
    assert resolver.zone('Asia/Tokyo') is first
    assert len(resolver) == 1
    resolver.clear()
    assert len(resolver) == 0


def test_resolver_uses_injected_cache():
    cache = {}
    TimeZoneResolver(cache).zone('Europe/Oslo')
    assert list(cache) == ['Europe/Oslo']


def test_to_instant_local_time(timezones):
    instant = timezones.to_instant(SOLSTICE, 13.5, 'Asia/Tokyo')
    assert (instant.hour, instant.minute) == (13, 30)
    assert instant.utcoffset().total_seconds() == 9 * 3600
    assert timezones.to_decimal_hour(instant, 'Asia/Tokyo') == pytest.approx(13.5)
    assert timezones.to_decimal_hour(instant, 'UTC') == pytest.approx(4.5)


def test_to_instant_hour_24_is_next_midnight(timezones):
    instant = timezones.to_instant(SOLSTICE, 24.0, 'UTC')
    assert instant.date() == date(2025, 6, 22)
    assert instant.hour == 0


def test_formatting(timezones):
    instant = datetime(2025, 6, 20, 20, 5, tzinfo=timezone.utc)
    assert timezones.format_time(instant, 'Asia/Tokyo') == '05:05'
    assert timezones.format_date(instant, 'Asia/Tokyo') == '2025-06-21'
    assert timezones.local_date(instant, 'Asia/Tokyo') == SOLSTICE
    assert timezones.format_time(None, 'Asia/Tokyo') == '--:--'


if __name__ == "__main__":
    pytest.main([__file__])
