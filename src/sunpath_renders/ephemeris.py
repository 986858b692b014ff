"""
Solar ephemeris adapter built on astral.

The renderer treats this module as a black box: instants in, horizontal
coordinates and day events out. Polar days and nights are data (None
sunrise/sunset), never exceptions.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

import numpy as np
from astral import Observer
from astral import sun as astral_sun

from sunpath_renders import constants
from sunpath_renders.projection import HorizontalCoordinate, normalize_azimuth
from sunpath_renders.timezones import TimeZoneResolver

logger = logging.getLogger(__name__)


class PolarCondition(Enum):
    POLAR_DAY = "polar_day"      # Sun never sets
    POLAR_NIGHT = "polar_night"  # Sun never rises
    NORMAL = "normal"


@dataclass(frozen=True)
class SunTimes:
    """Day events for one calendar day. sunrise/sunset are None near the poles."""
    sunrise: datetime | None
    sunset: datetime | None
    solar_noon: datetime


@dataclass(frozen=True)
class SunPositionData:
    """Sun state for one local date and hour at one location."""
    date: date
    hour: float
    latitude: float
    longitude: float
    timezone: str
    altitude: float
    azimuth: float
    sunrise: datetime | None
    sunset: datetime | None
    solar_noon: datetime
    day_length_hours: float
    polar_condition: PolarCondition

    @property
    def coordinate(self):
        return HorizontalCoordinate(self.azimuth, self.altitude)


def check_polar_conditions(sunrise, sunset, noon_altitude=None):
    """
    Classify a day from its sunrise/sunset availability.

    Args:
        sunrise: Sunrise instant or None
        sunset: Sunset instant or None
        noon_altitude: Solar altitude at noon, used when both are None

    Returns:
        PolarCondition
    """
    if sunrise is not None and sunset is not None:
        return PolarCondition.NORMAL
    if sunrise is not None:
        return PolarCondition.POLAR_DAY
    if sunset is not None:
        return PolarCondition.POLAR_NIGHT
    if noon_altitude is not None and noon_altitude > 0:
        return PolarCondition.POLAR_DAY
    return PolarCondition.POLAR_NIGHT


def validate_coordinates(latitude, longitude):
    """
    Check a latitude/longitude pair.

    Returns:
        tuple: (valid, error message or None)
    """
    if not -90.0 <= latitude <= 90.0:
        return False, "Latitude must be between -90 and 90."
    if not -180.0 <= longitude <= 180.0:
        return False, "Longitude must be between -180 and 180."
    return True, None


class SolarEphemeris:
    """
    Sun position and day events for a ground observer.

    Args:
        timezones: TimeZoneResolver used for local-time conversions
        with_refraction: Apply atmospheric refraction to altitudes
    """

    def __init__(self, timezones=None, with_refraction=True):
        self.timezones = timezones if timezones is not None else TimeZoneResolver()
        self.with_refraction = with_refraction

    @staticmethod
    def observer(latitude, longitude):
        return Observer(latitude=latitude, longitude=longitude)

    def position(self, instant, latitude, longitude):
        """
        Horizontal coordinate of the sun at an aware instant.

        Returns:
            HorizontalCoordinate
        """
        obs = self.observer(latitude, longitude)
        altitude = astral_sun.elevation(obs, instant, with_refraction=self.with_refraction)
        azimuth = astral_sun.azimuth(obs, instant)
        return HorizontalCoordinate(normalize_azimuth(azimuth), float(np.clip(altitude, -90.0, 90.0)))

    def _event(self, func, obs, day, tz):
        try:
            return func(obs, day, tzinfo=tz)
        except ValueError as e:
            # "Sun is always above/below the horizon on this day"
            logger.debug("No %s on %s at (%.4f, %.4f): %s",
                         func.__name__, day, obs.latitude, obs.longitude, e)
            return None

    def day_events(self, day, latitude, longitude, tz_name):
        """
        Sunrise, sunset and solar noon for a local calendar day.

        Returns:
            SunTimes with None in place of events that do not occur
        """
        obs = self.observer(latitude, longitude)
        tz = self.timezones.zone(tz_name)
        return SunTimes(
            sunrise=self._event(astral_sun.sunrise, obs, day, tz),
            sunset=self._event(astral_sun.sunset, obs, day, tz),
            solar_noon=astral_sun.noon(obs, day, tzinfo=tz),
        )

    def calculate(self, day, hour, latitude, longitude, tz_name="UTC"):
        """
        Full sun state for a local date and decimal hour.

        Args:
            day: datetime.date (local)
            hour: Decimal local hour in [0, 24]
            latitude, longitude: Observer location in degrees
            tz_name: IANA zone of the local date/hour

        Returns:
            SunPositionData
        """
        instant = self.timezones.to_instant(day, hour, tz_name)
        coord = self.position(instant, latitude, longitude)
        times = self.day_events(day, latitude, longitude, tz_name)

        noon_altitude = self.position(times.solar_noon, latitude, longitude).altitude
        condition = check_polar_conditions(times.sunrise, times.sunset, noon_altitude)

        if times.sunrise is not None and times.sunset is not None:
            day_length = (times.sunset - times.sunrise).total_seconds() / 3600.0
            if day_length < 0:
                day_length += 24.0
        elif condition is PolarCondition.POLAR_DAY:
            day_length = 24.0
        else:
            day_length = 0.0

        return SunPositionData(
            date=day,
            hour=hour,
            latitude=latitude,
            longitude=longitude,
            timezone=tz_name,
            altitude=coord.altitude,
            azimuth=coord.azimuth,
            sunrise=times.sunrise,
            sunset=times.sunset,
            solar_noon=times.solar_noon,
            day_length_hours=day_length,
            polar_condition=condition,
        )

    def sample_day(self, day, latitude, longitude, tz_name="UTC",
                   step_hours=constants.PATH_STEP_HOURS):
        """
        Sample the sun across a local day at a fixed step, 0h to 24h inclusive.

        Returns:
            tuple: (hours, azimuths, altitudes) arrays
        """
        hours = np.arange(0.0, 24.0 + step_hours / 2.0, step_hours)
        azimuths = np.empty_like(hours)
        altitudes = np.empty_like(hours)
        for i, hour in enumerate(hours):
            instant = self.timezones.to_instant(day, hour, tz_name)
            coord = self.position(instant, latitude, longitude)
            azimuths[i] = coord.azimuth
            altitudes[i] = coord.altitude
        return hours, azimuths, altitudes
