"""
Civil time <-> absolute instant conversion for IANA time zones.

Zone objects are held by a TimeZoneResolver instance rather than a module
global, so callers decide how long lookups live and can inject their own.
"""
import logging
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


class TimeZoneResolver:
    """
    Resolves zone names and converts between local civil time and instants.

    Args:
        cache: Optional mapping used to store ZoneInfo objects by name.
            A fresh dict is used when omitted.
    """

    def __init__(self, cache=None):
        self._zones = {} if cache is None else cache

    def zone(self, name):
        """
        Return the ZoneInfo for name.

        Raises:
            zoneinfo.ZoneInfoNotFoundError: Unknown zone name
        """
        tz = self._zones.get(name)
        if tz is None:
            tz = ZoneInfo(name)
            self._zones[name] = tz
            logger.debug("Cached time zone %s", name)
        return tz

    def clear(self):
        self._zones.clear()

    def __len__(self):
        return len(self._zones)

    def to_instant(self, day, hour, tz_name):
        """
        Combine a calendar date and decimal local hour into an aware datetime.

        Args:
            day: datetime.date
            hour: Decimal hour in [0, 24]; 24 is midnight of the next day
            tz_name: IANA zone name

        Returns:
            Aware datetime in the requested zone
        """
        seconds = int(round(hour * 3600.0))
        local = datetime.combine(day, time(0, 0)) + timedelta(seconds=seconds)
        return local.replace(tzinfo=self.zone(tz_name))

    def to_decimal_hour(self, instant, tz_name):
        """Local decimal hour of an instant in the given zone."""
        local = instant.astimezone(self.zone(tz_name))
        return local.hour + local.minute / 60.0 + local.second / 3600.0

    def local_date(self, instant, tz_name):
        return instant.astimezone(self.zone(tz_name)).date()

    def format_date(self, instant, tz_name):
        """'YYYY-MM-DD' in the given zone."""
        return instant.astimezone(self.zone(tz_name)).strftime("%Y-%m-%d")

    def format_time(self, instant, tz_name):
        """'HH:MM' in the given zone, or '--:--' for a missing instant."""
        if instant is None:
            return "--:--"
        return instant.astimezone(self.zone(tz_name)).strftime("%H:%M")
