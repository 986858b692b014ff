"""
Named observer locations, including polar cities for midnight-sun and
polar-night views.
"""
from typing import NamedTuple


class City(NamedTuple):
    name: str
    latitude: float
    longitude: float
    timezone: str


MAJOR_CITIES = [
    City('Tokyo', 35.6762, 139.6503, 'Asia/Tokyo'),
    City('London', 51.5074, -0.1278, 'Europe/London'),
    City('New York', 40.7128, -74.0060, 'America/New_York'),
    City('Chiayi (Tropic of Cancer)', 23.4583, 120.4167, 'Asia/Taipei'),
    City('Alice Springs (Tropic of Capricorn)', -23.6980, 133.8807, 'Australia/Darwin'),
    City('Sydney', -33.8688, 151.2093, 'Australia/Sydney'),
    City('Beijing', 39.9042, 116.4074, 'Asia/Shanghai'),
    City('Singapore', 1.3521, 103.8198, 'Asia/Singapore'),
    City('Paris', 48.8566, 2.3522, 'Europe/Paris'),
    City('Berlin', 52.5200, 13.4050, 'Europe/Berlin'),
    City('Moscow', 55.7558, 37.6173, 'Europe/Moscow'),
    City('Cairo', 30.0444, 31.2357, 'Africa/Cairo'),
    City('Dubai', 25.2048, 55.2708, 'Asia/Dubai'),
    City('San Francisco', 37.7749, -122.4194, 'America/Los_Angeles'),
    City('Los Angeles', 34.0522, -118.2437, 'America/Los_Angeles'),
    City('Rio de Janeiro', -22.9068, -43.1729, 'America/Sao_Paulo'),
    City('Seoul', 37.5665, 126.9780, 'Asia/Seoul'),
    # Polar
    City('Reykjavik', 64.1466, -21.9426, 'Atlantic/Reykjavik'),
    City('Tromsø', 69.6492, 18.9553, 'Europe/Oslo'),
]


def find_city(name):
    """
    Look up a city by name, case-insensitively.

    Raises:
        KeyError: No city with that name
    """
    key = name.strip().casefold()
    for city in MAJOR_CITIES:
        if city.name.casefold() == key:
            return city
    raise KeyError(f"Unknown city: {name!r}")


def city_names():
    return [city.name for city in MAJOR_CITIES]
