import functools
import logging
import time
from dataclasses import dataclass
from datetime import date

import numpy as np

from sunpath_renders import constants
from sunpath_renders.camera import derive_viewport
from sunpath_renders.ephemeris import SolarEphemeris, validate_coordinates
from sunpath_renders.projection import DEFAULT_VIEWPORT, Viewport
from sunpath_renders.scene import SceneComposer, SceneState
from sunpath_renders.surface import RasterSurface
from sunpath_renders.timezones import TimeZoneResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderRequest:
    """
    Everything that determines one frame. Frozen and hashable so it can key
    the render cache.

    Attributes:
        date: Local calendar date
        hour: Decimal local hour in [0, 24]
        latitude, longitude: Observer location in degrees
        timezone: IANA zone name for date/hour
        viewport: User camera; follow_sun/auto_camera derive the effective one
        width, height: Canvas size in pixels
        show_sun_path: Draw the dashed day path and sunrise/sunset markers
        show_altitude_scale: Draw altitude reference lines
        auto_camera: Pitch and fov follow the solar altitude
        follow_sun: Camera azimuth tracks the sun
    """
    date: date
    hour: float
    latitude: float
    longitude: float
    timezone: str = "UTC"
    viewport: Viewport = DEFAULT_VIEWPORT
    width: int = constants.DEFAULT_WIDTH
    height: int = constants.DEFAULT_HEIGHT
    show_sun_path: bool = False
    show_altitude_scale: bool = False
    auto_camera: bool = True
    follow_sun: bool = False

    def __post_init__(self):
        valid, message = validate_coordinates(self.latitude, self.longitude)
        if not valid:
            raise ValueError(message)
        if not 0.0 <= self.hour <= 24.0:
            raise ValueError(f"hour must be within [0, 24], got {self.hour}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if not isinstance(self.viewport, Viewport):
            raise ValueError(f"viewport must be a Viewport, got {type(self.viewport).__name__}")


@dataclass(frozen=True)
class Frame:
    """
    Result of a render.

    image is a read-only (H, W, 3) uint8 array, or None when the frame was
    drawn onto a caller-supplied surface.
    """
    image: np.ndarray | None
    sun: object
    viewport: Viewport
    sky_phase: object
    sun_position: object
    path_segments: list

    @property
    def polar_condition(self):
        return self.sun.polar_condition

    @property
    def sun_visible(self):
        return self.sun_position is not None


class Renderer:
    """
    Sun position renderer: request in, frame out.

    Args:
        ephemeris: SolarEphemeris used for sun positions and day events
        timezones: TimeZoneResolver shared with the ephemeris
        composer: SceneComposer that draws the layers
        cache_size: Frames kept by the LRU cache; 0 disables caching
    """

    def __init__(self, ephemeris=None, timezones=None, composer=None, cache_size=32):
        self.timezones = timezones if timezones is not None else TimeZoneResolver()
        self.ephemeris = ephemeris if ephemeris is not None else SolarEphemeris(self.timezones)
        self.composer = composer if composer is not None else SceneComposer()
        self.cache_size = cache_size

        if cache_size > 0:
            self._render_cached = functools.lru_cache(maxsize=cache_size)(self._render_uncached)
        else:
            self._render_cached = self._render_uncached

    def compute(self, request):
        """
        Sun state, effective viewport and scene state for a request.

        Returns:
            tuple: (SunPositionData, Viewport, SceneState)
        """
        sun = self.ephemeris.calculate(request.date, request.hour, request.latitude,
                                       request.longitude, request.timezone)
        viewport = derive_viewport(request.viewport, sun.azimuth, sun.altitude,
                                   follow_sun=request.follow_sun,
                                   auto_camera=request.auto_camera)

        path_azimuths = ()
        path_altitudes = ()
        sunrise_azimuth = None
        sunset_azimuth = None
        if request.show_sun_path:
            _, azimuths, altitudes = self.ephemeris.sample_day(
                request.date, request.latitude, request.longitude, request.timezone)
            path_azimuths = tuple(azimuths.tolist())
            path_altitudes = tuple(altitudes.tolist())
            if sun.sunrise is not None:
                sunrise_azimuth = self.ephemeris.position(
                    sun.sunrise, request.latitude, request.longitude).azimuth
            if sun.sunset is not None:
                sunset_azimuth = self.ephemeris.position(
                    sun.sunset, request.latitude, request.longitude).azimuth

        state = SceneState(
            hour=request.hour,
            sun_azimuth=sun.azimuth,
            sun_altitude=sun.altitude,
            viewport=viewport,
            path_azimuths=path_azimuths,
            path_altitudes=path_altitudes,
            sunrise_azimuth=sunrise_azimuth,
            sunset_azimuth=sunset_azimuth,
            show_sun_path=request.show_sun_path,
            show_altitude_scale=request.show_altitude_scale,
        )
        return sun, viewport, state

    def draw(self, request, surface):
        """
        Draw a request onto an existing surface.

        Returns:
            Frame with image None
        """
        sun, viewport, state = self.compute(request)
        result = self.composer.compose(surface, state)
        return Frame(
            image=None,
            sun=sun,
            viewport=viewport,
            sky_phase=result.sky_phase,
            sun_position=result.sun_position,
            path_segments=result.path_segments,
        )

    def _render_uncached(self, request):
        start = time.perf_counter()
        surface = RasterSurface(request.width, request.height)
        frame = self.draw(request, surface)

        image = surface.to_array()
        image.setflags(write=False)

        logger.debug("Rendered %dx%d frame for %s %.2fh in %.1f ms",
                     request.width, request.height, request.date, request.hour,
                     (time.perf_counter() - start) * 1000.0)
        return Frame(
            image=image,
            sun=frame.sun,
            viewport=frame.viewport,
            sky_phase=frame.sky_phase,
            sun_position=frame.sun_position,
            path_segments=frame.path_segments,
        )

    def render(self, request):
        """
        Render a request to a raster frame.

        Identical requests return the cached Frame while caching is enabled.

        Raises:
            zoneinfo.ZoneInfoNotFoundError: Unknown time zone
        """
        return self._render_cached(request)

    def cache_info(self):
        """functools cache statistics, or None when caching is disabled."""
        if self.cache_size > 0:
            return self._render_cached.cache_info()
        return None

    def clear_cache(self):
        if self.cache_size > 0:
            self._render_cached.cache_clear()
