"""
Camera control: manual panning, follow-sun mode and altitude-driven framing.

Viewports are immutable; the controller swaps in a new one on each change.
"""
import logging
from dataclasses import replace

import numpy as np

from sunpath_renders import constants
from sunpath_renders.projection import DEFAULT_VIEWPORT, Viewport, angular_offset, normalize_azimuth

logger = logging.getLogger(__name__)


def clamp_fov(fov):
    """Clamp a field of view into the projection's stable range."""
    return float(np.clip(fov, constants.FOV_MIN, constants.FOV_MAX))


def _piecewise(altitude, curve, lo, hi):
    xp, fp = zip(*curve)
    return float(np.clip(np.interp(altitude, xp, fp), lo, hi))


def auto_tilt(sun_altitude):
    """Camera pitch that keeps the sun framed, from the solar altitude."""
    return _piecewise(sun_altitude, constants.AUTO_TILT_CURVE,
                      constants.AUTO_TILT_MIN, constants.AUTO_TILT_MAX)


def auto_fov(sun_altitude):
    """Field of view narrowing as the sun climbs."""
    return _piecewise(sun_altitude, constants.AUTO_FOV_CURVE,
                      constants.AUTO_FOV_MIN, constants.AUTO_FOV_MAX)


def follow_azimuth(current, sun_azimuth, min_delta=constants.FOLLOW_SUN_MIN_DELTA):
    """
    Snap the camera azimuth to the sun.

    Returns the current azimuth unchanged when the wrapped difference is
    below min_delta.
    """
    target = normalize_azimuth(sun_azimuth)
    if abs(angular_offset(target, current)) < min_delta:
        return normalize_azimuth(current)
    return target


def derive_viewport(base, sun_azimuth, sun_altitude, follow_sun=False, auto_camera=False):
    """
    Effective viewport for one frame.

    Args:
        base: Viewport chosen by the user
        sun_azimuth, sun_altitude: Current sun position in degrees
        follow_sun: Point the camera at the sun's azimuth
        auto_camera: Derive pitch and fov from the solar altitude

    Returns:
        Viewport with normalized azimuth and clamped fov
    """
    azimuth = base.center_azimuth
    if follow_sun:
        azimuth = follow_azimuth(azimuth, sun_azimuth)

    if auto_camera:
        pitch = auto_tilt(sun_altitude)
        fov = auto_fov(sun_altitude)
    else:
        pitch = base.center_altitude
        fov = base.fov

    return Viewport(center_azimuth=normalize_azimuth(azimuth),
                    center_altitude=pitch,
                    fov=clamp_fov(fov))


class CameraController:
    """
    Holds the user's camera state between frames.

    Args:
        viewport: Starting viewport (defaults to due south, level, 110 deg)
        follow_sun: Start in follow-sun mode
        auto_camera: Start with automatic pitch/fov
    """

    def __init__(self, viewport=None, follow_sun=False, auto_camera=False):
        base = viewport if viewport is not None else DEFAULT_VIEWPORT
        self._viewport = replace(base, center_azimuth=normalize_azimuth(base.center_azimuth),
                                 fov=clamp_fov(base.fov))
        self.follow_sun = follow_sun
        self.auto_camera = auto_camera

    @property
    def viewport(self):
        return self._viewport

    def set_azimuth(self, azimuth):
        self._viewport = replace(self._viewport, center_azimuth=normalize_azimuth(azimuth))
        return self._viewport

    def set_pitch(self, altitude):
        self._viewport = replace(self._viewport, center_altitude=float(altitude))
        return self._viewport

    def set_fov(self, fov):
        self._viewport = replace(self._viewport, fov=clamp_fov(fov))
        return self._viewport

    def set_follow_sun(self, enabled):
        self.follow_sun = bool(enabled)

    def drag(self, dx_pixels, canvas_width):
        """
        Pan horizontally by a drag gesture.

        Dragging right swings the view toward smaller azimuths. Ignored while
        follow-sun is active.

        Returns:
            True if the viewport changed
        """
        if self.follow_sun or dx_pixels == 0:
            return False
        degrees_per_pixel = self._viewport.fov / canvas_width
        self.set_azimuth(self._viewport.center_azimuth - dx_pixels * degrees_per_pixel)
        return True

    def update(self, sun_azimuth, sun_altitude):
        """
        Apply follow-sun and auto framing for a new sun position.

        Follow-sun changes persist as the user's azimuth; auto pitch/fov only
        shape the returned viewport.

        Returns:
            The effective Viewport for this frame
        """
        if self.follow_sun:
            azimuth = follow_azimuth(self._viewport.center_azimuth, sun_azimuth)
            if azimuth != self._viewport.center_azimuth:
                logger.debug("Follow-sun: azimuth %.2f -> %.2f",
                             self._viewport.center_azimuth, azimuth)
                self.set_azimuth(azimuth)
        return derive_viewport(self._viewport, sun_azimuth, sun_altitude,
                               follow_sun=False, auto_camera=self.auto_camera)
