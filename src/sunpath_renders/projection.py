"""
Perspective projection of horizontal (azimuth/altitude) coordinates.

World frame (right-handed):
- X-Axis: East
- Y-Axis: Zenith
- Z-Axis: True north
Azimuth is measured clockwise from north (N=0, E=90, S=180, W=270).

Camera frame: +Z looks into the screen, +X to the right, +Y up. The camera is
oriented by yawing to the viewport's center azimuth and pitching to its
center altitude.
"""
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

import numpy as np

from sunpath_renders import constants


class ScreenPosition(NamedTuple):
    """Canvas pixel position, origin top-left."""
    x: float
    y: float


class Visibility(Enum):
    """Reason attached to a projection result."""
    VISIBLE = "visible"
    BELOW_HORIZON = "below_horizon"
    BEYOND_ZENITH = "beyond_zenith"
    BEHIND_CAMERA = "behind_camera"
    OUTSIDE_FOV = "outside_fov"


class Projection(NamedTuple):
    position: ScreenPosition | None
    visibility: Visibility

    @property
    def visible(self):
        return self.visibility is Visibility.VISIBLE


class CardinalPoint(NamedTuple):
    name: str
    azimuth: float
    position: ScreenPosition | None


@dataclass(frozen=True)
class HorizontalCoordinate:
    """
    Position on the celestial sphere as seen by a ground observer.

    Attributes:
        azimuth: Degrees clockwise from true north, normalized to [0, 360)
        altitude: Degrees above the horizon, [-90, 90]
    """
    azimuth: float
    altitude: float

    def __post_init__(self):
        if not -90.0 <= self.altitude <= 90.0:
            raise ValueError(f"altitude must be within [-90, 90], got {self.altitude}")
        object.__setattr__(self, 'azimuth', normalize_azimuth(self.azimuth))


@dataclass(frozen=True)
class Viewport:
    """
    Camera orientation for a single frame.

    Attributes:
        center_azimuth: Look direction, degrees from north
        center_altitude: Camera pitch in degrees
        fov: Horizontal field of view in degrees
    """
    center_azimuth: float = constants.DEFAULT_CENTER_AZIMUTH
    center_altitude: float = constants.DEFAULT_CENTER_ALTITUDE
    fov: float = constants.DEFAULT_FOV

    def __post_init__(self):
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"fov must be within (0, 180), got {self.fov}")


DEFAULT_VIEWPORT = Viewport()


def normalize_azimuth(azimuth):
    """Wrap an azimuth into [0, 360)."""
    wrapped = float(azimuth) % 360.0
    # -1e-17 % 360 rounds up to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def angular_offset(azimuth, reference):
    """Signed smallest difference azimuth - reference, in [-180, 180)."""
    return (azimuth - reference + 180.0) % 360.0 - 180.0


def focal_length(fov):
    """Pinhole focal length for a horizontal fov in degrees."""
    return 1.0 / np.tan(np.deg2rad(fov) / 2.0)


def to_camera_space(azimuth, altitude, viewport):
    """
    Rotate horizontal coordinates into the camera frame.

    Accepts scalars or arrays for azimuth/altitude.

    Returns:
        tuple: (x_cam, y_cam, z_cam) unit-direction components
    """
    az = np.deg2rad(azimuth)
    alt = np.deg2rad(altitude)

    x = np.cos(alt) * np.sin(az)
    y = np.sin(alt)
    z = np.cos(alt) * np.cos(az)

    # Yaw by -center_azimuth about the zenith
    yaw = np.deg2rad(viewport.center_azimuth)
    x_cam = x * np.cos(yaw) - z * np.sin(yaw)
    z_yawed = x * np.sin(yaw) + z * np.cos(yaw)

    # Pitch by -center_altitude about the camera's right axis
    pitch = np.deg2rad(viewport.center_altitude)
    y_cam = y * np.cos(pitch) - z_yawed * np.sin(pitch)
    z_cam = y * np.sin(pitch) + z_yawed * np.cos(pitch)

    return x_cam, y_cam, z_cam


def project_many(azimuths, altitudes, viewport, width, height):
    """
    Vectorized projection of horizontal coordinates to canvas pixels.

    Args:
        azimuths: (N,) azimuths in degrees
        altitudes: (N,) altitudes in degrees (broadcast against azimuths)
        viewport: Viewport
        width, height: Canvas size in pixels

    Returns:
        tuple: (screen_x, screen_y, visible) where invisible entries are NaN
    """
    az, alt = np.broadcast_arrays(np.asarray(azimuths, dtype=float),
                                  np.asarray(altitudes, dtype=float))
    x_cam, y_cam, z_cam = to_camera_space(az, alt, viewport)

    in_band = (alt >= constants.MIN_VISIBLE_ALTITUDE) & (alt <= constants.MAX_VISIBLE_ALTITUDE)
    in_front = z_cam > constants.CAMERA_PLANE_EPSILON

    f = focal_length(viewport.fov)
    safe_z = np.where(in_front, z_cam, 1.0)
    x_proj = (x_cam / safe_z) * f
    y_proj = (y_cam / safe_z) * f
    in_fov = (np.abs(x_proj) <= 1.0) & (np.abs(y_proj) <= 1.0)

    visible = in_band & in_front & in_fov
    screen_x = np.where(visible, (x_proj * 0.5 + 0.5) * width, np.nan)
    screen_y = np.where(visible, (0.5 - y_proj * 0.5) * height, np.nan)
    return screen_x, screen_y, visible


def project_detailed(azimuth, altitude, viewport, width, height):
    """
    Project one horizontal coordinate and report why it is hidden, if it is.

    Returns:
        Projection(position, visibility)
    """
    if altitude < constants.MIN_VISIBLE_ALTITUDE:
        return Projection(None, Visibility.BELOW_HORIZON)
    if altitude > constants.MAX_VISIBLE_ALTITUDE:
        return Projection(None, Visibility.BEYOND_ZENITH)

    x_cam, y_cam, z_cam = to_camera_space(azimuth, altitude, viewport)
    if z_cam <= constants.CAMERA_PLANE_EPSILON:
        return Projection(None, Visibility.BEHIND_CAMERA)

    f = focal_length(viewport.fov)
    x_proj = (x_cam / z_cam) * f
    y_proj = (y_cam / z_cam) * f
    if abs(x_proj) > 1.0 or abs(y_proj) > 1.0:
        return Projection(None, Visibility.OUTSIDE_FOV)

    screen_x = (x_proj * 0.5 + 0.5) * width
    screen_y = (0.5 - y_proj * 0.5) * height
    return Projection(ScreenPosition(float(screen_x), float(screen_y)), Visibility.VISIBLE)


def project(azimuth, altitude, viewport, width, height):
    """
    Project a horizontal coordinate to canvas pixels.

    Returns:
        ScreenPosition, or None when the point is not visible
    """
    return project_detailed(azimuth, altitude, viewport, width, height).position


def altitude_line(viewport, width, height, altitude=0.0, num_points=100):
    """
    Sample a line of constant altitude across the camera's azimuth span.

    Invisible samples are dropped, leaving gaps rather than errors.
    """
    half_fov = viewport.fov / 2.0
    azimuths = np.linspace(viewport.center_azimuth - half_fov,
                           viewport.center_azimuth + half_fov, num_points)
    xs, ys, visible = project_many(azimuths, altitude, viewport, width, height)
    return [ScreenPosition(float(x), float(y)) for x, y in zip(xs[visible], ys[visible])]


def horizon_line(viewport, width, height, num_points=100):
    """Projected polyline of the 0-degree horizon."""
    return altitude_line(viewport, width, height, 0.0, num_points)


def cardinal_points(viewport, width, height):
    """Project N/E/S/W on the horizon. Hidden directions carry position None."""
    return [
        CardinalPoint(name, azimuth, project(azimuth, 0.0, viewport, width, height))
        for name, azimuth in constants.CARDINAL_NAMES
    ]
