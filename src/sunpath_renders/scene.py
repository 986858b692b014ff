"""
Scene composition: draws one frame back to front onto a Surface.

Layer order:
1. Sky gradient, ambient glow toward the south, ground below the horizon
2. Horizon line
3. Cardinal labels
4. Mountain silhouette (parallax with camera azimuth)
5. Altitude scale (optional)
6. Sun path with sunrise/sunset markers (optional)
7. Sun disc

Nothing is retained between calls; every frame is rebuilt from SceneState.
"""
import math
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from sunpath_renders import constants
from sunpath_renders.projection import (
    ScreenPosition,
    Viewport,
    altitude_line,
    angular_offset,
    cardinal_points,
    project,
    project_many,
)
from sunpath_renders.sky import SkyPhase, classify_sky_phase, get_sky_colors

# Ambient glow strength (alpha 0-255) per phase
GLOW_ALPHA = {
    SkyPhase.BEFORE_DAWN: 40,
    SkyPhase.SUNRISE: 110,
    SkyPhase.DAYTIME: 60,
    SkyPhase.SUNSET: 110,
    SkyPhase.NIGHT: 15,
}


@dataclass(frozen=True)
class SceneState:
    """
    Everything the composer needs for one frame.

    Attributes:
        hour: Local decimal hour (drives the sky phase)
        sun_azimuth, sun_altitude: Current sun position in degrees
        viewport: Effective camera for this frame
        path_azimuths, path_altitudes: Day samples of the sun, in time order
        sunrise_azimuth, sunset_azimuth: None when the event does not occur
        show_sun_path: Draw the dashed path and day markers
        show_altitude_scale: Draw projected altitude lines
    """
    hour: float
    sun_azimuth: float
    sun_altitude: float
    viewport: Viewport
    path_azimuths: tuple = ()
    path_altitudes: tuple = ()
    sunrise_azimuth: float | None = None
    sunset_azimuth: float | None = None
    show_sun_path: bool = False
    show_altitude_scale: bool = False


class SceneResult(NamedTuple):
    sky_phase: SkyPhase
    sun_position: ScreenPosition | None
    path_segments: list


def sun_radius_scale(altitude):
    """
    Apparent sun size multiplier from altitude.

    1.5x at or below the horizon tapering to 1.2x at 10 deg, then to 1.0x at
    45 deg, constant above.
    """
    if altitude < 10.0:
        return 1.5 - 0.3 * max(altitude, 0.0) / 10.0
    if altitude < 45.0:
        return 1.2 - 0.2 * (altitude - 10.0) / 35.0
    return 1.0


def haze_factor(altitude):
    """0 high in the sky, 1 at or below the horizon."""
    return float(np.clip(1.0 - max(altitude, 0.0) / constants.SUN_HAZE_ALTITUDE, 0.0, 1.0))


def glow_profile(altitude):
    """
    Sun glow size and strength.

    Returns:
        tuple: (radius multiplier of the disc radius, intensity in [0, 1])
    """
    haze = haze_factor(altitude)
    return constants.SUN_GLOW_RATIO * (1.0 + 0.6 * haze), 0.6 + 0.4 * haze


def segment_path(points, max_jump):
    """
    Split a sampled path into drawable polylines.

    A new segment starts at every None and whenever two consecutive points
    are further apart than max_jump pixels. Segments with fewer than two
    points are dropped.
    """
    segments = []
    current = []
    for p in points:
        if p is None:
            if current:
                segments.append(current)
            current = []
            continue
        if current and math.hypot(p.x - current[-1].x, p.y - current[-1].y) > max_jump:
            segments.append(current)
            current = []
        current.append(p)
    if current:
        segments.append(current)
    return [s for s in segments if len(s) >= 2]


def glow_center_x(viewport, width):
    """Screen x of due south, possibly off-canvas."""
    offset = angular_offset(viewport.center_azimuth, 180.0)
    return width / 2.0 - (offset / viewport.fov) * width


def mountain_polygons(viewport, width, horizon_y, mountains=constants.MOUNTAINS):
    """
    Triangles for the silhouette, tiled left/center/right and parallax-shifted.

    Shapes entirely outside [0, width] are skipped.
    """
    offset = angular_offset(viewport.center_azimuth, 180.0)
    shift = (-(offset / viewport.fov) * width) % width

    polygons = []
    for tile in (-1, 0, 1):
        base = tile * width + shift
        for x_ratio, height, base_width in mountains:
            peak_x = base + x_ratio * width
            left = peak_x - base_width / 2.0
            right = peak_x + base_width / 2.0
            if right < 0 or left > width:
                continue
            polygons.append([(left, horizon_y), (peak_x, horizon_y - height), (right, horizon_y)])
    return polygons


def _mix(c1, c2, t):
    return tuple(a + (b - a) * t for a, b in zip(c1, c2))


class SceneComposer:
    """
    Draws frames onto a Surface.

    Args:
        horizon_fraction: Fixed vertical position of the horizon (0-1)
        sun_base_radius: Sun disc radius in pixels before altitude scaling
        path_jump_fraction: Path break threshold as a fraction of width
        mountains: Sequence of (x_ratio, height, width) descriptors
    """

    def __init__(self, horizon_fraction=None, sun_base_radius=None,
                 path_jump_fraction=None, mountains=None):
        self.horizon_fraction = horizon_fraction if horizon_fraction is not None else constants.HORIZON_FRACTION
        self.sun_base_radius = sun_base_radius if sun_base_radius is not None else constants.SUN_BASE_RADIUS
        self.path_jump_fraction = (path_jump_fraction if path_jump_fraction is not None
                                   else constants.PATH_JUMP_FRACTION)
        self.mountains = tuple(mountains) if mountains is not None else tuple(constants.MOUNTAINS)

    def horizon_y(self, height):
        return height * self.horizon_fraction

    def compose(self, surface, state):
        """
        Draw a complete frame.

        Returns:
            SceneResult with the sky phase, the sun's screen position (or
            None) and the path segments that were stroked
        """
        w, h = surface.width, surface.height
        viewport = state.viewport
        phase = classify_sky_phase(state.hour, state.sun_altitude)

        self.draw_sky(surface, phase, viewport)
        self.draw_horizon(surface)
        self.draw_cardinals(surface, viewport)
        self.draw_mountains(surface, viewport, phase)

        if state.show_altitude_scale:
            self.draw_altitude_scale(surface, viewport)

        segments = []
        if state.show_sun_path:
            segments = self.path_segments(state.path_azimuths, state.path_altitudes, viewport, w, h)
            self.draw_sun_path(surface, segments)
            self.draw_day_markers(surface, viewport, state.sunrise_azimuth, state.sunset_azimuth)

        sun_position = None
        if state.sun_altitude > constants.MIN_VISIBLE_ALTITUDE:
            sun_position = project(state.sun_azimuth, state.sun_altitude, viewport, w, h)
            if sun_position is not None:
                self.draw_sun(surface, sun_position, state.sun_altitude)

        return SceneResult(phase, sun_position, segments)

    def draw_sky(self, surface, phase, viewport):
        """Sky gradient above the horizon, southern glow, darker ground below."""
        w, h = surface.width, surface.height
        horizon_y = self.horizon_y(h)

        colors = get_sky_colors(phase)
        stops = [(i / (len(colors) - 1), c) for i, c in enumerate(colors)]
        surface.fill_linear_gradient(0, 0, w, horizon_y, (0, 0), (0, horizon_y), stops)

        alpha = GLOW_ALPHA[phase]
        surface.fill_radial_gradient(
            glow_center_x(viewport, w), horizon_y, w * constants.GLOW_RADIUS_FRACTION,
            [(0.0, (*constants.GLOW_COLOR, alpha)), (1.0, (*constants.GLOW_COLOR, 0))],
        )

        top, bottom = constants.GROUND_COLORS[phase.value]
        surface.fill_linear_gradient(0, horizon_y, w, h - horizon_y, (0, horizon_y), (0, h),
                                     [(0.0, top), (1.0, bottom)])

    def draw_horizon(self, surface):
        y = self.horizon_y(surface.height)
        surface.stroke_polyline([(0, y), (surface.width, y)], constants.HORIZON_LINE_COLOR, width=2)

    def draw_cardinals(self, surface, viewport):
        """N/E/S/W labels; directions outside the view are skipped."""
        for point in cardinal_points(viewport, surface.width, surface.height):
            if point.position is None:
                continue
            x, y = point.position
            surface.fill_circle(x, y, 4, constants.LABEL_FILL)
            surface.draw_text(x, y - 10, point.name, constants.LABEL_FILL,
                              size=constants.LABEL_FONT_SIZE, stroke=constants.LABEL_STROKE,
                              stroke_width=3, anchor="mb")

    def draw_mountains(self, surface, viewport, phase):
        color = constants.MOUNTAIN_COLORS[phase.value]
        horizon_y = self.horizon_y(surface.height)
        for polygon in mountain_polygons(viewport, surface.width, horizon_y, self.mountains):
            surface.fill_polygon(polygon, color)

    def draw_altitude_scale(self, surface, viewport):
        """Faint lines of constant altitude with degree labels."""
        for altitude in range(0, constants.ALTITUDE_SCALE_MAX + 1, constants.ALTITUDE_SCALE_STEP):
            points = altitude_line(viewport, surface.width, surface.height, altitude, num_points=60)
            if len(points) < 2:
                continue
            surface.stroke_polyline(points, constants.ALTITUDE_SCALE_COLOR, width=1)
            x, y = points[0]
            surface.draw_text(x + 4, y, f"{altitude}°", constants.ALTITUDE_SCALE_COLOR,
                              size=12, anchor="lb")

    def path_segments(self, azimuths, altitudes, viewport, width, height):
        """Project day samples and split them into drawable segments."""
        if len(azimuths) == 0:
            return []
        xs, ys, visible = project_many(azimuths, altitudes, viewport, width, height)
        points = [ScreenPosition(float(x), float(y)) if v else None
                  for x, y, v in zip(xs, ys, visible)]
        return segment_path(points, width * self.path_jump_fraction)

    def draw_sun_path(self, surface, segments):
        for segment in segments:
            assert all(p is not None for p in segment), "path segment contains a hidden point"
            surface.stroke_polyline(segment, constants.PATH_COLOR,
                                    width=constants.PATH_WIDTH, dash=constants.PATH_DASH)

    def draw_day_markers(self, surface, viewport, sunrise_azimuth, sunset_azimuth):
        """Sunrise/sunset dots on the horizon; missing events are skipped."""
        markers = [
            (sunrise_azimuth, constants.SUNRISE_MARKER_COLOR, "Sunrise"),
            (sunset_azimuth, constants.SUNSET_MARKER_COLOR, "Sunset"),
        ]
        for azimuth, color, label in markers:
            if azimuth is None:
                continue
            position = project(azimuth, 0.0, viewport, surface.width, surface.height)
            if position is None:
                continue
            self.draw_marker(surface, position, color, label)

    def draw_marker(self, surface, position, color, label):
        assert position is not None, "cannot draw a marker at a hidden position"
        x, y = position
        surface.fill_circle(x, y, constants.MARKER_RADIUS, color)
        surface.stroke_circle(x, y, constants.MARKER_RADIUS, (255, 255, 255, 204), width=2)
        surface.draw_text(x, y - constants.MARKER_RADIUS - 6, label, color, size=14,
                          stroke=constants.LABEL_STROKE, stroke_width=2, anchor="mb")

    def sun_radius(self, altitude):
        return self.sun_base_radius * sun_radius_scale(altitude)

    def draw_sun(self, surface, position, altitude):
        """
        Glow, disc and brighter core.

        The glow widens and strengthens, and warms toward orange, as the sun
        nears the horizon.
        """
        assert position is not None, "cannot draw the sun at a hidden position"
        x, y = position
        radius = self.sun_radius(altitude)
        glow_ratio, intensity = glow_profile(altitude)
        haze = haze_factor(altitude)

        gold = _mix((255, 215, 0), (255, 140, 60), 0.5 * haze)
        surface.fill_radial_gradient(x, y, radius * glow_ratio, [
            (0.0, (255, 245, 225, 255 * intensity)),
            (0.4, (*gold, 255 * intensity)),
            (0.7, (*gold, 77 * intensity)),
            (1.0, (*gold, 0)),
        ])
        surface.fill_circle(x, y, radius, constants.SUN_CORE_COLOR)
        surface.fill_circle(x, y, radius * constants.SUN_INNER_RATIO, constants.SUN_LIMB_COLOR)
