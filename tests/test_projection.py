import numpy as np
import pytest

from sunpath_renders.projection import (
    HorizontalCoordinate,
    ScreenPosition,
    Viewport,
    Visibility,
    altitude_line,
    angular_offset,
    cardinal_points,
    focal_length,
    horizon_line,
    normalize_azimuth,
    project,
    project_detailed,
    project_many,
    to_camera_space,
)

W, H = 800, 600


def test_center_of_view_maps_to_canvas_center(south_view):
    pos = project(180.0, 0.0, south_view, W, H)
    assert pos == pytest.approx(ScreenPosition(400.0, 300.0))


def test_pitched_camera_centers_its_altitude():
    """A point at the camera's own pitch lands on the canvas center."""
    viewport = Viewport(180.0, 30.0, 110.0)
    assert project(180.0, 30.0, viewport, W, H) == pytest.approx((400.0, 300.0))


def test_west_of_south_is_right_of_center(south_view):
    """Facing south, larger azimuths (toward west) appear on the right."""
    pos = project(200.0, 0.0, south_view, W, H)
    expected_x = (np.tan(np.deg2rad(20.0)) / np.tan(np.deg2rad(55.0)) * 0.5 + 0.5) * W
    assert pos.x == pytest.approx(expected_x)
    assert pos.y == pytest.approx(300.0)


def test_higher_altitude_is_higher_on_screen(south_view):
    low = project(180.0, 10.0, south_view, W, H)
    high = project(180.0, 30.0, south_view, W, H)
    assert high.y < low.y < 300.0


def test_mirror_symmetry_about_view_center(south_view):
    """Offsets of equal size either side of the center mirror in x."""
    for delta in (5.0, 20.0, 40.0):
        for altitude in (0.0, 15.0, 30.0):
            left = project(180.0 - delta, altitude, south_view, W, H)
            right = project(180.0 + delta, altitude, south_view, W, H)
            assert left.x + right.x == pytest.approx(W)
            assert left.y == pytest.approx(right.y)


def test_projection_is_idempotent(south_view):
    assert project(190.0, 12.0, south_view, W, H) == project(190.0, 12.0, south_view, W, H)


@pytest.mark.parametrize("azimuth, altitude, reason", [
    (180.0, -7.0, Visibility.BELOW_HORIZON),
    (180.0, 96.0, Visibility.BEYOND_ZENITH),
    (0.0, 10.0, Visibility.BEHIND_CAMERA),
    (250.0, 0.0, Visibility.OUTSIDE_FOV),
    (180.0, 60.0, Visibility.OUTSIDE_FOV),
])
def test_hidden_reasons(south_view, azimuth, altitude, reason):
    result = project_detailed(azimuth, altitude, south_view, W, H)
    assert result.visibility is reason
    assert result.position is None
    assert not result.visible
    assert project(azimuth, altitude, south_view, W, H) is None


def test_twilight_band_is_projectable(south_view):
    """Down to -6 deg still projects; the ground covers it when drawn."""
    assert project(180.0, -5.0, south_view, W, H) is not None


@pytest.mark.parametrize("viewport, size", [
    (Viewport(180.0, 0.0, 110.0), (600, 600)),
    (Viewport(135.0, 20.0, 90.0), (W, H)),
])
def test_visibility_matches_camera_space(viewport, size):
    """A point is visible exactly when it is in front, inside the fov and in the altitude band."""
    f = focal_length(viewport.fov)
    for azimuth in np.arange(0.0, 360.0, 7.5):
        for altitude in np.arange(-10.0, 91.0, 5.0):
            x_cam, y_cam, z_cam = to_camera_space(azimuth, altitude, viewport)
            expected = (-6.0 <= altitude <= 95.0 and z_cam > 0.01
                        and abs(x_cam / z_cam * f) <= 1.0 and abs(y_cam / z_cam * f) <= 1.0)
            assert (project(azimuth, altitude, viewport, *size) is not None) == expected


def test_azimuth_wraps_at_north():
    """0/360 and negative azimuths land on the same pixels."""
    north = Viewport(0.0, 0.0, 110.0)
    wrapped = Viewport(360.0, 0.0, 110.0)
    negative = Viewport(-360.0, 0.0, 110.0)
    for azimuth in (350.0, -10.0, 10.0, 370.0):
        a = project(azimuth, 5.0, north, W, H)
        assert a == pytest.approx(project(azimuth, 5.0, wrapped, W, H))
        assert a == pytest.approx(project(azimuth, 5.0, negative, W, H))

    assert project(350.0, 5.0, north, W, H).x < 400.0 < project(10.0, 5.0, north, W, H).x
    assert project(10.0, 5.0, north, W, H) == pytest.approx(project(370.0, 5.0, north, W, H))


def test_project_many_matches_project():
    viewport = Viewport(200.0, 15.0, 100.0)
    azimuths = np.array([120.0, 170.0, 200.0, 230.0, 20.0, 200.0])
    altitudes = np.array([0.0, 10.0, 40.0, -3.0, 10.0, -20.0])
    xs, ys, visible = project_many(azimuths, altitudes, viewport, W, H)

    for i, (az, alt) in enumerate(zip(azimuths, altitudes)):
        pos = project(az, alt, viewport, W, H)
        assert bool(visible[i]) == (pos is not None)
        if pos is None:
            assert np.isnan(xs[i]) and np.isnan(ys[i])
        else:
            assert pos == pytest.approx((float(xs[i]), float(ys[i])))


def test_horizon_line_level_camera(south_view):
    points = horizon_line(south_view, W, H)
    assert len(points) >= 98
    np.testing.assert_allclose([p.y for p in points], 300.0, atol=1e-9)
    xs = [p.x for p in points]
    assert xs == sorted(xs)


def test_altitude_line_above_horizon(south_view):
    points = altitude_line(south_view, W, H, altitude=30.0, num_points=50)
    assert len(points) >= 48
    assert all(p.y < 300.0 for p in points)


def test_altitude_line_out_of_view_is_empty(south_view):
    assert altitude_line(south_view, W, H, altitude=80.0) == []


def test_cardinal_points_default_view(south_view):
    points = cardinal_points(south_view, W, H)
    assert [p.name for p in points] == ['N', 'E', 'S', 'W']
    by_name = {p.name: p for p in points}
    assert by_name['S'].position == pytest.approx((400.0, 300.0))
    assert by_name['N'].position is None
    # 90 deg off-axis sits on the camera plane
    assert by_name['E'].position is None
    assert by_name['W'].position is None


def test_cardinal_points_facing_southeast():
    points = {p.name: p for p in cardinal_points(Viewport(135.0, 0.0, 110.0), W, H)}
    assert points['E'].position.x < 400.0 < points['S'].position.x


@pytest.mark.parametrize("fov", [0.0, -10.0, 180.0, 270.0])
def test_viewport_rejects_degenerate_fov(fov):
    with pytest.raises(ValueError):
        Viewport(180.0, 0.0, fov)


def test_horizontal_coordinate_validation():
    assert HorizontalCoordinate(-90.0, 10.0).azimuth == pytest.approx(270.0)
    with pytest.raises(ValueError):
        HorizontalCoordinate(180.0, 91.0)


def test_normalize_azimuth():
    assert normalize_azimuth(720.0) == 0.0
    assert normalize_azimuth(-90.0) == 270.0
    assert normalize_azimuth(-1e-17) == 0.0
    assert 0.0 <= normalize_azimuth(359.9999) < 360.0


def test_angular_offset():
    assert angular_offset(10.0, 350.0) == pytest.approx(20.0)
    assert angular_offset(350.0, 10.0) == pytest.approx(-20.0)
    assert angular_offset(180.0, 0.0) == pytest.approx(-180.0)


if __name__ == "__main__":
    pytest.main([__file__])
