"""Tests for geodesy and wind triangle helpers"""
import math

import pytest
from geopy import Point as GeoPoint

from flightsim.utility import (
    angle_diff_deg,
    calculate_initial_compass_bearing,
    distance_km,
    distance_nm,
    path_length_nm,
    point_from,
    wind_triangle,
    wrap_180,
    wrap_360,
)

PAIRS = [
    (GeoPoint(0, 0), GeoPoint(0, 1)),
    (GeoPoint(51.47, -0.4543), GeoPoint(49.0097, 2.5479)),
    (GeoPoint(47.6062, -122.3321), GeoPoint(45.5152, -122.6784)),
    (GeoPoint(-33.9461, 151.1772), GeoPoint(1.3644, 103.9915)),
    (GeoPoint(10, 179.5), GeoPoint(-10, -179.5)),
]


class TestAngles:
    """Tests for angle wrapping"""

    def test_wrap_360(self):
        assert wrap_360(370) == pytest.approx(10)
        assert wrap_360(-90) == pytest.approx(270)

    def test_wrap_360_tiny_negative(self):
        """A tiny negative angle must not come back as 360"""
        assert wrap_360(-1e-20) == 0.0

    def test_wrap_180(self):
        assert wrap_180(190) == pytest.approx(-170)
        assert wrap_180(-180) == 180.0
        assert wrap_180(180) == 180.0

    def test_angle_diff_short_way(self):
        assert angle_diff_deg(10, 350) == pytest.approx(20)
        assert angle_diff_deg(350, 10) == pytest.approx(-20)

    def test_angle_diff_half_turn(self):
        """Exactly opposite resolves to +180"""
        assert angle_diff_deg(180, 0) == 180
        assert angle_diff_deg(0, 180) == 180


class TestDistance:
    """Tests for great-circle distance"""

    def test_same_point(self):
        p = GeoPoint(47.9377, -121.9687)
        assert distance_nm(p, p) == 0.0

    def test_equator_degree(self):
        """1 degree of longitude at the equator is about 60 NM"""
        assert distance_nm(GeoPoint(0, 0), GeoPoint(0, 1)) == pytest.approx(60.04, abs=0.01)

    def test_km(self):
        assert distance_km(GeoPoint(0, 0), GeoPoint(0, 1)) == pytest.approx(111.195, abs=0.001)

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_symmetry(self, a, b):
        assert distance_nm(a, b) == distance_nm(b, a)

    def test_path_length(self):
        a, b, c = GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(1, 1)
        assert path_length_nm([a, b, c]) == pytest.approx(distance_nm(a, b) + distance_nm(b, c))

    def test_path_length_single_point(self):
        assert path_length_nm([GeoPoint(0, 0)]) == 0


class TestBearing:
    """Tests for initial bearing"""

    def test_east(self):
        assert calculate_initial_compass_bearing(GeoPoint(0, 0), GeoPoint(0, 1)) == pytest.approx(90)

    def test_north(self):
        assert calculate_initial_compass_bearing(GeoPoint(0, 0), GeoPoint(1, 0)) == pytest.approx(0)

    def test_west(self):
        assert calculate_initial_compass_bearing(GeoPoint(0, 0), GeoPoint(0, -1)) == pytest.approx(270)

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_range(self, a, b):
        assert 0 <= calculate_initial_compass_bearing(a, b) < 360


class TestDestinationPoint:
    """Tests for the direct problem and its inverse"""

    @pytest.mark.parametrize("origin", [GeoPoint(0, 0), GeoPoint(10, 20), GeoPoint(-45, 170), GeoPoint(60, -30)])
    @pytest.mark.parametrize("bearing", [0.0, 45.0, 135.0, 270.0, 359.0])
    @pytest.mark.parametrize("dist", [0.5, 60.0, 500.0])
    def test_inverse(self, origin, bearing, dist):
        dest = point_from(origin, bearing, dist)
        assert distance_nm(origin, dest) == pytest.approx(dist, rel=1e-9)
        back = calculate_initial_compass_bearing(origin, dest)
        assert abs(angle_diff_deg(back, bearing)) < 1e-6

    def test_zero_distance_returns_origin(self):
        p = GeoPoint(12.5, 45.25)
        assert point_from(p, 123.0, 0) is p

    def test_antimeridian_normalized(self):
        dest = point_from(GeoPoint(0, 179.9), 90.0, 30.0)
        assert -180 < dest.longitude <= 180
        assert dest.longitude == pytest.approx(-179.6003, abs=1e-3)


class TestWindTriangle:
    """Tests for ground speed and track"""

    def test_crosswind(self):
        """Heading 0 at 300 kt with a 50 kt wind along 090"""
        gs, track = wind_triangle(0.0, 300.0, 90.0, 50.0)
        assert gs == pytest.approx(math.sqrt(300 ** 2 + 50 ** 2), rel=1e-9)
        assert 0 < track < 90
        assert track == pytest.approx(math.degrees(math.atan2(50, 300)), abs=1e-9)

    def test_no_wind(self):
        gs, track = wind_triangle(123.0, 250.0, 0.0, 0.0)
        assert gs == pytest.approx(250.0)
        assert track == pytest.approx(123.0)

    def test_opposing_wind(self):
        gs, track = wind_triangle(0.0, 300.0, 180.0, 50.0)
        assert gs == pytest.approx(250.0)
        assert track == pytest.approx(0.0, abs=1e-9)

    def test_stationary(self):
        gs, track = wind_triangle(45.0, 0.0, 0.0, 0.0)
        assert gs == 0.0
        assert 0 <= track < 360
