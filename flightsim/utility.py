import math

import numpy as np
from geopy import Point as GeoPoint
from geopy.distance import great_circle

from flightsim.units import NM_TO_KM

# Spherical earth, shared by distance and destination so they invert each other
EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_NM = EARTH_RADIUS_KM / NM_TO_KM


def wrap_360(deg: float) -> float:
    deg = float(deg) % 360.0
    # tiny negatives round up to exactly 360.0
    return 0.0 if deg == 360.0 else deg

def wrap_180(deg: float) -> float:
    # longitude into (-180, 180]
    deg = (float(deg) + 180.0) % 360.0 - 180.0
    return 180.0 if deg == -180.0 else deg

def angle_diff_deg(a: float, b: float) -> float:
    # signed shortest diff a-b in degrees, range (-180,180]
    d = (float(a) - float(b)) % 360.0
    return d - 360.0 if d > 180.0 else d


####------ GEODESY ------#####

def distance_nm(pointA, pointB) -> float:
    """
    Haversine great-circle distance in nautical miles.
    Identical points return exactly 0.
    """
    if pointA.latitude == pointB.latitude and pointA.longitude == pointB.longitude:
        return 0.0
    lat1, lat2 = map(math.radians, [pointA.latitude, pointB.latitude])
    d_lat = lat2 - lat1
    d_lon = math.radians(pointB.longitude - pointA.longitude)
    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_NM * c

def distance_km(pointA, pointB) -> float:
    return distance_nm(pointA, pointB) * NM_TO_KM

def calculate_initial_compass_bearing(pointA, pointB) -> float:
    lat1, lat2 = map(math.radians, [pointA.latitude, pointB.latitude])
    diff_lon = math.radians(pointB.longitude - pointA.longitude)
    x = math.sin(diff_lon) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - (
        math.sin(lat1) * math.cos(lat2) * math.cos(diff_lon)
    )
    return wrap_360(math.degrees(math.atan2(x, y)))

def point_from(p, bearing_deg, dist_nm):
    """
    Point reached from p after dist_nm along the initial bearing bearing_deg.
    Zero distance returns p itself. Longitude comes back in (-180, 180].
    """
    if dist_nm == 0:
        return p
    dest = great_circle(nautical=dist_nm, radius=EARTH_RADIUS_KM).destination(p, bearing_deg)
    return GeoPoint(dest.latitude, wrap_180(dest.longitude))

def path_length_nm(points) -> float:
    """Sum of great-circle legs along an ordered sequence of points."""
    return sum(distance_nm(a, b) for a, b in zip(points, points[1:]))


####------ WIND TRIANGLE ------#####

def _bearing_components(bearing_deg: float, magnitude: float) -> np.ndarray:
    # bearing: 0=N, 90=E -> (east, north)
    br = np.radians(bearing_deg)
    return magnitude * np.array([np.sin(br), np.cos(br)])

def wind_triangle(heading_deg, airspeed, wind_dir_deg, wind_speed):
    """
    Ground speed and track from heading/airspeed and the wind vector.

    The wind vector is laid along wind_dir_deg, the same way the heading
    vector is, and summed with it. Speeds come back in whatever unit they
    went in. Returns (ground_speed, track_deg) with track in [0, 360).
    """
    ground = _bearing_components(heading_deg, airspeed) + _bearing_components(wind_dir_deg, wind_speed)
    ge, gn = float(ground[0]), float(ground[1])
    ground_speed = math.hypot(ge, gn)
    track = wrap_360(math.degrees(math.atan2(ge, gn)))
    return ground_speed, track
