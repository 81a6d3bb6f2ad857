"""
Route and waypoint model.

A route is an ordered list of at least two waypoints: the first is the origin,
the last is the destination. Route data is validated here, before any
simulation state is built from it.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from geopy import Point as GeoPoint

from flightsim.units import NM_TO_KM
from flightsim.utility import path_length_nm


class RouteError(ValueError):
    """Raised for missing or malformed route data."""


@dataclass(frozen=True)
class Waypoint:
    """A named point on the route"""
    ident: str
    latitude: float
    longitude: float
    name: Optional[str] = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Waypoint":
        """
        Accepts either flat {"ident", "latitude", "longitude"} or the airport
        shape {"iata", "name", "coordinates": {"latitude", "longitude"}}.
        """
        if not isinstance(data, dict):
            raise RouteError(f"waypoint must be an object, got {type(data).__name__}")
        ident = data.get("ident") or data.get("iata") or data.get("id")
        coords = data.get("coordinates", data)
        if not isinstance(coords, dict):
            raise RouteError(f"waypoint {ident!r}: coordinates must be an object")
        return make_waypoint(ident, coords.get("latitude"), coords.get("longitude"), data.get("name"))


def _coordinate(ident, label, value, limit):
    if isinstance(value, bool) or value is None:
        raise RouteError(f"waypoint {ident!r}: missing {label}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise RouteError(f"waypoint {ident!r}: {label} {value!r} is not a number") from None
    if not math.isfinite(value) or abs(value) > limit:
        raise RouteError(f"waypoint {ident!r}: {label} {value} out of range")
    return value


def make_waypoint(ident, latitude, longitude, name=None) -> Waypoint:
    if not isinstance(ident, str) or not ident.strip():
        raise RouteError(f"waypoint identifier must be a non-empty string, got {ident!r}")
    ident = ident.strip()
    return Waypoint(
        ident=ident,
        latitude=_coordinate(ident, "latitude", latitude, 90.0),
        longitude=_coordinate(ident, "longitude", longitude, 180.0),
        name=name,
    )


@dataclass(frozen=True)
class Route:
    waypoints: Tuple[Waypoint, ...]

    def __post_init__(self):
        if len(self.waypoints) < 2:
            raise RouteError("a route needs at least an origin and a destination")
        for wp in self.waypoints:
            if not isinstance(wp, Waypoint):
                raise RouteError(f"route entries must be Waypoint objects, got {type(wp).__name__}")

    @property
    def origin(self) -> Waypoint:
        return self.waypoints[0]

    @property
    def destination(self) -> Waypoint:
        return self.waypoints[-1]

    @property
    def last_index(self) -> int:
        return len(self.waypoints) - 1

    @property
    def label(self) -> str:
        return "-".join(wp.ident for wp in self.waypoints)

    def total_distance_km(self) -> float:
        return path_length_nm([wp.point for wp in self.waypoints]) * NM_TO_KM

    @classmethod
    def from_waypoints(cls, waypoints: Sequence[Waypoint]) -> "Route":
        return cls(tuple(waypoints))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Route":
        """
        Build a route from routes.json-style data:
        {"origin": {...}, "waypoints": [{...}, ...], "destination": {...}}
        or a bare {"waypoints": [...]} list that already includes both ends.
        """
        if not isinstance(data, dict):
            raise RouteError(f"route must be an object, got {type(data).__name__}")
        middle = data.get("waypoints") or []
        if not isinstance(middle, list):
            raise RouteError("route waypoints must be a list")

        entries: List[Dict[str, Any]]
        if "origin" in data or "destination" in data:
            if "origin" not in data or "destination" not in data:
                raise RouteError("route needs both an origin and a destination")
            entries = [data["origin"], *middle, data["destination"]]
        else:
            entries = list(middle)
        return cls(tuple(Waypoint.from_dict(e) for e in entries))
