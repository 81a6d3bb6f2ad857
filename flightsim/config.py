"""
Simulation configuration: physics rates, navigation thresholds and timing.

Defaults reproduce the stock airliner profile. A JSON file with any subset of
the groups below overrides them, e.g.

    {"physics": {"turn_rate_dps": 2.0}, "navigation": {"landing_proximity_km": 1.5}}
"""

import json
import math
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Optional, Union

from flightsim.units import NM_TO_KM


class ConfigError(ValueError):
    """Raised when settings are out of range or their thresholds are misordered."""


@dataclass
class PhysicsParams:
    """Rate limits, in internal units"""
    climb_rate_fpm: float = 1800.0
    descent_rate_fpm: float = 1500.0
    acceleration_kts: float = 5.0     # kt per second
    deceleration_kts: float = 7.0     # kt per second
    turn_rate_dps: float = 3.0
    vs_blend: float = 0.1             # fraction of the way to the desired VS per tick
    altitude_capture_ft: float = 10.0
    speed_capture_kts: float = 1.0


@dataclass
class NavigationParams:
    """Sequencing and landing thresholds. All proximity radii are in km."""
    takeoff_min_distance_km: float = 0.2
    takeoff_min_speed_kts: float = 50.0
    waypoint_capture_km: float = 3 * NM_TO_KM
    approach_radius_km: Optional[float] = None  # defaults to 2x capture
    landing_proximity_km: float = 2.0
    landing_altitude_threshold_m: float = 300.0
    landing_final_altitude_m: float = 30.0
    landing_speed_threshold_kph: float = 260.0
    takeoff_status_altitude_m: float = 50.0

    def __post_init__(self):
        if self.approach_radius_km is None and _is_number(self.waypoint_capture_km):
            self.approach_radius_km = 2 * self.waypoint_capture_km


@dataclass
class SimulationSettings:
    """Top-level settings container"""
    tick_interval_ms: int = 100
    initial_altitude_ft: float = 50.0
    default_target_altitude_m: float = 3000.0
    default_target_speed_kph: float = 400.0
    history_max_points: int = 120
    wind_speed_min_kts: float = 5.0
    wind_speed_range_kts: float = 30.0
    physics: PhysicsParams = field(default_factory=PhysicsParams)
    navigation: NavigationParams = field(default_factory=NavigationParams)

    @property
    def tick_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationSettings":
        """Build settings from a dictionary, ignoring keys that are not settings."""
        if not isinstance(data, dict):
            raise ConfigError(f"settings must be an object, got {type(data).__name__}")
        top = {f.name for f in fields(cls)} - {"physics", "navigation"}
        settings = cls(**{k: v for k, v in data.items() if k in top})

        if "physics" in data:
            settings.physics = PhysicsParams(**_group(data, "physics", PhysicsParams))

        if "navigation" in data:
            settings.navigation = NavigationParams(**_group(data, "navigation", NavigationParams))

        return settings

    def validate(self) -> "SimulationSettings":
        _require_int("tick_interval_ms", self.tick_interval_ms, minimum=1)
        _require_int("history_max_points", self.history_max_points, minimum=1)
        for name in ("initial_altitude_ft", "default_target_altitude_m", "default_target_speed_kph",
                     "wind_speed_min_kts", "wind_speed_range_kts"):
            _require_non_negative(name, getattr(self, name))

        p = self.physics
        if not isinstance(p, PhysicsParams):
            raise ConfigError("physics must be a PhysicsParams")
        for name in ("climb_rate_fpm", "descent_rate_fpm", "acceleration_kts",
                     "deceleration_kts", "turn_rate_dps"):
            value = getattr(p, name)
            _require_non_negative(f"physics.{name}", value)
            if value == 0:
                raise ConfigError(f"physics.{name} must be positive, got {value}")
        _require_non_negative("physics.vs_blend", p.vs_blend)
        if not 0 < p.vs_blend <= 1:
            raise ConfigError(f"physics.vs_blend must be in (0, 1], got {p.vs_blend}")
        _require_non_negative("physics.altitude_capture_ft", p.altitude_capture_ft)
        _require_non_negative("physics.speed_capture_kts", p.speed_capture_kts)

        n = self.navigation
        if not isinstance(n, NavigationParams):
            raise ConfigError("navigation must be a NavigationParams")
        for f in fields(NavigationParams):
            _require_non_negative(f"navigation.{f.name}", getattr(n, f.name))
        if not n.waypoint_capture_km < n.approach_radius_km:
            raise ConfigError("waypoint capture radius must be smaller than the approach radius")
        if not n.landing_proximity_km <= n.approach_radius_km:
            raise ConfigError("landing proximity must not exceed the approach radius")
        if not n.landing_final_altitude_m < n.landing_altitude_threshold_m:
            raise ConfigError("final landing altitude must be below the landing-soon altitude")
        return self


def _group(data, name, params_cls):
    group = data[name]
    if not isinstance(group, dict):
        raise ConfigError(f"{name} must be an object, got {type(group).__name__}")
    known_fields = {f.name for f in fields(params_cls)}
    return {k: v for k, v in group.items() if k in known_fields}


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_int(name, value, minimum):
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}")


def _require_non_negative(name, value):
    if not _is_number(value) or not math.isfinite(value) or value < 0:
        raise ConfigError(f"{name} must be a finite non-negative number, got {value!r}")


# === Load settings ===
def load_settings(path: Union[str, Path, None] = None) -> SimulationSettings:
    """Load settings from a JSON file, or the defaults when no path is given."""
    if path is None:
        return SimulationSettings().validate()
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object at top level")
    return SimulationSettings.from_dict(data).validate()
