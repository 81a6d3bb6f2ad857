from dataclasses import dataclass, field

from geopy import Point as GeoPoint

from flightsim.navigation import FlightStatus


@dataclass(frozen=True)
class Wind:
    """Wind for one flight. direction is the bearing the wind vector is laid along."""
    speed: float = 0.0       # kt
    direction: float = 0.0   # degrees [0, 360)


@dataclass
class SimulationState:
    """
    Mutable per-flight state in internal units (ft, kt, ft/min, degrees).

    Owned by the FlightSimulator; a new one is built on every reset or route
    change rather than being reused.
    """
    position: GeoPoint
    altitude: float                 # ft
    target_altitude: float          # ft
    speed: float                    # kt, airspeed
    target_speed: float             # kt
    heading: float                  # degrees [0, 360)
    wind: Wind = field(default_factory=Wind)
    vertical_speed: float = 0.0     # ft/min
    ground_speed: float = 0.0       # kt, from the last tick
    track: float = 0.0              # degrees, from the last tick
    autopilot_engaged: bool = False
    waypoint_index: int = 0
    elapsed_seconds: float = 0.0
    status: FlightStatus = FlightStatus.IDLE
