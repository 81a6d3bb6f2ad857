"""
flightsim - point-mass flight kinematics along a route, with autopilot
targets, wind and landing detection.
"""

from flightsim.clock import SimulationClock
from flightsim.config import ConfigError, SimulationSettings, load_settings
from flightsim.navigation import FlightStatus, InvalidTransitionError
from flightsim.route import Route, RouteError, Waypoint
from flightsim.simulator import FlightSimulator, FlightSnapshot
from flightsim.state import SimulationState, Wind

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "FlightSimulator",
    "FlightSnapshot",
    "FlightStatus",
    "InvalidTransitionError",
    "Route",
    "RouteError",
    "SimulationClock",
    "SimulationSettings",
    "SimulationState",
    "Waypoint",
    "Wind",
    "load_settings",
]
