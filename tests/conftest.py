"""
Pytest configuration and shared fixtures for flightsim tests.
"""

import numpy as np
import pytest
from geopy import Point as GeoPoint

from flightsim.config import NavigationParams, PhysicsParams
from flightsim.navigation import FlightStatus
from flightsim.route import Route, make_waypoint
from flightsim.simulator import FlightSimulator
from flightsim.state import SimulationState, Wind
from flightsim.units import kph_to_knots, meters_to_feet


@pytest.fixture
def physics():
    return PhysicsParams()


@pytest.fixture
def nav():
    return NavigationParams()


@pytest.fixture
def equator_route():
    """(0N, 0E) to (0N, 1E), about 60 NM"""
    return Route.from_waypoints([
        make_waypoint("ORG", 0.0, 0.0),
        make_waypoint("DST", 0.0, 1.0),
    ])


@pytest.fixture
def dogleg_route():
    return Route.from_waypoints([
        make_waypoint("ORG", 0.0, 0.0),
        make_waypoint("MID", 0.3, 0.5),
        make_waypoint("DST", 0.0, 1.0),
    ])


@pytest.fixture
def sim():
    return FlightSimulator(rng=np.random.default_rng(42))


@pytest.fixture
def calm_sim(sim, equator_route):
    """Simulator reset onto the equator route with no wind"""
    sim.reset(equator_route, wind=Wind(0.0, 0.0))
    return sim


def _build_state(**overrides):
    fields = dict(
        position=GeoPoint(0.0, 0.0),
        altitude=meters_to_feet(3000),
        target_altitude=meters_to_feet(3000),
        speed=kph_to_knots(400),
        target_speed=kph_to_knots(400),
        heading=90.0,
        autopilot_engaged=True,
        status=FlightStatus.EN_ROUTE,
    )
    fields.update(overrides)
    return SimulationState(**fields)


def _put_on_final(sim, route, speed_kph, altitude_m, lon=0.99):
    """
    Put an engaged aircraft on the final leg, ~1.1 km short of the
    destination of the equator route, at the given speed and height.
    """
    sim.reset(route, wind=Wind(0.0, 0.0))
    sim.set_target_speed(speed_kph)
    sim.set_target_altitude(0)
    sim.engage_autopilot()
    state = sim.state
    state.position = GeoPoint(0.0, lon)
    state.altitude = meters_to_feet(altitude_m)
    state.speed = kph_to_knots(speed_kph)
    state.waypoint_index = route.last_index
    state.status = FlightStatus.EN_ROUTE
    return state


@pytest.fixture
def make_state():
    """Factory for an engaged, en-route SimulationState; keyword overrides apply"""
    return _build_state


@pytest.fixture
def place_on_final():
    return _put_on_final
