"""
Flight simulation driver.

FlightSimulator owns the per-flight SimulationState, the flown track and the
telemetry history. The host calls tick() on a fixed period (see
flightsim.clock) and feeds commands in between ticks; every tick and every
command that changes the flight produces a FlightSnapshot in display units.
"""

import logging
import math
from collections import deque, namedtuple
from dataclasses import dataclass, asdict
from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from flightsim.config import SimulationSettings
from flightsim.kinematics import (
    ForceEstimate,
    estimate_forces,
    update_altitude,
    update_heading,
    update_speed,
)
from flightsim.navigation import (
    FlightStatus,
    check_landing,
    check_waypoint_sequencing,
    engaged_status,
    transition,
)
from flightsim.route import Route, RouteError
from flightsim.state import SimulationState, Wind
from flightsim.units import (
    feet_to_meters,
    fpm_to_mpm,
    kph_to_knots,
    knots_to_kph,
    meters_to_feet,
)
from flightsim.utility import (
    calculate_initial_compass_bearing,
    distance_km,
    point_from,
    wind_triangle,
)

logger = logging.getLogger(__name__)

ETA_UNAVAILABLE = "--:--:--"
ARRIVED = "Arrived"
ETA_MIN_GROUND_SPEED_KPH = 20.0
ETA_MIN_REMAINING_KM = 0.1
ETA_MAX_SECONDS = 2 * 24 * 3600

TelemetrySample = namedtuple(
    "TelemetrySample", ["time", "altitude_m", "speed_kph", "lift", "drag", "thrust"]
)


def format_eta(remaining_km, ground_speed_kph, status: FlightStatus) -> str:
    """HH:MM:SS to destination at the current ground speed."""
    if status == FlightStatus.LANDED:
        return ARRIVED
    if status.is_terminal:
        return ETA_UNAVAILABLE
    if ground_speed_kph <= ETA_MIN_GROUND_SPEED_KPH or remaining_km <= ETA_MIN_REMAINING_KM:
        return ETA_UNAVAILABLE

    secs = int(round(remaining_km / ground_speed_kph * 3600))
    if secs >= ETA_MAX_SECONDS:
        return ETA_UNAVAILABLE
    h, rem = divmod(secs, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


@dataclass(frozen=True)
class FlightSnapshot:
    """Read-only view of the flight in display units"""
    position: Tuple[float, float]   # (lat, lon) degrees
    altitude_m: float
    ground_speed_kph: float
    airspeed_kph: float
    heading_deg: float
    track_deg: float
    vertical_speed_mpm: float
    status: FlightStatus
    flown_km: float
    total_km: float
    remaining_km: float
    next_waypoint: str
    waypoint_index: int
    wind_direction_deg: float
    wind_speed_kph: float
    eta: str
    elapsed_seconds: float
    autopilot_engaged: bool
    target_altitude_m: float
    target_speed_kph: float
    forces: ForceEstimate

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        data["forces"] = self.forces._asdict()
        return data


def _check_target(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be finite and non-negative, got {value}")
    return float(value)


class FlightSimulator:
    """
    Point-mass flight simulator for one aircraft along one route.

    Until a route is selected the simulator is empty: state is None, tick()
    and snapshot() return None and engaging the autopilot is refused.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None,
                 rng: Optional[np.random.Generator] = None):
        self._settings = (settings or SimulationSettings()).validate()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._target_altitude_m = self._settings.default_target_altitude_m
        self._target_speed_kph = self._settings.default_target_speed_kph

        self._route: Optional[Route] = None
        self._state: Optional[SimulationState] = None
        self._total_km = 0.0
        self._flown_km = 0.0
        self._track: List = []
        self._history = deque(maxlen=self._settings.history_max_points)
        self._listeners: List[Callable[[FlightSnapshot], None]] = []

    # --- Read access ---

    @property
    def settings(self) -> SimulationSettings:
        return self._settings

    @property
    def route(self) -> Optional[Route]:
        return self._route

    @property
    def state(self) -> Optional[SimulationState]:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is not None

    @property
    def engaged(self) -> bool:
        return self._state is not None and self._state.autopilot_engaged

    @property
    def flown_distance_km(self) -> float:
        return self._flown_km

    @property
    def total_distance_km(self) -> float:
        return self._total_km

    @property
    def remaining_distance_km(self) -> float:
        return max(0.0, self._total_km - self._flown_km)

    @property
    def flown_track(self) -> tuple:
        return tuple(self._track)

    @property
    def history(self) -> Tuple[TelemetrySample, ...]:
        return tuple(self._history)

    def subscribe(self, callback: Callable[[FlightSnapshot], None]) -> Callable[[], None]:
        """Register a snapshot listener. Returns a function that unregisters it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    # --- Commands ---

    def select_route(self, route: Union[Route, dict], force: bool = False) -> bool:
        """
        Make route the active route and start a fresh flight on it.
        Re-selecting the active route keeps the current flight unless force is set.
        Returns True if a new flight was started.
        """
        if isinstance(route, dict):
            route = Route.from_dict(route)
        if not force and self._state is not None and route == self._route:
            return False
        self.reset(route)
        return True

    def reset(self, route: Union[Route, dict, None] = None, wind: Optional[Wind] = None) -> Optional[FlightSnapshot]:
        """
        Discard the current flight and build a new one on route (or on the
        active route when none is given). Wind is sampled unless given.
        """
        if isinstance(route, dict):
            route = Route.from_dict(route)
        if route is None:
            route = self._route
        if route is None:
            logger.warning("Cannot reset: no route selected")
            return None
        if not isinstance(route, Route):
            raise RouteError(f"expected a Route, got {type(route).__name__}")

        origin = route.origin.point
        heading = calculate_initial_compass_bearing(origin, route.waypoints[1].point)

        self._route = route
        self._state = SimulationState(
            position=origin,
            altitude=self._settings.initial_altitude_ft,
            target_altitude=meters_to_feet(self._target_altitude_m),
            speed=0.0,
            target_speed=kph_to_knots(self._target_speed_kph),
            heading=heading,
            track=heading,
            wind=wind if wind is not None else self._sample_wind(),
        )
        self._total_km = route.total_distance_km()
        self._flown_km = 0.0
        self._track = [origin]
        self._history.clear()

        logger.info("Simulation state reset for route %s (%.1f km)", route.label, self._total_km)
        return self._publish()

    def engage_autopilot(self) -> bool:
        state = self._state
        if state is None:
            logger.warning("Cannot engage autopilot: no route selected")
            return False
        if state.status.is_terminal:
            logger.warning("Cannot engage autopilot: flight is %s", state.status)
            return False
        if state.autopilot_engaged:
            return False

        transition(state, engaged_status(state.altitude, self._settings.navigation))
        state.autopilot_engaged = True
        logger.info("Autopilot engaged - status: %s", state.status)
        self._publish()
        return True

    def disengage_autopilot(self) -> bool:
        state = self._state
        if state is None or not state.autopilot_engaged or state.status.is_terminal:
            return False
        state.autopilot_engaged = False
        transition(state, FlightStatus.PAUSED)
        logger.info("Autopilot disengaged")
        self._publish()
        return True

    def set_target_altitude(self, meters) -> None:
        self._target_altitude_m = _check_target("target altitude", meters)
        if self._state is not None and not self._state.status.is_terminal:
            self._state.target_altitude = meters_to_feet(self._target_altitude_m)
            self._publish()

    def set_target_speed(self, kph) -> None:
        self._target_speed_kph = _check_target("target speed", kph)
        if self._state is not None and not self._state.status.is_terminal:
            self._state.target_speed = kph_to_knots(self._target_speed_kph)
            self._publish()

    # --- Simulation step ---

    def tick(self) -> Optional[FlightSnapshot]:
        """
        Advance the flight by one fixed tick.

        Order: altitude, speed, heading, wind triangle, position, flown
        distance, landing check, then waypoint sequencing. Does nothing while
        the autopilot is off or once the flight has landed or crashed.
        """
        state = self._state
        if state is None:
            return None
        if state.status.is_terminal or not state.autopilot_engaged:
            return self.snapshot()

        route = self._route
        physics = self._settings.physics
        nav = self._settings.navigation
        dt = self._settings.tick_seconds
        state.elapsed_seconds += dt

        state.altitude, state.vertical_speed = update_altitude(
            state.altitude, state.vertical_speed, state.target_altitude, dt, physics
        )
        state.speed = update_speed(state.speed, state.target_speed, dt, physics)

        # no steering until sequenced past the origin
        if state.waypoint_index >= 1:
            bearing = calculate_initial_compass_bearing(state.position, self._active_waypoint().point)
            state.heading = update_heading(state.heading, bearing, dt, physics)

        state.ground_speed, state.track = wind_triangle(
            state.heading, state.speed, state.wind.direction, state.wind.speed
        )
        self._advance_position(dt)

        if state.waypoint_index == route.last_index:
            dist_km = distance_km(state.position, route.destination.point)
            if check_landing(state, dist_km, nav):
                self._record_history()
                return self._publish()

        dist_km = distance_km(state.position, self._active_waypoint().point)
        check_waypoint_sequencing(state, self._flown_km, dist_km, route.last_index, nav)

        self._record_history()
        return self._publish()

    def snapshot(self) -> Optional[FlightSnapshot]:
        state = self._state
        if state is None:
            return None

        # a frozen aircraft is not moving over the ground
        gs_kph = knots_to_kph(state.ground_speed) if state.autopilot_engaged else 0.0
        remaining_km = self.remaining_distance_km
        if state.status.is_terminal:
            next_wpt = ARRIVED
        else:
            next_wpt = self._active_waypoint().ident

        return FlightSnapshot(
            position=(state.position.latitude, state.position.longitude),
            altitude_m=feet_to_meters(state.altitude),
            ground_speed_kph=gs_kph,
            airspeed_kph=knots_to_kph(state.speed),
            heading_deg=state.heading,
            track_deg=state.track,
            vertical_speed_mpm=fpm_to_mpm(state.vertical_speed),
            status=state.status,
            flown_km=self._flown_km,
            total_km=self._total_km,
            remaining_km=remaining_km,
            next_waypoint=next_wpt,
            waypoint_index=state.waypoint_index,
            wind_direction_deg=state.wind.direction,
            wind_speed_kph=knots_to_kph(state.wind.speed),
            eta=format_eta(remaining_km, gs_kph, state.status),
            elapsed_seconds=state.elapsed_seconds,
            autopilot_engaged=state.autopilot_engaged,
            target_altitude_m=feet_to_meters(state.target_altitude),
            target_speed_kph=knots_to_kph(state.target_speed),
            forces=self._forces(),
        )

    # --- Internals ---

    def _active_waypoint(self):
        return self._route.waypoints[self._state.waypoint_index]

    def _advance_position(self, dt):
        state = self._state
        dist_nm = state.ground_speed * (dt / 3600.0)
        if dist_nm <= 0:
            return
        previous = state.position
        state.position = point_from(previous, state.track, dist_nm)
        self._flown_km += distance_km(previous, state.position)
        self._track.append(state.position)

    def _forces(self) -> ForceEstimate:
        s = self._state
        return estimate_forces(s.speed, s.target_speed, s.altitude, s.target_altitude, self._settings.physics)

    def _record_history(self):
        s = self._state
        forces = self._forces()
        self._history.append(TelemetrySample(
            time=s.elapsed_seconds,
            altitude_m=feet_to_meters(s.altitude),
            speed_kph=knots_to_kph(s.speed),
            lift=forces.lift,
            drag=forces.drag,
            thrust=forces.thrust,
        ))

    def _sample_wind(self) -> Wind:
        speed = round(self._rng.random() * self._settings.wind_speed_range_kts + self._settings.wind_speed_min_kts)
        direction = round(self._rng.random() * 360) % 360
        return Wind(speed=float(speed), direction=float(direction))

    def _publish(self) -> Optional[FlightSnapshot]:
        snap = self.snapshot()
        if snap is not None:
            for callback in list(self._listeners):
                callback(snap)
        return snap
