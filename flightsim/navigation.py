"""
Flight status, legal status transitions, and the per-tick navigation checks
(departure sequencing, waypoint capture, approach and landing resolution).

The checks take the simulation state plus distances already measured by the
driver, and mutate only state.status, state.waypoint_index and
state.autopilot_engaged.
"""

import logging
from enum import Enum

from flightsim.units import feet_to_meters, knots_to_kph

logger = logging.getLogger(__name__)


class FlightStatus(Enum):
    IDLE = "Idle"
    PAUSED = "Paused"
    TAKEOFF_CLIMB = "Takeoff / Climb"
    EN_ROUTE = "En Route"
    APPROACHING = "Approaching"
    LANDING_SOON = "Landing Soon"
    LANDED = "Landed"
    CRASHED = "Crashed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def __str__(self):
        return self.value


TERMINAL_STATUSES = frozenset({FlightStatus.LANDED, FlightStatus.CRASHED})

# status -> statuses it may move to
TRANSITIONS = {
    FlightStatus.IDLE: frozenset({FlightStatus.TAKEOFF_CLIMB, FlightStatus.EN_ROUTE}),
    FlightStatus.PAUSED: frozenset({FlightStatus.TAKEOFF_CLIMB, FlightStatus.EN_ROUTE}),
    FlightStatus.TAKEOFF_CLIMB: frozenset({
        FlightStatus.EN_ROUTE, FlightStatus.LANDING_SOON, FlightStatus.PAUSED,
    }),
    FlightStatus.EN_ROUTE: frozenset({
        FlightStatus.APPROACHING, FlightStatus.LANDING_SOON, FlightStatus.PAUSED,
    }),
    FlightStatus.APPROACHING: frozenset({FlightStatus.LANDING_SOON, FlightStatus.PAUSED}),
    FlightStatus.LANDING_SOON: frozenset({
        FlightStatus.LANDED, FlightStatus.CRASHED, FlightStatus.PAUSED,
    }),
    FlightStatus.LANDED: frozenset(),
    FlightStatus.CRASHED: frozenset(),
}


class InvalidTransitionError(RuntimeError):
    """Raised when a status change is not in the transition table."""


def can_transition(current: FlightStatus, new: FlightStatus) -> bool:
    return new == current or new in TRANSITIONS[current]


def transition(state, new_status: FlightStatus) -> bool:
    """
    Move state.status to new_status. Returns True if the status changed.
    Staying in the same status is always allowed and is a no-op.
    """
    current = state.status
    if new_status == current:
        return False
    if new_status not in TRANSITIONS[current]:
        raise InvalidTransitionError(f"{current} -> {new_status} is not a legal status change")
    logger.debug("Status %s -> %s", current, new_status)
    state.status = new_status
    if new_status.is_terminal:
        state.autopilot_engaged = False
    return True


def engaged_status(altitude_ft, params) -> FlightStatus:
    """Status reported when the autopilot is engaged at the given altitude."""
    if feet_to_meters(altitude_ft) < params.takeoff_status_altitude_m:
        return FlightStatus.TAKEOFF_CLIMB
    return FlightStatus.EN_ROUTE


def check_landing(state, distance_to_destination_km, params) -> bool:
    """
    Approach / landing-soon / touchdown checks, for the final leg only.

    The checks run in order within one tick, so a single tick may go straight
    from En Route through Landing Soon to Landed or Crashed when the aircraft
    is already below the final altitude. Returns True if the flight ended.
    """
    if state.status.is_terminal:
        return True

    alt_m = feet_to_meters(state.altitude)
    if distance_to_destination_km < params.landing_proximity_km and alt_m < params.landing_altitude_threshold_m:
        transition(state, FlightStatus.LANDING_SOON)
    elif distance_to_destination_km < params.approach_radius_km and state.status == FlightStatus.EN_ROUTE:
        transition(state, FlightStatus.APPROACHING)

    if state.status == FlightStatus.LANDING_SOON and alt_m < params.landing_final_altitude_m:
        speed_kph = knots_to_kph(state.speed)
        if speed_kph < params.landing_speed_threshold_kph:
            transition(state, FlightStatus.LANDED)
            logger.info("Landed at %.0f km/h", speed_kph)
        else:
            transition(state, FlightStatus.CRASHED)
            logger.warning("Landed too fast! %.0f km/h", speed_kph)
        return True
    return False


def check_waypoint_sequencing(state, flown_km, distance_to_active_km, last_index, params) -> bool:
    """
    Advance waypoint_index when the active waypoint is done with.

    Index 0 (origin) is left only once the aircraft has flown far enough and
    fast enough to be airborne; intermediate waypoints are left when inside
    the capture radius. The destination is never sequenced past.
    Returns True if the index advanced.
    """
    if state.status.is_terminal or not state.autopilot_engaged:
        return False

    if state.waypoint_index == 0:
        if state.speed > params.takeoff_min_speed_kts and flown_km > params.takeoff_min_distance_km:
            state.waypoint_index = 1
            transition(state, FlightStatus.EN_ROUTE)
            logger.info("Sequencing past origin")
            return True
        return False

    if state.waypoint_index < last_index and distance_to_active_km < params.waypoint_capture_km:
        state.waypoint_index += 1
        logger.info("Waypoint %d captured, now tracking waypoint %d",
                    state.waypoint_index - 1, state.waypoint_index)
        return True
    return False
