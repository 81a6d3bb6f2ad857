"""
Per-tick update laws for altitude, airspeed and heading.

Each is a pure function of the current value, its target, the tick length dt
(seconds) and the rate limits in PhysicsParams. None of them snaps to the
target; the change per tick is always bounded by a rate.
"""

from collections import namedtuple

from flightsim.units import fpm_to_fps
from flightsim.utility import angle_diff_deg, wrap_360

ForceEstimate = namedtuple("ForceEstimate", ["lift", "drag", "thrust"])


def update_altitude(altitude_ft, vertical_speed_fpm, target_altitude_ft, dt, params):
    """
    Returns (altitude_ft, vertical_speed_fpm) after one tick.

    Outside the capture band the desired VS is the fixed climb or descent rate;
    inside it the desired VS is 0. The actual VS moves a fixed fraction of the
    way toward the desired one each tick.
    """
    diff_ft = target_altitude_ft - altitude_ft
    target_vs = 0.0
    if abs(diff_ft) > params.altitude_capture_ft:
        target_vs = params.climb_rate_fpm if diff_ft > 0 else -params.descent_rate_fpm

    vertical_speed_fpm += (target_vs - vertical_speed_fpm) * params.vs_blend
    altitude_ft += fpm_to_fps(vertical_speed_fpm) * dt
    return max(0.0, altitude_ft), vertical_speed_fpm


def update_speed(speed_kts, target_speed_kts, dt, params):
    diff_kts = target_speed_kts - speed_kts
    if abs(diff_kts) > params.speed_capture_kts:
        accel = params.acceleration_kts if diff_kts > 0 else -params.deceleration_kts
        change = accel * dt
        # never overshoot
        if abs(change) > abs(diff_kts):
            change = diff_kts
        speed_kts += change
    return max(0.0, speed_kts)


def update_heading(heading_deg, target_bearing_deg, dt, params):
    """Turn toward the bearing the short way round, at most turn_rate * dt."""
    diff = angle_diff_deg(target_bearing_deg, heading_deg)
    max_turn = params.turn_rate_dps * dt
    turn = max(-max_turn, min(max_turn, diff))
    return wrap_360(heading_deg + turn)


def estimate_forces(speed_kts, target_speed_kts, altitude_ft, target_altitude_ft, params):
    """
    Relative lift/drag/thrust for display. Not an aerodynamic model:
    lift scales with (speed / target speed)^2 and thrust follows what the
    autopilot is currently asking for.
    """
    ref = target_speed_kts if target_speed_kts > 0 else 1.0
    lift = (speed_kts / ref) ** 2
    drag = lift * 0.8 + 0.1

    thrust = 0.5
    if speed_kts < target_speed_kts - params.speed_capture_kts:
        thrust = 1.0
    if altitude_ft < target_altitude_ft - params.altitude_capture_ft:
        thrust = 1.2
    if speed_kts > target_speed_kts + params.speed_capture_kts:
        thrust = 0.2
    return ForceEstimate(lift, drag, thrust)
