# aerodrome-lite/aerodrome/atc/commands.py
"""
Command validator and applier.

``apply_command`` is a pure state transition: it reads the live roster and the
airport, and returns an updated copy of the target aircraft. Rejected or
inapplicable commands return an unchanged copy; they are an everyday outcome of
an imperfect controlling policy, not an error.
"""
from enum import Enum

from .forecast import (find_heading_away_from_airport, find_safe_heading,
                       predict_airport_zone_entry, predict_collision)
from .geometry import angle_difference, normalize_angle
from .model import Aircraft, AircraftStatus, Airport, Command, CommandAction
from .params import Rules
from .zones import is_in_approach_zone

import logging
logger = logging.getLogger("aerodrome.commands")
logger.setLevel(logging.INFO)


class UnknownAircraftError(KeyError):
    """A command referenced an aircraft id that is not in the roster."""


class CommandOutcome(Enum):
    APPLIED = "applied"
    REDIRECTED = "redirected"        # turn replaced by a safer heading
    REJECTED = "rejected"            # forecast found no safe alternative
    BLOCKED = "blocked"              # not allowed in the aircraft's current status
    DENIED = "denied"                # approach requested outside the corridor
    EMERGENCY = "emergency"          # hold turned into an immediate escape turn
    IGNORED = "ignored"              # terminal aircraft or missing value


def _log(category, aircraft: Aircraft, message, **data):
    if logger.isEnabledFor(logging.DEBUG):
        details = ", ".join(f"{k}={v}" for k, v in data.items())
        logger.debug(f"[{category}] {aircraft.callsign} ({aircraft.id}) {message}" + (f" | {details}" if details else ""))


def _turn(aircraft, updated, command, airport, all_aircraft, rules, canvas_size, game_speed):
    if aircraft.status == AircraftStatus.APPROACHING:
        # heading belongs to the automatic centreline correction now
        _log("TURN-BLOCKED", aircraft, "turn blocked for approaching aircraft",
             requested=command.value, heading=round(aircraft.heading))
        return CommandOutcome.BLOCKED

    new_heading = normalize_angle(command.value)
    outcome = CommandOutcome.APPLIED

    if rules.collision_avoidance:
        prediction = predict_collision(aircraft, new_heading, all_aircraft, rules, canvas_size, game_speed)
        if prediction.will_collide:
            _log("TURN-COLLISION-PREDICTED", aircraft, f"turn would conflict with {prediction.other.callsign}",
                 requested=round(new_heading), eta=f"{prediction.time_to_collision:.1f}s",
                 point=prediction.collision_point)
            safe_heading = find_safe_heading(aircraft, new_heading, all_aircraft, rules, canvas_size, game_speed)
            if safe_heading is None:
                _log("TURN-REJECTED", aircraft, "no safe heading found, keeping current heading",
                     requested=round(new_heading), heading=round(aircraft.heading))
                return CommandOutcome.REJECTED
            _log("TURN-REDIRECTED", aircraft, "redirecting to safe heading",
                 requested=round(new_heading), safe=round(safe_heading))
            new_heading = safe_heading
            outcome = CommandOutcome.REDIRECTED

    if rules.airport_avoidance and aircraft.status == AircraftStatus.FLYING:
        zone = predict_airport_zone_entry(aircraft, new_heading, airport, rules,
                                          rules.airport_horizon, game_speed, canvas_size)
        if zone.will_enter:
            _log("TURN-AIRPORT-PREDICTED", aircraft, "turn would enter the airport zone",
                 requested=round(new_heading), frames=zone.frames_until_entry, point=zone.entry_point)
            away = find_heading_away_from_airport(aircraft, airport, rules, game_speed)
            clash = (predict_collision(aircraft, away, all_aircraft, rules, canvas_size, game_speed)
                     if rules.collision_avoidance else None)
            if clash:
                _log("TURN-REJECTED-AIRPORT", aircraft, "escape heading unsafe, keeping current heading",
                     requested=round(new_heading), heading=round(aircraft.heading))
                return CommandOutcome.REJECTED
            _log("TURN-REDIRECTED-AIRPORT", aircraft, "redirecting away from airport",
                 requested=round(new_heading), safe=round(away))
            new_heading = away
            outcome = CommandOutcome.REDIRECTED

    change = abs(angle_difference(aircraft.heading, new_heading))
    updated.heading = new_heading
    _log("TURN", aircraft, "turning", old=round(aircraft.heading), new=round(new_heading),
         change=round(change), status=aircraft.status.value, speed=f"{aircraft.speed:.2f}")
    return outcome


def _speed(aircraft, updated, command, rules):
    updated.speed = max(rules.min_speed, min(rules.max_speed, command.value))
    _log("SPEED", aircraft, "speed change", old=f"{aircraft.speed:.2f}", new=f"{updated.speed:.2f}")
    return CommandOutcome.APPLIED


def _approach(aircraft, updated, airport, rules):
    if not is_in_approach_zone(aircraft.position, airport.runway_start, airport.runway_end, airport.runway_width):
        _log("APPROACH-DENIED", aircraft, "not in approach zone",
             heading=round(aircraft.heading), position=(round(aircraft.x), round(aircraft.y)))
        return CommandOutcome.DENIED
    updated.status = AircraftStatus.APPROACHING
    updated.speed = min(updated.speed, rules.approach_speed)
    _log("APPROACH", aircraft, "cleared for approach", heading=round(aircraft.heading),
         speed=f"{updated.speed:.2f}")
    return CommandOutcome.APPLIED


def _hold(aircraft, updated, airport, rules, canvas_size, game_speed):
    if aircraft.status == AircraftStatus.APPROACHING:
        _log("HOLD-BLOCKED", aircraft, "hold blocked for approaching aircraft", heading=round(aircraft.heading))
        return CommandOutcome.BLOCKED

    zone = None
    if rules.airport_avoidance:
        zone = predict_airport_zone_entry(aircraft, aircraft.heading, airport, rules,
                                          rules.airport_horizon, game_speed, canvas_size)
    if zone:
        # current heading runs into the airport zone: turn away now and slow down hard
        updated.heading = find_heading_away_from_airport(aircraft, airport, rules, game_speed)
        updated.speed = max(rules.min_speed, aircraft.speed * rules.emergency_speed_factor)
        _log("HOLD-EMERGENCY", aircraft, "emergency turn away from airport zone",
             old=round(aircraft.heading), new=round(updated.heading), frames=zone.frames_until_entry,
             speed=f"{updated.speed:.2f}")
        return CommandOutcome.EMERGENCY

    target = airport.holding_heading
    diff = angle_difference(aircraft.heading, target)
    if abs(diff) > rules.hold_turn_step:
        updated.heading = normalize_angle(aircraft.heading + (rules.hold_turn_step if diff > 0 else -rules.hold_turn_step))
    else:
        updated.heading = target
    updated.speed = max(rules.hold_min_speed, aircraft.speed * rules.hold_speed_factor)
    _log("HOLD", aircraft, "holding", old=round(aircraft.heading), new=round(updated.heading),
         speed=f"{updated.speed:.2f}")
    return CommandOutcome.APPLIED


def resolve_command(aircraft: Aircraft, command: Command, airport: Airport, all_aircraft, rules: Rules = None,
                    canvas_size=(800, 600), game_speed=1.0):
    """
    Validates a command against the live state and computes its effect.

    :param aircraft: Target aircraft (not modified)
    :param command: Command to apply
    :param airport: Airport geometry
    :param all_aircraft: Current roster, read for collision forecasts
    :param rules: Rule thresholds
    :param canvas_size: (width, height) of the toroidal canvas
    :param game_speed: Global movement multiplier used by the forecasts
    :return: (updated copy of the aircraft, CommandOutcome)
    """
    rules = rules if rules is not None else Rules()
    updated = aircraft.copy()

    if not aircraft.active:
        _log("IGNORED", aircraft, f"{command.action.value} ignored, aircraft is {aircraft.status.value}")
        return updated, CommandOutcome.IGNORED

    match command.action:
        case CommandAction.TURN | CommandAction.SPEED if command.value is None:
            _log("IGNORED", aircraft, f"{command.action.value} without value")
            outcome = CommandOutcome.IGNORED
        case CommandAction.TURN:
            outcome = _turn(aircraft, updated, command, airport, all_aircraft, rules, canvas_size, game_speed)
        case CommandAction.SPEED:
            outcome = _speed(aircraft, updated, command, rules)
        case CommandAction.APPROACH:
            outcome = _approach(aircraft, updated, airport, rules)
        case CommandAction.HOLD:
            outcome = _hold(aircraft, updated, airport, rules, canvas_size, game_speed)
        case _:
            raise ValueError(f"Unknown command action: {command.action}")

    return updated, outcome


def apply_command(aircraft: Aircraft, command: Command, airport: Airport, all_aircraft, rules: Rules = None,
                  canvas_size=(800, 600), game_speed=1.0):
    """Returns the aircraft as it is after the command; see :func:`resolve_command`."""
    updated, _ = resolve_command(aircraft, command, airport, all_aircraft, rules, canvas_size, game_speed)
    return updated

