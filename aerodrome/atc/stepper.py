# aerodrome-lite/aerodrome/atc/stepper.py
from typing import List, Tuple

from .geometry import (angle_difference, from_runway_local, heading_to, move_position, normalize_angle,
                       to_runway_local, wrap_position, wrapped_distance)
from .model import Aircraft, AircraftStatus, Airport, World
from .params import Rules, frames_for
from .zones import is_on_runway, is_over_airport

import logging
logger = logging.getLogger("aerodrome.stepper")
logger.setLevel(logging.INFO)


class StepReport:
    """What happened during one tick."""

    def __init__(self):
        self.collisions: List[Tuple[Aircraft, Aircraft]] = []
        self.incursions: List[Aircraft] = []
        self.landed: List[Aircraft] = []

    @property
    def crashed(self):
        crashed = [a for pair in self.collisions for a in pair]
        return crashed + self.incursions

    def __bool__(self):
        return bool(self.collisions or self.incursions or self.landed)

    def __repr__(self):
        return (f"StepReport(collisions={len(self.collisions)}, incursions={len(self.incursions)}, "
                f"landed={len(self.landed)})")


def approach_correction(aircraft: Aircraft, airport: Airport, rules: Rules):
    """
    Heading change that steers an approaching aircraft back onto the runway centreline.

    The aircraft aims at a point rules.approach_lookahead ahead of it on the
    centreline; the change is clamped to rules.approach_correction_rate.
    """
    angle = airport.runway_angle
    along, _ = to_runway_local(aircraft.position, airport.runway_start, angle)
    target = from_runway_local((max(along, 0.0) + rules.approach_lookahead, 0.0), airport.runway_start, angle)
    delta = angle_difference(aircraft.heading, heading_to(aircraft.position, target))
    return max(-rules.approach_correction_rate, min(rules.approach_correction_rate, delta))


def collides(aircraft1: Aircraft, aircraft2: Aircraft, rules: Rules, canvas_size):
    """True if two active aircraft are closer than the collision distance. Symmetric."""
    if not (aircraft1.active and aircraft2.active):
        return False
    return wrapped_distance(aircraft1.position, aircraft2.position, *canvas_size) < rules.collision_distance


def can_land(aircraft: Aircraft, airport: Airport, rules: Rules):
    if aircraft.status != AircraftStatus.APPROACHING:
        return False
    if not is_on_runway(aircraft.position, airport.runway_start, airport.runway_end, airport.runway_width,
                        include_landing_extension=True):
        return False
    heading_error = abs(angle_difference(aircraft.heading, airport.runway_heading))
    return heading_error < rules.landing_heading_tolerance and aircraft.speed < rules.landing_speed


def move_aircraft(world: World, dt, rules: Rules, game_speed=1.0):
    frames = frames_for(dt)
    for aircraft in world.aircraft:
        if not aircraft.active:
            continue
        if aircraft.status == AircraftStatus.APPROACHING:
            aircraft.heading = normalize_angle(aircraft.heading + approach_correction(aircraft, world.airport, rules))
        position = move_position(aircraft.position, aircraft.heading, aircraft.speed * frames * game_speed)
        aircraft.position = wrap_position(position, world.canvas_width, world.canvas_height)


def step_world(world: World, dt, rules: Rules = None, game_speed=1.0):
    """
    Advances the world by one tick of dt seconds.

    1. approaching aircraft steer toward the centreline, then every active aircraft moves
    2. pairs closer than the collision distance crash together
    3. flying aircraft inside the airport zone crash (unauthorised incursion)
    4. aligned, slow, approaching aircraft on the runway land
    5. landings are counted and landed aircraft leave the roster
    6. game time advances

    Nothing happens while the world is paused.

    :param world: Session state, modified in place
    :param dt: Elapsed time in seconds
    :param rules: Rule thresholds
    :param game_speed: Global movement multiplier
    :return: StepReport of the tick
    """
    rules = rules if rules is not None else Rules()
    report = StepReport()
    if world.is_paused:
        return report

    move_aircraft(world, dt, rules, game_speed)

    roster = world.aircraft
    for i in range(len(roster)):
        for j in range(i + 1, len(roster)):
            a, b = roster[i], roster[j]
            if collides(a, b, rules, world.canvas_size):
                a.freeze(AircraftStatus.CRASHED)
                b.freeze(AircraftStatus.CRASHED)
                world.collisions += 1
                report.collisions.append((a, b))
                logger.info(f"Collision: {a.callsign} and {b.callsign} at ({a.x:.0f}, {a.y:.0f})")

    airport = world.airport
    for aircraft in roster:
        if aircraft.status == AircraftStatus.FLYING and is_over_airport(
                aircraft.position, airport.runway_start, airport.runway_end, airport.runway_width):
            aircraft.freeze(AircraftStatus.CRASHED)
            world.collisions += 1
            report.incursions.append(aircraft)
            logger.info(f"Airport incursion: {aircraft.callsign} entered the airport zone without clearance")

    for aircraft in roster:
        if can_land(aircraft, airport, rules):
            aircraft.freeze(AircraftStatus.LANDED)
            report.landed.append(aircraft)
            logger.info(f"Landed: {aircraft.callsign}")

    world.landings += len(report.landed)
    world.aircraft = [a for a in roster if a.status != AircraftStatus.LANDED]
    world.game_time += dt
    return report
