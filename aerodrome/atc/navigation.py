# aerodrome-lite/aerodrome/atc/navigation.py
"""
Read-only situation summaries for a controlling policy or an observer:
per-aircraft navigation data, pairwise collision risks, landing order.
Nothing here modifies the roster.
"""
from enum import Enum
from typing import List

from .forecast import detect_tail_collision
from .geometry import angle_difference, distance, heading_to, predict_position, wrap_position, wrapped_distance
from .model import Aircraft, AircraftStatus, Airport
from .params import Rules, frames_for
from .zones import airport_zone_polygon, approach_zone_entry, distance_to_zone, is_in_approach_zone, is_on_runway

# Seconds the risk assessment looks ahead, one decision interval of the policy
RISK_HORIZON = 5.0


class NavigationData:
    def __init__(self, distance_to_runway, heading_to_runway_center, on_runway, aligned_for_landing,
                 heading_to_approach_zone, distance_to_approach_zone, in_approach_zone, distance_to_airport_zone=0.0):
        self.distance_to_runway = distance_to_runway
        self.heading_to_runway_center = heading_to_runway_center
        self.on_runway = on_runway
        self.aligned_for_landing = aligned_for_landing
        self.heading_to_approach_zone = heading_to_approach_zone
        self.distance_to_approach_zone = distance_to_approach_zone
        self.in_approach_zone = in_approach_zone
        self.distance_to_airport_zone = distance_to_airport_zone

    def to_dict(self):
        return dict(self.__dict__)


def calculate_navigation_data(aircraft: Aircraft, airport: Airport, rules: Rules = None):
    """
    Where an aircraft stands relative to the runway and the approach corridor.

    Distances and headings are rounded to whole units; the approach-zone figures
    point at the corridor entry point on the extended centreline.
    """
    rules = rules if rules is not None else Rules()
    center = airport.runway_center
    entry = approach_zone_entry(airport.runway_start, airport.runway_end)
    heading_error = abs(angle_difference(aircraft.heading, airport.runway_heading))
    return NavigationData(
        distance_to_runway=round(distance(aircraft.position, center)),
        heading_to_runway_center=round(heading_to(aircraft.position, center)) % 360,
        on_runway=is_on_runway(aircraft.position, airport.runway_start, airport.runway_end, airport.runway_width),
        aligned_for_landing=heading_error < rules.landing_heading_tolerance,
        heading_to_approach_zone=round(heading_to(aircraft.position, entry)) % 360,
        distance_to_approach_zone=round(distance(aircraft.position, entry)),
        in_approach_zone=is_in_approach_zone(aircraft.position, airport.runway_start, airport.runway_end,
                                             airport.runway_width),
        distance_to_airport_zone=round(distance_to_zone(
            aircraft.position, airport_zone_polygon(airport.runway_start, airport.runway_end, airport.runway_width))),
    )


class RiskLevel(Enum):
    HIGH = 0
    MEDIUM = 1
    LOW = 2


class CollisionRisk:
    def __init__(self, aircraft1, aircraft2, current_distance, predicted_distance, level: RiskLevel,
                 kind="converging", catch_up_seconds=None):
        self.aircraft1 = aircraft1
        self.aircraft2 = aircraft2
        self.current_distance = current_distance
        self.predicted_distance = predicted_distance
        self.level = level
        self.kind = kind
        self.catch_up_seconds = catch_up_seconds

    def to_dict(self):
        return {
            "plane1": self.aircraft1,
            "plane2": self.aircraft2,
            "current_distance": self.current_distance,
            "predicted_distance": self.predicted_distance,
            "risk_level": self.level.name,
            "kind": self.kind,
            "catch_up_seconds": self.catch_up_seconds,
        }

    def __repr__(self):
        return (f"CollisionRisk({self.aircraft1}/{self.aircraft2} {self.level.name} {self.kind} "
                f"now={self.current_distance} predicted={self.predicted_distance})")


def risk_level(current_distance, predicted_distance, rules: Rules):
    """HIGH below the collision distance ahead or the prediction distance now, MEDIUM at twice the margin."""
    if predicted_distance < rules.collision_distance or current_distance < rules.prediction_distance:
        return RiskLevel.HIGH
    if predicted_distance < 2 * rules.collision_distance or current_distance < rules.prediction_distance + 30:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def assess_collision_risks(aircraft: List[Aircraft], rules: Rules = None, canvas_size=None, game_speed=1.0,
                           seconds_ahead=RISK_HORIZON):
    """
    Rates every pair of active aircraft by their distance now and after seconds_ahead
    on their current headings. A faster aircraft closing in from behind on a similar
    track is reported as a "tail" risk even when both distances look comfortable.

    :param canvas_size: (width, height); distances wrap around the canvas when given
    :return: Non-LOW risks, HIGH first
    """
    rules = rules if rules is not None else Rules()
    active = [a for a in aircraft if a.active]
    frames = frames_for(seconds_ahead)

    def separation(p1, p2):
        if canvas_size is None:
            return distance(p1, p2)
        return wrapped_distance(p1, p2, *canvas_size)

    def ahead(a):
        position = predict_position(a.position, a.heading, a.speed * game_speed, frames)
        return wrap_position(position, *canvas_size) if canvas_size is not None else position

    risks = []
    for i in range(len(active)):
        for j in range(i + 1, len(active)):
            a1, a2 = active[i], active[j]
            current = separation(a1.position, a2.position)
            predicted = separation(ahead(a1), ahead(a2))
            level = risk_level(current, predicted, rules)
            if level != RiskLevel.LOW:
                risks.append(CollisionRisk(a1.id, a2.id, round(current), round(predicted), level))
                continue
            is_risk, faster, slower, seconds = detect_tail_collision(a1, a2)
            if is_risk:
                risks.append(CollisionRisk(faster.id, slower.id, round(current), round(predicted),
                                           RiskLevel.MEDIUM, "tail", seconds))

    return sorted(risks, key=lambda r: r.level.value)


class LandingQueueEntry:
    def __init__(self, aircraft_id, callsign, distance_to_runway, is_on_approach, is_in_approach_zone,
                 priority=0):
        self.aircraft_id = aircraft_id
        self.callsign = callsign
        self.distance_to_runway = distance_to_runway
        self.is_on_approach = is_on_approach
        self.is_in_approach_zone = is_in_approach_zone
        self.priority = priority

    def to_dict(self):
        return dict(self.__dict__)

    def __repr__(self):
        return f"#{self.priority} {self.callsign} ({self.distance_to_runway})"


def build_landing_queue(aircraft: List[Aircraft], airport: Airport, rules: Rules = None):
    """
    Orders the active aircraft for landing: cleared aircraft first, then those
    inside the approach corridor, then the rest by distance to the runway.
    Priorities start at 1.
    """
    entries = []
    for a in aircraft:
        if not a.active:
            continue
        nav = calculate_navigation_data(a, airport, rules)
        entries.append(LandingQueueEntry(a.id, a.callsign, nav.distance_to_runway,
                                         a.status == AircraftStatus.APPROACHING, nav.in_approach_zone))

    entries.sort(key=lambda e: (not e.is_on_approach, not e.is_in_approach_zone, e.distance_to_runway))
    for priority, entry in enumerate(entries, start=1):
        entry.priority = priority
    return entries


def build_coordination_note(landing_queue: List[LandingQueueEntry]):
    """One-line instruction for the whole airspace, derived from the landing queue."""
    approaching = [e for e in landing_queue if e.is_on_approach]
    in_zone = [e for e in landing_queue if e.is_in_approach_zone and not e.is_on_approach]

    if approaching:
        names = ", ".join(e.callsign for e in approaching)
        return f"{names} is on FINAL APPROACH. All other aircraft MUST hold and maintain separation."
    if in_zone:
        return f"{landing_queue[0].callsign} has landing priority. Other aircraft should hold or slow down."
    if landing_queue:
        return f"{landing_queue[0].callsign} is closest to runway and has landing priority."
    return "No aircraft in queue."
