# aerodrome-lite/aerodrome/atc/forecast.py
"""
Predictive safety forecaster.

A candidate heading is dead-reckoned forward in fixed samples (every
``rules.sample_interval_frames`` frames, 1/12 s at the reference frame rate)
while every other active aircraft is assumed to keep its current heading and
speed. The first sample that breaks separation, or that lies inside the
airport zone, is reported.
"""
import math

import numpy as np

from .geometry import (angle_difference, deg_to_rad, heading_to, normalize_angle,
                       wrap_position)
from .model import Aircraft, Airport
from .params import Rules, FRAMES_PER_SECOND
from .zones import is_over_airport

import logging
logger = logging.getLogger("aerodrome.forecast")
logger.setLevel(logging.INFO)

# Horizon used to double-check that the escape heading leaves the airport zone alone
ESCAPE_CHECK_SECONDS = 5


class CollisionPrediction:
    def __init__(self, will_collide, other: Aircraft = None, time_to_collision=None, collision_point=None):
        self.will_collide = will_collide
        self.other = other
        self.time_to_collision = time_to_collision
        self.collision_point = collision_point

    def __bool__(self):
        return self.will_collide

    def __repr__(self):
        if not self.will_collide:
            return "CollisionPrediction(clear)"
        return (f"CollisionPrediction(with={self.other.callsign}, eta={self.time_to_collision:.2f}s, "
                f"point=({self.collision_point[0]:.0f}, {self.collision_point[1]:.0f}))")


class ZonePrediction:
    def __init__(self, will_enter, frames_until_entry=None, entry_point=None):
        self.will_enter = will_enter
        self.frames_until_entry = frames_until_entry
        self.entry_point = entry_point

    @property
    def time_to_entry(self):
        if self.frames_until_entry is None:
            return None
        return self.frames_until_entry / FRAMES_PER_SECOND

    def __bool__(self):
        return self.will_enter

    def __repr__(self):
        if not self.will_enter:
            return "ZonePrediction(clear)"
        return f"ZonePrediction(frames={self.frames_until_entry}, point={self.entry_point})"


def _sample_frames(seconds, rules: Rules):
    total_frames = seconds * FRAMES_PER_SECOND
    return np.arange(rules.sample_interval_frames, total_frames + 1e-9, rules.sample_interval_frames,
                     dtype=float)


def _track(position, heading, speed, frames):
    """Positions along a straight track for an array of frame offsets, shape (n, 2)."""
    rad = deg_to_rad(heading)
    step = np.array([math.cos(rad), math.sin(rad)]) * speed
    return np.asarray(position, dtype=float) + frames[:, None] * step


def _wrapped_norm(delta, canvas_size):
    extent = np.asarray(canvas_size, dtype=float)
    d = np.fmod(delta, extent)
    d = np.where(np.abs(d) > extent / 2, d - np.sign(d) * extent, d)
    return np.hypot(d[..., 0], d[..., 1])


def predict_collision(aircraft: Aircraft, new_heading, all_aircraft, rules: Rules, canvas_size,
                      game_speed=1.0, seconds_ahead=None):
    """
    Forecasts whether flying new_heading would bring the aircraft too close to another one.

    :param aircraft: Aircraft whose heading is being validated
    :param new_heading: Candidate heading in degrees
    :param all_aircraft: Whole roster; the aircraft itself and terminal ones are skipped
    :param rules: Provides the safety threshold, sampling interval and default horizon
    :param canvas_size: (width, height) used for wrapped distances
    :param game_speed: Global movement multiplier
    :param seconds_ahead: Horizon, rules.prediction_horizon when omitted
    :return: CollisionPrediction for the earliest sample below rules.prediction_distance
    """
    if seconds_ahead is None:
        seconds_ahead = rules.prediction_horizon
    others = [o for o in all_aircraft if o.id != aircraft.id and o.active]
    if not others:
        return CollisionPrediction(False)

    frames = _sample_frames(seconds_ahead, rules)
    own = _track(aircraft.position, new_heading, aircraft.speed * game_speed, frames)
    # shape (n_samples, n_others, 2)
    tracks = np.stack([_track(o.position, o.heading, o.speed * game_speed, frames) for o in others], axis=1)
    dists = _wrapped_norm(tracks - own[:, None, :], canvas_size)

    hits = dists < rules.prediction_distance
    if not hits.any():
        return CollisionPrediction(False)

    sample_idx = int(np.argmax(hits.any(axis=1)))
    other_idx = int(np.argmax(hits[sample_idx]))
    point = (float(own[sample_idx, 0]), float(own[sample_idx, 1]))
    return CollisionPrediction(True, others[other_idx], frames[sample_idx] / FRAMES_PER_SECOND, point)


def find_safe_heading(aircraft: Aircraft, requested_heading, all_aircraft, rules: Rules, canvas_size,
                      game_speed=1.0):
    """
    Tries rules.avoidance_offsets around the requested heading in order.

    :return: The first heading without a predicted collision, or None if every offset is unsafe
    """
    for adjustment in rules.avoidance_offsets:
        alternative = normalize_angle(requested_heading + adjustment)
        prediction = predict_collision(aircraft, alternative, all_aircraft, rules, canvas_size, game_speed)
        if not prediction.will_collide:
            return alternative
    return None


def predict_airport_zone_entry(aircraft: Aircraft, heading, airport: Airport, rules: Rules,
                               seconds_ahead=10, game_speed=1.0, canvas_size=None):
    """
    Forecasts whether holding a heading carries the aircraft over the airport zone.

    :param canvas_size: When given, sample positions are wrapped onto the canvas first
    :return: ZonePrediction for the earliest sample inside the zone
    """
    frames = _sample_frames(seconds_ahead, rules)
    track = _track(aircraft.position, heading, aircraft.speed * game_speed, frames)
    for frame, (sim_x, sim_y) in zip(frames, track):
        point = (float(sim_x), float(sim_y))
        if canvas_size is not None:
            point = wrap_position(point, *canvas_size)
        if is_over_airport(point, airport.runway_start, airport.runway_end, airport.runway_width):
            return ZonePrediction(True, int(frame), point)
    return ZonePrediction(False)


def find_heading_away_from_airport(aircraft: Aircraft, airport: Airport, rules: Rules, game_speed=1.0):
    """
    Heading pointing straight away from the runway centre.

    If even that heading is forecast to cross the airport zone (the aircraft is
    already on top of it), the airport's holding heading is returned instead.
    """
    away_heading = heading_to(airport.runway_center, aircraft.position)
    prediction = predict_airport_zone_entry(aircraft, away_heading, airport, rules,
                                            ESCAPE_CHECK_SECONDS, game_speed)
    if not prediction.will_enter:
        return away_heading
    return airport.holding_heading


def detect_tail_collision(aircraft1: Aircraft, aircraft2: Aircraft, heading_tolerance=45,
                          lateral_limit=60, catch_up_frames=600):
    """
    Detects a faster aircraft catching up with a slower one on a similar track.

    :return: (is_risk, faster, slower, catch_up_seconds)
    """
    if abs(angle_difference(aircraft1.heading, aircraft2.heading)) > heading_tolerance:
        return False, None, None, 0

    # project both positions onto the mean track to see who is ahead
    mean_heading = aircraft1.heading + angle_difference(aircraft1.heading, aircraft2.heading) / 2
    rad = deg_to_rad(mean_heading)
    proj1 = aircraft1.x * math.cos(rad) + aircraft1.y * math.sin(rad)
    proj2 = aircraft2.x * math.cos(rad) + aircraft2.y * math.sin(rad)
    ahead, behind = (aircraft1, aircraft2) if proj1 > proj2 else (aircraft2, aircraft1)

    if behind.speed <= ahead.speed:
        return False, None, None, 0

    perp = deg_to_rad(mean_heading + 90)
    lateral = abs((aircraft2.x - aircraft1.x) * math.cos(perp) + (aircraft2.y - aircraft1.y) * math.sin(perp))
    if lateral > lateral_limit:
        return False, None, None, 0

    frames = abs(proj1 - proj2) / (behind.speed - ahead.speed)
    if frames < catch_up_frames:
        return True, behind, ahead, round(frames / FRAMES_PER_SECOND)
    return False, None, None, 0

