import math

import pytest

from aerodrome.atc.forecast import (detect_tail_collision, find_heading_away_from_airport, find_safe_heading,
                                    predict_airport_zone_entry, predict_collision)
from aerodrome.atc.geometry import heading_to
from aerodrome.atc.model import AircraftStatus


def test_head_on_traffic_is_predicted(make_aircraft, rules, canvas):
    own = make_aircraft(100, 100, heading=0, speed=0.5)
    other = make_aircraft(300, 100, heading=180, speed=0.5)
    prediction = predict_collision(own, 0, [own, other], rules, canvas)
    assert prediction.will_collide
    assert prediction.other is other
    # 150 units of closing distance at 1 unit per frame
    assert prediction.time_to_collision == pytest.approx(2.5, abs=0.1)
    assert prediction.collision_point[0] == pytest.approx(175, abs=3)


def test_no_prediction_without_traffic(make_aircraft, rules, canvas):
    own = make_aircraft(100, 100)
    assert not predict_collision(own, 0, [own], rules, canvas)


def test_terminal_aircraft_are_ignored(make_aircraft, rules, canvas):
    own = make_aircraft(100, 100, heading=0, speed=0.5)
    wreck = make_aircraft(150, 100, speed=0, status=AircraftStatus.CRASHED)
    assert not predict_collision(own, 0, [own, wreck], rules, canvas)


def test_parallel_traffic_is_clear(make_aircraft, rules, canvas):
    own = make_aircraft(100, 100, heading=0, speed=0.4)
    other = make_aircraft(100, 200, heading=0, speed=0.4)
    assert not predict_collision(own, 0, [own, other], rules, canvas)


def test_prediction_wraps_around_the_canvas(make_aircraft, rules, canvas):
    own = make_aircraft(780, 100, heading=0, speed=0.5)
    other = make_aircraft(60, 100, heading=0, speed=0)
    prediction = predict_collision(own, 0, [own, other], rules, canvas)
    assert prediction.will_collide
    assert prediction.other is other


def test_game_speed_shortens_reach(make_aircraft, rules, canvas):
    own = make_aircraft(100, 100, heading=0, speed=0.5)
    other = make_aircraft(380, 100, heading=0, speed=0)
    # 240 units in 8 s at full speed, 120 at half speed
    assert predict_collision(own, 0, [own, other], rules, canvas, game_speed=1.0)
    assert not predict_collision(own, 0, [own, other], rules, canvas, game_speed=0.5)


def test_find_safe_heading_tries_offsets_in_order(make_aircraft, rules, canvas):
    own = make_aircraft(100, 100, heading=0, speed=0.5)
    blocker = make_aircraft(100, 180, speed=0)
    # 90 and its +-30 neighbours pass within 50 of the blocker, +60 does not
    assert find_safe_heading(own, 90, [own, blocker], rules, canvas) == pytest.approx(150)


def test_find_safe_heading_gives_up_when_surrounded(make_aircraft, rules, canvas):
    own = make_aircraft(200, 150, heading=0, speed=0.3)
    ring = [make_aircraft(200 + 40 * math.cos(math.radians(a)), 150 + 40 * math.sin(math.radians(a)), speed=0)
            for a in range(0, 360, 45)]
    assert find_safe_heading(own, 0, [own] + ring, rules, canvas) is None


def test_airport_zone_entry(make_aircraft, rules, airport):
    inbound = make_aircraft(400, 300, heading=0, speed=0.5)
    prediction = predict_airport_zone_entry(inbound, 0, airport, rules, seconds_ahead=6)
    assert prediction.will_enter
    # zone starts 70 units ahead
    assert prediction.frames_until_entry == pytest.approx(140, abs=5)
    assert prediction.time_to_entry == pytest.approx(140 / 60, abs=0.1)

    assert not predict_airport_zone_entry(inbound, 180, airport, rules, seconds_ahead=6)


def test_heading_away_from_airport(make_aircraft, rules, airport):
    aircraft = make_aircraft(550, 150, heading=90, speed=0.5)
    away = find_heading_away_from_airport(aircraft, airport, rules)
    assert away == pytest.approx(heading_to(airport.runway_center, aircraft.position))


def test_heading_away_falls_back_to_holding_heading_over_the_runway(make_aircraft, rules, airport):
    aircraft = make_aircraft(600, 300, heading=0, speed=0.5)
    assert find_heading_away_from_airport(aircraft, airport, rules) == airport.holding_heading


def test_tail_collision(make_aircraft):
    fast = make_aircraft(100, 100, heading=0, speed=0.6)
    slow = make_aircraft(200, 100, heading=5, speed=0.3)
    is_risk, faster, slower, seconds = detect_tail_collision(slow, fast)
    assert is_risk
    assert faster is fast
    assert slower is slow
    assert seconds == round(100 / 0.3 / 60)


def test_no_tail_collision_when_tracks_differ(make_aircraft):
    fast = make_aircraft(100, 100, heading=0, speed=0.6)
    assert not detect_tail_collision(fast, make_aircraft(200, 100, heading=180, speed=0.3))[0]
    assert not detect_tail_collision(fast, make_aircraft(200, 250, heading=0, speed=0.3))[0]
    assert not detect_tail_collision(fast, make_aircraft(200, 100, heading=0, speed=0.7))[0]
