import pytest

from aerodrome.atc.model import AircraftStatus, World
from aerodrome.atc.params import Rules
from aerodrome.atc.stepper import approach_correction, can_land, collides, step_world

DT = 1 / 60


@pytest.fixture
def short_world(short_airport):
    return World(800, 600, airport=short_airport)


def test_aligned_slow_approach_lands_and_leaves_roster(short_world, make_aircraft):
    aircraft = make_aircraft(450, 300, heading=0, speed=0.2, status=AircraftStatus.APPROACHING)
    short_world.aircraft.append(aircraft)

    report = step_world(short_world, DT, Rules(), game_speed=0.5)

    assert report.landed == [aircraft]
    assert aircraft.status == AircraftStatus.LANDED
    assert aircraft.speed == 0
    assert short_world.aircraft == []
    assert short_world.landings == 1
    assert short_world.collisions == 0


@pytest.mark.parametrize("heading, speed", [(90, 0.3), (0, 0.6)])
def test_misaligned_or_fast_approach_does_not_land(short_world, make_aircraft, heading, speed):
    aircraft = make_aircraft(450, 300, heading=heading, speed=speed, status=AircraftStatus.APPROACHING)
    short_world.aircraft.append(aircraft)

    report = step_world(short_world, DT)

    assert not report
    assert aircraft.status == AircraftStatus.APPROACHING
    assert short_world.landings == 0
    assert short_world.aircraft == [aircraft]


def test_close_pair_crashes_together(short_world, make_aircraft):
    a = make_aircraft(100, 100)
    b = make_aircraft(120, 100)
    short_world.aircraft.extend([a, b])

    report = step_world(short_world, DT)

    assert report.collisions == [(a, b)]
    assert set(report.crashed) == {a, b}
    assert a.status == b.status == AircraftStatus.CRASHED
    assert a.speed == b.speed == 0
    assert short_world.collisions == 1
    # crashed aircraft stay in the roster
    assert short_world.aircraft == [a, b]


def test_collision_across_canvas_edge(short_world, make_aircraft):
    a = make_aircraft(2, 100, heading=90)
    b = make_aircraft(795, 100, heading=90)
    short_world.aircraft.extend([a, b])

    step_world(short_world, DT)

    assert a.status == b.status == AircraftStatus.CRASHED


def test_flying_aircraft_over_airport_crashes(short_world, make_aircraft):
    intruder = make_aircraft(450, 300, heading=0, speed=0.3)
    short_world.aircraft.append(intruder)

    report = step_world(short_world, DT)

    assert report.incursions == [intruder]
    assert intruder.status == AircraftStatus.CRASHED
    assert short_world.collisions == 1


def test_cleared_aircraft_may_enter_airport_zone(short_world, make_aircraft):
    cleared = make_aircraft(450, 300, heading=0, speed=0.6, status=AircraftStatus.APPROACHING)
    short_world.aircraft.append(cleared)

    step_world(short_world, DT)

    assert cleared.status == AircraftStatus.APPROACHING
    assert short_world.collisions == 0


def test_paused_world_is_left_untouched(short_world, make_aircraft):
    aircraft = make_aircraft(100, 100, heading=0, speed=0.5)
    short_world.aircraft.append(aircraft)
    short_world.is_paused = True

    report = step_world(short_world, DT)

    assert not report
    assert aircraft.position == (100, 100)
    assert short_world.game_time == 0


def test_positions_wrap_around_the_canvas(short_world, make_aircraft):
    aircraft = make_aircraft(799.9, 100, heading=0, speed=0.3)
    short_world.aircraft.append(aircraft)

    step_world(short_world, DT)

    assert aircraft.x == pytest.approx(0.2)
    assert aircraft.y == pytest.approx(100)


def test_movement_scales_with_dt_and_game_speed(short_world, make_aircraft):
    aircraft = make_aircraft(100, 100, heading=90, speed=0.5)
    short_world.aircraft.append(aircraft)

    step_world(short_world, 0.5, game_speed=2.0)

    # 0.5 per frame * 30 frames * 2.0
    assert aircraft.y == pytest.approx(130)
    assert aircraft.x == pytest.approx(100)


def test_terminal_aircraft_do_not_move(short_world, make_aircraft):
    wreck = make_aircraft(100, 100, speed=0, status=AircraftStatus.CRASHED)
    short_world.aircraft.append(wreck)

    step_world(short_world, 1.0)

    assert wreck.position == (100, 100)
    assert short_world.aircraft == [wreck]


def test_game_time_advances(short_world):
    step_world(short_world, 0.25)
    step_world(short_world, 0.25)
    assert short_world.game_time == pytest.approx(0.5)


def test_approach_correction_is_rate_limited(short_world, make_aircraft, rules):
    aircraft = make_aircraft(300, 320, heading=90, speed=0.3, status=AircraftStatus.APPROACHING)
    short_world.aircraft.append(aircraft)

    assert approach_correction(aircraft, short_world.airport, rules) == pytest.approx(-2)
    step_world(short_world, DT, rules)
    assert aircraft.heading == pytest.approx(88)


def test_no_correction_on_centreline(short_airport, make_aircraft, rules):
    aircraft = make_aircraft(300, 300, heading=0, status=AircraftStatus.APPROACHING)
    assert approach_correction(aircraft, short_airport, rules) == pytest.approx(0)


def test_can_land_requires_clearance(short_airport, make_aircraft, rules):
    flying = make_aircraft(450, 300, heading=0, speed=0.2)
    assert not can_land(flying, short_airport, rules)

    # the landing extension runs past the runway end
    overshoot = make_aircraft(650, 300, heading=0, speed=0.2, status=AircraftStatus.APPROACHING)
    assert can_land(overshoot, short_airport, rules)

    short = make_aircraft(380, 300, heading=0, speed=0.2, status=AircraftStatus.APPROACHING)
    assert not can_land(short, short_airport, rules)


def test_collides_is_symmetric_and_skips_terminal(make_aircraft, rules, canvas):
    a = make_aircraft(100, 100)
    b = make_aircraft(110, 100)
    far = make_aircraft(400, 100)
    wreck = make_aircraft(105, 100, status=AircraftStatus.CRASHED)

    assert collides(a, b, rules, canvas) and collides(b, a, rules, canvas)
    assert not collides(a, far, rules, canvas)
    assert not collides(a, wreck, rules, canvas)
    assert not collides(wreck, a, rules, canvas)


def test_landing_at_runway_end(short_world, make_aircraft):
    aircraft = make_aircraft(600, 300, heading=0, speed=0.2, status=AircraftStatus.APPROACHING)
    short_world.aircraft.append(aircraft)

    report = step_world(short_world, DT, Rules(), game_speed=0.5)

    assert report.landed == [aircraft]
    assert aircraft.speed == 0
    assert short_world.landings == 1


def test_flying_aircraft_on_centreline_crashes(short_world, make_aircraft):
    aircraft = make_aircraft(500, 300, heading=0, speed=0.3)
    short_world.aircraft.append(aircraft)

    step_world(short_world, DT)

    assert aircraft.status == AircraftStatus.CRASHED
    assert short_world.collisions == 1


def test_two_flying_aircraft_twenty_apart_crash(world, make_aircraft):
    a = make_aircraft(300, 100, heading=90)
    b = make_aircraft(320, 100, heading=90)
    world.aircraft.extend([a, b])

    report = step_world(world, DT)

    assert len(report.collisions) == 1
    assert a.status == b.status == AircraftStatus.CRASHED
    assert world.collisions == 1
