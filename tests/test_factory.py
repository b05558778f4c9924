import random
import re

import pytest

from aerodrome.atc.factory import CALLSIGN_PREFIXES, COLORS, AircraftFactory
from aerodrome.atc.geometry import distance
from aerodrome.atc.model import AircraftStatus, World
from aerodrome.atc.params import Rules


def test_callsign_format():
    factory = AircraftFactory(rng=random.Random(1))
    for _ in range(50):
        callsign = factory.generate_callsign()
        assert re.fullmatch(r"[A-Z]{2}\d{3}", callsign)
        assert callsign[:2] in CALLSIGN_PREFIXES
        assert 100 <= int(callsign[2:]) <= 999


def test_spawn_positions_on_top_bottom_or_left_edge(airport):
    factory = AircraftFactory(rng=random.Random(7))
    for counter in range(1, 60):
        aircraft = factory.create_aircraft(800, 600, airport=airport, counter=counter)
        x, y = aircraft.position
        if x == 50:
            assert 50 <= y <= 550
        else:
            assert y in (50, 550)
            assert 50 <= x <= 800 * 0.4


def test_new_aircraft_properties(airport):
    factory = AircraftFactory(rng=random.Random(3))
    aircraft = factory.create_aircraft(800, 600, airport=airport, counter=4)
    assert aircraft.id == "plane-4"
    assert aircraft.color == COLORS[4 % len(COLORS)]
    assert aircraft.status == AircraftStatus.FLYING
    assert aircraft.heading == airport.runway_heading
    assert 0.3 <= aircraft.speed <= 0.6


def test_spawn_keeps_separation_when_possible(airport, make_aircraft):
    factory = AircraftFactory(rng=random.Random(11))
    existing = [make_aircraft(50, 300)]
    for counter in range(1, 30):
        aircraft = factory.create_aircraft(800, 600, existing, airport, counter)
        assert distance(aircraft.position, airport.position) >= 200


def test_crowded_spawn_still_returns_an_aircraft(airport, make_aircraft):
    crowd = []
    for x in range(50, 330, 40):
        crowd.append(make_aircraft(x, 50))
        crowd.append(make_aircraft(x, 550))
    for y in range(50, 560, 40):
        crowd.append(make_aircraft(50, y))

    factory = AircraftFactory(rng=random.Random(5))
    aircraft = factory.create_aircraft(800, 600, crowd, airport, counter=99)
    assert aircraft is not None
    assert aircraft.id == "plane-99"
    assert aircraft.status == AircraftStatus.FLYING


def test_terminal_aircraft_do_not_block_spawning(airport, make_aircraft):
    wreck = make_aircraft(50, 300, speed=0, status=AircraftStatus.CRASHED)
    factory = AircraftFactory(Rules(spawn_attempts=1), rng=random.Random(2))
    assert factory._clearance((50, 320), [wreck], None) == float('inf')


def test_seeded_factories_agree(airport):
    a = AircraftFactory(rng=random.Random())
    b = AircraftFactory(rng=random.Random())
    a.seed(42)
    b.seed(42)
    first = a.create_aircraft(800, 600, airport=airport)
    second = b.create_aircraft(800, 600, airport=airport)
    assert first.to_dict() == second.to_dict()


def test_spawn_advances_world_counter():
    world = World(800, 600)
    factory = AircraftFactory(rng=random.Random(0))
    first = factory.spawn(world)
    second = factory.spawn(world)
    assert world.aircraft_counter == 2
    assert [first.id, second.id] == ["plane-1", "plane-2"]
    assert world.aircraft == [first, second]
