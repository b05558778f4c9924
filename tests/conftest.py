import pytest

from aerodrome.atc.model import Aircraft, AircraftStatus, Airport, World
from aerodrome.atc.params import Rules

CANVAS = (800, 600)


@pytest.fixture
def rules():
    return Rules()


@pytest.fixture
def canvas():
    return CANVAS


@pytest.fixture
def airport():
    # runway (500, 300) -> (700, 300), approach corridor from x=200 to x=500
    return Airport.for_canvas(*CANVAS)


@pytest.fixture
def short_airport():
    # runway (400, 300) -> (600, 300)
    return Airport((500, 300), (400, 300), (600, 300), 40)


@pytest.fixture
def make_aircraft():
    counter = iter(range(1, 10_000))

    def make(x, y, heading=0, speed=0.3, status=AircraftStatus.FLYING, aircraft_id=None):
        n = next(counter)
        return Aircraft(aircraft_id or f"plane-{n}", f"TS{100 + n}", "#60a5fa", x, y, heading, speed, status)

    return make


@pytest.fixture
def world():
    return World(*CANVAS)
