import pytest

from aerodrome.atc.zones import (airport_zone_polygon, approach_zone_entry, approach_zone_polygon, distance_to_zone,
                                 is_in_approach_zone, is_on_runway, is_over_airport, runway_polygon)

START = (400, 300)
END = (600, 300)
WIDTH = 40


@pytest.mark.parametrize("position, expected", [
    ((500, 300), True),
    ((400, 300), True),
    ((500, 319), True),
    ((500, 321), False),
    ((399, 300), False),
    ((650, 300), False),
])
def test_is_on_runway(position, expected):
    assert is_on_runway(position, START, END, WIDTH) is expected


def test_landing_extension_accepts_small_overshoot():
    assert not is_on_runway((650, 300), START, END, WIDTH)
    assert is_on_runway((650, 300), START, END, WIDTH, include_landing_extension=True)
    assert is_on_runway((700, 300), START, END, WIDTH, include_landing_extension=True)
    assert not is_on_runway((701, 300), START, END, WIDTH, include_landing_extension=True)


@pytest.mark.parametrize("position, expected", [
    ((500, 300), True),
    ((380, 300), True),
    ((365, 300), False),
    ((629, 300), True),
    ((500, 349), True),
    ((500, 351), False),
])
def test_is_over_airport(position, expected):
    assert is_over_airport(position, START, END, WIDTH) is expected


def test_approach_zone_entry_lies_behind_runway_start():
    assert approach_zone_entry(START, END) == pytest.approx((100, 300))


@pytest.mark.parametrize("position, expected", [
    ((250, 300), True),
    ((100, 300), True),
    ((90, 300), False),
    ((250, 339), True),
    ((250, 341), False),
    ((450, 300), False),
    ((700, 300), False),
])
def test_is_in_approach_zone(position, expected):
    assert is_in_approach_zone(position, START, END, WIDTH) is expected


def test_approach_zone_follows_runway_direction():
    # runway pointing down the canvas: corridor lies above the start
    start, end = (400, 200), (400, 400)
    assert is_in_approach_zone((400, 100), start, end, WIDTH)
    assert not is_in_approach_zone((400, 450), start, end, WIDTH)


def test_polygons_agree_with_containment_tests():
    assert airport_zone_polygon(START, END, WIDTH).bounds == pytest.approx((370, 250, 630, 350))
    assert runway_polygon(START, END, WIDTH).bounds == pytest.approx((400, 280, 600, 320))
    assert runway_polygon(START, END, WIDTH, include_landing_extension=True).bounds == pytest.approx(
        (400, 280, 700, 320))
    assert approach_zone_polygon(START, END, WIDTH).bounds == pytest.approx((100, 260, 400, 340))


def test_distance_to_zone():
    zone = airport_zone_polygon(START, END, WIDTH)
    assert distance_to_zone((500, 300), zone) == 0
    assert distance_to_zone((300, 300), zone) == pytest.approx(70)
