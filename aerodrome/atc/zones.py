# aerodrome-lite/aerodrome/atc/zones.py
"""
Zone classifier.

All three zones are rectangles expressed in the runway-local frame
(x along the runway from its start, y across it), so the containment tests and
the shapely outlines below always agree with each other.
"""
import shapely.geometry as geom

from .geometry import distance, runway_angle, to_runway_local, from_runway_local

# Length of the approach corridor measured back from the runway start
APPROACH_ZONE_LENGTH = 300
# Overshoot tolerated past the runway end when checking for a landing
LANDING_ZONE_EXTENSION = 100
# Padding added around the runway to form the airport exclusion zone
AIRPORT_ZONE_PADDING = 30
# Corridor width as a multiple of the runway width
APPROACH_WIDTH_FACTOR = 2.0


def _local(position, runway_start, runway_end):
    angle = runway_angle(runway_start, runway_end)
    return to_runway_local(position, runway_start, angle)


def is_on_runway(position, runway_start, runway_end, runway_width, include_landing_extension=False):
    """
    Checks whether a position lies on the runway rectangle.

    :param include_landing_extension: Stretch the rectangle past the runway end by
        LANDING_ZONE_EXTENSION so aircraft that overshoot slightly still count
    """
    runway_length = distance(runway_start, runway_end)
    local_x, local_y = _local(position, runway_start, runway_end)
    max_x = runway_length + LANDING_ZONE_EXTENSION if include_landing_extension else runway_length
    return 0 <= local_x <= max_x and abs(local_y) <= runway_width / 2


def is_over_airport(position, runway_start, runway_end, runway_width):
    """Runway rectangle padded on every side; flying aircraft may not be inside it."""
    runway_length = distance(runway_start, runway_end)
    local_x, local_y = _local(position, runway_start, runway_end)
    zone_half_width = runway_width / 2 + AIRPORT_ZONE_PADDING
    return (-AIRPORT_ZONE_PADDING <= local_x <= runway_length + AIRPORT_ZONE_PADDING
            and abs(local_y) <= zone_half_width)


def approach_zone_entry(runway_start, runway_end):
    """Point APPROACH_ZONE_LENGTH behind the runway start, on the extended centreline."""
    angle = runway_angle(runway_start, runway_end)
    return from_runway_local((-APPROACH_ZONE_LENGTH, 0.0), runway_start, angle)


def is_in_approach_zone(position, runway_start, runway_end, runway_width):
    """
    Checks whether a position is inside the approach corridor.

    The corridor runs from the approach entry point up to the runway start and
    is wider than the runway to absorb small alignment errors.
    """
    angle = runway_angle(runway_start, runway_end)
    entry = approach_zone_entry(runway_start, runway_end)
    local_x, local_y = to_runway_local(position, entry, angle)
    approach_width = runway_width * APPROACH_WIDTH_FACTOR
    return 0 <= local_x <= APPROACH_ZONE_LENGTH and abs(local_y) <= approach_width / 2


def _local_rectangle(runway_start, runway_end, x_min, x_max, half_width):
    angle = runway_angle(runway_start, runway_end)
    corners = [(x_min, -half_width), (x_max, -half_width), (x_max, half_width), (x_min, half_width)]
    return geom.Polygon([from_runway_local(c, runway_start, angle) for c in corners])


def runway_polygon(runway_start, runway_end, runway_width, include_landing_extension=False):
    length = distance(runway_start, runway_end)
    if include_landing_extension:
        length += LANDING_ZONE_EXTENSION
    return _local_rectangle(runway_start, runway_end, 0, length, runway_width / 2)


def airport_zone_polygon(runway_start, runway_end, runway_width):
    length = distance(runway_start, runway_end)
    return _local_rectangle(runway_start, runway_end,
                            -AIRPORT_ZONE_PADDING, length + AIRPORT_ZONE_PADDING,
                            runway_width / 2 + AIRPORT_ZONE_PADDING)


def approach_zone_polygon(runway_start, runway_end, runway_width):
    return _local_rectangle(runway_start, runway_end,
                            -APPROACH_ZONE_LENGTH, 0,
                            runway_width * APPROACH_WIDTH_FACTOR / 2)


def distance_to_zone(position, polygon):
    """Distance from a position to a zone outline, 0 when inside."""
    return polygon.distance(geom.Point(position[0], position[1]))
