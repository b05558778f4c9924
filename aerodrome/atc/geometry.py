# aerodrome-lite/aerodrome/atc/geometry.py
"""
Geometry kernel for the 2D airspace.

Positions are ``(x, y)`` tuples on a y-down canvas. Headings are degrees with
0 pointing along +x and angles growing clockwise on screen, so a heading can be
integrated directly as ``(cos θ, sin θ)``. The canvas is toroidal: anything that
measures the separation between two points has a ``wrapped_`` variant that takes
the shorter way round.
"""
import math

from numba import jit


@jit(nopython=True)
def normalize_angle(angle):
    """
    Folds any angle into [0, 360).

    :param angle: Angle in degrees, any real value
    :return: Equivalent angle in [0, 360)
    """
    a = float(angle) % 360.0
    # tiny negative inputs round up to exactly 360.0
    if a >= 360.0:
        a -= 360.0
    return a


@jit(nopython=True)
def angle_difference(angle1, angle2):
    """
    Signed shortest rotation that takes angle1 onto angle2.

    :return: Value in [-180, 180]; positive means a clockwise (right) turn
    """
    diff = normalize_angle(angle2) - normalize_angle(angle1)
    if diff > 180.0:
        diff -= 360.0
    if diff < -180.0:
        diff += 360.0
    return diff


@jit(nopython=True)
def _wrap_axis(delta, extent):
    # reduce first so deltas of several canvas widths still fold correctly
    d = delta - extent * math.trunc(delta / extent)
    if abs(d) > extent / 2.0:
        if d > 0:
            d -= extent
        else:
            d += extent
    return d


@jit(nopython=True)
def _rotate(dx, dy, angle_rad):
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    return dx * c - dy * s, dx * s + dy * c


def deg_to_rad(degrees):
    return degrees * math.pi / 180.0


def distance(p1, p2):
    """Plain Euclidean distance."""
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def heading_to(p1, p2):
    """Heading flown from p1 to reach p2, ignoring wrap-around."""
    return normalize_angle(math.degrees(math.atan2(p2[1] - p1[1], p2[0] - p1[0])))


def wrapped_delta(p1, p2, canvas_width, canvas_height):
    """
    Shortest (dx, dy) from p1 to p2 on the toroidal canvas.

    On each axis, when the raw delta is longer than half the canvas extent the
    full extent is added or subtracted so the delta follows the shorter path
    through the opposite edge.
    """
    dx = _wrap_axis(p2[0] - p1[0], canvas_width)
    dy = _wrap_axis(p2[1] - p1[1], canvas_height)
    return dx, dy


def wrapped_distance(p1, p2, canvas_width, canvas_height):
    dx, dy = wrapped_delta(p1, p2, canvas_width, canvas_height)
    return math.hypot(dx, dy)


def wrapped_heading_to(p1, p2, canvas_width, canvas_height):
    dx, dy = wrapped_delta(p1, p2, canvas_width, canvas_height)
    return normalize_angle(math.degrees(math.atan2(dy, dx)))


def move_position(position, heading, speed):
    """Linear integration of one step: ``position + speed * (cos θ, sin θ)``."""
    rad = deg_to_rad(heading)
    return (position[0] + math.cos(rad) * speed,
            position[1] + math.sin(rad) * speed)


def predict_position(position, heading, speed, frames):
    """Dead-reckoned position after ``frames`` frames at constant heading and speed."""
    return move_position(position, heading, speed * frames)


def wrap_position(position, canvas_width, canvas_height):
    """Folds a position that left the canvas back in through the opposite edge."""
    x = position[0] % canvas_width
    y = position[1] % canvas_height
    # tiny negative coordinates round up to the full extent
    if x >= canvas_width:
        x = 0.0
    if y >= canvas_height:
        y = 0.0
    return (x, y)


def runway_angle(runway_start, runway_end):
    """Runway direction in radians (start -> end)."""
    return math.atan2(runway_end[1] - runway_start[1], runway_end[0] - runway_start[0])


def to_runway_local(point, runway_start, angle_rad):
    """
    Transforms a point into runway-aligned coordinates.

    :param point: World position
    :param runway_start: Origin of the local frame
    :param angle_rad: Runway direction in radians
    :return: (along, across) - distance along the runway axis and signed
             perpendicular offset from the centreline
    """
    return _rotate(point[0] - runway_start[0], point[1] - runway_start[1], -angle_rad)


def from_runway_local(local, runway_start, angle_rad):
    """Inverse of :func:`to_runway_local`."""
    dx, dy = _rotate(local[0], local[1], angle_rad)
    return (runway_start[0] + dx, runway_start[1] + dy)
