# aerodrome-lite/aerodrome/atc/model.py
import copy
from enum import Enum
from typing import List

from .geometry import distance, heading_to, normalize_angle, runway_angle

import logging
logger = logging.getLogger("aerodrome.model")
logger.setLevel(logging.INFO)

# Runway dimensions used when an airport is laid out on a canvas
RUNWAY_LENGTH = 200
RUNWAY_WIDTH = 40


class AircraftStatus(Enum):
    """Lifecycle of an aircraft: flying -> approaching -> landed, or crashed from either."""
    FLYING = "flying"
    APPROACHING = "approaching"
    LANDED = "landed"
    CRASHED = "crashed"

    @property
    def terminal(self):
        return self in (AircraftStatus.LANDED, AircraftStatus.CRASHED)


class CommandAction(Enum):
    TURN = "turn"
    SPEED = "speed"
    APPROACH = "approach"
    HOLD = "hold"


class Aircraft:
    def __init__(self, aircraft_id: str, callsign: str, color: str, x: float, y: float,
                 heading: float, speed: float, status: AircraftStatus = AircraftStatus.FLYING):
        """
        An aircraft in the session.

        :param aircraft_id: Unique identifier, e.g. "plane-3"
        :param callsign: Airline code plus number, e.g. "LH482"
        :param color: Display colour as a hex string
        :param x: X-coordinate on the canvas
        :param y: Y-coordinate on the canvas (y grows downwards)
        :param heading: Heading in degrees, 0 = +x, clockwise
        :param speed: Distance flown per reference frame
        :param status: Lifecycle status
        """
        self.id = aircraft_id
        self.callsign = callsign
        self.color = color
        self.x = x
        self.y = y
        self.heading = normalize_angle(heading)
        self.speed = speed
        self.status = status

    @property
    def position(self):
        return (self.x, self.y)

    @position.setter
    def position(self, value):
        self.x, self.y = value

    @property
    def active(self):
        """Flying or approaching; terminal aircraft take part in no further checks."""
        return not self.status.terminal

    def copy(self):
        return copy.copy(self)

    def freeze(self, status: AircraftStatus):
        """Moves the aircraft into a terminal status; its kinematics stop here."""
        self.status = status
        self.speed = 0

    def to_dict(self):
        return {
            "id": self.id,
            "callsign": self.callsign,
            "color": self.color,
            "position": {"x": self.x, "y": self.y},
            "heading": self.heading,
            "speed": self.speed,
            "status": self.status.value,
        }

    def __repr__(self):
        return (f"Aircraft({self.callsign} {self.id} pos=({self.x:.1f}, {self.y:.1f}) "
                f"hdg={self.heading:.0f} spd={self.speed:.2f} {self.status.value})")


class Airport:
    def __init__(self, position, runway_start, runway_end, runway_width=RUNWAY_WIDTH):
        """
        Single-runway airport. The runway heading is the heading of runway_start -> runway_end,
        which is the only direction an aircraft may land in.

        :param position: Visual centre of the airport
        :param runway_start: Threshold where landing aircraft touch down first
        :param runway_end: Far end of the runway
        :param runway_width: Perpendicular extent of the runway
        """
        self.position = tuple(position)
        self.runway_start = tuple(runway_start)
        self.runway_end = tuple(runway_end)
        self.runway_width = runway_width
        self.runway_heading = heading_to(self.runway_start, self.runway_end)

    @classmethod
    def for_canvas(cls, canvas_width, canvas_height):
        """Lays the airport out on the right of the canvas, runway pointing along +x."""
        center_x = canvas_width * 0.75
        center_y = canvas_height / 2
        return cls(
            (center_x, center_y),
            (center_x - RUNWAY_LENGTH / 2, center_y),
            (center_x + RUNWAY_LENGTH / 2, center_y),
            RUNWAY_WIDTH,
        )

    @property
    def runway_length(self):
        return distance(self.runway_start, self.runway_end)

    @property
    def runway_angle(self):
        return runway_angle(self.runway_start, self.runway_end)

    @property
    def runway_center(self):
        return ((self.runway_start[0] + self.runway_end[0]) / 2,
                (self.runway_start[1] + self.runway_end[1]) / 2)

    @property
    def holding_heading(self):
        """Heading pointing away from the runway, used for holds and as last-resort escape."""
        return normalize_angle(self.runway_heading + 180)

    def to_dict(self):
        return {
            "position": self.position,
            "runway_start": self.runway_start,
            "runway_end": self.runway_end,
            "runway_width": self.runway_width,
            "runway_heading": self.runway_heading,
        }


class Command:
    def __init__(self, aircraft_id: str, action, value=None):
        """
        A single directive for one aircraft, applied once and discarded.

        :param aircraft_id: Target aircraft
        :param action: CommandAction or its string value ("turn", "speed", "approach", "hold")
        :param value: New heading for turn, new speed for speed, unused otherwise
        :raises ValueError: If the action is unknown
        """
        self.aircraft_id = aircraft_id
        self.action = CommandAction(action)
        self.value = value

    @classmethod
    def from_dict(cls, data):
        return cls(data["aircraft_id"], data["action"], data.get("value"))

    def __repr__(self):
        if self.value is None:
            return f"Command({self.aircraft_id}, {self.action.value})"
        return f"Command({self.aircraft_id}, {self.action.value}, {self.value})"


class World:
    def __init__(self, canvas_width, canvas_height, airport: Airport = None):
        """
        All mutable state of one session. Resetting a session means building a new World.

        :param canvas_width: Width of the toroidal canvas
        :param canvas_height: Height of the toroidal canvas
        :param airport: Airport, laid out from the canvas size when omitted
        """
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.airport = airport if airport is not None else Airport.for_canvas(canvas_width, canvas_height)
        self.aircraft: List[Aircraft] = []
        self.is_paused = False
        self.collisions = 0
        self.landings = 0
        self.game_time = 0.0
        # Number of aircraft ever created; drives ids and colours
        self.aircraft_counter = 0

    @property
    def canvas_size(self):
        return (self.canvas_width, self.canvas_height)

    def active_aircraft(self):
        return [a for a in self.aircraft if a.active]

    def find(self, aircraft_id):
        for aircraft in self.aircraft:
            if aircraft.id == aircraft_id:
                return aircraft
        return None

    def resize(self, canvas_width, canvas_height):
        """Recomputes the airport for a new canvas; aircraft keep their positions."""
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError(f"invalid canvas size {canvas_width}x{canvas_height}")
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.airport = Airport.for_canvas(canvas_width, canvas_height)
        logger.debug(f"Canvas resized to {canvas_width}x{canvas_height}, runway at {self.airport.runway_start}")
