# aerodrome-lite/aerodrome/atc/factory.py
import random

from .geometry import distance
from .model import Aircraft, Airport, AircraftStatus, World
from .params import Rules

import logging
logger = logging.getLogger("aerodrome.factory")
logger.setLevel(logging.INFO)

CALLSIGN_PREFIXES = ['AA', 'UA', 'DL', 'SW', 'BA', 'LH', 'AF', 'KL', 'QF', 'EK']

COLORS = [
    '#60a5fa',  # blue
    '#f472b6',  # pink
    '#4ade80',  # green
    '#fbbf24',  # amber
    '#a78bfa',  # purple
    '#f87171',  # red
    '#2dd4bf',  # teal
    '#fb923c',  # orange
]


class AircraftFactory:
    """
    Spawns aircraft on the top, bottom and left canvas edges. The right edge is
    never used because the airport sits next to it.
    """

    def __init__(self, rules: Rules = None, rng: random.Random = None):
        self.rules = rules if rules is not None else Rules()
        self.rng = rng if rng is not None else random.Random()

    def seed(self, seed=None):
        self.rng.seed(seed)

    def generate_callsign(self):
        prefix = self.rng.choice(CALLSIGN_PREFIXES)
        return f"{prefix}{self.rng.randint(100, 999)}"

    def _spawn_position(self, canvas_width, canvas_height):
        margin = self.rules.spawn_margin
        edge = self.rng.randint(0, 2)

        if edge == 0:  # Top, left part of the canvas to leave room before the airport
            return (self.rng.uniform(margin, canvas_width * 0.4), margin)
        elif edge == 1:  # Bottom
            return (self.rng.uniform(margin, canvas_width * 0.4), canvas_height - margin)
        else:  # Left
            return (margin, self.rng.uniform(margin, canvas_height - margin))

    def _clearance(self, position, existing, airport):
        """
        How much room a spawn position has: the smallest margin by which it
        exceeds the separation rules. Negative means at least one rule is broken.
        """
        margins = []
        for other in existing:
            if not other.active:
                continue
            margins.append(distance(position, other.position) - self.rules.spawn_separation)
        if airport is not None:
            margins.append(distance(position, airport.position) - self.rules.spawn_airport_distance)
        return min(margins) if margins else float('inf')

    def create_aircraft(self, canvas_width, canvas_height, existing=(), airport: Airport = None,
                        counter: int = 1):
        """
        Creates a new flying aircraft at a free edge position.

        Up to rules.spawn_attempts positions are drawn. When none of them keeps the
        required distance to the other aircraft and to the airport, the attempt
        with the most room is used anyway; spawning never fails.

        :param existing: Aircraft already in the session
        :param airport: Airport to keep away from and to head towards
        :param counter: Creation number of this aircraft, used for its id and colour
        :return: The new Aircraft
        """
        best_position = None
        best_clearance = None
        for attempt in range(self.rules.spawn_attempts):
            position = self._spawn_position(canvas_width, canvas_height)
            clearance = self._clearance(position, existing, airport)
            if best_clearance is None or clearance > best_clearance:
                best_position, best_clearance = position, clearance
            if clearance >= 0:
                break
        else:
            logger.debug(f"No safe spawn position after {self.rules.spawn_attempts} attempts, "
                         f"using best one with clearance {best_clearance:.1f}")

        # Every aircraft starts heading towards the runway side of the canvas
        heading = airport.runway_heading if airport is not None else 0

        low, high = self.rules.spawn_speed_range
        return Aircraft(
            f"plane-{counter}",
            self.generate_callsign(),
            COLORS[counter % len(COLORS)],
            best_position[0], best_position[1],
            heading,
            self.rng.uniform(low, high),
            AircraftStatus.FLYING,
        )

    def spawn(self, world: World):
        """Creates an aircraft for a world, advancing its creation counter, and adds it to the roster."""
        world.aircraft_counter += 1
        aircraft = self.create_aircraft(world.canvas_width, world.canvas_height,
                                        world.aircraft, world.airport, world.aircraft_counter)
        world.aircraft.append(aircraft)
        logger.debug(f"Spawned {aircraft}")
        return aircraft
