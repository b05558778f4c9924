# aerodrome-lite/aerodrome/atc/simulation.py
"""
Session orchestrator. A Simulation is the single owner of the aircraft roster:
ticks, command batches and traffic maintenance all go through it, and
observers only ever get read-only snapshots and events.
"""
from enum import Enum
from typing import Callable, List

from .commands import CommandOutcome, UnknownAircraftError, resolve_command
from .factory import AircraftFactory
from .model import Aircraft, Command, World
from .navigation import (assess_collision_risks, build_coordination_note, build_landing_queue,
                         calculate_navigation_data)
from .params import Rules, SimParameters
from .stepper import StepReport, step_world

import logging
logger = logging.getLogger("aerodrome.simulation")
logger.setLevel(logging.INFO)


class EventKind(Enum):
    SPAWNED = "spawned"
    CRASHED = "crashed"
    LANDED = "landed"
    COMMAND = "command"


class SimEvent:
    def __init__(self, kind: EventKind, aircraft: Aircraft, game_time, detail=None):
        """
        Something an observer may want to know about.

        :param kind: What happened
        :param aircraft: Aircraft concerned, as it was right after the event
        :param game_time: Session time of the event in seconds
        :param detail: Extra information, e.g. the command and its outcome, or the crash cause
        """
        self.kind = kind
        self.aircraft = aircraft
        self.game_time = game_time
        self.detail = detail if detail is not None else {}

    def to_dict(self):
        return {
            "kind": self.kind.value,
            "game_time": self.game_time,
            "aircraft": self.aircraft.to_dict(),
            **self.detail,
        }

    def __repr__(self):
        return f"SimEvent({self.kind.value} {self.aircraft.callsign} t={self.game_time:.1f})"


class Simulation:
    def __init__(self, params: SimParameters = None, rules: Rules = None, factory: AircraftFactory = None,
                 seed=None):
        """
        :param params: Configuration surface
        :param rules: Rule thresholds
        :param factory: Aircraft factory, created from the rules when omitted
        :param seed: Seed of the factory's random generator
        """
        self.params = params if params is not None else SimParameters()
        self.rules = rules if rules is not None else Rules()
        self.factory = factory if factory is not None else AircraftFactory(self.rules)
        if seed is not None:
            self.factory.seed(seed)
        self._subscribers: List[Callable[[SimEvent], None]] = []
        self._since_last_spawn = 0.0
        self.world = None
        self.reset()

    # --- observers -------------------------------------------------------------

    def subscribe(self, callback: Callable[[SimEvent], None]):
        """Registers a callback receiving every SimEvent; returns the callback."""
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback):
        self._subscribers.remove(callback)

    def _emit(self, kind: EventKind, aircraft: Aircraft, **detail):
        event = SimEvent(kind, aircraft.copy(), self.world.game_time, detail)
        for callback in self._subscribers:
            callback(event)

    # --- session lifecycle -----------------------------------------------------

    def reset(self, paused=False):
        """Starts a fresh session with the configured number of initial aircraft."""
        self.world = World(self.params.canvas_width, self.params.canvas_height)
        self.world.is_paused = paused
        self._since_last_spawn = 0.0
        for _ in range(self.params.initial_aircraft_count):
            self.spawn()
        logger.debug(f"Session reset: {self.params}")
        return self.world

    def resize(self, canvas_width, canvas_height):
        self.world.resize(canvas_width, canvas_height)
        self.params.canvas_width = canvas_width
        self.params.canvas_height = canvas_height

    def toggle_pause(self):
        self.world.is_paused = not self.world.is_paused
        if not self.world.is_paused:
            # the spawn interval restarts when the session resumes
            self._since_last_spawn = 0.0
        logger.debug("Paused" if self.world.is_paused else "Resumed")
        return self.world.is_paused

    @property
    def is_paused(self):
        return self.world.is_paused

    # --- traffic ---------------------------------------------------------------

    def spawn(self):
        aircraft = self.factory.spawn(self.world)
        self._emit(EventKind.SPAWNED, aircraft)
        return aircraft

    def maintain_traffic(self, dt):
        """
        Keeps the number of active aircraft between the configured bounds:
        below the minimum an aircraft is spawned right away, otherwise one is
        added every spawn interval as long as the maximum is not reached.

        :return: The spawned aircraft or None
        """
        self._since_last_spawn += dt
        active_count = len(self.world.active_aircraft())
        if active_count < self.params.min_aircraft:
            return self.spawn()
        if self._since_last_spawn >= self.params.spawn_interval and active_count < self.params.max_aircraft:
            self._since_last_spawn = 0.0
            return self.spawn()
        return None

    def tick(self, dt) -> StepReport:
        """Advances the session by dt seconds. Does nothing while paused."""
        if self.world.is_paused:
            return StepReport()

        report = step_world(self.world, dt, self.rules, self.params.game_speed)
        for aircraft1, aircraft2 in report.collisions:
            self._emit(EventKind.CRASHED, aircraft1, cause="collision", other=aircraft2.id)
            self._emit(EventKind.CRASHED, aircraft2, cause="collision", other=aircraft1.id)
        for aircraft in report.incursions:
            self._emit(EventKind.CRASHED, aircraft, cause="airport_incursion")
        for aircraft in report.landed:
            self._emit(EventKind.LANDED, aircraft)

        self.maintain_traffic(dt)
        return report

    def run(self, seconds, dt=1 / 60):
        """Ticks for the given session time; returns the reports of every tick."""
        reports = []
        elapsed = 0.0
        while elapsed < seconds:
            reports.append(self.tick(dt))
            elapsed += dt
        return reports

    # --- commands --------------------------------------------------------------

    def _index_of(self, aircraft_id):
        for i, aircraft in enumerate(self.world.aircraft):
            if aircraft.id == aircraft_id:
                return i
        raise UnknownAircraftError(aircraft_id)

    def apply_command(self, command: Command) -> CommandOutcome:
        """
        Applies a single command to the live roster.

        :raises UnknownAircraftError: If no aircraft in the roster has the command's id
        """
        if isinstance(command, dict):
            command = Command.from_dict(command)
        index = self._index_of(command.aircraft_id)
        updated, outcome = resolve_command(self.world.aircraft[index], command, self.world.airport,
                                           self.world.aircraft, self.rules, self.world.canvas_size,
                                           self.params.game_speed)
        self.world.aircraft[index] = updated
        self._emit(EventKind.COMMAND, updated, action=command.action.value, value=command.value,
                   outcome=outcome.value)
        return outcome

    def apply_commands(self, commands) -> List[CommandOutcome]:
        """
        Applies a batch in list order; each command sees the effect of the ones before it.
        Every id is checked first, so a batch with an unknown id changes nothing.

        :raises UnknownAircraftError: If any command targets an aircraft not in the roster
        """
        commands = [Command.from_dict(c) if isinstance(c, dict) else c for c in commands]
        for command in commands:
            self._index_of(command.aircraft_id)
        return [self.apply_command(command) for command in commands]

    # --- observer views --------------------------------------------------------

    def navigation(self, aircraft_id):
        return calculate_navigation_data(self.world.aircraft[self._index_of(aircraft_id)], self.world.airport,
                                         self.rules)

    def collision_risks(self):
        return assess_collision_risks(self.world.aircraft, self.rules, self.world.canvas_size,
                                      self.params.game_speed)

    def landing_queue(self):
        return build_landing_queue(self.world.aircraft, self.world.airport, self.rules)

    def coordination_note(self):
        return build_coordination_note(self.landing_queue())

    def snapshot(self):
        """Plain-data view of the session for observers."""
        world = self.world
        return {
            "aircraft": [a.to_dict() for a in world.aircraft],
            "airport": world.airport.to_dict(),
            "canvas_width": world.canvas_width,
            "canvas_height": world.canvas_height,
            "is_paused": world.is_paused,
            "collisions": world.collisions,
            "landings": world.landings,
            "game_time": world.game_time,
        }
