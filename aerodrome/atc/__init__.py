# aerodrome-lite/aerodrome/atc/__init__.py
from .model import Aircraft, AircraftStatus, Airport, Command, CommandAction, World
from .params import Rules, SimParameters
from .commands import CommandOutcome, UnknownAircraftError, apply_command, resolve_command
from .factory import AircraftFactory
from .stepper import StepReport, step_world
from .simulation import EventKind, SimEvent, Simulation
