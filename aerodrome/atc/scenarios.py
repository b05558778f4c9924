# aerodrome-lite/aerodrome/atc/scenarios.py
from . import params


class Scenario:
    """
    Base class for session presets.

    A scenario bundles everything a session is configured with:
    - the configuration surface (canvas, traffic bounds, timing, game speed)
    - the rule thresholds
    Variants of the game differ only in these values.
    """
    sim_parameters: params.SimParameters
    rules: params.Rules

    def __init__(self, sim_parameters=None, rules=None):
        self.sim_parameters = sim_parameters if sim_parameters is not None else params.SimParameters()
        self.rules = rules if rules is not None else params.Rules()

    def __repr__(self):
        return f"{type(self).__name__}({self.sim_parameters})"


class DefaultScenario(Scenario):
    """800x600 canvas, one aircraft at start, kept at three, half game speed."""


class SingleAircraft(Scenario):
    """
    One aircraft at a time, replaced only after it has landed or crashed.
    Useful to try a policy's landing procedure in isolation.
    """
    def __init__(self):
        super().__init__(params.SimParameters(initial_aircraft_count=1, min_aircraft=1, max_aircraft=1))


class BusyAirspace(Scenario):
    """Larger canvas with up to six aircraft and faster spawning."""
    def __init__(self):
        super().__init__(params.SimParameters(
            canvas_width=1200,
            canvas_height=800,
            initial_aircraft_count=3,
            min_aircraft=4,
            max_aircraft=6,
            spawn_interval=10.0,
        ))


class RushHour(Scenario):
    """Default traffic at full game speed with tighter decision intervals."""
    def __init__(self):
        super().__init__(params.SimParameters(
            initial_aircraft_count=2,
            game_speed=1.0,
            decision_interval=3.0,
        ))


class NoSafetyNet(Scenario):
    """Commands are applied without collision or airport-zone forecasting."""
    def __init__(self):
        super().__init__(rules=params.Rules(collision_avoidance=False, airport_avoidance=False))


def load_scenario(name):
    """
    Looks up a scenario class by name and instantiates it.

    :raises ValueError: If no scenario of that name exists
    """
    scenario_class = globals().get(name)
    if not (isinstance(scenario_class, type) and issubclass(scenario_class, Scenario)):
        raise ValueError(f"Scenario {name} not found in aerodrome.atc.scenarios")
    return scenario_class()


def available_scenarios():
    return sorted(name for name, value in globals().items()
                  if isinstance(value, type) and issubclass(value, Scenario) and value is not Scenario)
