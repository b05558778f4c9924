# aerodrome-lite/aerodrome/atc/aerodrome_gym.py
import math
import random

import gymnasium as gym
import numpy as np
from gymnasium.utils import seeding
from numba import jit

from .themes import ColorScheme, hex_to_rgb
from . import model
from . import scenarios
from . import zones
from .commands import CommandOutcome
from .geometry import angle_difference
from .navigation import RiskLevel, calculate_navigation_data
from .params import FRAMES_PER_SECOND
from .simulation import Simulation

import logging
logger = logging.getLogger("aerodrome.gym")
logger.setLevel(logging.INFO)

# Order of the action selector bins; the first bin issues no command
ACTIONS = [None, model.CommandAction.TURN, model.CommandAction.SPEED,
           model.CommandAction.APPROACH, model.CommandAction.HOLD]

LANDING_REWARD = 1.0
COLLISION_PENALTY = 1.0


@jit(nopython=True)
def selector_bin(value, bins):
    """Maps a selector in [-1, 1] onto one of `bins` equally wide bins."""
    idx = int((value + 1.0) / 2.0 * bins)
    return min(max(idx, 0), bins - 1)


class AerodromeGym(gym.Env):
    """
    Air Traffic Control Gym Environment

    Front end for external controlling policies. Every env step is one decision
    round: the policy submits at most one command per aircraft slot, then the
    session runs for one decision interval.
    """

    metadata = {
        'render_modes': ['human', 'rgb_array', 'headless'],
        "render_fps": 30
    }

    def __init__(self, scenario=None, aircraft_slots=3, render_mode='headless', tick_seconds=1 / FRAMES_PER_SECOND,
                 max_steps=120):
        """
        Initialize the aerodrome gym environment

        Args:
            scenario: Session preset (scenario instance or class name), DefaultScenario if omitted
            aircraft_slots: Number of aircraft the policy observes and commands at once
            render_mode: 'human' for window rendering, 'rgb_array' for array output, 'headless' for no rendering
            tick_seconds: Simulated seconds per tick
            max_steps: Decision rounds before the episode is truncated
        """
        if scenario is None:
            scenario = scenarios.DefaultScenario()
        elif isinstance(scenario, str):
            scenario = scenarios.load_scenario(scenario)
        if aircraft_slots < 1:
            raise ValueError("aircraft_slots must be at least 1")

        self.render_mode = render_mode
        self._scenario = scenario
        self._slots = aircraft_slots
        self._tick_seconds = tick_seconds
        self.max_steps = max_steps
        self.sim = Simulation(scenario.sim_parameters, scenario.rules)

        # Reward and episode tracking
        self.last_reward = 0
        self.total_reward = 0
        self.timesteps = 0
        self.last_outcomes = []

        params = scenario.sim_parameters
        rules = scenario.rules
        n = self._slots
        max_distance = math.hypot(params.canvas_width, params.canvas_height)
        self.normalization_state_min = np.array([
            *[0 for _ in range(n)],       # slot occupied
            *[0 for _ in range(n)],       # x position
            *[0 for _ in range(n)],       # y position
            *[0 for _ in range(n)],       # heading
            *[0 for _ in range(n)],       # speed
            *[0 for _ in range(n)],       # cleared for approach
            *[0 for _ in range(n)],       # inside the approach corridor
            *[0 for _ in range(n)],       # distance to runway centre
            *[-180 for _ in range(n)],    # heading relative to the runway heading
        ], dtype=np.float32)
        self.normalization_state_max = np.array([
            *[1 for _ in range(n)],
            *[params.canvas_width for _ in range(n)],
            *[params.canvas_height for _ in range(n)],
            *[360 for _ in range(n)],
            *[rules.max_speed for _ in range(n)],
            *[1 for _ in range(n)],
            *[1 for _ in range(n)],
            *[max_distance for _ in range(n)],
            *[180 for _ in range(n)],
        ], dtype=np.float32)

        # action layout: [selector per slot..., value per slot...]
        self.action_space = gym.spaces.Box(low=-1.0, high=1.0, shape=(2 * n,), dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=-1.0, high=1.0, shape=(len(self.normalization_state_min),),
                                                dtype=np.float32)

        self.viewer = None
        self._geoms = None
        self._drawn_airport = None

    @property
    def world(self):
        return self.sim.world

    def seed(self, seed=None):
        """
        Seeds the environment's random number generators for reproducibility

        Args:
            seed: Random seed value

        Returns:
            List containing the seed
        """
        self.np_random, seed = seeding.np_random(seed)
        random.seed(seed)
        self.sim.factory.seed(seed)
        return [seed]

    def _slot_aircraft(self):
        return self.world.active_aircraft()[:self._slots]

    def _denormalized_value(self, action, value):
        rules = self.sim.rules
        if action == model.CommandAction.TURN:
            return (value + 1.0) * 180.0 % 360
        if action == model.CommandAction.SPEED:
            return rules.min_speed + (value + 1.0) / 2.0 * (rules.max_speed - rules.min_speed)
        return None

    def decode_action(self, action_array):
        """
        Turns an action vector into commands for the aircraft currently in the slots

        Args:
            action_array: [selector per slot..., value per slot...], all in [-1, 1]

        Returns:
            List of Command
        """
        action_array = np.clip(np.asarray(action_array, dtype=np.float64), -1.0, 1.0)
        commands = []
        for c, aircraft in enumerate(self._slot_aircraft()):
            action = ACTIONS[selector_bin(action_array[c], len(ACTIONS))]
            if action is None:
                continue
            value = self._denormalized_value(action, float(action_array[self._slots + c]))
            commands.append(model.Command(aircraft.id, action, value))
        return commands

    def step(self, action_array):
        """
        Execute one decision round

        Args:
            action_array: Action vector, see decode_action

        Returns:
            (state, reward, terminated, truncated, info) tuple
        """
        self.timesteps += 1
        world = self.world
        landings_before, collisions_before = world.landings, world.collisions

        commands = self.decode_action(action_array)
        self.last_outcomes = self.sim.apply_commands(commands)
        for command, outcome in zip(commands, self.last_outcomes):
            if outcome in (CommandOutcome.REJECTED, CommandOutcome.DENIED, CommandOutcome.BLOCKED):
                logger.debug(f"{command} -> {outcome.value}")

        ticks = max(1, round(self.sim.params.decision_interval / self._tick_seconds))
        for _ in range(ticks):
            self.sim.tick(self._tick_seconds)

        landed = world.landings - landings_before
        crashed = world.collisions - collisions_before
        reward = LANDING_REWARD * landed - COLLISION_PENALTY * crashed
        self.last_reward = reward
        self.total_reward += reward

        truncated = self.timesteps >= self.max_steps
        info = {
            "landings": world.landings,
            "collisions": world.collisions,
            "game_time": world.game_time,
            "outcomes": [o.value for o in self.last_outcomes],
        }
        return self._get_obs(), reward, False, truncated, info

    def _get_obs(self):
        """
        Current observation vector, normalized to [-1, 1]. Empty slots are all-minimum.
        """
        airport = self.world.airport
        n = self._slots
        raw = np.array(self.normalization_state_min, dtype=np.float32)
        for c, aircraft in enumerate(self._slot_aircraft()):
            nav = calculate_navigation_data(aircraft, airport, self.sim.rules)
            features = [
                1,
                aircraft.x,
                aircraft.y,
                aircraft.heading,
                aircraft.speed,
                1 if aircraft.status == model.AircraftStatus.APPROACHING else 0,
                1 if nav.in_approach_zone else 0,
                nav.distance_to_runway,
                angle_difference(airport.runway_heading, aircraft.heading),
            ]
            for feature_idx, value in enumerate(features):
                raw[feature_idx * n + c] = value

        state = 2 * (raw - self.normalization_state_min) / (self.normalization_state_max - self.normalization_state_min) - 1
        return np.clip(state, -1.0, 1.0).astype(np.float32)

    def reset(self, seed=None, options=None):
        """
        Starts a new session

        Args:
            seed: Seeds the aircraft factory when given
            options: Unused

        Returns:
            Initial state and info dictionary
        """
        super().reset(seed=seed)
        if seed is not None:
            self.sim.factory.seed(seed)
        self.sim.reset()
        self.total_reward = 0
        self.last_reward = 0
        self.timesteps = 0
        self.last_outcomes = []
        return self._get_obs(), {"info": "Environment reset"}

    # --- rendering -------------------------------------------------------------

    def render(self, mode=None):
        """
        Render the current state of the environment

        Args:
            mode: If provided, overrides the render_mode set during initialization

        Returns:
            RGB frame for 'rgb_array', otherwise whether the viewer is still open
        """
        render_mode = mode if mode is not None else self.render_mode
        world = self.world

        if self.viewer is None:
            if render_mode == 'headless':
                from . import headless_rendering as geoms
                self.viewer = geoms.HeadlessViewer(world.canvas_width, world.canvas_height)
            else:
                from . import rendering as geoms
                self.viewer = geoms.Viewer(world.canvas_width, world.canvas_height)
            self._geoms = geoms

        if self._drawn_airport is not world.airport:
            self.viewer.geoms = []
            self._render_airport()
            self._drawn_airport = world.airport

        self._render_risks()
        for aircraft in world.aircraft:
            self._render_aircraft(aircraft)
        self._render_status()

        return self.viewer.render(render_mode == 'rgb_array')

    def _screen(self, x, y):
        """Canvas coordinates are y-down, the screen is y-up"""
        return (x, self.world.canvas_height - y)

    def _screen_polygon(self, polygon):
        return [self._screen(x, y) for x, y in list(polygon.exterior.coords)[:-1]]

    def _render_airport(self):
        g = self._geoms
        world = self.world
        airport = world.airport
        w, h = world.canvas_width, world.canvas_height

        background = g.FilledPolygon([(0, 0), (0, h), (w, h), (w, 0)])
        background.set_color(*ColorScheme.background)
        self.viewer.add_geom(background)

        approach = g.FilledPolygon(self._screen_polygon(
            zones.approach_zone_polygon(airport.runway_start, airport.runway_end, airport.runway_width)))
        approach.set_color_opacity(*ColorScheme.approach_zone)
        self.viewer.add_geom(approach)

        exclusion = g.FilledPolygon(self._screen_polygon(
            zones.airport_zone_polygon(airport.runway_start, airport.runway_end, airport.runway_width)))
        exclusion.set_color_opacity(*ColorScheme.airport_zone)
        self.viewer.add_geom(exclusion)

        runway = g.FilledPolygon(self._screen_polygon(
            zones.runway_polygon(airport.runway_start, airport.runway_end, airport.runway_width)))
        runway.set_color(*ColorScheme.runway)
        self.viewer.add_geom(runway)

        centerline = g.Line(self._screen(*airport.runway_start), self._screen(*airport.runway_end))
        centerline.set_color(*ColorScheme.runway_centerline)
        self.viewer.add_geom(centerline)

        # approach lights on the threshold side
        threshold = g.Circle(*self._screen(*airport.runway_start), 4)
        threshold.set_color(*ColorScheme.approach_lights)
        self.viewer.add_geom(threshold)

    def _render_aircraft(self, aircraft: model.Aircraft):
        g = self._geoms
        x, y = self._screen(aircraft.x, aircraft.y)
        if aircraft.status == model.AircraftStatus.CRASHED:
            color = ColorScheme.crashed
        else:
            color = hex_to_rgb(aircraft.color)

        symbol = g.Circle(x, y, 6)
        symbol.set_color(*color)
        self.viewer.add_onetime(symbol)

        if aircraft.status == model.AircraftStatus.APPROACHING:
            ring = g.Circle(x, y, 10, filled=False)
            ring.set_color(*ColorScheme.approaching)
            self.viewer.add_onetime(ring)

        rad = math.radians(aircraft.heading)
        vector = g.Line((x, y), (x + 18 * math.cos(rad), y - 18 * math.sin(rad)), linewidth=2)
        vector.set_color(*color)
        self.viewer.add_onetime(vector)

        label = g.Label(f"{aircraft.callsign} {aircraft.heading:03.0f} {aircraft.speed:.2f}", x + 10, y + 20,
                        font_size=9)
        self.viewer.add_onetime(label)

    def _render_risks(self):
        g = self._geoms
        for risk in self.sim.collision_risks():
            a1 = self.world.find(risk.aircraft1)
            a2 = self.world.find(risk.aircraft2)
            line = g.Line(self._screen(a1.x, a1.y), self._screen(a2.x, a2.y))
            if risk.level == RiskLevel.HIGH:
                line.set_color_opacity(*ColorScheme.risk_high)
            else:
                line.set_color_opacity(*ColorScheme.risk_medium)
            self.viewer.add_onetime(line)

    def _render_status(self):
        g = self._geoms
        world = self.world
        lines = [
            f"Landings: {world.landings}   Collisions: {world.collisions}   Time: {world.game_time:.0f}s",
            f"Total reward: {self.total_reward:.2f}   Last reward: {self.last_reward:.2f}",
            self.sim.coordination_note(),
        ]
        for i, text in enumerate(lines):
            label = g.Label(text, 10, world.canvas_height - 10 - 18 * i)
            label.set_color_opacity(*ColorScheme.label)
            self.viewer.add_onetime(label)

    def close(self):
        if self.viewer is not None:
            self.viewer.close()
            self.viewer = None
            self._drawn_airport = None
