# aerodrome-lite/aerodrome/atc/params.py
import logging

logger = logging.getLogger("aerodrome.params")
logger.setLevel(logging.INFO)

# Reference frame rate that speeds are expressed against (distance per frame)
FRAMES_PER_SECOND = 60


class SimParameters:
    def __init__(self, canvas_width: float = 800, canvas_height: float = 600,
                 initial_aircraft_count: int = 1, min_aircraft: int = 3, max_aircraft: int = 3,
                 game_speed: float = 0.5, spawn_interval: float = 15.0,
                 decision_interval: float = 5.0, debug_logging: bool = False):
        """
        Configuration surface of a session. Supplied by the host, never changed by the core.

        :param canvas_width: Width of the toroidal canvas
        :param canvas_height: Height of the toroidal canvas
        :param initial_aircraft_count: Aircraft spawned when a session is reset
        :param min_aircraft: Below this many active aircraft a new one is spawned immediately
        :param max_aircraft: Periodic spawning stops at this many active aircraft
        :param game_speed: Global multiplier on aircraft movement (1.0 = normal)
        :param spawn_interval: Seconds between periodic spawns
        :param decision_interval: Seconds between two command batches of the external policy
        :param debug_logging: Log every command decision and zone event at DEBUG level
        """
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError(f"invalid canvas size {canvas_width}x{canvas_height}")
        if min_aircraft > max_aircraft:
            raise ValueError(f"min_aircraft ({min_aircraft}) exceeds max_aircraft ({max_aircraft})")
        if game_speed <= 0:
            raise ValueError("game_speed must be positive")
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.initial_aircraft_count = initial_aircraft_count
        self.min_aircraft = min_aircraft
        self.max_aircraft = max_aircraft
        self.game_speed = game_speed
        self.spawn_interval = spawn_interval
        self.decision_interval = decision_interval
        self.debug_logging = debug_logging

        if debug_logging:
            set_log_level(logging.DEBUG)

    def __repr__(self):
        return (f"SimParameters(canvas={self.canvas_width}x{self.canvas_height}, "
                f"aircraft={self.initial_aircraft_count} [{self.min_aircraft}..{self.max_aircraft}], "
                f"game_speed={self.game_speed})")


class Rules:
    def __init__(self,
                 collision_distance: float = 30,
                 prediction_distance: float = 50,
                 prediction_horizon: float = 8.0,
                 airport_horizon: float = 6.0,
                 sample_interval_frames: int = 5,
                 avoidance_offsets=(30, -30, 60, -60, 90, -90, 120, -120, 150, -150, 180),
                 min_speed: float = 0.15,
                 max_speed: float = 0.8,
                 approach_speed: float = 0.4,
                 landing_speed: float = 0.5,
                 landing_heading_tolerance: float = 25,
                 approach_correction_rate: float = 2.0,
                 approach_lookahead: float = 100,
                 hold_turn_step: float = 15,
                 hold_speed_factor: float = 0.8,
                 hold_min_speed: float = 0.2,
                 emergency_speed_factor: float = 0.7,
                 spawn_separation: float = 120,
                 spawn_airport_distance: float = 200,
                 spawn_margin: float = 50,
                 spawn_attempts: int = 10,
                 spawn_speed_range=(0.3, 0.6),
                 collision_avoidance: bool = True,
                 airport_avoidance: bool = True):
        """
        Thresholds of the airspace rules. Variants of the game differ only in these values.

        :param collision_distance: Separation below which two aircraft crash
        :param prediction_distance: Separation the forecaster treats as a future collision,
            larger than collision_distance to leave reaction margin
        :param prediction_horizon: Seconds a turn is forecast ahead for collisions
        :param airport_horizon: Seconds a heading is forecast ahead for airport-zone entry
        :param sample_interval_frames: Frames between two forecast samples
        :param avoidance_offsets: Ordered heading offsets tried when a turn is unsafe
        :param min_speed: Lowest speed a speed command can set
        :param max_speed: Highest speed a speed command can set
        :param approach_speed: Speed ceiling applied when clearing an aircraft for approach
        :param landing_speed: Aircraft must be slower than this to land
        :param landing_heading_tolerance: Max degrees off the runway heading for a landing
        :param approach_correction_rate: Max degrees per tick of automatic centreline correction
        :param approach_lookahead: Distance ahead on the centreline the correction aims at
        :param hold_turn_step: Max degrees a hold command turns toward the holding heading
        :param hold_speed_factor: Speed multiplier of a normal hold
        :param hold_min_speed: Speed floor of a normal hold
        :param emergency_speed_factor: Speed multiplier of an emergency hold (floor min_speed)
        :param spawn_separation: Minimum spawn distance to other active aircraft
        :param spawn_airport_distance: Minimum spawn distance to the airport centre
        :param spawn_margin: Distance from the canvas edge of spawn positions
        :param spawn_attempts: Retries before the best spawn attempt is accepted
        :param spawn_speed_range: Uniform range of initial speeds
        :param collision_avoidance: Forecast collisions when validating turns
        :param airport_avoidance: Forecast airport-zone entry when validating turns and holds
        """
        if spawn_attempts < 1:
            raise ValueError(f"spawn_attempts must be at least 1, got {spawn_attempts}")
        self.collision_distance = collision_distance
        self.prediction_distance = prediction_distance
        self.prediction_horizon = prediction_horizon
        self.airport_horizon = airport_horizon
        self.sample_interval_frames = sample_interval_frames
        self.avoidance_offsets = tuple(avoidance_offsets)
        self.min_speed = min_speed
        self.max_speed = max_speed
        self.approach_speed = approach_speed
        self.landing_speed = landing_speed
        self.landing_heading_tolerance = landing_heading_tolerance
        self.approach_correction_rate = approach_correction_rate
        self.approach_lookahead = approach_lookahead
        self.hold_turn_step = hold_turn_step
        self.hold_speed_factor = hold_speed_factor
        self.hold_min_speed = hold_min_speed
        self.emergency_speed_factor = emergency_speed_factor
        self.spawn_separation = spawn_separation
        self.spawn_airport_distance = spawn_airport_distance
        self.spawn_margin = spawn_margin
        self.spawn_attempts = spawn_attempts
        self.spawn_speed_range = tuple(spawn_speed_range)
        self.collision_avoidance = collision_avoidance
        self.airport_avoidance = airport_avoidance


def frames_for(seconds):
    """Converts elapsed seconds into reference frames."""
    return seconds * FRAMES_PER_SECOND


def set_log_level(level):
    """Sets the level of every aerodrome logger; module loggers carry their own level."""
    logging.getLogger("aerodrome").setLevel(level)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("aerodrome."):
            logging.getLogger(name).setLevel(level)
