# aerodrome-lite/run_sim.py
import argparse
import os
import sys

from utils.type_checkers import gt_0, gt_0_float, log_list_type, outdir_type, parse_log_config, scenario_type
from utils.log_stuff import log_info, set_log_paths, EventCsvLogger

import logging
from rich.logging import RichHandler

logging.getLogger('numba').setLevel(logging.WARNING)
logging.getLogger('matplotlib').setLevel(logging.WARNING)
logging.getLogger('PIL').setLevel(logging.WARNING)

FORMAT = "%(message)s"
logging.basicConfig(
    level="NOTSET", format=FORMAT, datefmt="[%X]", handlers=[RichHandler()]
)

logger = logging.getLogger("run_sim")
logger.setLevel(logging.INFO)


def add_arguments(parser):
    """
    Add command line arguments to the parser.
    """
    parser.add_argument('--scenario', type=scenario_type, default='DefaultScenario', help='Scenario preset to run')
    parser.add_argument('--policy', type=str, default='random', choices=['random', 'idle'], help='Controlling policy')
    parser.add_argument('--slots', type=gt_0, default=3, help='Number of aircraft the policy commands at once')
    parser.add_argument('--episodes', type=gt_0, default=5, help='Number of episodes to run')
    parser.add_argument('--steps', type=gt_0, default=60, help='Decision rounds per episode')
    parser.add_argument('--tick', type=gt_0_float, default=1 / 60, help='Simulated seconds per tick')
    parser.add_argument('--seed', type=int, default=None, help='Seed of the aircraft factory')
    parser.add_argument('--outdir', type=outdir_type, default='logs/run_sim', help='Output directory for logs')
    parser.add_argument('--log-where', type=log_list_type, default=['csv'], help='Where to log the session (csv, stdout, file)')
    parser.add_argument('--render', action='store_true', help='Open the pyglet viewer', default=False)
    parser.add_argument('--live-plot', action='store_true', help='Live plot of landings and collisions per episode', default=False)
    parser.add_argument('--no-progress-bar', action='store_true', help='Hide the progress bar', default=False)
    parser.add_argument('--debug', action='store_true', help='Enable debug mode, i.e. every command decision is logged.', default=False)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Run aerodrome sessions with a simple controlling policy')
    add_arguments(parser)
    args = parser.parse_args(argv)

    args.log_csv, args.log_file = parse_log_config(args.log_where)

    # Import after parsing args to reduce unnecessary imports
    from aerodrome.atc import scenarios
    from aerodrome.atc.aerodrome_gym import AerodromeGym
    from aerodrome.atc.params import set_log_level
    from utils.run_functions import POLICIES, run_episodes

    if args.debug:
        logger.setLevel(logging.DEBUG)
        set_log_level(logging.DEBUG)
        logger.info("Debug mode ENABLED.")
    elif "stdout" not in args.log_where:
        # landings and collisions are only echoed with stdout logging
        set_log_level(logging.WARNING)

    # macOS needs this before pyglet opens a window
    os.environ['PYGLET_SHADOW_WINDOW'] = '0'

    try:
        scenario = scenarios.load_scenario(args.scenario)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"Using scenario: {scenario}")

    events_log_path_csv, episodes_log_path_csv, flog_path, plotter = set_log_paths(args)
    log_info(args, logger)

    env = AerodromeGym(scenario, aircraft_slots=args.slots, render_mode='human' if args.render else 'headless',
                       tick_seconds=args.tick, max_steps=args.steps)
    if events_log_path_csv is not None:
        env.sim.subscribe(EventCsvLogger(events_log_path_csv))

    results = run_episodes(env, POLICIES[args.policy], args, logger, events_log_path_csv, episodes_log_path_csv,
                           flog_path, plotter)

    env.close()
    if plotter is not None:
        plotter.close()
    return results


if __name__ == "__main__":
    main()
