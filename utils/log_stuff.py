import csv
import os
from pathlib import Path

from matplotlib import pyplot as plt

from aerodrome.atc.simulation import SimEvent

EVENT_FIELDS = ['game_time', 'kind', 'aircraft_id', 'callsign', 'x', 'y', 'heading', 'speed', 'status', 'detail']
EPISODE_FIELDS = ['episode', 'total_reward', 'landings', 'collisions', 'game_time']


def set_log_paths(args):
    if args.log_csv:
        events_log_path_csv = Path(args.outdir) / "events.csv"
        episodes_log_path_csv = Path(args.outdir) / "episodes.csv"
    else:
        events_log_path_csv = None
        episodes_log_path_csv = None

    if args.log_file:
        flog_path = Path(args.outdir) / "log.txt"
    else:
        flog_path = None

    if args.live_plot:
        plotter = SessionPlotter(['landings', 'collisions'])
    else:
        plotter = None

    return events_log_path_csv, episodes_log_path_csv, flog_path, plotter


def log_info(args, logger):
    logger.info(f"=" * 80)
    logger.info(f"Session Information for scenario {args.scenario}:")
    logger.info(f"Logging -> CSV: {args.log_csv}, File: {args.log_file}")
    logger.info(f"Output directory: '{args.outdir}'")
    logger.info(f"Policy: {args.policy}")
    logger.info(f"Episodes: {args.episodes}, decision rounds per episode: {args.steps}")
    logger.info(f"Aircraft slots: {args.slots}")
    logger.info(f"Live plotting: {args.live_plot}")
    logger.info(f"=" * 80)


def log_episode_stuff(log_csv, log_file, ep, total_reward, info, log_path, flog_path):
    if log_csv:
        file_exists = log_path.exists()
        with open(log_path, 'a', newline='') as f:
            writer = csv.writer(f)
            if not file_exists:
                writer.writerow(EPISODE_FIELDS)
            writer.writerow([ep, total_reward, info['landings'], info['collisions'], round(info['game_time'], 2)])

    if log_file:
        with open(flog_path, 'a') as f:
            f.write(f"Episode {ep}: Total Reward = {total_reward}, Landings = {info['landings']}, "
                    f"Collisions = {info['collisions']}, Game time = {info['game_time']:.1f}s\n")


class EventCsvLogger:
    """
    Simulation subscriber that appends every event to a CSV file.

    Usage: sim.subscribe(EventCsvLogger(path))
    """

    def __init__(self, path):
        self.path = Path(path)
        self.rows_written = 0
        if not self.path.exists():
            with open(self.path, 'w', newline='') as f:
                csv.writer(f).writerow(EVENT_FIELDS)

    def __call__(self, event: SimEvent):
        aircraft = event.aircraft
        detail = ";".join(f"{k}={v}" for k, v in event.detail.items())
        with open(self.path, 'a', newline='') as f:
            csv.writer(f).writerow([
                round(event.game_time, 3), event.kind.value, aircraft.id, aircraft.callsign,
                round(aircraft.x, 1), round(aircraft.y, 1), round(aircraft.heading, 1), round(aircraft.speed, 3),
                aircraft.status.value, detail,
            ])
        self.rows_written += 1


def human_readable_time(seconds):
    """
    Convert seconds to a human-readable format

    HH:MM:SS.mmm
    """
    if seconds < 0:
        return "Negative time"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    millis = int(round((seconds - int(seconds)) * 1000)) % 1000
    whole_seconds = int(seconds % 60)

    return f"{hours:02}:{minutes:02}:{whole_seconds:02}.{millis:03}"


class SessionPlotter:
    def __init__(self, keys):
        self.keys = keys
        self.history = {k: [] for k in keys}
        self.episodes = []
        plt.ion()
        self.fig, self.ax = plt.subplots()
        self.lines = {k: self.ax.plot([], [], label=k)[0] for k in keys}
        self.ax.legend()
        self.ax.set_xlabel('Episode')
        self.ax.set_ylabel('Count')
        self.fig.canvas.manager.set_window_title('Landings and collisions')

    def update(self, episode, values):
        self.episodes.append(episode)
        for k in self.keys:
            self.history[k].append(values.get(k, 0))
            self.lines[k].set_data(self.episodes, self.history[k])
        self.ax.relim()
        self.ax.autoscale_view()
        self.fig.canvas.draw()
        self.fig.canvas.flush_events()

    def save(self, outdir):
        png_path = os.path.join(outdir, 'session_counts.png')
        self.fig.savefig(png_path)

    def close(self):
        plt.ioff()
        plt.close(self.fig)
