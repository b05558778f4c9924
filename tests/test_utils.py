import argparse
import csv
import logging

import pytest

from aerodrome.atc.simulation import Simulation
from aerodrome.atc.params import SimParameters
from utils.log_stuff import EVENT_FIELDS, EventCsvLogger, human_readable_time
from utils.type_checkers import gt_0, gt_0_float, log_list_type, outdir_type, parse_log_config, scenario_type


def test_log_list_type():
    assert log_list_type("csv, stdout") == ["csv", "stdout"]
    with pytest.raises(argparse.ArgumentTypeError):
        log_list_type("csv,tensorboard")


def test_parse_log_config():
    assert parse_log_config("csv,file") == (True, True)
    assert parse_log_config(["stdout"]) == (False, False)


def test_scenario_type():
    assert scenario_type("RushHour") == "RushHour"
    with pytest.raises(argparse.ArgumentTypeError):
        scenario_type("Scenario")


def test_positive_numbers():
    assert gt_0("3") == 3
    assert gt_0_float("0.5") == 0.5
    with pytest.raises(argparse.ArgumentTypeError):
        gt_0("0")
    with pytest.raises(argparse.ArgumentTypeError):
        gt_0_float("-1")


def test_outdir_type_backs_up_existing_directory(tmp_path):
    outdir = tmp_path / "run"
    outdir.mkdir()
    (outdir / "old.csv").write_text("x")

    result = outdir_type(str(outdir))

    assert result == outdir
    assert list(result.iterdir()) == []
    backups = [p for p in tmp_path.iterdir() if p.name.startswith("backup_run_")]
    assert len(backups) == 1
    assert (backups[0] / "old.csv").exists()


@pytest.mark.parametrize("seconds, expected", [
    (0, "00:00:00.000"),
    (61.25, "00:01:01.250"),
    (3661.5, "01:01:01.500"),
    (-1, "Negative time"),
])
def test_human_readable_time(seconds, expected):
    assert human_readable_time(seconds) == expected


def test_event_csv_logger(tmp_path):
    path = tmp_path / "events.csv"
    sim = Simulation(SimParameters(initial_aircraft_count=0, min_aircraft=0, max_aircraft=0), seed=1)
    event_logger = sim.subscribe(EventCsvLogger(path))

    sim.spawn()
    aircraft = sim.world.aircraft[0]
    sim.apply_command({"aircraft_id": aircraft.id, "action": "speed", "value": 0.5})

    with open(path, newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0] == EVENT_FIELDS
    assert [row[1] for row in rows[1:]] == ["spawned", "command"]
    assert rows[2][2] == aircraft.id
    assert "outcome=applied" in rows[2][-1]
    assert event_logger.rows_written == 2


@pytest.fixture
def restore_log_levels():
    yield
    from aerodrome.atc.params import set_log_level
    set_log_level(logging.INFO)


def test_run_sim_main(tmp_path, restore_log_levels):
    import run_sim

    outdir = tmp_path / "out"
    results = run_sim.main(["--episodes", "1", "--steps", "2", "--outdir", str(outdir), "--seed", "1",
                            "--policy", "idle", "--no-progress-bar", "--log-where", "csv,file"])

    assert len(results) == 1
    total_reward, info = results[0]
    assert info["game_time"] == pytest.approx(10.0)
    assert (outdir / "events.csv").exists()
    assert (outdir / "log.txt").read_text().startswith("Episode 1:")
    with open(outdir / "episodes.csv", newline='') as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "episode"
    assert len(rows) == 2
