import argparse
from datetime import datetime
from pathlib import Path

import logging
logger = logging.getLogger("run_sim.type_checkers")


def outdir_type(value):
    outdir_path = Path(value)
    if outdir_path.exists():
        # move current contents to a directory called "backup_<name>_<timestamp>"
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_dir = outdir_path.parent / f"backup_{outdir_path.name}_{timestamp}"
        outdir_path.rename(backup_dir)
        logger.info(f"Existing directory moved to: '{backup_dir}'")

    outdir_path.mkdir(parents=True, exist_ok=False)
    return outdir_path


def log_list_type(value):
    log_types = [x.strip() for x in value.split(',') if x.strip()]
    valid_log_types = ['csv', 'stdout', 'file']
    for log_type in log_types:
        if log_type not in valid_log_types:
            raise argparse.ArgumentTypeError(f"Invalid log type: {log_type}. Valid options are: {valid_log_types}")
    return log_types


def scenario_type(value):
    from aerodrome.atc import scenarios
    if value not in scenarios.available_scenarios():
        raise argparse.ArgumentTypeError(
            f"Unknown scenario: {value}. Valid options are: {scenarios.available_scenarios()}")
    return value


def gt_0(value):
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError(f"Value must be greater than 0: {value}")
    return ivalue


def gt_0_float(value):
    fvalue = float(value)
    if fvalue <= 0:
        raise argparse.ArgumentTypeError(f"Value must be greater than 0: {value}")
    return fvalue


def parse_log_config(log_config):
    """
    Parse the log configuration into separate flags.
    log-where is a comma-separated string of log types (e.g., 'csv,stdout,file').
    Args:
        log_config (str or list): The log configuration string or list.
    Returns:
        tuple: (log_csv, log_file)
    """
    if isinstance(log_config, str):
        log_config = log_config.split(',')
    log_csv = 'csv' in log_config
    log_file = 'file' in log_config
    return log_csv, log_file
