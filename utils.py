# utils.py
"""
Utility functions for the application framework.

This module provides logging setup and configuration loading, used across
the application but not belonging to the simulation or rendering domains.
"""
import copy
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

from constants import DEFAULT_FPS, DEFAULT_WINDOW_SIZE

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys. "log_file" may be null.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates the log
#     directory if needed. Sets up a console handler and, when a log file is
#     configured, a rotating file handler.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The file's contents merged over DEFAULT_CONFIG.
#   - Side Effects: Logs and re-raises FileNotFoundError / JSONDecodeError.

DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_file": "logs/geoflux.log",
    },
    "simulation_parameters": {
        "seed": None,
        "density": 50,
        "speed": 50,
        "gravity": 0,
        "color_speed": 20,
        "range": 40,
        "base_hue": 180,
    },
    "run_control": {
        "fps": DEFAULT_FPS,
        "max_steps": None,
        "log_throttle_steps": 300,
        "profile": False,
    },
    "visualization": {
        "width": DEFAULT_WINDOW_SIZE[0],
        "height": DEFAULT_WINDOW_SIZE[1],
        "fullscreen": False,
        "device_pixel_ratio": 1.0,
        "export_dir": "exports",
    },
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merges `override` over a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.
    """
    log_config = config.get('logging', {})
    log_level = str(log_config.get('level', 'INFO')).upper()
    log_format = log_config.get('format', DEFAULT_CONFIG['logging']['format'])
    log_file_path = log_config.get('log_file')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}. Log file: {log_file_path or 'disabled'}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file and fills in missing keys."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
    if not isinstance(config, dict):
        logging.error(f"Configuration in {path} must be a JSON object.")
        raise ValueError(f"Configuration in {path} must be a JSON object, got {type(config).__name__}.")
    logging.info("Configuration loaded successfully.")
    return merge_config(DEFAULT_CONFIG, config)
